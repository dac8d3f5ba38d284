"""Common test setup."""

from tests.mock_utils import patch_mockfirestore

# mockfirestore needs FieldFilter, ArrayUnion and reference equality support
# before any test module builds a client.
patch_mockfirestore()
