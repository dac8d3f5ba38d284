# Cloud Functions entry point for the teamboard backend.
#
# This file containing Python cloud functions must be named main.py.
# See https://firebase.google.com/docs/functions/get-started?gen=2nd for more info.

from firebase_admin import firestore, initialize_app
from firebase_functions import https_fn, logger, options
from firebase_functions.firestore_fn import (
    Change,
    DocumentSnapshot,
    Event,
    on_document_updated,
)

from teamboard import create_app
from teamboard.constants import NOTIFICATIONS_COLLECTION
from teamboard.notifications.services import NotificationService

initialize_app()

flask_app = create_app()


@https_fn.on_request(memory=options.MemoryOption.MB_512)
def api(req: https_fn.Request) -> https_fn.Response:
    """Serve every callable plus the probe and client log ingress."""
    return https_fn.Response.from_app(flask_app.wsgi_app, req.environ)


@on_document_updated(document=NOTIFICATIONS_COLLECTION + "/{notificationId}")
def on_notification_updated(event: Event[Change[DocumentSnapshot]]) -> None:
    """Keep ``users/{uid}.unreadNotifications`` in step with read flags."""
    before = event.data.before.to_dict() if event.data.before else None
    after = event.data.after.to_dict() if event.data.after else None

    result = NotificationService.sync_unread_count(firestore.client(), before, after)
    if result is None:
        return
    if "error" in result:
        logger.error(
            f"Unread count sync failed for {event.params['notificationId']}: "
            f"{result['error']}"
        )
    else:
        logger.info(
            f"Unread count for {after['userId']} is now {result['unreadNotifications']}"
        )
