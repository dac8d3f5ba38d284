"""Global constants for the teamboard application."""

# Collection names
USERS_COLLECTION = "users"
TEAMS_COLLECTION = "teams"
NOTIFICATIONS_COLLECTION = "notifications"

# Firestore rejects batches with more than 500 writes.
FIRESTORE_BATCH_LIMIT = 500

# Team roles
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_MEMBER = "member"
TEAM_ROLES = (ROLE_ADMIN, ROLE_MANAGER, ROLE_MEMBER)
MANAGER_ROLES = (ROLE_ADMIN, ROLE_MANAGER)

# Fields a user may change on their own profile
PROFILE_FIELDS = ("displayName", "email", "bio", "role", "phoneNumber")

# User search
SEARCH_MIN_LENGTH = 2
# Upper bound for prefix range queries.
PREFIX_RANGE_END = "\uf8ff"
DEFAULT_DISPLAY_NAME = "User"
DEFAULT_PHOTO_URL = "https://via.placeholder.com/40"

# Task defaults
DEFAULT_TASK_DURATION = 1
DEFAULT_TASK_PROGRESS = 0
DEFAULT_TASK_TYPE = "task"
DEFAULT_TASK_PRIORITY = "medium"
DEFAULT_TASK_STATUS = "notStarted"
TASK_START_DATE = "start_date"

# Notification types
NOTIFICATION_TEAM_CREATED = "team_created"
NOTIFICATION_TEAM_INVITATION = "team_invitation"
NOTIFICATION_TEAM_DISBANDED = "team_disbanded"
NOTIFICATION_TEAM_REMOVAL = "team_removal"
NOTIFICATION_ROLE_UPDATE = "role_update"
NOTIFICATION_TASK_ASSIGNMENT = "task_assignment"

# Client log ingress
CORS_ALLOW_METHODS = "POST, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type, Authorization"
