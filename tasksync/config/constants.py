"""
Application constants
"""

# Task service
DEFAULT_REQUEST_TIMEOUT = 10  # seconds

# Wire field names (canonical / legacy alias accepted on read)
COMPLETED_FIELD = "completed"
COMPLETED_FIELD_ALIAS = "iscompleted"
DELETED_FIELD = "deleted"
DELETED_FIELD_ALIAS = "isdeleted"

# Provisional tasks
PROVISIONAL_ID_PREFIX = "tmp-"

# Rollback scopes
ROLLBACK_RECORD = "record"
ROLLBACK_COLLECTION = "collection"

# User-facing action names, used in error messages ("Could not <action>: ...")
ACTION_FETCH = "load tasks"
ACTION_ADD = "add task"
ACTION_DELETE = "delete task"
ACTION_EDIT = "edit task"
ACTION_TOGGLE = "change task status"

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
