"""Constants and defaults."""

DEFAULT_LIST_LIMIT = 500
MAX_LIST_LIMIT = 5000
MIN_PASSWORD_LENGTH = 6

USER_ID_PREFIX = "u"
REQUEST_ID_PREFIX = "r"

USERS_FILENAME = "users.json"
REQUESTS_FILENAME = "requests.json"
