SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_JSON = False

STORE_BACKEND = "memory"
DATA_DIR = ""

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "onduty_test",
}

AUTO_INIT_DB = False

DEFAULT_ADMIN_NAME = "Team Admin"
DEFAULT_ADMIN_EMAIL = "admin@company.local"
DEFAULT_ADMIN_PASSWORD = "admin123"
