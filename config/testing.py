import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timekeeping_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

ROOT_EMAIL = "root@test.local"
ROOT_PASSWORD = "root123"

DEDUCTION_RATE = 0.05

LEDGER_ENDPOINT = "http://ledger.test"
LEDGER_CANISTER_ID = ""
LEDGER_TIMEOUT_SECONDS = 1.0

REPORT_TOP_N = 10
