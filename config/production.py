import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timekeeping_db"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

ROOT_EMAIL = os.getenv("ROOT_EMAIL", "")
ROOT_PASSWORD = os.getenv("ROOT_PASSWORD", "")

DEDUCTION_RATE = float(os.getenv("DEDUCTION_RATE", "0.05"))

LEDGER_ENDPOINT = os.getenv("LEDGER_ENDPOINT", "https://ic0.app")
LEDGER_CANISTER_ID = os.getenv("LEDGER_CANISTER_ID", "")
LEDGER_TIMEOUT_SECONDS = float(os.getenv("LEDGER_TIMEOUT_SECONDS", "10"))

REPORT_TOP_N = int(os.getenv("REPORT_TOP_N", "10"))
