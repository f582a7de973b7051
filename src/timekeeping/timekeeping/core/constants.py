"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Fraction of salary deducted per hour late / per hour of early leave.
DEFAULT_DEDUCTION_RATE = 0.05

CHECK_IN_RULE = "check_in_time"
CHECK_OUT_RULE = "check_out_time"

DEFAULT_TOP_N = 10
DEFAULT_LIST_LIMIT = 200

LOGIN_CODE_LENGTH = 8

DEFAULT_LEDGER_ENDPOINT = "https://ic0.app"
DEFAULT_LEDGER_TIMEOUT_SECONDS = 10.0

SECONDS_PER_DAY = 86400
