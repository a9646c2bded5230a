"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 1
DEFAULT_SEARCH_LIMIT = 100

# Minutes in a regular 8-hour working day; lates convert to days with it.
MINUTES_PER_DAY = 480

# Payroll scaffolding: working days per month used to derive a daily rate.
WORKING_DAYS_PER_MONTH = 22

# Biometric enrollment
ENROLLMENT_SPECIMENS = 3
ENROLLMENT_QUALITY_SCORE = 95
ENROLLMENT_PURGE_SECONDS = 5 * 60

# DTR portal pins
DEFAULT_PORTAL_PIN = "1234"
PORTAL_PIN_MAX_DIGITS = 6
PORTAL_PIN_MIN_DIGITS = 4
LEGACY_HASH_LENGTH = 50

# Root administrator (always passes permission checks)
ROOT_USERTYPE_ID = 1
ROOT_USER_ID = 1
