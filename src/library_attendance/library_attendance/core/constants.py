"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

FACE_DESCRIPTOR_LENGTH = 128
FACE_MATCH_THRESHOLD = 0.6

QR_TOKEN_BYTES = 16
DEFAULT_QR_TTL_SECONDS = 120
QR_TOKEN_MAX_ATTEMPTS = 3

DEFAULT_HISTORY_LIMIT = 60
MAX_HISTORY_LIMIT = 500

DEFAULT_JWT_EXPIRES_HOURS = 2
SESSION_COOKIE_NAME = "session"

DEFAULT_STUDENT_PHONE = "0000000000"
DEFAULT_MEMBERSHIP_DAYS = 365
DEFAULT_STAFF_DESIGNATION = "Assistant"
DEFAULT_STAFF_BASE_SALARY = 15000
