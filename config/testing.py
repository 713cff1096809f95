import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "library_attendance_test"),
}
DB_POOL_SIZE = 2

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

JWT_SECRET = "test-jwt-secret"
JWT_EXPIRES_HOURS = 2

QR_SESSION_POLICY = "end_of_day"
QR_SESSION_TTL_SECONDS = 120
QR_REUSE_ACTIVE_SESSION = True

FACE_MATCH_THRESHOLD = 0.6

AUTO_INIT_DB = False
AUTO_SEED_DB = False
