import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "library_attendance"),
}
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Bearer tokens; falls back to SECRET_KEY when unset
JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
JWT_EXPIRES_HOURS = float(os.getenv("JWT_EXPIRES_HOURS", "2"))

# "end_of_day" (reused per admin per day) or "fixed" (QR_SESSION_TTL_SECONDS)
QR_SESSION_POLICY = os.getenv("QR_SESSION_POLICY", "end_of_day")
QR_SESSION_TTL_SECONDS = int(os.getenv("QR_SESSION_TTL_SECONDS", "120"))
QR_REUSE_ACTIVE_SESSION = bool(int(os.getenv("QR_REUSE_ACTIVE_SESSION", "1")))

FACE_MATCH_THRESHOLD = float(os.getenv("FACE_MATCH_THRESHOLD", "0.6"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create the demo accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
