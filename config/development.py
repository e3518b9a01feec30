import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "library_db"),
}

# Token encoded in the printed library QR code
QR_TOKEN = os.getenv("QR_TOKEN", "LIBRARY_CHECKIN")

DEBUG = bool(int(os.getenv("DEBUG", "1")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
