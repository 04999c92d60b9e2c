# file: reunitems/core/config.py
import os
import logging

logger = logging.getLogger("core.config")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ==============================
# Firebase / Firestore
# ==============================
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "reunitems")
# Either a path to the service account file or the raw JSON string
CREDENTIAL_SOURCE = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
FIRESTORE_EMULATOR_HOST = os.getenv("FIRESTORE_EMULATOR_HOST")

# Every store call is bounded; a slow backend surfaces as an error instead of a hang
STORE_TIMEOUT_SECONDS = float(os.getenv("STORE_TIMEOUT_SECONDS", "10"))

# ==============================
# Security Settings
# ==============================
# Loaded lazily from Firestore CONFIG/jwt when unset (see core.security.get_secret_key)
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))

# ==============================
# Search
# ==============================
# Maximum match distance (0 = exact, 1 = unrelated) a record may have to be returned
SEARCH_THRESHOLD = float(os.getenv("SEARCH_THRESHOLD", "0.25"))

# ==============================
# HTTP
# ==============================
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
RATE_LIMIT_ENABLED = _env_bool("RATE_LIMIT_ENABLED", "true")
RATE_LIMIT_DEFAULT = os.getenv("RATE_LIMIT_DEFAULT", "1000/hour")
AUTH_RATE_LIMIT = os.getenv("AUTH_RATE_LIMIT", "10/minute")

# ==============================
# Logging & maintenance
# ==============================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CLOUD_LOGGING_ENABLED = _env_bool("CLOUD_LOGGING_ENABLED")
SCHEDULER_ENABLED = _env_bool("SCHEDULER_ENABLED")
AUDIT_RETENTION_DAYS = int(os.getenv("AUDIT_RETENTION_DAYS", "90"))
