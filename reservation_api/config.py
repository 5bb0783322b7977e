"""Runtime configuration loaded from the environment (and an optional .env)."""

import os
import warnings
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# JWT
JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    warnings.warn(
        "JWT_SECRET not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    JWT_SECRET = "insecure-dev-secret-change-me-32-chars!!"  # noqa: S105 - dev fallback only
JWT_ALGORITHM = "HS256"
JWT_ISSUER = os.getenv("JWT_ISSUER", "reservation-api")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "reservation-clients")
JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", "3"))

MIN_PASSWORD_LENGTH = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))

# Upper bound on follow-on slots considered for one recurring booking
MAX_RECURRENCE_OCCURRENCES = int(os.getenv("MAX_RECURRENCE_OCCURRENCES", "365"))

# Bootstrap admin account, created at startup when both are set
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Server bind address for ``python -m reservation_api``
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
