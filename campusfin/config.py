"""Environment configuration for the campusfin API."""
import os
from datetime import datetime

import pytz
from dotenv import load_dotenv

# Load environment variables from a local .env if present
load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./campusfin.db")
AUTH_SECRET = os.environ.get("AUTH_SECRET", "dev-only-campusfin-secret-change-me")
AUTH_ALGORITHM = "HS256"
TOKEN_EXPIRE_DAYS = int(os.environ.get("TOKEN_EXPIRE_DAYS", "7"))

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")
DEBUG = _env_bool("DEBUG", default=ENVIRONMENT == "development")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

RATE_LIMIT_MAX_REQUESTS = int(os.environ.get("RATE_LIMIT_MAX_REQUESTS", "100"))
RATE_LIMIT_WINDOW_SECONDS = int(os.environ.get("RATE_LIMIT_WINDOW_SECONDS", "60"))

RECURRENCE_WINDOW_DAYS = int(os.environ.get("RECURRENCE_WINDOW_DAYS", "60"))

# Calendar decisions ("today", "previous month") are made in this zone
APP_TIMEZONE = pytz.timezone(os.environ.get("APP_TIMEZONE", "UTC"))


def local_now() -> datetime:
    """Current wall-clock time in APP_TIMEZONE, returned as a naive datetime."""
    return datetime.now(pytz.utc).astimezone(APP_TIMEZONE).replace(tzinfo=None)
