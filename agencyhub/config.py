import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./agencyhub.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

# Sessions
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session")
SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", "24"))
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"

# Identity cache used by the auth dependency (short-lived, not correctness-critical)
IDENTITY_CACHE_TTL_SECONDS = float(os.getenv("IDENTITY_CACHE_TTL_SECONDS", "30"))
IDENTITY_CACHE_MAX_ENTRIES = int(os.getenv("IDENTITY_CACHE_MAX_ENTRIES", "1024"))

# Client-facing base URL used to build invitation magic links
CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:8081")

# Default terms applied to representations created through the invitation flow
DEFAULT_COMMISSION = float(os.getenv("DEFAULT_COMMISSION", "10"))
DEFAULT_TERRITORIES = os.getenv("DEFAULT_TERRITORIES", "US").split(",")
DEFAULT_MEDIA_TYPES = os.getenv("DEFAULT_MEDIA_TYPES", "Theatrical").split(",")

# Rate limiting (Redis-backed, fails open when Redis is unreachable)
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:8081,http://localhost:5173",
).split(",")

# Longest span, in days, a single per-day calendar summary may cover (one leap year)
CALENDAR_MAX_SUMMARY_DAYS = int(os.getenv("CALENDAR_MAX_SUMMARY_DAYS", "366"))
