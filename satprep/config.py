"""Application configuration and constants."""
import logging
import os
from pathlib import Path


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_log_level(name: str, default: int) -> int:
    """Parse a logging level name or number from environment variable."""
    raw = os.environ.get(name)
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


# Database
DB_DIR = Path(os.environ.get("DB_DIR", Path.cwd() / "data"))
DATABASE_URL = os.environ.get("DATABASE_URL")
if DATABASE_URL is None:
    DB_DIR.mkdir(parents=True, exist_ok=True)
    DATABASE_URL = f"sqlite:///{DB_DIR / 'satprep.db'}"

# Identity provider tokens
JWT_SECRET = os.environ.get(
    "JWT_SECRET",
    "CHANGE_ME_IN_PRODUCTION_USE_THE_PROVIDER_JWT_SECRET"
)
JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.environ.get("JWT_AUDIENCE", "authenticated")

# Adaptive difficulty
ADAPTIVE_HISTORY_LIMIT = _parse_int_env("ADAPTIVE_HISTORY_LIMIT", 10)

# SAT sessions and maintenance
SAT_SESSION_TTL_MINUTES = _parse_int_env("SAT_SESSION_TTL_MINUTES", 4 * 60)
INCOMPLETE_ATTEMPT_RETENTION_DAYS = _parse_int_env(
    "INCOMPLETE_ATTEMPT_RETENTION_DAYS", 30
)
CLEANUP_INTERVAL_SECONDS = _parse_int_env("CLEANUP_INTERVAL_SECONDS", 24 * 60 * 60)

# Logging
LOG_LEVEL = _parse_log_level("LOG_LEVEL", logging.DEBUG)
