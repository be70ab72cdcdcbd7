# app/core/config.py
import os
from pathlib import Path

from dotenv import load_dotenv

APP_DIR = Path(__file__).resolve().parent.parent
PROJECT_ROOT_DIR = APP_DIR.parent

# .env in the project root; fall back to the default lookup from the cwd
dotenv_path = PROJECT_ROOT_DIR / ".env"
if dotenv_path.exists():
    load_dotenv(dotenv_path)
else:
    load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# --- Database ---
DEFAULT_DATABASE_URL = f"sqlite+aiosqlite:///{APP_DIR / 'survey_app_fallback.db'}"
DATABASE_URL = os.getenv("DATABASE_URL")
USING_FALLBACK_DATABASE = DATABASE_URL is None
if USING_FALLBACK_DATABASE:
    DATABASE_URL = DEFAULT_DATABASE_URL

SQL_ECHO = _env_flag("SQL_ECHO")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- CORS ---
FALLBACK_ORIGINS = [
    "http://127.0.0.1:3000",
    "http://localhost:3000",
]


def allowed_origins() -> list:
    env_origins = os.getenv("BACKEND_ALLOWED_ORIGINS")
    if env_origins:
        origins = [origin.strip() for origin in env_origins.split(",") if origin.strip()]
        if origins:
            return origins
    return list(FALLBACK_ORIGINS)


def sync_database_url(url: str) -> str:
    """Strips the async driver so Alembic can use a synchronous engine."""
    if "+asyncpg" in url:
        return url.replace("+asyncpg", "")
    if "+aiosqlite" in url:
        return url.replace("+aiosqlite", "")
    return url
