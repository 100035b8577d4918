# congregation_reports/config.py
from pathlib import Path
from dotenv import load_dotenv
from pydantic_settings import BaseSettings
from pydantic import Field
from urllib.parse import urlparse

# Load local .env for development
load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env")


class Settings(BaseSettings):
    # ─── Hosted data store (REST layer + auth) ─────────────────────────────────
    DATASTORE_URL: str = ""
    DATASTORE_ANON_KEY: str = ""
    DATASTORE_TIMEOUT: int = 30

    # ─── Reports ────────────────────────────────────────────────────────────────
    # Raw-row fetches for one view run side by side on this many threads.
    FETCH_MAX_WORKERS: int = Field(default=5, ge=1)
    # Default date window when the caller gives no range.
    REPORT_WINDOW_DAYS: int = Field(default=30, ge=1)

    # ─── Optional Extras ────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# single settings instance for the whole app
settings = Settings()


def _normalize_base_url(raw: str) -> str:
    """
    Accepts a project URL with or without scheme/trailing slash.
    Example: "abc.example.co/" -> "https://abc.example.co"
    """
    raw = (raw or "").strip()
    if not raw:
        return ""
    parsed = urlparse(raw)
    if not parsed.scheme:
        raw = "https://" + raw
    return raw.rstrip("/")


# ─── Public, module-level config your app can import ───────────────────────────
DATASTORE_BASE_URL: str = _normalize_base_url(settings.DATASTORE_URL)
