import os
import logging
from pathlib import Path
from typing import List

from dotenv import load_dotenv

try:
    import streamlit as st  # type: ignore
    _HAS_STREAMLIT = True
except Exception:
    _HAS_STREAMLIT = False

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"

load_dotenv(PROJECT_ROOT / ".env")


def get_secret(name: str, default: str | None = None) -> str | None:
    # Prefer Streamlit secrets if available
    if _HAS_STREAMLIT:
        try:
            if name in st.secrets:
                return str(st.secrets.get(name))
        except Exception:
            pass
    # Fallback to environment variables
    return os.environ.get(name, default)


def _as_float(name: str, default: float) -> float:
    raw = get_secret(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r; using %s", name, raw, default)
        return default


class Settings:
    @property
    def mongodb_uri(self) -> str:
        return get_secret("MONGODB_URI", "mongodb://localhost:27017/") or "mongodb://localhost:27017/"

    @property
    def mongodb_db(self) -> str:
        return get_secret("MONGODB_DB", "healthlens") or "healthlens"

    @property
    def mongodb_tls_ca_file(self) -> str | None:
        return get_secret("MONGODB_TLS_CA_FILE")

    @property
    def skin_diseases_collection(self) -> str:
        return get_secret("SKIN_DISEASES_COLLECTION", "skin_diseases") or "skin_diseases"

    @property
    def mental_health_collection(self) -> str:
        return get_secret("MENTAL_HEALTH_COLLECTION", "mental_health_data") or "mental_health_data"

    @property
    def lookup_timeout(self) -> float:
        return _as_float("LOOKUP_TIMEOUT_SECONDS", 5.0)

    @property
    def feed_limit(self) -> int:
        return int(_as_float("FEED_LIMIT", 100))

    @property
    def cors_origins(self) -> List[str]:
        raw = get_secret("CORS_ORIGINS", "http://localhost:3000") or ""
        return [o.strip() for o in raw.split(",") if o.strip()]

    @property
    def port(self) -> int:
        return int(_as_float("PORT", 5000))

    @property
    def api_url(self) -> str:
        return (get_secret("HEALTHLENS_API_URL", "http://localhost:5000") or "http://localhost:5000").rstrip("/")

    @property
    def store_backend(self) -> str:
        # "mongo" or "memory"; memory is seeded from DATA_DIR
        return (get_secret("HEALTHLENS_STORE", "mongo") or "mongo").strip().lower()
