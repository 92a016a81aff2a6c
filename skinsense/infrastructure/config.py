import os
import logging

try:
    import streamlit as st  # type: ignore
    _HAS_STREAMLIT = True
except Exception:
    _HAS_STREAMLIT = False

logger = logging.getLogger(__name__)


DEFAULT_AGENT_BASE_URL = "https://agent-prod.studio.lyzr.ai/v3"
DEFAULT_AGENT_ID = "69a2937542fb78f6798a6c12"


def get_secret(name: str, default: str | None = None) -> str | None:
    # Prefer Streamlit secrets if available
    if _HAS_STREAMLIT:
        try:
            if name in st.secrets:
                return str(st.secrets.get(name))
        except Exception:
            # no secrets.toml outside a Streamlit run
            logger.debug("Streamlit secrets unavailable for %s", name)
    # Fallback to environment variables
    return os.environ.get(name, default)


def _get_int(name: str, default: int) -> int:
    raw = get_secret(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer for %s: %r; using %s", name, raw, default)
        return default


class Settings:
    @property
    def agent_api_key(self) -> str | None:
        return get_secret("AGENT_API_KEY")

    @property
    def agent_base_url(self) -> str:
        return (get_secret("AGENT_BASE_URL", DEFAULT_AGENT_BASE_URL) or DEFAULT_AGENT_BASE_URL).rstrip("/")

    @property
    def agent_id(self) -> str:
        return get_secret("AGENT_ID", DEFAULT_AGENT_ID) or DEFAULT_AGENT_ID

    @property
    def agent_timeout(self) -> int:
        return _get_int("AGENT_TIMEOUT", 120)

    @property
    def history_path(self) -> str | None:
        return get_secret("HISTORY_PATH")

    @property
    def max_history(self) -> int:
        return _get_int("MAX_HISTORY", 20)
