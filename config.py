import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-2.5-flash"
MAX_IMAGE_BYTES = 4 * 1024 * 1024
HTML_CHAR_LIMIT = 30_000


def _env_bool(name, default):
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def _env_int(name, default):
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else default


@dataclass(frozen=True)
class Settings:
    api_key: str
    model: str
    timeout_ms: int | None
    max_image_bytes: int
    html_char_limit: int
    max_sessions: int
    host: str
    port: int
    debug: bool
    log_level: str

    @classmethod
    def from_env(cls):
        load_dotenv()
        timeout_raw = (os.getenv("GEMINI_TIMEOUT_MS") or "").strip()
        return cls(
            api_key=(os.getenv("GEMINI_API_KEY") or "").strip(),
            model=(os.getenv("GEMINI_MODEL") or "").strip() or DEFAULT_MODEL,
            timeout_ms=int(timeout_raw) if timeout_raw else None,
            max_image_bytes=_env_int("AUTOCLIP_MAX_IMAGE_BYTES", MAX_IMAGE_BYTES),
            html_char_limit=_env_int("AUTOCLIP_HTML_CHAR_LIMIT", HTML_CHAR_LIMIT),
            max_sessions=_env_int("AUTOCLIP_MAX_SESSIONS", 256),
            host=(os.getenv("AUTOCLIP_HOST") or "").strip() or "127.0.0.1",
            port=_env_int("AUTOCLIP_PORT", 5001),
            debug=_env_bool("AUTOCLIP_DEBUG", True),
            log_level=(os.getenv("AUTOCLIP_LOG_LEVEL") or "").strip().upper() or "INFO",
        )
