"""Environment-driven settings for the proxy."""
from dataclasses import dataclass
from functools import lru_cache
import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_UPSTREAM_URL = "https://api.you.com/smart/agent"
DEFAULT_COMPLETION_FIELDS = ("message", "answer", "result", "completion")
FALLBACK_POLICIES = ("error", "serialize")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default):
    raw = os.getenv(name)
    if raw is None:
        return tuple(default)
    items = tuple(item.strip() for item in raw.split(",") if item.strip())
    return items or tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    upstream_url: str = DEFAULT_UPSTREAM_URL
    upstream_timeout: float = 30.0
    upstream_prompt_field: str = "query"
    completion_fields: tuple = DEFAULT_COMPLETION_FIELDS
    completion_fallback: str = "error"
    auth_error_override: bool = True
    include_debug: bool = True
    default_model: str = "youcom-proxy"
    proxy_path: str = "/youcom-proxy"
    port: int = 3000
    log_level: str = "INFO"
    log_dir: str | None = None
    app_version: str = "0.1.0"
    max_body_mb: float = 4
    strict_config: bool = False

    @property
    def max_content_length(self) -> int:
        return int(self.max_body_mb * 1024 * 1024)

    @property
    def api_key_configured(self) -> bool:
        return bool(self.api_key)


@lru_cache
def get_settings() -> Settings:
    """Load settings from environment variables."""
    fallback = os.getenv("COMPLETION_FALLBACK", "error").strip().lower()
    if fallback not in FALLBACK_POLICIES:
        fallback = "error"
    proxy_path = os.getenv("PROXY_PATH", "/youcom-proxy").strip() or "/youcom-proxy"
    if not proxy_path.startswith("/"):
        proxy_path = "/" + proxy_path
    return Settings(
        api_key=os.getenv("API_KEY") or os.getenv("YOUCOM_API_KEY") or "",
        upstream_url=os.getenv("UPSTREAM_URL", DEFAULT_UPSTREAM_URL),
        upstream_timeout=float(os.getenv("UPSTREAM_TIMEOUT", "30")),
        upstream_prompt_field=os.getenv("UPSTREAM_PROMPT_FIELD", "query"),
        completion_fields=_env_list("COMPLETION_FIELDS", DEFAULT_COMPLETION_FIELDS),
        completion_fallback=fallback,
        auth_error_override=_env_flag("AUTH_ERROR_OVERRIDE", "True"),
        include_debug=_env_flag("INCLUDE_DEBUG", "True"),
        default_model=os.getenv("DEFAULT_MODEL", "youcom-proxy"),
        proxy_path=proxy_path,
        port=int(os.getenv("PORT", "3000")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=os.getenv("LOG_DIR") or None,
        app_version=os.getenv("APP_VERSION", "0.1.0"),
        max_body_mb=float(os.getenv("MAX_BODY_MB", "4")),
        strict_config=_env_flag("STRICT_CONFIG", ""),
    )
