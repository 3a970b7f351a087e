import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str

    log_level: str
    api_prefix: str
    default_page_size: int


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_settings() -> Settings:
    page_size = _getenv_int("DEFAULT_PAGE_SIZE", 20)
    log_level = _getenv("LOG_LEVEL", "INFO").upper()
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_getenv("DATABASE_URL", "sqlite:///bizdash.db"),
        log_level=log_level if log_level in _LOG_LEVELS else "INFO",
        api_prefix="/" + _getenv("API_PREFIX", "/api").strip("/"),
        default_page_size=min(max(page_size, 1), 100),
    )


def load_config() -> dict:
    s = load_settings()
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        "API_PREFIX": s.api_prefix,
        "DEFAULT_PAGE_SIZE": s.default_page_size,
    }
