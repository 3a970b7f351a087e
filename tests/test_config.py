import pytest

from app.bizdash import create_app
from app.bizdash.config import load_config, load_settings


@pytest.fixture()
def clean_env(monkeypatch):
    for k in ("SECRET_KEY", "ENV", "DATABASE_URL", "LOG_LEVEL", "API_PREFIX", "DEFAULT_PAGE_SIZE"):
        monkeypatch.delenv(k, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = load_settings()
    assert s.secret_key == "change-me"
    assert s.env == "development"
    assert s.database_url == "sqlite:///bizdash.db"
    assert s.log_level == "INFO"
    assert s.api_prefix == "/api"
    assert s.default_page_size == 20


def test_page_size_is_clamped(clean_env):
    clean_env.setenv("DEFAULT_PAGE_SIZE", "500")
    assert load_settings().default_page_size == 100
    clean_env.setenv("DEFAULT_PAGE_SIZE", "0")
    assert load_settings().default_page_size == 1
    clean_env.setenv("DEFAULT_PAGE_SIZE", "lots")
    assert load_settings().default_page_size == 20


def test_api_prefix_and_log_level_normalized(clean_env):
    clean_env.setenv("API_PREFIX", "v1/")
    clean_env.setenv("LOG_LEVEL", "debug")
    cfg = load_config()
    assert cfg["API_PREFIX"] == "/v1"
    assert cfg["LOG_LEVEL"] == "DEBUG"

    clean_env.setenv("LOG_LEVEL", "chatty")
    assert load_config()["LOG_LEVEL"] == "INFO"


def test_custom_api_prefix_routes(clean_env, tmp_path):
    clean_env.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    clean_env.setenv("API_PREFIX", "/v1")
    client = create_app().test_client()
    assert client.get("/v1/customers/abc").status_code == 400
    assert client.get("/api/customers/abc").status_code == 404


@pytest.mark.parametrize(
    "env",
    [
        {"ENV": "production", "SECRET_KEY": "s3cret"},
        {"ENV": "production", "SECRET_KEY": "s3cret", "DATABASE_URL": "sqlite:///prod.db"},
        {"ENV": "production", "DATABASE_URL": "postgresql+psycopg://u:p@db/app"},
    ],
)
def test_production_guardrails(clean_env, env):
    for k, v in env.items():
        clean_env.setenv(k, v)
    with pytest.raises(RuntimeError):
        create_app()
