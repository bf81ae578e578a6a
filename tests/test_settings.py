"""Tests for environment-driven configuration."""

from shortener.core.setting import EnvSettingsOptions, Settings


def test_defaults(monkeypatch):
    """Defaults match the documented configuration."""
    for name in ("DATABASE_URL", "BASE_URL", "APP_URL", "PORT", "ENV_SETTING", "DATABASE_SSL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.CODE_LENGTH == 6
    assert settings.CODE_PROBE_ATTEMPTS == 5
    assert settings.BCRYPT_ROUNDS == 10
    assert settings.PORT == 3000
    assert settings.BASE_URL == "http://localhost:3000"
    assert settings.DATABASE_SSL is False


def test_app_url_alias_and_trailing_slash(monkeypatch):
    """APP_URL is accepted and a trailing slash dropped."""
    monkeypatch.delenv("BASE_URL", raising=False)
    monkeypatch.setenv("APP_URL", "https://sho.rt/")
    assert Settings(_env_file=None).BASE_URL == "https://sho.rt"


def test_postgres_urls_use_asyncpg():
    """Plain postgres URLs are switched to the asyncpg driver."""
    settings = Settings(_env_file=None, DATABASE_URL="postgres://u:p@db:5432/links")
    assert settings.DATABASE_URL == "postgresql+asyncpg://u:p@db:5432/links"
    settings = Settings(_env_file=None, DATABASE_URL="postgresql://u:p@db/links")
    assert settings.DATABASE_URL == "postgresql+asyncpg://u:p@db/links"


def test_ssl_follows_environment_unless_set(monkeypatch):
    """Production turns database TLS on unless set explicitly."""
    monkeypatch.delenv("DATABASE_SSL", raising=False)
    production = Settings(_env_file=None, ENV_SETTING=EnvSettingsOptions.production)
    assert production.DATABASE_SSL is True
    explicit = Settings(
        _env_file=None, ENV_SETTING=EnvSettingsOptions.production, DATABASE_SSL=False
    )
    assert explicit.DATABASE_SSL is False
