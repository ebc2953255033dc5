"""
配置测试
"""
from draft_studio.core.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite:///./data/draft_studio.db"
    assert settings.version_append_max_retries == 3
    assert settings.default_initial_summary == "Initial version"


def test_env_override(monkeypatch):
    monkeypatch.setenv("VERSION_APPEND_MAX_RETRIES", "5")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./other.db")

    settings = Settings(_env_file=None)

    assert settings.version_append_max_retries == 5
    assert settings.database_url == "sqlite:///./other.db"
