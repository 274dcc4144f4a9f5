"""Shared fixtures for the nginx-cache-sync test suite."""

import pytest

from nginx_cache_sync.common.config import Settings

CONFIG_ENV_VARS = (
    "DB_USER",
    "DB_PASSWORD",
    "DB_HOST",
    "DB_NAME",
    "DB_TABLE_PREFIX",
    "DB_CONNECT_TIMEOUT",
    "CACHE_PATH",
    "NGINX_CACHE_PATH",
    "STATE_FILE",
    "NGINX_CACHE_STATE_FILE",
    "CHECK_INTERVAL",
    "NGINX_CACHE_CHECK_INTERVAL",
    "CLEAR_METHOD",
    "CLEAR_TIMEOUT",
    "NGINX_CACHE_SYNC_LOG_LEVEL",
    "NGINX_CACHE_SYNC_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the caller's environment and any .env file."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def db_env(monkeypatch):
    monkeypatch.setenv("DB_USER", "wordpress")
    monkeypatch.setenv("DB_PASSWORD", "s3cret")
    monkeypatch.setenv("DB_HOST", "db.internal:3306")
    monkeypatch.setenv("DB_NAME", "wordpress")


@pytest.fixture
def settings(tmp_path):
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    return Settings(
        _env_file=None,
        db_user="wordpress",
        db_password="s3cret",
        db_host="db.internal",
        db_name="wordpress",
        cache_path=str(cache_dir),
        state_file=str(tmp_path / "state" / "nginx-cache-sync.last"),
        check_interval=5,
    )
