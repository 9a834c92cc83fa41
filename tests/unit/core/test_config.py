"""Unit tests for Settings."""

import pytest
from pydantic import ValidationError

from shelfbase.core.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.app_name == "ShelfBase"
    assert settings.search_result_limit == 20
    assert settings.store_timeout_seconds == 10.0
    assert settings.tag_autocomplete_limit == 10


def test_environment_variables_use_prefix(monkeypatch):
    monkeypatch.setenv("SHELFBASE_SEARCH_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("SHELFBASE_CORS_ORIGINS", "http://a.test, http://b.test")

    settings = Settings(_env_file=None)

    assert settings.search_timeout_seconds == 2.5
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_sqlite_rejects_multiple_workers():
    with pytest.raises(ValidationError, match="SQLite does not support multiple worker"):
        Settings(_env_file=None, workers=4, database_url="sqlite+aiosqlite:///./x.db")


def test_timeouts_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, store_timeout_seconds=0)



def test_cors_origins_accept_a_json_list(monkeypatch):
    monkeypatch.setenv("SHELFBASE_CORS_ORIGINS", '["http://a.test"]')

    assert Settings(_env_file=None).cors_origins == ["http://a.test"]
