import pytest
from pydantic import ValidationError

from classweave.core.config import Settings


def test_cors_origins_accept_comma_list():
    settings = Settings(cors_origins="http://a.test, http://b.test", _env_file=None)
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_cors_origins_accept_json_list():
    settings = Settings(cors_origins='["http://a.test"]', _env_file=None)
    assert settings.cors_origins == ["http://a.test"]


def test_log_level_is_normalized():
    assert Settings(log_level=" debug ", _env_file=None).log_level == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(log_level="chatty", _env_file=None)


def test_scheduler_defaults(monkeypatch):
    for name in ("SCHEDULER_REQUIRE_ROOM_STRICT", "SCHEDULER_SPLIT_LABS_BY_BATCH", "SCHEDULER_TIME_BUDGET_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.scheduler_require_room_strict is True
    assert settings.scheduler_split_labs_by_batch is True
    assert settings.scheduler_time_budget_seconds == 30.0
