import json

import pytest

from pool_hours.config import Config


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "POOL_HOURS_URL": "https://file.example.test/hours",
                "POOL_HOURS_REQUEST_TIMEOUT": 3,
                "POOL_HOURS_HTTP_PORT": 9000,
            }
        ),
        encoding="utf-8",
    )
    return path


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("POOL_HOURS_URL", raising=False)
    monkeypatch.delenv("POOL_HOURS_REQUEST_TIMEOUT", raising=False)
    cfg = Config(str(tmp_path / "missing.json"))

    assert cfg.site_timezone == "America/Los_Angeles"
    assert cfg.request_timeout == 10.0
    assert cfg.extraction_mode == "category"
    assert cfg.pool_url.startswith("https://")


def test_file_values(config_file, monkeypatch):
    monkeypatch.delenv("POOL_HOURS_URL", raising=False)
    monkeypatch.delenv("POOL_HOURS_REQUEST_TIMEOUT", raising=False)
    monkeypatch.delenv("POOL_HOURS_HTTP_PORT", raising=False)
    cfg = Config(str(config_file))

    assert cfg.pool_url == "https://file.example.test/hours"
    assert cfg.request_timeout == 3.0
    assert cfg.http_port == 9000


def test_environment_overrides_file(config_file, monkeypatch):
    monkeypatch.setenv("POOL_HOURS_URL", "https://env.example.test/hours")
    cfg = Config(str(config_file))

    assert cfg.pool_url == "https://env.example.test/hours"


def test_unreadable_file_is_ignored(tmp_path, monkeypatch):
    monkeypatch.delenv("POOL_HOURS_REQUEST_TIMEOUT", raising=False)
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    assert Config(str(path)).request_timeout == 10.0


def test_invalid_extraction_mode(tmp_path, monkeypatch):
    monkeypatch.setenv("POOL_HOURS_EXTRACTION_MODE", "everything")
    cfg = Config(str(tmp_path / "missing.json"))

    with pytest.raises(ValueError):
        cfg.extraction_mode


def test_debug_flag(tmp_path, monkeypatch):
    monkeypatch.setenv("POOL_HOURS_DEBUG", "True")

    assert Config(str(tmp_path / "missing.json")).enable_debug_mode is True
