import json

import pytest

from cryptopulse.clients.coingecko import DEFAULT_BASE_URL
from cryptopulse.config import AppConfig, load_config
from cryptopulse.types import Mode, View


def test_defaults():
    config = load_config(environ={})
    assert config == AppConfig()
    assert config.base_url == DEFAULT_BASE_URL
    assert config.poll_seconds == 30
    assert config.live_capacity == 10
    assert config.mode is Mode.LIVE
    assert config.view is View.GRAPH


def test_json_file(tmp_path):
    path = tmp_path / "dashboard.json"
    path.write_text(json.dumps({"mode": "180", "view": "comparison", "timeout_s": 3}))

    config = load_config(path, environ={})

    assert config.mode is Mode.WINDOW_180D
    assert config.view is View.COMPARISON
    assert config.timeout_s == 3.0


def test_env_overrides_file(tmp_path):
    path = tmp_path / "dashboard.json"
    path.write_text(json.dumps({"poll_seconds": 60}))

    config = load_config(
        path,
        environ={"CRYPTOPULSE_POLL_SECONDS": "15", "CRYPTOPULSE_LOG_LEVEL": "debug"},
    )

    assert config.poll_seconds == 15.0
    assert config.log_level == "DEBUG"


def test_with_overrides_skips_none():
    config = AppConfig().with_overrides(mode="365", base_url=None)
    assert config.mode is Mode.WINDOW_365D
    assert config.base_url == DEFAULT_BASE_URL


@pytest.mark.parametrize(
    "payload",
    [
        {"unknown": 1},
        {"mode": "7"},
        {"poll_seconds": 0},
        {"live_capacity": -1},
    ],
)
def test_invalid_values(tmp_path, payload):
    path = tmp_path / "dashboard.json"
    path.write_text(json.dumps(payload))

    with pytest.raises(ValueError):
        load_config(path, environ={})


def test_non_object_file(tmp_path):
    path = tmp_path / "dashboard.json"
    path.write_text("[1, 2]")

    with pytest.raises(ValueError):
        load_config(path, environ={})


def test_setup_logging_json(monkeypatch):
    import logging

    from cryptopulse.logging_config import JsonFormatter, setup_logging

    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    monkeypatch.setenv("CRYPTOPULSE_LOG_FORMAT", "json")
    try:
        setup_logging("debug")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        formatter = root.handlers[0].formatter
        assert isinstance(formatter, JsonFormatter)

        record = logging.LogRecord("cryptopulse.test", logging.INFO, __file__, 1, "hello %s", ("x",), None)
        assert json.loads(formatter.format(record))["msg"] == "hello x"
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
