"""
Log output selection between JSON and plain text lines.
"""
import json
import logging

from app.config.settings import Settings
from app.core.logging import JsonFormatter, build_formatter


def make_record(msg="hello world"):
    return logging.LogRecord("venues", logging.WARNING, __file__, 1, msg, None, None)


def test_json_is_default(monkeypatch):
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    formatter = build_formatter(Settings().log_line_format)
    assert isinstance(formatter, JsonFormatter)
    assert json.loads(formatter.format(make_record()))["message"] == "hello world"


def test_plain_mode_uses_line_format_setting(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "plain")
    settings = Settings()
    assert settings.log_line_format != "plain"

    line = build_formatter(settings.log_line_format).format(make_record())
    assert "venues - WARNING - hello world" in line


def test_plain_mode_without_line_format(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "plain")
    line = build_formatter().format(make_record())
    assert line.endswith("WARNING venues hello world")
