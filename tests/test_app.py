"""Settings from environment and structured logging."""

from __future__ import annotations

import json
import logging

from survey_reports.app.config import Settings
from survey_reports.app.logging import (
    JsonFormatter,
    ReportContextFilter,
    report_context,
    setup_logging,
)


def test_settings_defaults(monkeypatch):
    for key in ("APP_LOG_LEVEL", "APP_LOG_JSON", "APP_DEFAULT_LANGUAGE", "APP_SUFFICIENT_RESPONSES",
                "APP_MIN_REPORT_RESPONSES", "APP_DECIMALS"):
        monkeypatch.delenv(key, raising=False)
    s = Settings.from_env(dotenv=False)
    assert s == Settings()
    assert s.sufficient_responses == 5
    assert s.min_report_responses == 5


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("APP_LOG_JSON", "no")
    monkeypatch.setenv("APP_DEFAULT_LANGUAGE", "de")
    monkeypatch.setenv("APP_MIN_REPORT_RESPONSES", "10")
    monkeypatch.setenv("APP_DECIMALS", "not-a-number")
    s = Settings.from_env(dotenv=False)
    assert s.log_json is False
    assert s.default_language == "de"
    assert s.min_report_responses == 10
    assert s.decimals == 2


def test_json_formatter_includes_report_context_and_extras():
    with report_context("rep-9", "qn-1"):
        record = logging.LogRecord("survey_reports.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        record.question_ids = ["q1"]
        ReportContextFilter().filter(record)
    payload = json.loads(JsonFormatter().format(record))

    assert payload["msg"] == "hello world"
    assert payload["report_id"] == "rep-9"
    assert payload["questionnaire_id"] == "qn-1"
    assert payload["question_ids"] == ["q1"]
    assert payload["ts"].endswith("Z")


def test_report_context_is_restored_on_exit():
    record = logging.LogRecord("survey_reports.test", logging.INFO, __file__, 1, "outside", (), None)
    with report_context("outer"):
        with report_context("inner"):
            pass
        ReportContextFilter().filter(record)
        assert record.report_id == "outer"
    ReportContextFilter().filter(record)
    assert record.report_id is None
    assert "report_id" not in json.loads(JsonFormatter().format(record))


def test_setup_logging_follows_settings():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        handler = setup_logging(Settings(log_level="debug", log_json=False))
        assert root.handlers == [handler]
        assert root.level == logging.DEBUG
        assert not isinstance(handler.formatter, JsonFormatter)
        assert isinstance(setup_logging(Settings()).formatter, JsonFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
