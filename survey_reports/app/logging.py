from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

from survey_reports.app.config import DEFAULT_SETTINGS, Settings


# Report being generated in the current context; stamped onto every record.
_REPORT_CONTEXT: ContextVar[Dict[str, Optional[str]]] = ContextVar("report_context", default={})

CONTEXT_FIELDS = ("report_id", "questionnaire_id")

_RESERVED = {
    "msg", "args", "levelname", "levelno", "name", "pathname", "filename", "module",
    "exc_info", "exc_text", "stack_info", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName", "processName", "process",
    "taskName", *CONTEXT_FIELDS,
}


@contextmanager
def report_context(report_id: str, questionnaire_id: Optional[str] = None) -> Iterator[None]:
    # Scope one generation run; nested runs restore the outer context on exit.
    token = _REPORT_CONTEXT.set({"report_id": report_id, "questionnaire_id": questionnaire_id})
    try:
        yield
    finally:
        _REPORT_CONTEXT.reset(token)


class ReportContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        ctx = _REPORT_CONTEXT.get()
        for field in CONTEXT_FIELDS:
            setattr(record, field, ctx.get(field))
        return True


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value, ensure_ascii=False)
        return value
    except TypeError:
        return str(value)


class JsonFormatter(logging.Formatter):
    # One JSON object per line; report context first, then extra={} fields.
    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).replace(microsecond=0)
        payload: Dict[str, Any] = {
            "ts": ts.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        payload.update(
            {key: _jsonable(value) for key, value in record.__dict__.items() if key not in _RESERVED}
        )
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(settings: Optional[Settings] = None) -> logging.Handler:
    """
    Configures root logging from settings (APP_LOG_LEVEL, APP_LOG_JSON).

    Replaces any handlers already on the root logger and returns the new one.
    """
    settings = settings or DEFAULT_SETTINGS
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(settings.log_level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(ReportContextFilter())
    if settings.log_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s report_id=%(report_id)s %(message)s"
        ))

    root.addHandler(handler)
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
