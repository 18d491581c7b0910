# survey_reports/workflows/state.py
from __future__ import annotations

import json
from dataclasses import dataclass, field, asdict, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional


ReportStatus = Literal["pending", "running", "insufficient_data", "completed", "failed"]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


# -------------------------
# Core State (single object passed around LangGraph)
# -------------------------

@dataclass
class ReportState:
    # Identity / request
    report_id: str
    questionnaire_id: str
    schema: Any
    responses: List[Any] = field(default_factory=list)
    question_ids: List[str] = field(default_factory=list)
    template: Any = None
    language: Optional[str] = None

    # Outputs
    status: ReportStatus = "pending"
    aggregation: Dict[str, Any] = field(default_factory=dict)
    data: Optional[Dict[str, Any]] = None
    widgets: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    generated_at: Optional[str] = None


def report_record(final: Dict[str, Any]) -> Dict[str, Any]:
    """
    Persistable report record built from the graph's final values.

    Inputs (schema, responses, template) are left out; the record only carries
    what the reports table stores.
    """
    data = final.get("data") or {}
    return _json_sanitize({
        "report_id": final.get("report_id"),
        "questionnaire_id": final.get("questionnaire_id"),
        "status": final.get("status"),
        "response_count": data.get("response_count", len(final.get("responses") or [])),
        "data": final.get("data"),
        "widgets": final.get("widgets"),
        "error": final.get("error"),
        "generated_at": final.get("generated_at"),
    })


def to_json(record: Dict[str, Any], indent: Optional[int] = None) -> str:
    return json.dumps(_json_sanitize(record), ensure_ascii=False, indent=indent)


def _json_sanitize(obj: Any) -> Any:
    if obj is None: return None
    if isinstance(obj, (str, int, float, bool)): return obj
    if isinstance(obj, Enum): return obj.value
    if isinstance(obj, datetime): return obj.replace(microsecond=0).isoformat()
    if is_dataclass(obj): return _json_sanitize(asdict(obj))
    if isinstance(obj, dict): return {str(k): _json_sanitize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)): return [_json_sanitize(v) for v in obj]
    try:
        json.dumps(obj)
        return obj
    except TypeError:
        return str(obj)
