# survey_reports/reports/widgets.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from survey_reports.tools import stats

from .models import ComputedReportData, Dimension, MetricValue

NO_DATA_MESSAGE = "No data available"

Node = Dict[str, Any]


# -------------------------
# Formatting helpers
# -------------------------

def format_number(value: Optional[float], decimals: int = 2) -> str:
    return f"{float(value or 0):.{decimals}f}"


def format_percentage(rate: Optional[float], decimals: int = 1) -> str:
    # rate is a 0..1 fraction
    return f"{float(rate or 0) * 100:.{decimals}f}%"


def humanize_key(key: str) -> str:
    return key.replace("-", " ").replace("_", " ")


def scaled_percent(value: Optional[float], low: float, high: float) -> float:
    # Position of value within [low, high] as 0..100.
    pct = stats.percentage(float(value or 0) - low, high - low)
    return max(0.0, min(100.0, pct))


# -------------------------
# Node builders
# -------------------------

def bar(label: str, value: Optional[float], percent: float, decimals: int = 2) -> Node:
    return {
        "label": label,
        "value": float(value or 0),
        "display": format_number(value, decimals),
        "percent": percent,
    }


def dimension_bar(key: str, dim: Dimension) -> Node:
    b = dim.bounds()
    return bar(humanize_key(key), dim.value, scaled_percent(dim.value, b["min"], b["max"]))


def placeholder(title: str) -> Node:
    return {"kind": "placeholder", "title": title, "message": NO_DATA_MESSAGE}


def summary_cards(data: ComputedReportData, sufficient_responses: int = 5) -> List[Node]:
    """
    Summary indicators shown above every dashboard.

    Overall score and completion rate are included only when the report
    carries them; the response count card is always present.
    """
    cards: List[Node] = []

    if data.overall_score is not None:
        cards.append({
            "kind": "summary",
            "id": "overall_score",
            "label": "Overall Score",
            "value": data.overall_score,
            "display": format_number(data.overall_score, 1),
            "percent": scaled_percent(data.overall_score, 0, 100),
        })

    sufficient = data.response_count >= sufficient_responses
    cards.append({
        "kind": "summary",
        "id": "response_count",
        "label": "Total Responses",
        "value": data.response_count,
        "display": str(data.response_count),
        "sufficient": sufficient,
        "note": "Sufficient data" if sufficient else "Need more responses",
    })

    if data.completion_rate is not None:
        cards.append({
            "kind": "summary",
            "id": "completion_rate",
            "label": "Completion Rate",
            "value": data.completion_rate,
            "display": format_percentage(data.completion_rate),
            "percent": scaled_percent(data.completion_rate, 0, 1),
        })

    return cards


def dimension_chart(dimensions: Mapping[str, Dimension], title: str) -> Node:
    if not dimensions:
        return placeholder(title)
    return {
        "kind": "chart",
        "chart": "horizontal-bar",
        "title": title,
        "bars": [dimension_bar(k, d) for k, d in dimensions.items()],
    }


def metric_card(dim: Optional[Dimension], title: str) -> Node:
    if dim is None:
        return placeholder(title)
    b = dim.bounds()
    return {
        "kind": "metric",
        "title": title,
        "value": float(dim.value or 0),
        "display": format_number(dim.value),
        "max": b["max"],
        "percent": scaled_percent(dim.value, b["min"], b["max"]),
        "responses": dim.responses or 0,
    }


def dimension_table(data: ComputedReportData, title: str) -> Node:
    rows: List[Node] = [
        {
            "label": humanize_key(k),
            "score": format_number(d.value),
            "responses": d.responses or 0,
        }
        for k, d in data.dimensions.items()
    ]
    rows.append({
        "label": "Overall",
        "score": format_number(data.overall_score),
        "responses": data.response_count or 0,
        "total": True,
    })
    return {
        "kind": "table",
        "title": title,
        "columns": ["Dimension", "Score", "Responses"],
        "rows": rows,
    }


def metrics_table(metrics: Mapping[str, MetricValue], title: str = "Metrics") -> Node:
    rows = [
        {
            "label": k,
            "value": format_number(v, 2) if isinstance(v, (int, float)) and not isinstance(v, bool) else str(v),
        }
        for k, v in metrics.items()
    ]
    return {"kind": "table", "title": title, "columns": ["Metric", "Value"], "rows": rows}


def unknown_widget(widget_type: str, title: Optional[str]) -> Node:
    return {"kind": "unknown", "title": title or "Widget", "message": f"Unknown widget type: {widget_type}"}
