# survey_reports/reports/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

import jsonschema

from survey_reports.app.errors import RenderConfigError


ReportType = Literal["dashboard", "pdf", "visualization"]
DashboardLayout = Literal["grid", "single", "three-column"]
WidgetType = Literal["metric", "chart", "table"]
MetricValue = Union[int, float, str]

DEFAULT_SCALE: Dict[str, float] = {"min": 1, "max": 5}


# -------------------------
# Computed report data
# -------------------------

@dataclass(frozen=True)
class Dimension:
    value: float
    responses: int = 0
    scale: Optional[Dict[str, float]] = None

    def bounds(self) -> Dict[str, float]:
        return dict(self.scale) if self.scale else dict(DEFAULT_SCALE)


@dataclass(frozen=True)
class ComputedReportData:
    response_count: int
    dimensions: Dict[str, Dimension] = field(default_factory=dict)
    metrics: Dict[str, MetricValue] = field(default_factory=dict)
    completion_rate: Optional[float] = None
    overall_score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "response_count": self.response_count,
            "dimensions": {
                k: {
                    "value": d.value,
                    "responses": d.responses,
                    **({"scale": dict(d.scale)} if d.scale else {}),
                }
                for k, d in self.dimensions.items()
            },
            "metrics": dict(self.metrics),
        }
        if self.completion_rate is not None:
            out["completion_rate"] = self.completion_rate
        if self.overall_score is not None:
            out["overall_score"] = self.overall_score
        return out

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "ComputedReportData":
        dimensions: Dict[str, Dimension] = {}
        for key, raw in (d.get("dimensions") or {}).items():
            scale = raw.get("scale")
            dimensions[str(key)] = Dimension(
                value=raw.get("value") or 0,
                responses=int(raw.get("responses") or 0),
                scale={
                    "min": scale.get("min", DEFAULT_SCALE["min"]),
                    "max": scale.get("max", DEFAULT_SCALE["max"]),
                } if scale else None,
            )
        return ComputedReportData(
            response_count=int(d.get("response_count") or 0),
            dimensions=dimensions,
            metrics=dict(d.get("metrics") or {}),
            completion_rate=d.get("completion_rate"),
            overall_score=d.get("overall_score"),
        )


# -------------------------
# Report templates
# -------------------------

TEMPLATE_CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "type": {"enum": ["dashboard", "pdf", "visualization"]},
        "dashboard": {
            "type": "object",
            "properties": {
                "layout": {"enum": ["grid", "single", "three-column"]},
                "widgets": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "type": {"type": "string"},
                            "dataSource": {"type": "string"},
                            "options": {"type": "object"},
                        },
                        "required": ["type"],
                    },
                },
            },
        },
        "pdf": {"type": "object"},
        "visualization": {"type": "object"},
    },
    "required": ["type"],
}


@dataclass(frozen=True)
class DashboardWidget:
    type: str
    data_source: str = ""
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> Optional[str]:
        title = self.options.get("title")
        return str(title) if title else None


@dataclass(frozen=True)
class DashboardConfig:
    layout: DashboardLayout = "grid"
    widgets: List[DashboardWidget] = field(default_factory=list)


@dataclass(frozen=True)
class ReportTemplateConfig:
    type: ReportType
    dashboard: Optional[DashboardConfig] = None
    pdf: Optional[Dict[str, Any]] = None
    visualization: Optional[Dict[str, Any]] = None

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "ReportTemplateConfig":
        try:
            jsonschema.validate(instance=dict(d), schema=TEMPLATE_CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            raise RenderConfigError(f"Invalid report template: {e.message}") from e

        dashboard = None
        if d.get("dashboard") is not None:
            raw = d["dashboard"]
            dashboard = DashboardConfig(
                layout=raw.get("layout") or "grid",
                widgets=[
                    DashboardWidget(
                        type=w["type"],
                        data_source=w.get("dataSource") or "",
                        options=dict(w.get("options") or {}),
                    )
                    for w in raw.get("widgets") or []
                ],
            )

        return ReportTemplateConfig(
            type=d["type"],
            dashboard=dashboard,
            pdf=d.get("pdf"),
            visualization=d.get("visualization"),
        )
