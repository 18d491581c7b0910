# survey_reports/reports/composer.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from survey_reports.app.config import DEFAULT_SETTINGS, Settings
from survey_reports.app.errors import RenderConfigError
from survey_reports.app.logging import get_logger

from . import widgets as w
from .models import ComputedReportData, DashboardWidget, ReportTemplateConfig

logger = get_logger(__name__)

ReportInput = Union[ComputedReportData, Mapping[str, Any]]
TemplateInput = Union[ReportTemplateConfig, Mapping[str, Any]]


class BaseRenderer:
    """
    Turns computed report data into a JSON-serializable widget tree.

    Renderers are stateless apart from settings; data and template are passed
    explicitly to `render`.
    """

    type: str = "base"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or DEFAULT_SETTINGS

    def render(self, data: ComputedReportData, config: ReportTemplateConfig) -> Dict[str, Any]:
        raise NotImplementedError


class DashboardRenderer(BaseRenderer):
    type = "dashboard"

    def render(self, data: ComputedReportData, config: ReportTemplateConfig) -> Dict[str, Any]:
        if config.dashboard is None:
            raise RenderConfigError("Dashboard configuration is required")

        dashboard = config.dashboard
        return {
            "type": self.type,
            "summary": w.summary_cards(data, self.settings.sufficient_responses),
            "container": {
                "layout": dashboard.layout or "grid",
                "widgets": self._render_widgets(data, dashboard.widgets),
            },
        }

    def _render_widgets(self, data: ComputedReportData, widgets: List[DashboardWidget]) -> List[Dict[str, Any]]:
        if not widgets:
            return self._default_widgets(data)
        return [self._render_widget(data, widget) for widget in widgets]

    def _default_widgets(self, data: ComputedReportData) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        if data.dimensions:
            out.append(w.dimension_chart(data.dimensions, "Dimensions"))
        if data.metrics:
            out.append(w.metrics_table(data.metrics, "Metrics"))
        return out

    def _render_widget(self, data: ComputedReportData, widget: DashboardWidget) -> Dict[str, Any]:
        title = widget.title
        if widget.type == "metric":
            return w.metric_card(data.dimensions.get(widget.data_source), title or widget.data_source)
        if widget.type == "chart":
            return w.dimension_chart(data.dimensions, title or "Dimension Scores")
        if widget.type == "table":
            return w.dimension_table(data, title or "Summary")

        logger.warning("Unknown widget type %r", widget.type)
        return w.unknown_widget(widget.type, title)


class PdfRenderer(BaseRenderer):
    type = "pdf"

    def render(self, data: ComputedReportData, config: ReportTemplateConfig) -> Dict[str, Any]:
        pdf = config.pdf or {}
        sections: List[Dict[str, Any]] = [
            {"kind": "summary", "items": w.summary_cards(data, self.settings.sufficient_responses)},
            w.dimension_table(data, "Dimensions"),
        ]
        if data.metrics:
            sections.append(w.metrics_table(data.metrics))
        return {"type": self.type, "title": pdf.get("title") or "Report", "sections": sections}


class VisualizationRenderer(BaseRenderer):
    type = "visualization"

    def render(self, data: ComputedReportData, config: ReportTemplateConfig) -> Dict[str, Any]:
        viz = config.visualization or {}
        return {
            "type": self.type,
            "charts": [w.dimension_chart(data.dimensions, viz.get("title") or "Dimension Scores")],
        }


RENDERERS = {r.type: r for r in (DashboardRenderer, PdfRenderer, VisualizationRenderer)}


class ReportComposer:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or DEFAULT_SETTINGS

    def compose(self, report: ReportInput, template: TemplateInput) -> Dict[str, Any]:
        data = report if isinstance(report, ComputedReportData) else ComputedReportData.from_dict(report)
        config = template if isinstance(template, ReportTemplateConfig) else ReportTemplateConfig.from_dict(template)

        renderer_cls = RENDERERS.get(config.type)
        if renderer_cls is None:
            raise RenderConfigError(f"Unsupported report type: {config.type}")
        return renderer_cls(self.settings).render(data, config)


def compose(report: ReportInput, template: TemplateInput, settings: Optional[Settings] = None) -> Dict[str, Any]:
    return ReportComposer(settings).compose(report, template)
