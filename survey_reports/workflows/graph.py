from typing import Any, Dict, Optional, Sequence
from uuid import uuid4

from langgraph.graph import StateGraph, END

from survey_reports.app.config import DEFAULT_SETTINGS, Settings
from survey_reports.app.errors import AppError
from survey_reports.app.logging import get_logger, report_context
from survey_reports.analytics.aggregator import DataAggregator
from survey_reports.reports.builder import build_report_data, completion_rate
from survey_reports.reports.composer import ReportComposer
from survey_reports.workflows.state import ReportState, report_record, utc_now_iso

logger = get_logger(__name__)


def build_graph(settings: Optional[Settings] = None):
    settings = settings or DEFAULT_SETTINGS

    # --- 1. Initialize services ---
    aggregator = DataAggregator(settings)
    composer = ReportComposer(settings)

    workflow = StateGraph(ReportState)

    # --- 2. Define nodes ---

    def gate(state: ReportState):
        """Refuses to generate below the minimum response count."""
        n = len(state.responses)
        if n < settings.min_report_responses:
            logger.info("Report gated: %d of %d required responses", n, settings.min_report_responses)
            return {
                "status": "insufficient_data",
                "error": f"At least {settings.min_report_responses} responses are required to generate reports",
            }
        return {"status": "running"}

    def run_aggregation(state: ReportState):
        result = aggregator.aggregate(state.schema, state.responses, state.question_ids, state.language)
        return {"aggregation": result}

    def build_data(state: ReportState):
        rate = completion_rate(state.schema, state.responses, state.question_ids)
        data = build_report_data(state.aggregation, rate, settings.decimals)
        return {"data": data.to_dict()}

    def render(state: ReportState):
        widgets = composer.compose(state.data, state.template)
        return {"widgets": widgets, "status": "completed", "generated_at": utc_now_iso()}

    # --- 3. Add nodes ---
    workflow.add_node("gate", gate)
    workflow.add_node("aggregate", run_aggregation)
    workflow.add_node("build", build_data)
    workflow.add_node("render", render)

    # --- 4. Edges ---
    workflow.set_entry_point("gate")

    def gate_decision(state: ReportState):
        if state.status == "insufficient_data":
            return END
        return "aggregate"

    workflow.add_conditional_edges("gate", gate_decision)
    workflow.add_edge("aggregate", "build")
    workflow.add_edge("build", "render")
    workflow.add_edge("render", END)

    return workflow.compile()


def generate_report(
    questionnaire_id: str,
    schema: Any,
    responses: Sequence[Any],
    question_ids: Sequence[str],
    template: Any,
    language: Optional[str] = None,
    settings: Optional[Settings] = None,
    report_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Runs the full generation pipeline once and returns a report record.

    Regeneration always starts from scratch; the previous record is replaced
    wholesale by whoever stores the result. Domain errors (bad template,
    empty input) end up as status="failed" on the record.
    """
    report_id = report_id or str(uuid4())
    with report_context(report_id, questionnaire_id):
        graph = build_graph(settings)
        initial = ReportState(
            report_id=report_id,
            questionnaire_id=questionnaire_id,
            schema=schema,
            responses=list(responses),
            question_ids=list(question_ids),
            template=template,
            language=language,
        )
        try:
            final = graph.invoke(initial)
        except AppError as e:
            logger.warning("Report generation failed: %s", e)
            final = {
                "report_id": report_id,
                "questionnaire_id": questionnaire_id,
                "responses": list(responses),
                "status": "failed",
                "error": str(e),
            }
        return report_record(dict(final))
