# survey_reports/reports/builder.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from survey_reports.analytics.aggregator import ResponseInput, SchemaInput, answer_of
from survey_reports.analytics.results import AggregationResult
from survey_reports.schema.catalog import QuestionCatalog
from survey_reports.schema.models import QuestionnaireSchema, QuestionType
from survey_reports.schema.resolver import resolve
from survey_reports.tools import stats

from .models import DEFAULT_SCALE, ComputedReportData, Dimension, MetricValue
from .widgets import scaled_percent


def _is_answered(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return True


def completion_rate(
    schema: SchemaInput,
    responses: Sequence[ResponseInput],
    question_ids: Sequence[str],
) -> Optional[float]:
    """
    Share of responses that answered every required question among `question_ids`.

    Returns None when there are no responses. Questions marked optional, and
    ids missing from the schema, do not count.
    """
    if not responses:
        return None
    if not isinstance(schema, QuestionnaireSchema):
        schema = QuestionnaireSchema.from_dict(schema)

    catalog = QuestionCatalog(resolve(schema))
    required: List[str] = []
    for qid in question_ids:
        ref = catalog.find(qid)
        if ref is not None and ref.question.required:
            required.append(qid)
    if not required:
        return 1.0

    complete = 0
    for r in responses:
        if all(_is_answered(answer_of(r, qid)) for qid in required):
            complete += 1
    return complete / len(responses)


def _top_ranked(average_ranks: Dict[str, float]) -> Optional[str]:
    if not average_ranks:
        return None
    # Lowest average rank wins; ties keep option order.
    return min(average_ranks, key=average_ranks.get)


def build_report_data(
    aggregation: AggregationResult,
    completion: Optional[float] = None,
    decimals: int = 2,
) -> ComputedReportData:
    """
    Derives the persisted report document from one aggregation run.

    Scale questions with at least one valid answer become dimensions keyed by
    question id; other question types contribute scalar metrics. The overall
    score is the mean dimension position on its own scale, in percent.
    """
    dimensions: Dict[str, Dimension] = {}
    metrics: Dict[str, MetricValue] = {}

    for qid, result in (aggregation.get("questions") or {}).items():
        qtype = result.get("type")
        count = int(result.get("responseCount") or 0)

        if qtype == QuestionType.SCALE.value:
            if count == 0:
                continue
            scale = result.get("scale") or DEFAULT_SCALE
            dimensions[qid] = Dimension(
                value=result.get("average") or 0,
                responses=count,
                scale={"min": scale["min"], "max": scale["max"]},
            )

        elif qtype == QuestionType.SINGLE_CHOICE.value:
            if result.get("topAnswer") is not None:
                metrics[f"{qid}.top_answer"] = result["topAnswer"]

        elif qtype == QuestionType.MULTIPLE_CHOICE.value:
            metrics[f"{qid}.total_selections"] = int(result.get("totalSelections") or 0)

        elif qtype == QuestionType.RANKING.value:
            top = _top_ranked(result.get("averageRanks") or {})
            if top is not None:
                metrics[f"{qid}.top_ranked"] = top

        elif qtype == QuestionType.FREE_TEXT.value:
            metrics[f"{qid}.text_responses"] = count

    overall: Optional[float] = None
    if dimensions:
        positions: List[float] = []
        for d in dimensions.values():
            b = d.bounds()
            positions.append(scaled_percent(d.value, b["min"], b["max"]))
        overall = stats.round_to(stats.average(positions), decimals)

    return ComputedReportData(
        response_count=int(aggregation.get("responseCount") or 0),
        dimensions=dimensions,
        metrics=metrics,
        completion_rate=completion,
        overall_score=overall,
    )
