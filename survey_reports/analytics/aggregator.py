# survey_reports/analytics/aggregator.py
from __future__ import annotations

import math
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from survey_reports.app.config import DEFAULT_SETTINGS, Settings
from survey_reports.app.errors import InsufficientDataError, ValidationError
from survey_reports.app.logging import get_logger
from survey_reports.schema.catalog import QuestionCatalog, QuestionRef
from survey_reports.schema.models import QuestionnaireSchema, QuestionType, Response
from survey_reports.schema.resolver import resolve
from survey_reports.tools import stats

from .results import (
    AggregationResult,
    FreeTextResult,
    MultipleChoiceResult,
    QuestionResult,
    RankingResult,
    ScaleResult,
    SingleChoiceResult,
)

logger = get_logger(__name__)

SchemaInput = Union[QuestionnaireSchema, Mapping[str, Any]]
ResponseInput = Union[Response, Mapping[str, Any]]


def _answers_of(response: ResponseInput) -> Mapping[str, Any]:
    # Support Response dataclasses and raw rows from the responses table.
    if isinstance(response, Response):
        return response.answers or {}
    if isinstance(response, Mapping):
        answers = response.get("answers")
        return answers if isinstance(answers, Mapping) else {}
    return {}


def _is_number(v: Any) -> bool:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return False
    return not (isinstance(v, float) and math.isnan(v))


def answer_of(response: ResponseInput, question_id: str) -> Any:
    return _answers_of(response).get(question_id)


def extract_raw_values(responses: Sequence[ResponseInput], question_id: str) -> List[Any]:
    # Drops missing answers only; shape checks happen per type.
    out: List[Any] = []
    for r in responses:
        value = answer_of(r, question_id)
        if value is not None:
            out.append(value)
    return out


class DataAggregator:
    """
    Per-question statistics over a questionnaire's responses.

    One call is a pure function of (schema, responses, question_ids, language):
    nothing is cached and inputs are never mutated.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or DEFAULT_SETTINGS
        self._handlers: Dict[QuestionType, Callable[[QuestionResult, QuestionRef, List[Any]], QuestionResult]] = {
            QuestionType.SCALE: self._scale,
            QuestionType.SINGLE_CHOICE: self._single_choice,
            QuestionType.MULTIPLE_CHOICE: self._multiple_choice,
            QuestionType.RANKING: self._ranking,
            QuestionType.FREE_TEXT: self._free_text,
        }
        missing = set(QuestionType) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No aggregation handler for: {sorted(t.value for t in missing)}")

    def aggregate(
        self,
        schema: SchemaInput,
        responses: Sequence[ResponseInput],
        question_ids: Sequence[str],
        language: Optional[str] = None,
    ) -> AggregationResult:
        if not responses:
            raise InsufficientDataError("No responses to aggregate.")
        if not question_ids:
            raise ValidationError("questionIds must not be empty.")

        if not isinstance(schema, QuestionnaireSchema):
            schema = QuestionnaireSchema.from_dict(schema, self.settings.default_language)

        catalog = QuestionCatalog(resolve(schema, language))

        questions: Dict[str, QuestionResult] = {}
        skipped: List[str] = []
        for qid in question_ids:
            ref = catalog.find(qid)
            if ref is None:
                skipped.append(qid)
                continue
            questions[qid] = self.aggregate_question(ref, responses)

        if skipped:
            logger.debug("Skipped unknown question ids", extra={"question_ids": skipped})
        logger.info(
            "Aggregated %d question(s) over %d response(s)",
            len(questions),
            len(responses),
        )
        return {"questions": questions, "responseCount": len(responses)}

    def aggregate_question(self, ref: QuestionRef, responses: Sequence[ResponseInput]) -> QuestionResult:
        question = ref.question
        raw_values = extract_raw_values(responses, question.id)
        base: QuestionResult = {
            "questionText": question.text,
            "sectionTitle": ref.section_title,
            "type": question.type_name,
        }

        handler = self._handlers.get(question.type) if isinstance(question.type, QuestionType) else None
        if handler is None:
            # Forward-compatible shape for types this version does not know.
            base["responseCount"] = len(raw_values)
            return base
        return handler(base, ref, raw_values)

    # -------------------------
    # Type handlers
    # -------------------------

    def _round(self, value: float) -> float:
        return stats.round_to(value, self.settings.decimals)

    def _scale(self, base: QuestionResult, ref: QuestionRef, raw_values: List[Any]) -> ScaleResult:
        scale = ref.question.scale.to_dict() if ref.question.scale is not None else None
        values = [v for v in raw_values if _is_number(v)]

        if not values:
            return {
                **base,
                "scale": scale,
                "responseCount": 0,
                "average": 0,
                "median": 0,
                "min": 0,
                "max": 0,
                "distribution": {},
            }

        bounds = stats.value_range(values)
        return {
            **base,
            "scale": scale,
            "responseCount": len(values),
            "average": self._round(stats.average(values)),
            "median": self._round(stats.median(values)),
            "min": bounds["min"],
            "max": bounds["max"],
            "distribution": stats.distribution(values),
        }

    def _single_choice(self, base: QuestionResult, ref: QuestionRef, raw_values: List[Any]) -> SingleChoiceResult:
        values = [v for v in raw_values if isinstance(v, str)]
        return {
            **base,
            "options": list(ref.question.options or []),
            "responseCount": len(values),
            "distribution": stats.distribution(values),
            "topAnswer": stats.mode(values),
        }

    def _multiple_choice(self, base: QuestionResult, ref: QuestionRef, raw_values: List[Any]) -> MultipleChoiceResult:
        selections: List[str] = []
        for value in raw_values:
            if isinstance(value, (list, tuple)):
                selections.extend(v for v in value if isinstance(v, str))

        return {
            **base,
            "options": list(ref.question.options or []),
            "responseCount": len(raw_values),
            "totalSelections": len(selections),
            "distribution": stats.distribution(selections),
        }

    def _ranking(self, base: QuestionResult, ref: QuestionRef, raw_values: List[Any]) -> RankingResult:
        options = list(ref.question.options or [])
        rank_sums: Dict[str, int] = {o: 0 for o in options}
        rank_counts: Dict[str, int] = {o: 0 for o in options}

        for value in raw_values:
            if not isinstance(value, (list, tuple)):
                continue
            for position, option in enumerate(value, start=1):
                if isinstance(option, str):
                    rank_sums[option] = rank_sums.get(option, 0) + position
                    rank_counts[option] = rank_counts.get(option, 0) + 1

        average_ranks = {
            option: self._round(rank_sums[option] / rank_counts[option])
            for option in rank_sums
            if rank_counts[option] > 0
        }
        return {
            **base,
            "options": options,
            "responseCount": len(raw_values),
            "averageRanks": average_ranks,
            "rankCounts": rank_counts,
        }

    def _free_text(self, base: QuestionResult, ref: QuestionRef, raw_values: List[Any]) -> FreeTextResult:
        texts = [v for v in raw_values if isinstance(v, str) and v.strip()]
        return {
            **base,
            "maxLength": ref.question.max_length,
            "responseCount": len(texts),
            "responses": texts,
        }


def aggregate(
    schema: SchemaInput,
    responses: Sequence[ResponseInput],
    question_ids: Sequence[str],
    language: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> AggregationResult:
    return DataAggregator(settings).aggregate(schema, responses, question_ids, language)
