# survey_reports/analytics/results.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, TypedDict


# -------------------------
# Per-question payloads (JSON-friendly, camelCase as served to dashboards)
# -------------------------

class QuestionResult(TypedDict, total=False):
    questionText: str
    sectionTitle: str
    type: str
    responseCount: int


class ScaleResult(QuestionResult, total=False):
    scale: Optional[Dict[str, Any]]
    average: float
    median: float
    min: float
    max: float
    distribution: Dict[Any, int]


class SingleChoiceResult(QuestionResult, total=False):
    options: List[str]
    distribution: Dict[str, int]
    topAnswer: Optional[str]


class MultipleChoiceResult(QuestionResult, total=False):
    options: List[str]
    totalSelections: int
    distribution: Dict[str, int]


class RankingResult(QuestionResult, total=False):
    options: List[str]
    averageRanks: Dict[str, float]
    rankCounts: Dict[str, int]


class FreeTextResult(QuestionResult, total=False):
    maxLength: Optional[int]
    responses: List[str]


class AggregationResult(TypedDict, total=False):
    questions: Dict[str, QuestionResult]
    responseCount: int
    message: str
    questionnaireTitle: str


EMPTY_RESULT_MESSAGE = "No responses available"


def empty_result() -> AggregationResult:
    # Benign payload served when a questionnaire has no responses yet.
    return {"questions": {}, "responseCount": 0, "message": EMPTY_RESULT_MESSAGE}
