# survey_reports/analytics/service.py
from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

import jsonschema

from survey_reports.app.config import DEFAULT_SETTINGS, Settings
from survey_reports.app.errors import AppError, InsufficientDataError, NotFoundError, ValidationError
from survey_reports.app.logging import get_logger
from survey_reports.schema.models import QuestionnaireSchema

from .aggregator import DataAggregator, ResponseInput, SchemaInput
from .results import AggregationResult, empty_result

logger = get_logger(__name__)


AGGREGATE_REQUEST_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "questionnaireId": {"type": "string", "minLength": 1},
        "questionIds": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 1,
        },
        "language": {"type": "string"},
    },
    "required": ["questionnaireId", "questionIds"],
    "additionalProperties": True,
}

# Loader contracts (the persistence layer lives outside this package).
# load_schema may return the schema alone or (schema, title); None means not found.
SchemaLoader = Callable[[str], Union[None, SchemaInput, Tuple[SchemaInput, Optional[str]]]]
ResponseLoader = Callable[[str], Sequence[ResponseInput]]


def validate_request(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError("Missing required fields")
    try:
        jsonschema.validate(instance=dict(payload), schema=AGGREGATE_REQUEST_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ValidationError(f"Missing required fields: {e.message}") from e
    return dict(payload)


def _split_loaded(loaded: Any) -> Tuple[SchemaInput, Optional[str]]:
    if isinstance(loaded, tuple):
        schema, title = loaded
        return schema, title
    return loaded, None


def aggregate_request(
    payload: Mapping[str, Any],
    load_schema: SchemaLoader,
    load_responses: ResponseLoader,
    language: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> AggregationResult:
    """
    Request boundary for `POST .../analytics/aggregate`.

    ValidationError and NotFoundError propagate; an empty response set is
    turned into the benign empty payload instead of an error.
    """
    settings = settings or DEFAULT_SETTINGS
    request = validate_request(payload)
    questionnaire_id = request["questionnaireId"]

    loaded = load_schema(questionnaire_id)
    if loaded is None:
        raise NotFoundError("Questionnaire not found")
    schema, title = _split_loaded(loaded)
    if not isinstance(schema, QuestionnaireSchema):
        schema = QuestionnaireSchema.from_dict(schema, settings.default_language)

    responses = list(load_responses(questionnaire_id) or [])

    try:
        result = DataAggregator(settings).aggregate(
            schema,
            responses,
            request["questionIds"],
            language or request.get("language"),
        )
    except InsufficientDataError:
        logger.info("No responses for questionnaire %s", questionnaire_id)
        return empty_result()

    if title is not None:
        result["questionnaireTitle"] = title
    return result


def error_payload(exc: Exception) -> Dict[str, Any]:
    # Transport-neutral error body: {"error": ..., "status": ...}.
    if isinstance(exc, AppError):
        return {"error": str(exc), "status": exc.status_code}
    logger.error("Analytics aggregation error", exc_info=exc)
    return {"error": "Internal server error", "status": 500}
