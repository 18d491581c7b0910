"""Aggregation request boundary: validation, not-found and empty-data handling."""

from __future__ import annotations

import pytest

from survey_reports.analytics.service import aggregate_request, error_payload, validate_request
from survey_reports.app.errors import InsufficientDataError, NotFoundError, ValidationError


def _loaders(raw_schema, responses, title=None):
    def load_schema(qid):
        if qid != "qn1":
            return None
        return (raw_schema, title) if title else raw_schema

    def load_responses(qid):
        return responses

    return load_schema, load_responses


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"questionnaireId": "qn1"},
        {"questionIds": ["q_scale"]},
        {"questionnaireId": "", "questionIds": ["q_scale"]},
        {"questionnaireId": "qn1", "questionIds": []},
        "not-an-object",
    ],
)
def test_invalid_requests_raise_validation_error(payload):
    with pytest.raises(ValidationError):
        validate_request(payload)


def test_unknown_questionnaire_raises_not_found(raw_schema, responses):
    load_schema, load_responses = _loaders(raw_schema, responses)
    with pytest.raises(NotFoundError):
        aggregate_request({"questionnaireId": "other", "questionIds": ["q_scale"]}, load_schema, load_responses)


def test_no_responses_returns_benign_empty_result(raw_schema):
    load_schema, load_responses = _loaders(raw_schema, [])
    result = aggregate_request({"questionnaireId": "qn1", "questionIds": ["q_scale"]}, load_schema, load_responses)
    assert result == {"questions": {}, "responseCount": 0, "message": "No responses available"}


def test_successful_request_includes_title(raw_schema, responses):
    load_schema, load_responses = _loaders(raw_schema, responses, title="Engagement 2026")
    result = aggregate_request(
        {"questionnaireId": "qn1", "questionIds": ["q_scale", "q_single"], "language": "de"},
        load_schema,
        load_responses,
    )
    assert result["responseCount"] == 5
    assert result["questionnaireTitle"] == "Engagement 2026"
    assert result["questions"]["q_single"]["options"] == ["Mo", "Di"]


def test_error_payload_maps_status_codes():
    assert error_payload(ValidationError("Missing required fields")) == {"error": "Missing required fields", "status": 400}
    assert error_payload(NotFoundError("Questionnaire not found"))["status"] == 404
    assert error_payload(InsufficientDataError("none"))["status"] == 422
    assert error_payload(RuntimeError("boom")) == {"error": "Internal server error", "status": 500}
