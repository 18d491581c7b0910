"""Shared fixtures: a small bilingual questionnaire and matching responses."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest

from survey_reports.schema.models import QuestionnaireSchema, Response


RAW_SCHEMA: Dict[str, Any] = {
    "primaryLanguage": "en",
    "availableLanguages": ["en", "de"],
    "sections": [
        {
            "id": "s1",
            "title": {"en": "Leadership", "de": "Führung"},
            "description": {"en": "How you are led"},
            "questions": [
                {
                    "id": "q_scale",
                    "type": "scale",
                    "text": {"en": "Rate your manager", "de": "Bewerten Sie Ihre Führungskraft"},
                    "scale": {
                        "min": 1,
                        "max": 5,
                        "minLabel": {"en": "Poor", "de": "Schlecht"},
                        "maxLabel": {"en": "Great", "de": "Sehr gut"},
                    },
                },
                {
                    "id": "q_single",
                    "type": "single-choice",
                    "text": {"en": "Preferred meeting day"},
                    "options": {"en": ["Mon", "Tue"], "de": ["Mo", "Di"]},
                },
            ],
        },
        {
            "id": "s2",
            "title": {"en": "Team", "de": "Team"},
            "questions": [
                {
                    "id": "q_multi",
                    "type": "multiple-choice",
                    "text": {"en": "Tools you use"},
                    "options": ["x", "y", "z"],
                },
                {
                    "id": "q_rank",
                    "type": "ranking",
                    "text": {"en": "Rank priorities"},
                    "options": ["A", "B", "C"],
                },
                {
                    "id": "q_text",
                    "type": "free-text",
                    "text": {"en": "Anything else?"},
                    "required": False,
                    "maxLength": 500,
                },
                {
                    "id": "q_future",
                    "type": "matrix",
                    "text": {"en": "Future question type"},
                    "required": False,
                },
            ],
        },
    ],
}


@pytest.fixture()
def raw_schema() -> Dict[str, Any]:
    return RAW_SCHEMA


@pytest.fixture()
def schema() -> QuestionnaireSchema:
    return QuestionnaireSchema.from_dict(RAW_SCHEMA)


def make_responses(answer_sets: List[Dict[str, Any]]) -> List[Response]:
    return [
        Response(response_id=f"r{i}", questionnaire_id="qn1", participant_id=f"p{i}", answers=answers)
        for i, answers in enumerate(answer_sets, start=1)
    ]


@pytest.fixture()
def responses() -> List[Response]:
    return make_responses([
        {"q_scale": 1, "q_single": "Mon", "q_multi": ["x", "y"], "q_rank": ["A", "B"], "q_text": " great "},
        {"q_scale": 2, "q_single": "Tue", "q_multi": ["x"], "q_rank": ["B", "A"], "q_text": "   "},
        {"q_scale": 3, "q_single": "Mon"},
        {"q_scale": 4, "q_future": {"row": 1}},
        {"q_scale": 5, "q_text": "ok"},
    ])
