# survey_reports/schema/catalog.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import LocalizedQuestion, LocalizedSchema


@dataclass(frozen=True)
class QuestionRef:
    question: LocalizedQuestion
    section_id: str
    section_title: str


def find(schema: LocalizedSchema, question_id: str) -> Optional[QuestionRef]:
    # Linear scan; schemas hold tens of questions.
    for section in schema.sections:
        for question in section.questions:
            if question.id == question_id:
                return QuestionRef(question=question, section_id=section.id, section_title=section.title)
    return None


class QuestionCatalog:
    """
    Question lookup over a localized schema.

    `find` returns None for unknown ids; callers decide whether a missing
    question is an error (the aggregator skips it).
    """

    def __init__(self, schema: LocalizedSchema):
        self.schema = schema

    def find(self, question_id: str) -> Optional[QuestionRef]:
        return find(self.schema, question_id)
