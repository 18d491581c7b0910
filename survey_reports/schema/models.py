# models.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from survey_reports.app.errors import SchemaError


TranslatableText = Dict[str, str]


class QuestionType(str, Enum):
    SCALE = "scale"
    SINGLE_CHOICE = "single-choice"
    MULTIPLE_CHOICE = "multiple-choice"
    RANKING = "ranking"
    FREE_TEXT = "free-text"

    @classmethod
    def parse(cls, raw: Any) -> Union["QuestionType", str]:
        # Unknown type strings are kept as-is so newer schemas still load.
        try:
            return cls(raw)
        except ValueError:
            return str(raw)


CHOICE_TYPES = (QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE, QuestionType.RANKING)


# -------------------------
# Options (tagged variant)
# -------------------------

@dataclass(frozen=True)
class PlainOptions:
    values: List[str]
    kind: Literal["plain"] = "plain"


@dataclass(frozen=True)
class LocalizedOptions:
    values: Dict[str, List[str]]
    kind: Literal["localized"] = "localized"


Options = Union[PlainOptions, LocalizedOptions]


@dataclass(frozen=True)
class Scale:
    min: float
    max: float
    min_label: TranslatableText = field(default_factory=dict)
    max_label: TranslatableText = field(default_factory=dict)


# -------------------------
# Multilingual schema
# -------------------------

@dataclass(frozen=True)
class Question:
    id: str
    type: Union[QuestionType, str]
    text: TranslatableText
    required: bool = True
    scale: Optional[Scale] = None
    options: Optional[Options] = None
    max_length: Optional[int] = None


@dataclass(frozen=True)
class Section:
    id: str
    title: TranslatableText
    questions: List[Question] = field(default_factory=list)
    description: Optional[TranslatableText] = None


@dataclass(frozen=True)
class QuestionnaireSchema:
    sections: List[Section] = field(default_factory=list)
    primary_language: str = "en"
    available_languages: List[str] = field(default_factory=lambda: ["en"])

    def iter_questions(self):
        for section in self.sections:
            for question in section.questions:
                yield section, question

    @staticmethod
    def from_dict(raw: Mapping[str, Any], default_language: str = "en") -> "QuestionnaireSchema":
        """
        Builds a schema from its stored JSON form.

        Accepts camelCase keys as stored by the questionnaire editor
        (primaryLanguage, minLabel, maxLength) and plain strings wherever a
        translatable text is expected. `default_language` becomes the primary
        language of schemas that do not declare one.
        """
        if not isinstance(raw, Mapping):
            raise SchemaError("Schema must be a JSON object.")

        primary = str(raw.get("primaryLanguage") or raw.get("primary_language") or default_language)
        available = raw.get("availableLanguages") or raw.get("available_languages") or [primary]

        seen: set = set()
        sections: List[Section] = []
        for s in raw.get("sections") or []:
            questions: List[Question] = []
            for q in s.get("questions") or []:
                qid = q.get("id")
                if not isinstance(qid, str) or not qid:
                    raise SchemaError(f"Question in section {s.get('id')!r} has no id.")
                if qid in seen:
                    raise SchemaError(f"Duplicate question id: {qid}")
                seen.add(qid)
                questions.append(_question_from_dict(q, primary))

            description = s.get("description")
            sections.append(
                Section(
                    id=str(s.get("id", "")),
                    title=_text(s.get("title"), primary),
                    description=_text(description, primary) if description is not None else None,
                    questions=questions,
                )
            )

        return QuestionnaireSchema(
            sections=sections,
            primary_language=primary,
            available_languages=[str(x) for x in available],
        )


def _text(value: Any, primary: str) -> TranslatableText:
    if value is None:
        return {}
    if isinstance(value, str):
        return {primary: value}
    if isinstance(value, Mapping):
        return {str(k): str(v) for k, v in value.items() if v is not None}
    return {primary: str(value)}


def _options(value: Any) -> Optional[Options]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return PlainOptions(values=[str(v) for v in value])
    if isinstance(value, Mapping):
        return LocalizedOptions(
            values={str(lang): [str(v) for v in (opts or [])] for lang, opts in value.items()}
        )
    raise SchemaError(f"Unsupported options format: {type(value).__name__}")


def _question_from_dict(q: Mapping[str, Any], primary: str) -> Question:
    scale_raw = q.get("scale")
    scale = None
    if isinstance(scale_raw, Mapping):
        scale = Scale(
            min=scale_raw.get("min", 1),
            max=scale_raw.get("max", 5),
            min_label=_text(scale_raw.get("minLabel", scale_raw.get("min_label")), primary),
            max_label=_text(scale_raw.get("maxLabel", scale_raw.get("max_label")), primary),
        )

    max_length = q.get("maxLength", q.get("max_length"))
    return Question(
        id=q["id"],
        type=QuestionType.parse(q.get("type")),
        text=_text(q.get("text"), primary),
        required=bool(q.get("required", True)),
        scale=scale,
        options=_options(q.get("options")),
        max_length=int(max_length) if max_length is not None else None,
    )


# -------------------------
# Single-language view
# -------------------------

@dataclass(frozen=True)
class LocalizedScale:
    min: float
    max: float
    min_label: str = ""
    max_label: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"min": self.min, "max": self.max, "minLabel": self.min_label, "maxLabel": self.max_label}


@dataclass(frozen=True)
class LocalizedQuestion:
    id: str
    type: Union[QuestionType, str]
    text: str
    required: bool = True
    scale: Optional[LocalizedScale] = None
    options: Optional[List[str]] = None
    max_length: Optional[int] = None

    @property
    def type_name(self) -> str:
        return self.type.value if isinstance(self.type, QuestionType) else str(self.type)


@dataclass(frozen=True)
class LocalizedSection:
    id: str
    title: str
    questions: List[LocalizedQuestion] = field(default_factory=list)
    description: Optional[str] = None


@dataclass(frozen=True)
class LocalizedSchema:
    language: str
    sections: List[LocalizedSection] = field(default_factory=list)


# -------------------------
# Responses
# -------------------------

@dataclass(frozen=True)
class Response:
    response_id: str
    questionnaire_id: str
    participant_id: Optional[str] = None
    answers: Mapping[str, Any] = field(default_factory=dict)
    submitted_at: Optional[str] = None

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Response":
        return Response(
            response_id=str(d.get("id") or d.get("response_id") or ""),
            questionnaire_id=str(d.get("questionnaire_id") or d.get("questionnaireId") or ""),
            participant_id=d.get("participant_id") or d.get("participantId"),
            answers=dict(d.get("answers") or {}),
            submitted_at=d.get("submitted_at") or d.get("submittedAt"),
        )
