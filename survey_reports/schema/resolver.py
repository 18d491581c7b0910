# survey_reports/schema/resolver.py
from __future__ import annotations

from dataclasses import replace
from typing import List, Mapping, Optional, TypeVar

from .models import (
    LocalizedOptions,
    LocalizedQuestion,
    LocalizedScale,
    LocalizedSchema,
    LocalizedSection,
    Options,
    PlainOptions,
    Question,
    QuestionnaireSchema,
    Scale,
)

T = TypeVar("T")


def _pick(values: Mapping[str, T], language: Optional[str], primary: Optional[str]) -> Optional[T]:
    """
    Fallback chain shared by text, options and scale labels:
    requested language -> primary language -> first available entry.
    Empty entries count as missing.
    """
    for lang in (language, primary):
        if lang and values.get(lang):
            return values[lang]
    for v in values.values():
        if v:
            return v
    return None


def translate_text(text: Optional[Mapping[str, str]], language: Optional[str], primary: Optional[str] = None) -> str:
    if not text:
        return ""
    return _pick(text, language, primary) or ""


def translate_options(options: Optional[Options], language: Optional[str], primary: Optional[str] = None) -> List[str]:
    if options is None:
        return []
    if isinstance(options, PlainOptions):
        return list(options.values)
    if isinstance(options, LocalizedOptions):
        return list(_pick(options.values, language, primary) or [])
    return []


def translate_scale(scale: Scale, language: Optional[str], primary: Optional[str] = None) -> LocalizedScale:
    return LocalizedScale(
        min=scale.min,
        max=scale.max,
        min_label=translate_text(scale.min_label, language, primary),
        max_label=translate_text(scale.max_label, language, primary),
    )


def _localize_question(q: Question, language: Optional[str], primary: str) -> LocalizedQuestion:
    return LocalizedQuestion(
        id=q.id,
        type=q.type,
        text=translate_text(q.text, language, primary),
        required=q.required,
        scale=translate_scale(q.scale, language, primary) if q.scale is not None else None,
        options=translate_options(q.options, language, primary) if q.options is not None else None,
        max_length=q.max_length,
    )


def resolve(schema: QuestionnaireSchema, language: Optional[str] = None) -> LocalizedSchema:
    # Reduce every translatable field to one language. Never raises.
    primary = schema.primary_language
    lang = language or primary
    sections = [
        LocalizedSection(
            id=s.id,
            title=translate_text(s.title, lang, primary),
            description=translate_text(s.description, lang, primary) if s.description is not None else None,
            questions=[_localize_question(q, lang, primary) for q in s.questions],
        )
        for s in schema.sections
    ]
    return LocalizedSchema(language=lang, sections=sections)


def empty_schema(primary_language: str = "en") -> QuestionnaireSchema:
    return QuestionnaireSchema(sections=[], primary_language=primary_language, available_languages=[primary_language])


def add_language(schema: QuestionnaireSchema, language: str) -> QuestionnaireSchema:
    if language in schema.available_languages:
        return schema
    return replace(schema, available_languages=[*schema.available_languages, language])


__all__ = [
    "add_language",
    "empty_schema",
    "resolve",
    "translate_options",
    "translate_scale",
    "translate_text",
]
