"""Per-question aggregation across the five question types."""

from __future__ import annotations

import copy

import pytest

from survey_reports.analytics.aggregator import DataAggregator, aggregate, extract_raw_values
from survey_reports.app.config import Settings
from survey_reports.app.errors import InsufficientDataError, ValidationError


ALL_IDS = ["q_scale", "q_single", "q_multi", "q_rank", "q_text", "q_future"]


def test_scale_statistics(schema, responses):
    result = aggregate(schema, responses, ["q_scale"])
    q = result["questions"]["q_scale"]
    assert q["average"] == 3
    assert q["median"] == 3
    assert q["min"] == 1
    assert q["max"] == 5
    assert q["distribution"] == {1: 1, 2: 1, 3: 1, 4: 1, 5: 1}
    assert q["responseCount"] == 5
    assert q["sectionTitle"] == "Leadership"
    assert q["scale"] == {"min": 1, "max": 5, "minLabel": "Poor", "maxLabel": "Great"}


def test_scale_rounds_average_and_median_to_two_decimals(schema):
    rows = [{"answers": {"q_scale": v}} for v in (1, 2, 2)]
    q = aggregate(schema, rows, ["q_scale"])["questions"]["q_scale"]
    assert q["average"] == 1.67
    assert q["median"] == 2


def test_scale_without_numeric_answers_is_soft_empty(schema):
    rows = [{"answers": {"q_single": "Mon"}}, {"answers": {"q_scale": "four"}}, {"answers": {"q_scale": True}}]
    q = aggregate(schema, rows, ["q_scale"])["questions"]["q_scale"]
    for key in ("responseCount", "average", "median", "min", "max"):
        assert q[key] == 0
    assert q["distribution"] == {}


def test_single_choice(schema, responses):
    q = aggregate(schema, responses, ["q_single"])["questions"]["q_single"]
    assert q["distribution"] == {"Mon": 2, "Tue": 1}
    assert q["topAnswer"] == "Mon"
    assert q["options"] == ["Mon", "Tue"]
    assert q["responseCount"] == 3


def test_single_choice_options_follow_language(schema, responses):
    q = aggregate(schema, responses, ["q_single"], language="de")["questions"]["q_single"]
    assert q["options"] == ["Mo", "Di"]
    assert q["sectionTitle"] == "Führung"


def test_multiple_choice_flattens_selections(schema):
    rows = [{"answers": {"q_multi": ["x", "y"]}}, {"answers": {"q_multi": ["x"]}}]
    q = aggregate(schema, rows, ["q_multi"])["questions"]["q_multi"]
    assert q["totalSelections"] == 3
    assert q["distribution"] == {"x": 2, "y": 1}
    assert q["responseCount"] == 2
    assert sum(q["distribution"].values()) == q["totalSelections"]


def test_ranking_average_ranks(schema):
    rows = [{"answers": {"q_rank": ["A", "B"]}}, {"answers": {"q_rank": ["B", "A"]}}]
    q = aggregate(schema, rows, ["q_rank"])["questions"]["q_rank"]
    assert q["averageRanks"] == {"A": 1.5, "B": 1.5}
    assert q["rankCounts"] == {"A": 2, "B": 2, "C": 0}
    assert "C" not in q["averageRanks"]
    assert q["responseCount"] == 2


def test_free_text_keeps_answers_as_written(schema, responses):
    q = aggregate(schema, responses, ["q_text"])["questions"]["q_text"]
    # Whitespace-only answers are dropped; kept answers are not trimmed.
    assert q["responses"] == [" great ", "ok"]
    assert q["responseCount"] == 2
    assert q["maxLength"] == 500


def test_unknown_type_gets_minimal_shape(schema, responses):
    q = aggregate(schema, responses, ["q_future"])["questions"]["q_future"]
    assert q == {
        "questionText": "Future question type",
        "sectionTitle": "Team",
        "type": "matrix",
        "responseCount": 1,
    }


def test_unknown_ids_are_skipped(schema, responses):
    result = aggregate(schema, responses, ["nope", "q_scale"])
    assert list(result["questions"]) == ["q_scale"]


def test_response_count_is_total_input_responses(schema, responses):
    result = aggregate(schema, responses, ["q_multi"])
    assert result["responseCount"] == 5
    assert result["questions"]["q_multi"]["responseCount"] == 2


def test_empty_responses_raise(schema):
    with pytest.raises(InsufficientDataError):
        aggregate(schema, [], ["q_scale"])


def test_empty_question_ids_raise(schema, responses):
    with pytest.raises(ValidationError):
        aggregate(schema, responses, [])


def test_raw_schema_dict_is_accepted(raw_schema, responses):
    result = aggregate(raw_schema, responses, ["q_scale"])
    assert result["questions"]["q_scale"]["average"] == 3


def test_aggregation_is_idempotent_and_does_not_mutate_inputs(schema, raw_schema):
    rows = [{"answers": {"q_rank": ["A", "B"], "q_multi": ["x"]}}, {"answers": {"q_rank": ["C"]}}]
    before = copy.deepcopy(rows)
    agg = DataAggregator()
    first = agg.aggregate(schema, rows, ALL_IDS)
    second = agg.aggregate(schema, rows, ALL_IDS)
    assert first == second
    assert rows == before


def test_extract_raw_values_drops_only_missing():
    rows = [{"answers": {"q": None}}, {"answers": {"q": 0}}, {"answers": {"q": ""}}, {"answers": {}}, {}]
    assert extract_raw_values(rows, "q") == [0, ""]


def test_free_text_padding_survives(schema):
    q = aggregate(schema, [{"answers": {"q_text": "  padded  "}}], ["q_text"])["questions"]["q_text"]
    assert q["responses"] == ["  padded  "]


def test_no_language_resolves_to_schema_primary():
    raw = {
        "primaryLanguage": "de",
        "availableLanguages": ["de", "en"],
        "sections": [{
            "id": "s",
            "title": {"de": "Allgemein", "en": "General"},
            "questions": [{"id": "q", "type": "free-text", "text": {"de": "Kommentar", "en": "Comment"}}],
        }],
    }
    q = aggregate(raw, [{"answers": {"q": "gut"}}], ["q"])["questions"]["q"]
    assert q["questionText"] == "Kommentar"
    assert q["sectionTitle"] == "Allgemein"
    en = aggregate(raw, [{"answers": {"q": "gut"}}], ["q"], language="en")["questions"]["q"]
    assert en["questionText"] == "Comment"


def test_configured_language_fills_missing_primary():
    raw = {"sections": [{"id": "s", "title": "Allgemein", "questions": [{"id": "q", "type": "free-text", "text": "Kommentar"}]}]}
    q = aggregate(raw, [{"answers": {"q": "gut"}}], ["q"], settings=Settings(default_language="de"))["questions"]["q"]
    assert q["questionText"] == "Kommentar"
