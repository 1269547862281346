"""Tests for resilient extraction of JSON from language-model output."""

import json

import pytest
from langchain_core.messages import AIMessage

from uni_agent.parsing import (
    DataAnalysis,
    ExtractionPath,
    InsightsResult,
    PlanSchema,
    ResilientJSONExtractor,
    SummaryResult,
    repair_json,
)

from conftest import INSIGHTS_JSON, SUMMARY_JSON


@pytest.fixture
def extractor():
    return ResilientJSONExtractor()


def test_clean_json_takes_direct_path(extractor):
    extraction = extractor.extract_with_path(SUMMARY_JSON, SummaryResult)

    assert extraction.path is ExtractionPath.DIRECT
    assert extraction.value.record_count == 2
    assert extraction.value.key_points == ["Two employees", "Ages between 25 and 30"]


def test_fences_and_surrounding_prose_are_stripped(extractor):
    text = f"Here is the analysis you asked for:\n```json\n{INSIGHTS_JSON}\n```\nHope it helps!"
    insights = extractor.extract(text, InsightsResult)

    assert insights.insights == ["The team is young"]
    assert insights.anomalies == []


def test_message_objects_are_accepted(extractor):
    summary = extractor.extract(AIMessage(content=SUMMARY_JSON), SummaryResult)
    assert summary.data_quality.startswith("good")


def test_missing_comma_between_keys_is_repaired(extractor):
    text = '{"insights": ["a", "b"]\n"trends": ["c"]\n"anomalies": []}'
    extraction = extractor.extract_with_path(text, InsightsResult)

    assert extraction.path is ExtractionPath.DIRECT
    assert extraction.value.trends == ["c"]


def test_bare_array_elements_are_quoted():
    text = '{"insights": [\nFirst insight,\nSecond insight\n]}'
    assert json.loads(repair_json(text)) == {"insights": ["First insight", "Second insight"]}


def test_malformed_fenced_response_never_raises(extractor):
    text = '```json\n{"a": [1\n2]}\n```'
    result = extractor.extract(text, InsightsResult)

    assert isinstance(result, InsightsResult)


def test_unusable_text_returns_shape_default(extractor):
    extraction = extractor.extract_with_path("I am sorry, I cannot help with that.", InsightsResult)

    assert extraction.path is ExtractionPath.DEFAULT
    assert extraction.degraded
    assert extraction.value.anomalies == []
    assert extraction.value.summary == "Analysis could not be completed"
    assert extraction.value.insights == ["Unable to parse insights from LLM response"]


def test_default_analysis_runs_every_pass(extractor):
    analysis = extractor.extract("no json here", DataAnalysis)

    assert analysis.needs_cleaning and analysis.needs_transformation and analysis.needs_validation


def test_null_lists_become_empty(extractor):
    insights = extractor.extract('{"insights": null, "trends": "one trend"}', InsightsResult)

    assert insights.insights == []
    assert insights.trends == ["one trend"]


def test_plan_shape_tolerates_missing_dependencies(extractor):
    text = '{"tasks": [{"action": "get_statistics", "params": null}], "reasoning": "stats"}'
    plan = extractor.extract(text, PlanSchema)

    assert plan.tasks[0].params == {}
    assert plan.tasks[0].dependencies == []
