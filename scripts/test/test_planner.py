"""Tests for the planner agent: structured path, fallback path, direct routing."""

import asyncio

import pytest

from uni_agent.agents import PlannerAgent, detect_intent, needs_planning
from uni_agent.exceptions import PlanningError
from uni_agent.workflow import PlanSource, TaskRef, TaskStatus

from conftest import FALLBACK_PLAN_PROMPT, PLAN_PROMPT, ScriptedLLM, plan_json

REPORT_PLAN = plan_json(
    [
        {"action": "get_by_filename", "params": {"filename": "employees.csv"}},
        {"action": "generate_report", "params": {"recordId": "{task.0.id}"}, "dependencies": [0]},
        {"action": "export_pdf", "params": {"report": "{{task.1.reportId}}"}, "dependencies": [1]},
    ],
    reasoning="Retrieve the stored file, report on it, export the report",
)


def test_structured_plan():
    llm = ScriptedLLM({PLAN_PROMPT: REPORT_PLAN})
    plan = asyncio.run(PlannerAgent(llm).plan("Create a report for employees.csv and export as PDF"))

    assert plan.source is PlanSource.STRUCTURED
    assert [t.action for t in plan.tasks] == ["get_by_filename", "generate_report", "export_pdf"]
    assert plan.tasks[1].params["recordId"] == TaskRef(0, "id")
    assert plan.tasks[2].params["report"] == TaskRef(1, "reportId")
    assert plan.tasks[2].dependencies == [1]
    assert all(t.status is TaskStatus.PENDING for t in plan.tasks)
    assert plan.reasoning.startswith("Retrieve")
    assert llm.calls_to(FALLBACK_PLAN_PROMPT) == 0


def test_prompt_carries_request_catalogue_and_shortened_context():
    llm = ScriptedLLM({PLAN_PROMPT: REPORT_PLAN})
    context = {"filename": "big.csv", "fileData": "x" * 5000}
    asyncio.run(PlannerAgent(llm).plan("Summarize big.csv", context))

    prompt = llm.prompts[0]
    assert "USER REQUEST: Summarize big.csv" in prompt
    assert "save_to_database" in prompt and "export_markdown" in prompt
    assert "[data truncated]" in prompt
    assert "x" * 5000 not in prompt


def test_fallback_path_used_when_structured_parse_fails():
    messy = '```json\n{"tasks": [{"action": "get_statistics", "params": {"data": "{context.fileData}"}}]\n"reasoning": "stats only"}\n```'
    llm = ScriptedLLM({PLAN_PROMPT: "Sure! First I will compute statistics.", FALLBACK_PLAN_PROMPT: messy})

    plan = asyncio.run(PlannerAgent(llm).plan("Get statistics for the uploaded data"))

    assert plan.source is PlanSource.FALLBACK
    assert [t.action for t in plan.tasks] == ["get_statistics"]
    assert plan.reasoning == "stats only"
    assert llm.calls_to(FALLBACK_PLAN_PROMPT) == 1


def test_planning_error_when_both_paths_fail():
    llm = ScriptedLLM({PLAN_PROMPT: "no idea", FALLBACK_PLAN_PROMPT: "still no idea"})

    with pytest.raises(PlanningError):
        asyncio.run(PlannerAgent(llm).plan("do something"))


def test_empty_task_list_is_not_a_plan():
    empty = plan_json([])
    llm = ScriptedLLM({PLAN_PROMPT: empty, FALLBACK_PLAN_PROMPT: empty})

    with pytest.raises(PlanningError):
        asyncio.run(PlannerAgent(llm).plan("do nothing"))


def test_invalid_dependency_indices_are_dropped():
    llm = ScriptedLLM({PLAN_PROMPT: plan_json([
        {"action": "clean_data", "params": {"data": "a,b\n1,2"}, "dependencies": [0, 3]},
        {"action": "validate_data", "params": {"data": "{task.0.data}"}, "dependencies": [0, 1, -1, 7]},
    ])})

    plan = asyncio.run(PlannerAgent(llm).plan("clean and validate"))

    assert plan.tasks[0].dependencies == []
    assert plan.tasks[1].dependencies == [0]


# === Direct routing ===

@pytest.mark.parametrize(
    "request_text,expected",
    [
        ("Clean the data, then generate report", True),
        ("Export the report as markdown", True),
        ("show stats for this data", False),
        ("Find employees.csv", False),
    ],
)
def test_needs_planning(request_text, expected):
    assert needs_planning(request_text) is expected


@pytest.mark.parametrize(
    "request_text,intent",
    [
        ("Find employees.csv", "retrieve"),
        ("Give me a summary", "report"),
        ("Clean this file", "process"),
        ("Analyze the columns", "analyze"),
        ("Do whatever is needed", "process"),
    ],
)
def test_detect_intent(request_text, intent):
    assert detect_intent(request_text) == intent


def test_direct_plan_does_not_call_the_model():
    llm = ScriptedLLM()
    planner = PlannerAgent(llm)

    plan = planner.direct_plan("show stats for this data", {"fileData": "a,b\n1,2"})

    assert plan.source is PlanSource.DIRECT
    assert [t.action for t in plan.tasks] == ["get_statistics"]
    assert llm.prompts == []


def test_direct_plan_for_retrieval_needs_a_source():
    with pytest.raises(PlanningError):
        PlannerAgent(ScriptedLLM()).direct_plan("Find my file", {})
