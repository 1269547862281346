"""Tests for workflow execution: ordering, dependencies, failure policy."""

import asyncio

import pytest

from uni_agent.agents import DataAnalystAgent, ReportAgent
from uni_agent.exceptions import CriticalTaskFailure, RecordNotFoundError, UnknownActionError
from uni_agent.models import KnowledgeRecord, Report
from uni_agent.tools import WorkflowTools
from uni_agent.workflow import (
    Action,
    Task,
    TaskStatus,
    WorkflowExecutor,
    WorkflowPlan,
)

from conftest import ScriptedLLM, make_settings, report_routes


class RecordingTools:
    """ToolSet that records calls; failing actions raise."""

    def __init__(self, failing=()):
        self.calls = []
        self.failing = set(failing)

    async def run(self, action, params):
        self.calls.append(action)
        if action in self.failing:
            raise RecordNotFoundError(f"{action.value} exploded")
        return {"action": action.value, "id": f"id-{len(self.calls)}"}


def _plan(*tasks):
    return WorkflowPlan(tasks=[Task.from_dict(t) for t in tasks])


@pytest.fixture
def real_executor(store, settings):
    llm = ScriptedLLM(report_routes())
    tools = WorkflowTools(store, DataAnalystAgent(llm), ReportAgent(llm, store, settings=settings))
    return WorkflowExecutor(tools, settings=settings)


def test_reference_to_retrieved_record_drives_the_report(real_executor):
    plan = _plan(
        {"action": "get_by_filename", "params": {"filename": "employees.csv"}},
        {"action": "generate_report", "params": {"recordId": "{task.0.id}"}, "dependencies": [0]},
    )

    result = asyncio.run(real_executor.execute(plan))

    report = result.results[1]
    assert isinstance(report, Report)
    assert report.metadata.record_id == "R1"
    assert report.metadata.data_source == "employees.csv"
    assert report.metadata.record_count == 2
    assert [t.status for t in plan.tasks] == [TaskStatus.COMPLETED, TaskStatus.COMPLETED]
    assert result.summary == "Workflow completed: 2 successful, 0 failed"


def test_failed_dependency_skips_task_without_invoking_tool():
    tools = RecordingTools(failing={Action.GENERATE_REPORT})
    executor = WorkflowExecutor(tools, settings=make_settings())
    plan = _plan(
        {"action": "generate_report", "params": {"data": "a,b\n1,2"}},
        {"action": "export_markdown", "params": {"report": "{task.0}"}, "dependencies": [0]},
    )

    result = asyncio.run(executor.execute(plan))

    assert tools.calls == [Action.GENERATE_REPORT]
    assert plan.tasks[1].status is TaskStatus.FAILED
    assert plan.tasks[1].error == "Dependency task 0 failed"
    assert result.results[1] == {"error": "Dependency task 0 failed"}
    assert result.summary == "Workflow completed: 0 successful, 2 failed"


def test_non_critical_failure_is_recorded_and_workflow_continues():
    tools = RecordingTools(failing={Action.EXPORT_PDF})
    executor = WorkflowExecutor(tools, settings=make_settings())
    plan = _plan(
        {"action": "export_pdf", "params": {"data": "a,b\n1,2"}},
        {"action": "get_statistics", "params": {"data": "a,b\n1,2"}},
    )

    result = asyncio.run(executor.execute(plan))

    assert plan.tasks[0].error == "export_pdf exploded"
    assert plan.tasks[1].status is TaskStatus.COMPLETED
    assert [t.action for t in result.failed] == ["export_pdf"]
    assert [t.action for t in result.succeeded] == ["get_statistics"]
    assert result.summary == "Workflow completed: 1 successful, 1 failed"


def test_critical_failure_aborts_workflow(real_executor):
    plan = _plan(
        {"action": "get_by_filename", "params": {"filename": "missing.csv"}},
        {"action": "generate_report", "params": {"recordId": "{task.0.id}"}, "dependencies": [0]},
    )

    with pytest.raises(CriticalTaskFailure) as exc_info:
        asyncio.run(real_executor.execute(plan))

    error = exc_info.value
    assert error.task_index == 0
    assert error.action == "get_by_filename"
    assert str(error) == 'Workflow failed at task 1 (get_by_filename): Record "missing" not found'
    assert plan.tasks[0].status is TaskStatus.FAILED
    assert plan.tasks[1].status is TaskStatus.PENDING
    assert error.results == [{"error": 'Record "missing" not found'}]


def test_critical_categories_are_configurable():
    tools = RecordingTools(failing={Action.GET_BY_ID})
    executor = WorkflowExecutor(tools, settings=make_settings(critical_categories=[]))

    result = asyncio.run(executor.execute(_plan({"action": "get_by_id", "params": {"id": "X"}})))

    assert result.summary == "Workflow completed: 0 successful, 1 failed"


def test_unknown_action_fails_task_and_raises():
    tools = RecordingTools()
    executor = WorkflowExecutor(tools, settings=make_settings())
    plan = _plan(
        {"action": "get_statistics", "params": {"data": "a,b\n1,2"}},
        {"action": "send_email", "params": {}},
    )

    with pytest.raises(UnknownActionError) as exc_info:
        asyncio.run(executor.execute(plan))

    assert exc_info.value.action == "send_email"
    assert plan.tasks[1].status is TaskStatus.FAILED
    assert plan.tasks[1].error == "Unknown action: send_email"
    assert tools.calls == [Action.GET_STATISTICS]


def test_missing_required_params_fail_the_task():
    executor = WorkflowExecutor(RecordingTools(), settings=make_settings())
    plan = _plan({"action": "get_statistics", "params": {}})

    result = asyncio.run(executor.execute(plan))

    assert "Invalid parameters for get_statistics" in plan.tasks[0].error
    assert result.results == [{"error": plan.tasks[0].error}]


def test_processing_tools_report_their_path(real_executor):
    plan = _plan(
        {"action": "clean_data", "params": {"data": "name,age\nJohn,N/A"}},
        {"action": "validate_data", "params": {"data": "{task.0.data}"}, "dependencies": [0]},
        {"action": "normalize_data", "params": {"data": "one line only"}},
    )

    result = asyncio.run(real_executor.execute(plan))

    assert result.results[0] == {"data": "name,age\nJohn,Unknown", "path": "structured", "rowCount": 1}
    assert result.results[1]["data"] == "name,age\nJohn,Unknown"
    assert result.results[2]["path"] == "fallback"


def test_save_to_database_splits_title_and_extension(real_executor, store):
    plan = _plan({"action": "save_to_database", "params": {"title": "Sales.Q1.CSV", "content": "a,b\n1,2", "tags": "sales"}})

    result = asyncio.run(real_executor.execute(plan))

    record = result.results[0]
    assert record.title == "Sales.Q1"
    assert record.file_type == "csv"
    assert record.raw_content == "a,b\n1,2"
    assert len(store) == 2


def test_result_serializes_to_plain_data(real_executor):
    plan = _plan(
        {"action": "get_by_id", "params": {"id": "R1"}},
        {"action": "export_json", "params": {"recordId": "{task.0.id}"}, "dependencies": [0]},
    )

    data = asyncio.run(real_executor.execute(plan)).to_dict()

    assert data["plan"]["tasks"][1]["params"]["recordId"] == "{task.0.id}"
    assert data["results"][0]["id"] == "R1"
    assert data["results"][1]["metadata"]["dataSource"] == "employees.csv"


def test_export_of_a_different_record_is_not_swapped_for_an_earlier_report(real_executor, store):
    asyncio.run(store.save(KnowledgeRecord(id="RB", title="sales", content="region,amount\nWest,10", filename="sales.csv")))
    plan = _plan(
        {"action": "generate_report", "params": {"recordId": "R1"}},
        {"action": "export_json", "params": {"recordId": "RB"}},
    )

    result = asyncio.run(real_executor.execute(plan))

    assert result.results[0].metadata.record_id == "R1"
    assert result.results[1]["metadata"]["recordId"] == "RB"
    assert result.results[1]["metadata"]["dataSource"] == "sales.csv"


def test_unusual_digits_in_age_column_are_tagged_not_fatal(real_executor):
    plan = _plan({"action": "validate_data", "params": {"data": "name,age\nJohn,³\nJane,30"}})

    result = asyncio.run(real_executor.execute(plan))

    assert plan.tasks[0].status is TaskStatus.COMPLETED
    assert result.results[0]["data"] == "name,age\nJohn,[INVALID_AGE]\nJane,30"
