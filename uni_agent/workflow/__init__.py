"""Workflow module: action catalogue, plans, parameter resolution and execution."""

from .actions import (
    ACTION_CATALOGUE,
    Action,
    ActionCategory,
    ActionParams,
    DataParams,
    ExportParams,
    FilenameParams,
    ProcessDataParams,
    RecordIdParams,
    ReportParams,
    SaveParams,
    SourceParams,
)
from .executor import ToolSet, WorkflowExecutor, dependency_failure
from .references import ContextRef, TaskRef, parse_reference, parse_references
from .resolver import ParameterResolver, ResolvedParams, is_report_like, lookup_field
from .state import (
    PlanSource,
    Task,
    TaskStatus,
    WorkflowPlan,
    WorkflowResult,
    is_error_result,
    summarize_results,
    to_jsonable,
)

__all__ = [
    # Actions
    "ACTION_CATALOGUE",
    "Action",
    "ActionCategory",
    "ActionParams",
    "DataParams",
    "ExportParams",
    "FilenameParams",
    "ProcessDataParams",
    "RecordIdParams",
    "ReportParams",
    "SaveParams",
    "SourceParams",
    # References
    "TaskRef",
    "ContextRef",
    "parse_reference",
    "parse_references",
    # State
    "PlanSource",
    "Task",
    "TaskStatus",
    "WorkflowPlan",
    "WorkflowResult",
    "is_error_result",
    "summarize_results",
    "to_jsonable",
    # Resolution and execution
    "ParameterResolver",
    "ResolvedParams",
    "is_report_like",
    "lookup_field",
    "ToolSet",
    "WorkflowExecutor",
    "dependency_failure",
]
