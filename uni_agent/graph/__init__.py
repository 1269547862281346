"""LangGraph workflow: planning, per-task execution loop and summary."""

from .edges import route_after_planning, route_after_task
from .nodes import WorkflowNodes
from .state import UniState, WorkflowPhase, create_initial_state
from .workflow import UniWorkflowRunner, compile_workflow, create_uni_workflow

__all__ = [
    "UniState",
    "WorkflowPhase",
    "create_initial_state",
    "WorkflowNodes",
    "route_after_planning",
    "route_after_task",
    "create_uni_workflow",
    "compile_workflow",
    "UniWorkflowRunner",
]
