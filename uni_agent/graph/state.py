"""
LangGraph shared state definitions.

Defines the state schema for the Uni Agent workflow graph.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, TypedDict
from uuid import uuid4

from uni_agent.workflow import WorkflowPlan


class WorkflowPhase(str, Enum):
    """Current phase of the workflow."""

    PLANNING = "planning"
    EXECUTION = "execution"
    COMPLETE = "complete"


class UniState(TypedDict, total=False):
    """
    Shared state for the Uni Agent workflow.

    The graph runs without a checkpointer, so the plan is kept as the live
    WorkflowPlan object the executor mutates.
    """

    # === Session Info ===
    session_id: str
    created_at: str

    # === Input ===
    request: str
    context: dict[str, Any]

    # === Planning ===
    plan: WorkflowPlan | None

    # === Execution ===
    results: list[Any]
    current_index: int

    # === Output ===
    summary: str | None
    current_phase: str


def create_initial_state(
    request: str,
    context: dict[str, Any] | None = None,
    plan: WorkflowPlan | None = None,
) -> UniState:
    """
    Create initial state for a new run.

    Args:
        request: User request text
        context: Request context (fileData, filename, tags, recordId)
        plan: Pre-built plan; planning is skipped when given
    """
    return UniState(
        session_id=str(uuid4()),
        created_at=datetime.now(timezone.utc).isoformat(),
        request=request,
        context=dict(context or {}),
        plan=plan,
        results=[],
        current_index=0,
        summary=None,
        current_phase=WorkflowPhase.PLANNING.value,
    )
