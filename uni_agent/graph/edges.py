"""
LangGraph conditional edge functions.

Defines routing between nodes based on state.
"""

from __future__ import annotations

from typing import Literal

from .state import UniState


def _has_remaining_tasks(state: UniState) -> bool:
    plan = state.get("plan")
    if plan is None:
        return False
    return state.get("current_index", 0) < len(plan.tasks)


def route_after_planning(state: UniState) -> Literal["execute_task", "summary"]:
    """Go to execution if the plan has tasks."""
    return "execute_task" if _has_remaining_tasks(state) else "summary"


def route_after_task(state: UniState) -> Literal["execute_task", "summary"]:
    """
    Route after a task ran.

    Tasks run one at a time in plan order; the loop ends after the last one.
    """
    return "execute_task" if _has_remaining_tasks(state) else "summary"
