"""
Exception hierarchy for the Uni Agent core.

Local problems (CSV fallbacks, JSON repair, unresolved placeholders) never
surface as exceptions. Per-task failures are captured on the task. The
classes below are the fatal tier and reach the caller unchanged.
"""

from __future__ import annotations

from typing import Any


class UniAgentError(Exception):
    """Base class for all Uni Agent errors."""


class MalformedInputError(UniAgentError):
    """Tabular input has fewer than two non-blank lines."""


class PlanningError(UniAgentError):
    """No usable workflow plan could be produced."""


class UnknownActionError(UniAgentError):
    """A plan references an action the executor does not implement."""

    def __init__(self, action: str):
        super().__init__(f"Unknown action: {action}")
        self.action = action


class CriticalTaskFailure(UniAgentError):
    """A task in a critical category failed, aborting the workflow."""

    def __init__(
        self,
        task_index: int,
        action: str,
        error: str,
        plan: Any = None,
        results: list[Any] | None = None,
    ):
        super().__init__(f"Workflow failed at task {task_index + 1} ({action}): {error}")
        self.task_index = task_index
        self.action = action
        self.error = error
        self.plan = plan
        self.results = results or []


class RecordNotFoundError(UniAgentError):
    """The record store has no record for the given id or title."""


class InvalidParamsError(UniAgentError):
    """A tool received parameters it cannot work with."""
