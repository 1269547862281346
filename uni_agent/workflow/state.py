"""
Workflow plan and task state.

Tasks are created by the planner and mutated only by the executor
(status, result, error). The plan's task list never changes length or
order once built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .actions import Action
from .references import ContextRef, TaskRef, parse_references


class TaskStatus(str, Enum):
    """Lifecycle of a task. COMPLETED and FAILED are terminal."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class PlanSource(str, Enum):
    """How a plan was produced."""

    STRUCTURED = "structured"
    FALLBACK = "fallback"
    DIRECT = "direct"
    PROVIDED = "provided"


def to_jsonable(value: Any) -> Any:
    """Convert results (pydantic models, dataclasses, references) to plain data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, (TaskRef, ContextRef)):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


@dataclass
class Task:
    """One unit of work in a workflow plan."""

    action: str
    params: dict[str, Any] = field(default_factory=dict)
    dependencies: list[int] = field(default_factory=list)
    status: TaskStatus = TaskStatus.PENDING
    result: Any = None
    error: str | None = None

    @property
    def action_type(self) -> Action | None:
        """Catalogue member for this task, None for unknown actions."""
        return Action.parse(self.action)

    def start(self) -> None:
        self.status = TaskStatus.RUNNING

    def complete(self, result: Any) -> None:
        self.status = TaskStatus.COMPLETED
        self.result = result
        self.error = None

    def fail(self, error: str) -> None:
        self.status = TaskStatus.FAILED
        self.error = error

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data: dict[str, Any] = {
            "action": self.action,
            "params": to_jsonable(self.params),
            "dependencies": list(self.dependencies),
            "status": self.status.value,
        }
        if self.result is not None:
            data["result"] = to_jsonable(self.result)
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Create from dictionary. Placeholder strings become references."""
        status = data.get("status", "pending")
        if isinstance(status, str):
            status = TaskStatus(status)
        return cls(
            action=data.get("action", ""),
            params=parse_references(dict(data.get("params") or {})),
            dependencies=[int(d) for d in data.get("dependencies") or []],
            status=status,
            result=data.get("result"),
            error=data.get("error"),
        )


@dataclass
class WorkflowPlan:
    """Ordered tasks plus the planner's reasoning."""

    tasks: list[Task] = field(default_factory=list)
    reasoning: str = ""
    source: PlanSource = PlanSource.PROVIDED

    def __len__(self) -> int:
        return len(self.tasks)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "tasks": [task.to_dict() for task in self.tasks],
            "reasoning": self.reasoning,
            "source": self.source.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkflowPlan":
        """Create from dictionary."""
        source = data.get("source", PlanSource.PROVIDED)
        if isinstance(source, str):
            source = PlanSource(source)
        return cls(
            tasks=[Task.from_dict(t) for t in data.get("tasks", [])],
            reasoning=data.get("reasoning", ""),
            source=source,
        )


def is_error_result(result: Any) -> bool:
    """True for the error markers the executor records for failed tasks."""
    return isinstance(result, dict) and bool(result.get("error"))


def summarize_results(results: list[Any]) -> str:
    failed = sum(1 for result in results if is_error_result(result))
    return f"Workflow completed: {len(results) - failed} successful, {failed} failed"


@dataclass
class WorkflowResult:
    """Outcome of executing a plan."""

    plan: WorkflowPlan
    results: list[Any]
    summary: str

    @property
    def succeeded(self) -> list[Task]:
        return [t for t in self.plan.tasks if t.status is TaskStatus.COMPLETED]

    @property
    def failed(self) -> list[Task]:
        return [t for t in self.plan.tasks if t.status is TaskStatus.FAILED]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "plan": self.plan.to_dict(),
            "results": to_jsonable(self.results),
            "summary": self.summary,
        }
