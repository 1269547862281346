"""
Parameter references.

Plans refer to earlier task results and to the request context with explicit
reference objects instead of strings that get re-parsed at run time. The
textual placeholder forms are converted once, when a plan is built.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

# {task.0.id}, {{task.0.id}}, ${task.0.id}, {task.0} (whole result), {context.filename}
PLACEHOLDER_PATTERN = re.compile(
    r"^\s*(?:\$\{|\{\{|\{)\s*"
    r"(?:task\.(?P<index>\d+)|(?P<context>context))"
    r"(?:\.(?P<field>[A-Za-z_][\w.]*))?"
    r"\s*\}{1,2}\s*$"
)


@dataclass(frozen=True)
class TaskRef:
    """Field of an earlier task's result. An empty field means the whole result."""

    index: int
    field: str = ""

    def __str__(self) -> str:
        if not self.field:
            return f"{{task.{self.index}}}"
        return f"{{task.{self.index}.{self.field}}}"


@dataclass(frozen=True)
class ContextRef:
    """Field of the request context."""

    field: str

    def __str__(self) -> str:
        return f"{{context.{self.field}}}"


def parse_reference(value: Any) -> Any:
    """Return a reference for a placeholder string, otherwise the value unchanged."""
    if not isinstance(value, str):
        return value
    match = PLACEHOLDER_PATTERN.match(value)
    if not match:
        return value
    field = match.group("field") or ""
    if match.group("context"):
        # A bare {context} is not a usable reference
        return ContextRef(field=field) if field else value
    return TaskRef(index=int(match.group("index")), field=field)


def parse_references(value: Any) -> Any:
    """Convert placeholders anywhere inside nested dicts and lists."""
    if isinstance(value, dict):
        return {key: parse_references(item) for key, item in value.items()}
    if isinstance(value, list):
        return [parse_references(item) for item in value]
    return parse_reference(value)
