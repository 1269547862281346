"""
Parameter Resolver.

Turns a task's raw parameters into concrete values:
1. TaskRef / ContextRef objects are replaced with the referenced value
2. Context fields are injected into parameters that are not set
3. Export actions inherit the latest report when they have none of their own
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from uni_agent.models import Report

from .actions import Action
from .references import ContextRef, TaskRef
from .state import is_error_result

logger = logging.getLogger(__name__)

_MISSING = object()

# Parameters through which an export names its own report source
SOURCE_KEYS = ("recordId", "record_id", "filename", "data")

# context key -> parameter keys it fills (only when none of them is set)
CONTEXT_INJECTIONS: tuple[tuple[str, tuple[str, ...], tuple[str, ...]], ...] = (
    ("fileData", ("data",), ("data", "fileData")),
    ("filename", ("filename", "title"), ("filename", "title")),
    ("tags", ("tags",), ("tags",)),
    ("recordId", ("recordId",), ("recordId",)),
)


def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _lookup_one(obj: Any, key: str) -> Any:
    candidates = dict.fromkeys([key, _snake_case(key), _camel_case(key)])
    for candidate in candidates:
        if isinstance(obj, Mapping):
            if candidate in obj:
                return obj[candidate]
        elif hasattr(obj, candidate):
            return getattr(obj, candidate)
    return _MISSING


def lookup_field(obj: Any, path: str) -> Any:
    """
    Read a (dotted) field from a mapping or object.

    camelCase and snake_case spellings are interchangeable, so `recordId`
    finds `record_id` and vice versa. Returns the _MISSING sentinel when the
    field does not exist.
    """
    current = obj
    for key in path.split("."):
        if current is None:
            return _MISSING
        current = _lookup_one(current, key)
        if current is _MISSING:
            return _MISSING
    return current


def is_report_like(value: Any) -> bool:
    if isinstance(value, Report):
        return True
    return isinstance(value, Mapping) and "metadata" in value and "sections" in value


def _is_unset(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


@dataclass
class ResolvedParams:
    """Concrete parameters plus diagnostics about the resolution."""

    params: dict[str, Any]
    unresolved: list[str] = field(default_factory=list)
    unresolved_keys: set[str] = field(default_factory=set)
    inherited_from: int | None = None

    @property
    def fully_resolved(self) -> bool:
        return not self.unresolved


class ParameterResolver:
    """Resolves task parameters against earlier results and the request context."""

    def resolve(
        self,
        params: Mapping[str, Any],
        previous_results: list[Any],
        context: Mapping[str, Any] | None = None,
        action: Action | None = None,
    ) -> ResolvedParams:
        """
        Resolve raw task parameters.

        Args:
            params: Raw parameters, possibly holding references
            previous_results: Results of earlier tasks, in plan order
            context: Request context (fileData, filename, tags, recordId, ...)
            action: Action the parameters are for

        Returns:
            ResolvedParams; unresolved references stay in their text form
        """
        context = context or {}
        outcome = ResolvedParams(params={})

        for key, value in params.items():
            before = len(outcome.unresolved)
            outcome.params[key] = self._resolve_value(value, previous_results, context, outcome)
            if len(outcome.unresolved) > before:
                outcome.unresolved_keys.add(key)

        # Checked before context injection adds fileData and filename
        has_own_source = any(not _is_unset(outcome.params.get(key)) for key in SOURCE_KEYS)
        self._inject_context(outcome.params, context)

        if action is not None and action.is_export:
            self._inherit_report(outcome, previous_results, has_own_source)

        return outcome

    def _resolve_value(
        self,
        value: Any,
        previous_results: list[Any],
        context: Mapping[str, Any],
        outcome: ResolvedParams,
    ) -> Any:
        if isinstance(value, TaskRef):
            return self._resolve_task_ref(value, previous_results, outcome)
        if isinstance(value, ContextRef):
            found = lookup_field(context, value.field)
            if found is _MISSING:
                return self._unresolved(value, "context has no such field", outcome)
            return found
        if isinstance(value, dict):
            return {
                k: self._resolve_value(v, previous_results, context, outcome)
                for k, v in value.items()
            }
        if isinstance(value, list):
            return [self._resolve_value(v, previous_results, context, outcome) for v in value]
        return value

    def _resolve_task_ref(
        self,
        ref: TaskRef,
        previous_results: list[Any],
        outcome: ResolvedParams,
    ) -> Any:
        if ref.index >= len(previous_results):
            return self._unresolved(ref, "task index out of range", outcome)
        result = previous_results[ref.index]
        if is_error_result(result):
            return self._unresolved(ref, "referenced task failed", outcome)
        if not ref.field:
            return result
        found = lookup_field(result, ref.field)
        if found is _MISSING:
            return self._unresolved(ref, f"result has no field '{ref.field}'", outcome)
        return found

    @staticmethod
    def _unresolved(ref: TaskRef | ContextRef, reason: str, outcome: ResolvedParams) -> str:
        text = str(ref)
        logger.warning(f"[Resolver] Could not resolve {text}: {reason}")
        outcome.unresolved.append(text)
        return text

    @staticmethod
    def _inject_context(params: dict[str, Any], context: Mapping[str, Any]) -> None:
        for context_key, targets, guards in CONTEXT_INJECTIONS:
            value = context.get(context_key)
            if _is_unset(value):
                continue
            if all(_is_unset(params.get(guard)) for guard in guards):
                for target in targets:
                    params[target] = value

    def _inherit_report(
        self,
        outcome: ResolvedParams,
        previous_results: list[Any],
        has_own_source: bool,
    ) -> None:
        """
        Hand an export the latest earlier report when it has nothing usable of its own.

        Applies when one of its placeholders failed to resolve, or when it names
        neither a report nor a recordId, filename or data source.
        """
        params = outcome.params
        if is_report_like(params.get("report")) and "report" not in outcome.unresolved_keys:
            return
        if has_own_source and not outcome.unresolved_keys:
            return

        for index in range(len(previous_results) - 1, -1, -1):
            candidate = previous_results[index]
            if is_report_like(candidate):
                break
        else:
            return

        # Placeholders that failed to resolve are replaced by what the report carries
        for key in outcome.unresolved_keys:
            params.pop(key, None)

        metadata = lookup_field(candidate, "metadata")
        params["report"] = candidate
        for key in ("recordId", "filename", "reportType"):
            inherited = lookup_field(metadata, key)
            if _is_unset(params.get(key)) and inherited is not _MISSING and inherited is not None:
                params[key] = inherited

        outcome.inherited_from = index
        logger.info(f"[Resolver] Export inherits report from task {index}")
