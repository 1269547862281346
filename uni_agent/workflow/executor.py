"""
Workflow Executor.

Runs a plan's tasks strictly in order, one at a time. Per task:
dependency check -> parameter resolution -> typed parameter validation ->
tool dispatch -> status/result/error recording.

Failure policy:
- a task whose dependency failed is marked failed and skipped; never fatal
- an action outside the catalogue fails its task and raises UnknownActionError
- a failing task in a critical category raises CriticalTaskFailure
- any other failure is recorded and the workflow continues
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

from pydantic import ValidationError

from config import Settings, config
from uni_agent.exceptions import CriticalTaskFailure, InvalidParamsError, UnknownActionError

from .actions import Action, ActionParams
from .resolver import ParameterResolver
from .state import WorkflowPlan, WorkflowResult, is_error_result, summarize_results

logger = logging.getLogger(__name__)


class ToolSet(Protocol):
    """Dispatch target for validated actions."""

    async def run(self, action: Action, params: ActionParams) -> Any:
        ...


def dependency_failure(index: int) -> str:
    return f"Dependency task {index} failed"


class WorkflowExecutor:
    """Executes WorkflowPlans against a ToolSet."""

    def __init__(
        self,
        tools: ToolSet,
        resolver: ParameterResolver | None = None,
        settings: Settings | None = None,
    ):
        self.tools = tools
        self.resolver = resolver or ParameterResolver()
        self.settings = settings or config

    def is_critical(self, action: Action) -> bool:
        return action.category.value in self.settings.workflow.critical_categories

    async def execute(
        self,
        plan: WorkflowPlan,
        context: Mapping[str, Any] | None = None,
    ) -> WorkflowResult:
        """
        Execute every task of the plan.

        Raises:
            CriticalTaskFailure: A task in a critical category failed
            UnknownActionError: The plan uses an action outside the catalogue
        """
        logger.info(f"[Executor] Executing plan with {len(plan.tasks)} tasks")
        results: list[Any] = []
        for index in range(len(plan.tasks)):
            await self.run_task(plan, index, results, context)
        return self.finish(plan, results)

    def finish(self, plan: WorkflowPlan, results: list[Any]) -> WorkflowResult:
        summary = summarize_results(results)
        logger.info(f"[Executor] {summary}")
        return WorkflowResult(plan=plan, results=results, summary=summary)

    async def run_task(
        self,
        plan: WorkflowPlan,
        index: int,
        results: list[Any],
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        """
        Run one task and append its result (or error marker) to results.

        Returns:
            The task result, or None when the task failed
        """
        task = plan.tasks[index]
        logger.info(f"[Executor] Task {index + 1}/{len(plan.tasks)}: {task.action}")

        for dep in task.dependencies:
            if dep < len(results) and is_error_result(results[dep]):
                message = dependency_failure(dep)
                task.fail(message)
                results.append({"error": message})
                logger.warning(f"[Executor] Skipping task {index + 1}: {message}")
                return None

        action = task.action_type
        if action is None:
            error = UnknownActionError(task.action)
            task.fail(str(error))
            results.append({"error": str(error)})
            logger.error(f"[Executor] {error}")
            raise error

        task.start()
        try:
            resolved = self.resolver.resolve(task.params, results, context, action)
            params = self._validate_params(action, resolved.params)
            result = await self.tools.run(action, params)
        except Exception as e:
            message = str(e) or e.__class__.__name__
            task.fail(message)
            results.append({"error": message})
            logger.error(f"[Executor] Task {index + 1} ({action.value}) failed: {message}")
            if self.is_critical(action):
                raise CriticalTaskFailure(index, action.value, message, plan, results) from e
            return None

        task.complete(result)
        results.append(result)
        logger.info(f"[Executor] Task {index + 1} completed")
        return result

    @staticmethod
    def _validate_params(action: Action, params: dict[str, Any]) -> ActionParams:
        try:
            return action.params_model.model_validate(params)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise InvalidParamsError(
                f"Invalid parameters for {action.value}: missing or invalid {fields}"
            ) from e
