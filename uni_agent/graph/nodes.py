"""
LangGraph node implementations.

Each node is one step of the workflow: plan, run the next task, summarize.
Fatal errors (PlanningError, UnknownActionError, CriticalTaskFailure)
propagate out of the graph unchanged.
"""

from __future__ import annotations

import logging
from typing import Any

from uni_agent.workflow import WorkflowExecutor, summarize_results

from .state import UniState, WorkflowPhase

logger = logging.getLogger(__name__)


class WorkflowNodes:
    """Node callables bound to a planner and an executor."""

    def __init__(self, plan_fn: Any, executor: WorkflowExecutor):
        """
        Args:
            plan_fn: async (request, context) -> WorkflowPlan
            executor: Executor that runs individual tasks
        """
        self.plan_fn = plan_fn
        self.executor = executor

    async def planning_node(self, state: UniState) -> dict[str, Any]:
        """Produce the plan unless one was supplied."""
        plan = state.get("plan")
        if plan is None:
            logger.info(f"[Graph] Planning: {state['request'][:50]}...")
            plan = await self.plan_fn(state["request"], state.get("context", {}))
        else:
            logger.info("[Graph] Using supplied plan")

        return {
            "plan": plan,
            "results": [],
            "current_index": 0,
            "current_phase": WorkflowPhase.EXECUTION.value,
        }

    async def execute_task_node(self, state: UniState) -> dict[str, Any]:
        """Run the task at current_index."""
        plan = state["plan"]
        index = state.get("current_index", 0)
        results = list(state.get("results", []))

        await self.executor.run_task(plan, index, results, state.get("context", {}))

        return {
            "results": results,
            "current_index": index + 1,
        }

    async def summary_node(self, state: UniState) -> dict[str, Any]:
        """Count successes and failures."""
        summary = summarize_results(state.get("results", []))
        logger.info(f"[Graph] {summary}")
        return {
            "summary": summary,
            "current_phase": WorkflowPhase.COMPLETE.value,
        }
