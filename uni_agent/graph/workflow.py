"""
Uni Agent workflow graph.

Assembles nodes and edges into the LangGraph workflow.
"""

from __future__ import annotations

import logging
from typing import Any

from langgraph.graph import END, StateGraph

from config import Settings, config
from uni_agent.workflow import WorkflowPlan, WorkflowResult

from .edges import route_after_planning, route_after_task
from .nodes import WorkflowNodes
from .state import UniState, create_initial_state

logger = logging.getLogger(__name__)


def create_uni_workflow(nodes: WorkflowNodes) -> StateGraph:
    """
    Create the workflow graph.

    Graph structure:
    ```
    START
      │
      ▼
    planning ──(no tasks)──────────┐
      │                            │
      ▼                            │
    execute_task ◄──(more tasks)─┐ │
      │                          │ │
      ├──────────────────────────┘ │
      ▼                            │
    summary ◄──────────────────────┘
      │
      ▼
     END
    ```
    """
    workflow = StateGraph(UniState)

    # === Add Nodes ===
    workflow.add_node("planning", nodes.planning_node)
    workflow.add_node("execute_task", nodes.execute_task_node)
    workflow.add_node("summary", nodes.summary_node)

    # === Add Edges ===
    workflow.set_entry_point("planning")

    workflow.add_conditional_edges(
        "planning",
        route_after_planning,
        {
            "execute_task": "execute_task",
            "summary": "summary",
        },
    )

    workflow.add_conditional_edges(
        "execute_task",
        route_after_task,
        {
            "execute_task": "execute_task",
            "summary": "summary",
        },
    )

    workflow.add_edge("summary", END)

    return workflow


def compile_workflow(nodes: WorkflowNodes) -> Any:
    """Compile the workflow graph (no checkpointer; state holds live objects)."""
    return create_uni_workflow(nodes).compile()


class UniWorkflowRunner:
    """
    High-level runner for the workflow graph.

    Produces the same WorkflowResult as WorkflowExecutor.execute.
    """

    def __init__(self, nodes: WorkflowNodes, settings: Settings | None = None):
        self.settings = settings or config
        self.nodes = nodes
        self.graph = compile_workflow(nodes)

    def recursion_limit(self, plan: WorkflowPlan) -> int:
        """Configured step budget, raised so every task of the plan gets its step."""
        # planning + one step per task + summary, with one to spare
        return max(self.settings.workflow.recursion_limit, len(plan.tasks) + 3)

    @classmethod
    def from_service(cls, service: Any) -> "UniWorkflowRunner":
        """Runner sharing a UniAgentService's planning and executor."""
        return cls(WorkflowNodes(service.make_plan, service.executor), service.settings)

    async def run(
        self,
        request: str,
        context: dict[str, Any] | None = None,
        plan: WorkflowPlan | None = None,
    ) -> WorkflowResult:
        """
        Run the workflow for a request.

        Args:
            request: User request
            context: Request context
            plan: Pre-built plan; when omitted the request is planned first
        """
        logger.info(f"Starting workflow for: {request[:50]}...")
        if plan is None:
            # The step budget depends on the plan length, so plan before entering the graph
            plan = await self.nodes.plan_fn(request, dict(context or {}))

        final_state = await self.graph.ainvoke(
            create_initial_state(request, context, plan),
            {"recursion_limit": self.recursion_limit(plan)},
        )

        logger.info(f"Workflow complete. Phase: {final_state.get('current_phase')}")
        return WorkflowResult(
            plan=final_state["plan"],
            results=final_state.get("results", []),
            summary=final_state.get("summary") or "",
        )
