"""
Planner Agent - Workflow plan generation.

Turns a natural-language request into an ordered list of tasks drawn from
the action catalogue. Two paths:
- structured: PydanticOutputParser enforces the plan schema
- fallback:   a simplified prompt whose answer goes through the resilient extractor

Simple single-intent requests can also be routed to a deterministic plan
without calling the language model.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from langchain_core.exceptions import OutputParserException
from langchain_core.output_parsers import PydanticOutputParser
from pydantic import ValidationError

from uni_agent.exceptions import PlanningError
from uni_agent.parsing import PlanSchema, TaskSpec
from uni_agent.utils import truncate_data
from uni_agent.workflow import (
    ACTION_CATALOGUE,
    Action,
    PlanSource,
    Task,
    WorkflowPlan,
)

from .base import AgentCard, AgentRole, BaseAgent

logger = logging.getLogger(__name__)

# Context values longer than this are shortened in the planning prompt
CONTEXT_PREVIEW_CHARS = 1000

MULTI_STEP_KEYWORDS = (
    "then", "after", "and then", "followed by",
    "first", "second", "finally",
    "process and", "analyze and", "clean and",
    "generate report", "create report", "export",
)


@dataclass
class PlannerInput:
    """Input for the Planner agent."""

    request: str
    context: dict[str, Any] = field(default_factory=dict)


def format_context(context: dict[str, Any] | None) -> str:
    """Serialize request context for the prompt, shortening large values."""
    if not context:
        return "None"
    shown: dict[str, Any] = {}
    for key, value in context.items():
        if isinstance(value, str):
            value, _ = truncate_data(value, CONTEXT_PREVIEW_CHARS)
        shown[key] = value
    return json.dumps(shown, indent=2, default=str)


def needs_planning(request: str) -> bool:
    """Whether a request reads as multi-step and should go to the language model."""
    lowered = request.lower()
    return any(keyword in lowered for keyword in MULTI_STEP_KEYWORDS)


def detect_intent(request: str) -> str:
    """Single intent of a simple request: retrieve, report, process or analyze."""
    lowered = request.lower()
    if any(word in lowered for word in ("get", "retrieve", "find")):
        return "retrieve"
    if any(word in lowered for word in ("report", "summary", "export", "statistics", "stats")):
        return "report"
    if any(word in lowered for word in ("process", "clean", "transform")):
        return "process"
    if any(word in lowered for word in ("analyze", "analysis")):
        return "analyze"
    return "process"


class PlannerAgent(BaseAgent[PlannerInput, WorkflowPlan]):
    """
    Planner Agent - Builds workflow plans.

    The plan is returned with every task pending; execution belongs to the
    WorkflowExecutor.
    """

    @property
    def agent_card(self) -> AgentCard:
        return AgentCard(
            name="Planner",
            description="Plans data processing and reporting workflows",
            role=AgentRole.PLANNER,
            capabilities=[
                "workflow_planning",
                "direct_routing",
            ],
        )

    async def process(self, input_data: PlannerInput) -> WorkflowPlan:
        return await self.plan(input_data.request, input_data.context)

    async def plan(self, request: str, context: dict[str, Any] | None = None) -> WorkflowPlan:
        """
        Generate a workflow plan with the language model.

        Raises:
            PlanningError: Neither the structured nor the fallback path produced tasks
        """
        logger.info(f"[Planner] Planning: {request[:80]}")
        parser = PydanticOutputParser(pydantic_object=PlanSchema)

        response = await self.invoke_llm(
            self._build_prompt(request, context, parser.get_format_instructions())
        )
        try:
            schema = parser.parse(response)
            if schema.tasks:
                return self._to_plan(schema, PlanSource.STRUCTURED)
            logger.warning("[Planner] Structured plan has no tasks")
        except (OutputParserException, ValidationError) as e:
            logger.warning(f"[Planner] Structured parse failed, using fallback: {e}")

        response = await self.invoke_llm(self._build_fallback_prompt(request, context))
        extraction = self.extractor.extract_with_path(response, PlanSchema)
        if extraction.degraded or not extraction.value.tasks:
            raise PlanningError(f"Could not produce a workflow plan for request: {request[:200]}")
        return self._to_plan(extraction.value, PlanSource.FALLBACK)

    def direct_plan(self, request: str, context: dict[str, Any] | None = None) -> WorkflowPlan:
        """
        Build a one-task plan for a simple request without the language model.

        Parameters come from the context when the plan is executed.
        """
        context = context or {}
        intent = detect_intent(request)
        lowered = request.lower()

        if intent == "retrieve":
            if context.get("filename"):
                task = Task(action=Action.GET_BY_FILENAME.value)
            elif context.get("recordId") or context.get("id"):
                task = Task(
                    action=Action.GET_BY_ID.value,
                    params={"id": context.get("id") or context.get("recordId")},
                )
            else:
                raise PlanningError("No filename or ID provided for retrieval")
        elif intent == "report":
            if "summary" in lowered:
                task = Task(action=Action.CREATE_SUMMARY.value)
            elif "statistics" in lowered or "stats" in lowered:
                if not (context.get("fileData") or context.get("data")):
                    raise PlanningError("No data provided for statistics")
                task = Task(
                    action=Action.GET_STATISTICS.value,
                    params={"data": context.get("fileData") or context.get("data")},
                )
            else:
                task = Task(action=Action.GENERATE_REPORT.value)
        elif intent == "analyze":
            if not context.get("fileData"):
                raise PlanningError("No file data provided for analysis")
            task = Task(action=Action.ANALYZE_DATA.value)
        else:
            if not context.get("fileData"):
                raise PlanningError("No file data provided for processing")
            task = Task(
                action=Action.PROCESS_DATA.value,
                params={"filename": context.get("filename") or "uploaded_file.csv"},
            )

        logger.info(f"[Planner] Direct route: {intent} -> {task.action}")
        return WorkflowPlan(
            tasks=[task],
            reasoning=f"Single-step '{intent}' request handled without planning",
            source=PlanSource.DIRECT,
        )

    def _to_plan(self, schema: PlanSchema, source: PlanSource) -> WorkflowPlan:
        tasks = [
            Task.from_dict({
                "action": spec.action,
                "params": spec.params,
                "dependencies": self._valid_dependencies(index, spec),
            })
            for index, spec in enumerate(schema.tasks)
        ]
        logger.info(
            f"[Planner] Plan ({source.value}): "
            + " -> ".join(task.action for task in tasks)
        )
        return WorkflowPlan(tasks=tasks, reasoning=schema.reasoning, source=source)

    @staticmethod
    def _valid_dependencies(index: int, spec: TaskSpec) -> list[int]:
        valid = []
        for dep in spec.dependencies:
            if 0 <= dep < index:
                valid.append(dep)
            else:
                logger.warning(f"[Planner] Task {index} ({spec.action}): dropping dependency {dep}")
        return valid

    def _build_prompt(
        self,
        request: str,
        context: dict[str, Any] | None,
        format_instructions: str,
    ) -> str:
        return f"""You are an intelligent agent that plans data processing workflows.

AVAILABLE ACTIONS:
{ACTION_CATALOGUE}

PLANNING RULES:
- If the user mentions an EXISTING file/record, start with get_by_filename or get_by_id
- For NEW file uploads, use processing actions (analyze_data -> clean_data -> etc.)
- Reports can reference recordId, filename, or work directly with data
- Use the dependencies array to specify execution order (0-based indices of earlier tasks)
- To use a previous task's result, set the parameter value to exactly {{task.INDEX.FIELD}}
  (for example {{task.0.id}} or {{task.2.data}})
- To use a context value, set the parameter value to exactly {{context.FIELD}}
- For "process and report" workflows: process_data -> generate_report
- For "export report" workflows: generate_report -> export_pdf/export_markdown/export_json

EXAMPLES:
1. "Process this CSV and generate a report"
   -> analyze_data -> clean_data -> transform_data -> save_to_database -> generate_report
2. "Create a report for employees.csv and export as PDF"
   -> get_by_filename -> generate_report -> export_pdf
3. "Get statistics for the uploaded data"
   -> get_statistics
4. "Clean the data, save it, and create a summary"
   -> clean_data -> save_to_database -> create_summary

USER REQUEST: {request}

CONTEXT: {format_context(context)}

Plan the workflow using this JSON format:
{format_instructions}"""

    def _build_fallback_prompt(self, request: str, context: dict[str, Any] | None) -> str:
        actions = ", ".join(action.value for action in Action)
        return f"""Plan a data workflow for this request.

REQUEST: {request}

CONTEXT: {format_context(context)}

Allowed actions: {actions}

Respond with ONLY a JSON object, no markdown, no explanation:
{{"tasks": [{{"action": "action_name", "params": {{}}, "dependencies": []}}], "reasoning": "why"}}

Reference an earlier task's result with a parameter value of exactly {{task.INDEX.FIELD}}."""
