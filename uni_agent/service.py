"""
Uni Agent service.

Entry points for callers (an HTTP layer, the CLI script, tests):
- process_request: plan a request and execute the plan
- process_file_upload: same, for text already extracted from an uploaded file
- ingest_upload: extract text from uploaded bytes, then process_file_upload
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from config import Settings, config
from uni_agent.agents import DataAnalystAgent, PlannerAgent, ReportAgent, needs_planning
from uni_agent.exceptions import MalformedInputError
from uni_agent.llm import LanguageModel, create_llm_client
from uni_agent.models.store import RecordStore
from uni_agent.parsing import ResilientJSONExtractor
from uni_agent.tools import WorkflowTools
from uni_agent.utils import file_type, get_logger
from uni_agent.workflow import ParameterResolver, WorkflowExecutor, WorkflowPlan, WorkflowResult

logger = get_logger(__name__)


@runtime_checkable
class FileTextExtractor(Protocol):
    """Collaborator capability: uploaded bytes to text (e.g. PDF text extraction)."""

    def extract_text(self, file_bytes: bytes) -> str:
        ...


class PlainTextExtractor:
    """UTF-8 decoding for CSV and plain-text uploads."""

    def extract_text(self, file_bytes: bytes) -> str:
        return file_bytes.decode("utf-8", errors="replace")


def upload_request(filename: str, request: str) -> str:
    """Request text handed to the planner for an uploaded file."""
    return (
        f'A file named "{filename}" has been uploaded and extracted.\n'
        f"Task: {request}\n\n"
        "The file data is ready to be processed and saved to the database."
    )


class UniAgentService:
    """
    Planning and execution facade.

    The language model client is created once by the caller and shared by
    the planner, analyst and report agents.
    """

    def __init__(
        self,
        llm: LanguageModel,
        store: RecordStore,
        extractor: ResilientJSONExtractor | None = None,
        settings: Settings | None = None,
        planner_llm: LanguageModel | None = None,
        analysis_llm: LanguageModel | None = None,
    ):
        """
        Args:
            llm: Language model for report synthesis (and the default for all agents)
            store: Record store collaborator
            extractor: Shared JSON extractor
            settings: Settings to use instead of the global config
            planner_llm: Separate model client for planning
            analysis_llm: Separate model client for data analysis
        """
        self.settings = settings or config
        self.store = store
        extractor = extractor or ResilientJSONExtractor()

        self.planner = PlannerAgent(planner_llm or llm, extractor)
        self.analyst = DataAnalystAgent(analysis_llm or llm, extractor)
        self.reporter = ReportAgent(llm, store, extractor, self.settings)
        self.tools = WorkflowTools(store, self.analyst, self.reporter)
        self.executor = WorkflowExecutor(self.tools, ParameterResolver(), self.settings)

    @classmethod
    def from_settings(cls, store: RecordStore, settings: Settings | None = None) -> "UniAgentService":
        """Build clients for the configured endpoint, one per temperature."""
        settings = settings or config
        return cls(
            llm=create_llm_client(settings.llm.temperature, settings),
            store=store,
            settings=settings,
            planner_llm=create_llm_client(settings.llm.planner_temperature, settings),
            analysis_llm=create_llm_client(settings.llm.analysis_temperature, settings),
        )

    async def make_plan(self, request: str, context: dict[str, Any] | None = None) -> WorkflowPlan:
        """Direct plan for simple requests when enabled, otherwise a model-generated plan."""
        if self.settings.workflow.direct_routing and not needs_planning(request):
            return self.planner.direct_plan(request, context)
        return await self.planner.plan(request, context)

    async def process_request(
        self,
        request: str,
        context: dict[str, Any] | None = None,
    ) -> WorkflowResult:
        """
        Plan and execute a request.

        Raises:
            PlanningError, UnknownActionError, CriticalTaskFailure
        """
        context = dict(context or {})
        log = logger.bind(request=request[:120], context_keys=sorted(context))
        log.info("request_received")

        plan = await self.make_plan(request, context)
        log.info("plan_ready", source=plan.source.value, tasks=[t.action for t in plan.tasks])

        result = await self.executor.execute(plan, context)
        log.info("request_completed", summary=result.summary)
        return result

    async def execute_plan(
        self,
        plan: WorkflowPlan,
        context: dict[str, Any] | None = None,
    ) -> WorkflowResult:
        """Execute a caller-supplied plan without planning."""
        return await self.executor.execute(plan, dict(context or {}))

    async def process_file_upload(
        self,
        extracted_text: str,
        filename: str,
        request: str,
    ) -> WorkflowResult:
        """Process text extracted from an uploaded file."""
        if not extracted_text or not extracted_text.strip():
            raise MalformedInputError("File is empty or unreadable")

        context = {
            "filename": filename,
            "fileSize": len(extracted_text.encode("utf-8")),
            "fileType": file_type(filename),
            "fileData": extracted_text,
        }
        return await self.process_request(upload_request(filename, request), context)

    async def ingest_upload(
        self,
        file_bytes: bytes,
        filename: str,
        request: str,
        text_extractor: FileTextExtractor | None = None,
    ) -> WorkflowResult:
        """Extract text from uploaded bytes and process it."""
        text = (text_extractor or PlainTextExtractor()).extract_text(file_bytes)
        logger.info("upload_received", filename=filename, size=len(file_bytes))
        return await self.process_file_upload(text, filename, request)
