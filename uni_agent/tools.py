"""
Workflow tools.

One handler per catalogue action, each taking its typed parameter model.
The handler table is checked against the Action enum at construction so
every action has exactly one implementation.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from uni_agent import exporters
from uni_agent.agents import DataAnalystAgent, ReportAgent
from uni_agent.exceptions import InvalidParamsError
from uni_agent.models import KnowledgeRecord, Report
from uni_agent.models.store import RecordStore
from uni_agent.parsing import DataAnalysis
from uni_agent.processing import run_pass, run_stages
from uni_agent.utils import split_filename, strip_extension
from uni_agent.workflow import (
    Action,
    ActionParams,
    DataParams,
    ExportParams,
    FilenameParams,
    ProcessDataParams,
    RecordIdParams,
    ReportParams,
    SaveParams,
    SourceParams,
    is_report_like,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


class WorkflowTools:
    """ToolSet backed by the record store and the analyst/report agents."""

    def __init__(
        self,
        store: RecordStore,
        analyst: DataAnalystAgent,
        reporter: ReportAgent,
    ):
        self.store = store
        self.analyst = analyst
        self.reporter = reporter
        self._handlers: dict[Action, Handler] = {
            Action.GET_BY_ID: self.get_by_id,
            Action.GET_BY_FILENAME: self.get_by_filename,
            Action.ANALYZE_DATA: self.analyze_data,
            Action.CLEAN_DATA: self._pass("clean"),
            Action.TRANSFORM_DATA: self._pass("transform"),
            Action.VALIDATE_DATA: self._pass("validate"),
            Action.DEDUPLICATE_DATA: self._pass("deduplicate"),
            Action.NORMALIZE_DATA: self._pass("normalize"),
            Action.PROCESS_DATA: self.process_data,
            Action.SAVE_TO_DATABASE: self.save_to_database,
            Action.GENERATE_REPORT: self.generate_report,
            Action.CREATE_SUMMARY: self.create_summary,
            Action.GET_STATISTICS: self.get_statistics,
            Action.EXPORT_PDF: self.export_pdf,
            Action.EXPORT_MARKDOWN: self.export_markdown,
            Action.EXPORT_JSON: self.export_json,
        }
        missing = set(Action) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for actions: {sorted(a.value for a in missing)}")

    async def run(self, action: Action, params: ActionParams) -> Any:
        return await self._handlers[action](params)

    # === Retrieval ===

    async def get_by_id(self, params: RecordIdParams) -> KnowledgeRecord:
        return await self.store.get_by_id(params.id)

    async def get_by_filename(self, params: FilenameParams) -> KnowledgeRecord:
        return await self.store.get_by_title(strip_extension(params.filename))

    # === Processing ===

    async def analyze_data(self, params: DataParams) -> DataAnalysis:
        return await self.analyst.analyze(params.data)

    def _pass(self, name: str) -> Handler:
        async def handler(params: DataParams) -> dict[str, Any]:
            return run_pass(name, params.data).to_dict()

        handler.__name__ = f"{name}_data"
        return handler

    async def process_data(self, params: ProcessDataParams) -> dict[str, Any]:
        """Analyze, run the indicated passes, and save the result."""
        analysis = await self.analyst.analyze(params.data)
        processed = run_stages(
            params.data,
            cleaning=analysis.needs_cleaning,
            transformation=analysis.needs_transformation,
            validation=analysis.needs_validation,
        )
        saved = await self.save_to_database(
            SaveParams(title=params.filename, content=processed, tags=params.tags)
        )
        return {
            "analysis": analysis,
            "processedData": processed,
            "recordId": saved.id,
            "data": processed,
            "message": "Data processed and saved successfully",
        }

    async def save_to_database(self, params: SaveParams) -> KnowledgeRecord:
        if not params.name or params.body is None:
            raise InvalidParamsError("save_to_database requires a title (or filename) and content")
        title, extension = split_filename(params.name)
        record = KnowledgeRecord(
            title=title,
            content=params.body,
            raw_content=params.body,
            filename=params.name,
            file_type=extension,
            tags=params.tags,
        )
        return await self.store.save(record)

    # === Reporting ===

    async def generate_report(self, params: ReportParams) -> Report:
        return await self.reporter.generate_report(params)

    async def create_summary(self, params: SourceParams) -> Any:
        return await self.reporter.create_summary(params)

    async def get_statistics(self, params: DataParams) -> dict[str, Any]:
        return self.reporter.get_statistics(params.data)

    # === Export ===

    async def _report_for_export(self, params: ExportParams) -> Report:
        if is_report_like(params.report):
            return exporters.coerce_report(params.report)
        if params.has_source:
            logger.info("[Export] No report given; generating one from the source")
            return await self.reporter.generate_report(params)
        raise InvalidParamsError("Export needs a report or a recordId, filename or data source")

    async def export_pdf(self, params: ExportParams) -> str:
        return exporters.export_html(await self._report_for_export(params))

    async def export_markdown(self, params: ExportParams) -> str:
        return exporters.export_markdown(await self._report_for_export(params))

    async def export_json(self, params: ExportParams) -> dict[str, Any]:
        return exporters.export_json(await self._report_for_export(params))
