"""
Action catalogue.

A closed set of actions grouped by capability. Every action carries a typed
parameter model; the executor dispatches on the enum member rather than on
free-form names.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ActionCategory(str, Enum):
    """Capability group of an action."""

    RETRIEVAL = "retrieval"
    PROCESSING = "processing"
    REPORTING = "reporting"
    EXPORT = "export"


class Action(str, Enum):
    """All actions a workflow plan may use."""

    # Retrieval
    GET_BY_ID = "get_by_id"
    GET_BY_FILENAME = "get_by_filename"

    # Processing
    ANALYZE_DATA = "analyze_data"
    CLEAN_DATA = "clean_data"
    TRANSFORM_DATA = "transform_data"
    VALIDATE_DATA = "validate_data"
    DEDUPLICATE_DATA = "deduplicate_data"
    NORMALIZE_DATA = "normalize_data"
    PROCESS_DATA = "process_data"
    SAVE_TO_DATABASE = "save_to_database"

    # Reporting
    GENERATE_REPORT = "generate_report"
    CREATE_SUMMARY = "create_summary"
    GET_STATISTICS = "get_statistics"

    # Export
    EXPORT_PDF = "export_pdf"
    EXPORT_MARKDOWN = "export_markdown"
    EXPORT_JSON = "export_json"

    @property
    def category(self) -> ActionCategory:
        return _CATEGORIES[self]

    @property
    def is_export(self) -> bool:
        return self.category is ActionCategory.EXPORT

    @property
    def params_model(self) -> type["ActionParams"]:
        return _PARAMS[self]

    @classmethod
    def parse(cls, name: str) -> "Action | None":
        """Look up an action by name, None if it is not in the catalogue."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


_CATEGORIES: dict[Action, ActionCategory] = {
    Action.GET_BY_ID: ActionCategory.RETRIEVAL,
    Action.GET_BY_FILENAME: ActionCategory.RETRIEVAL,
    Action.ANALYZE_DATA: ActionCategory.PROCESSING,
    Action.CLEAN_DATA: ActionCategory.PROCESSING,
    Action.TRANSFORM_DATA: ActionCategory.PROCESSING,
    Action.VALIDATE_DATA: ActionCategory.PROCESSING,
    Action.DEDUPLICATE_DATA: ActionCategory.PROCESSING,
    Action.NORMALIZE_DATA: ActionCategory.PROCESSING,
    Action.PROCESS_DATA: ActionCategory.PROCESSING,
    Action.SAVE_TO_DATABASE: ActionCategory.PROCESSING,
    Action.GENERATE_REPORT: ActionCategory.REPORTING,
    Action.CREATE_SUMMARY: ActionCategory.REPORTING,
    Action.GET_STATISTICS: ActionCategory.REPORTING,
    Action.EXPORT_PDF: ActionCategory.EXPORT,
    Action.EXPORT_MARKDOWN: ActionCategory.EXPORT,
    Action.EXPORT_JSON: ActionCategory.EXPORT,
}


# === Parameter models ===

class ActionParams(BaseModel):
    """Base for typed action parameters. Unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RecordIdParams(ActionParams):
    id: str

    @model_validator(mode="before")
    @classmethod
    def accept_record_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("id") and data.get("recordId"):
            return {**data, "id": data["recordId"]}
        return data


class FilenameParams(ActionParams):
    filename: str


class DataParams(ActionParams):
    data: str

    @model_validator(mode="before")
    @classmethod
    def accept_content(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("data"):
            for key in ("fileData", "content"):
                if data.get(key):
                    return {**data, "data": data[key]}
        return data


class ProcessDataParams(DataParams):
    filename: str = "uploaded_file.csv"
    tags: str | list[str] | None = None


class SaveParams(ActionParams):
    title: str | None = None
    filename: str | None = None
    content: str | None = None
    data: str | None = None
    tags: str | list[str] | None = None

    @property
    def name(self) -> str | None:
        return self.title or self.filename

    @property
    def body(self) -> str | None:
        return self.content or self.data


class SourceParams(ActionParams):
    """Where report data comes from: a stored record or inline data."""

    record_id: str | None = Field(default=None, alias="recordId")
    filename: str | None = None
    data: str | None = None

    @property
    def has_source(self) -> bool:
        return bool(self.record_id or self.filename or self.data)


class ReportParams(SourceParams):
    report_type: str | None = Field(default=None, alias="reportType")


class ExportParams(ReportParams):
    report: Any = None


_PARAMS: dict[Action, type[ActionParams]] = {
    Action.GET_BY_ID: RecordIdParams,
    Action.GET_BY_FILENAME: FilenameParams,
    Action.ANALYZE_DATA: DataParams,
    Action.CLEAN_DATA: DataParams,
    Action.TRANSFORM_DATA: DataParams,
    Action.VALIDATE_DATA: DataParams,
    Action.DEDUPLICATE_DATA: DataParams,
    Action.NORMALIZE_DATA: DataParams,
    Action.PROCESS_DATA: ProcessDataParams,
    Action.SAVE_TO_DATABASE: SaveParams,
    Action.GENERATE_REPORT: ReportParams,
    Action.CREATE_SUMMARY: SourceParams,
    Action.GET_STATISTICS: DataParams,
    Action.EXPORT_PDF: ExportParams,
    Action.EXPORT_MARKDOWN: ExportParams,
    Action.EXPORT_JSON: ExportParams,
}


# Text embedded in the planning prompt
ACTION_CATALOGUE = """\
1. RETRIEVAL:
   - get_by_id: Retrieve record by ID (params: {id})
   - get_by_filename: Retrieve record by filename (params: {filename})

2. DATA PROCESSING:
   - analyze_data: Analyze data quality (params: {data})
   - clean_data: Remove nulls and format data (params: {data})
   - transform_data: Standardize dates, emails, phones, currency (params: {data})
   - validate_data: Validate data integrity (params: {data})
   - deduplicate_data: Remove duplicate rows (params: {data})
   - normalize_data: Normalize text casing and state codes (params: {data})
   - process_data: Analyze, clean, transform, validate and save in one step (params: {data, filename, tags?})
   - save_to_database: Save processed data (params: {title, content, tags?})

3. REPORTING:
   - generate_report: Create comprehensive report (params: {recordId?, filename?, data?, reportType?})
   - create_summary: Create quick summary (params: {recordId?, filename?, data?})
   - get_statistics: Get basic statistics (params: {data})

4. EXPORT:
   - export_pdf: Export report as PDF/HTML (params: {report})
   - export_markdown: Export report as Markdown (params: {report})
   - export_json: Export report as JSON (params: {report})"""
