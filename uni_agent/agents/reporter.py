"""
Report Agent - Report synthesis over processed data.

Two chained model calls (summary, then insights) produce a structured
Report. When a model call fails outright a basic fallback report is
returned instead, so reporting never takes a workflow down.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from config import Settings, config
from uni_agent.exceptions import InvalidParamsError
from uni_agent.llm import LanguageModel
from uni_agent.models import KnowledgeRecord, Report, ReportMetadata, ReportSection
from uni_agent.models.store import RecordStore
from uni_agent.parsing import InsightsResult, ResilientJSONExtractor, SummaryResult
from uni_agent.processing import parse_line
from uni_agent.processing.transforms import (
    INVALID_AGE,
    INVALID_AMOUNT,
    INVALID_DATE,
    INVALID_EMAIL,
    INVALID_PHONE,
)
from uni_agent.utils import strip_extension, truncate_data
from uni_agent.workflow.actions import ReportParams, SourceParams

from .base import AgentCard, AgentRole, BaseAgent

logger = logging.getLogger(__name__)

DIRECT_SOURCE = "Direct data input"

FALLBACK_RECOMMENDATIONS = [
    "Check data format and quality",
    "Ensure the language model service is running",
    "Try with a smaller dataset",
]

JSON_RULES = """CRITICAL JSON FORMATTING RULES:
- Respond with ONLY valid JSON - no markdown, no code blocks, no explanatory text
- ALL strings in arrays MUST be wrapped in double quotes: ["item1", "item2"]
- Do NOT write: [item1, item2] or ["item1, item2] - both are invalid
- Every array element must be a complete quoted string on one line
- Do not wrap the response in ```json or any other markers
- Ensure all commas and brackets are properly placed"""

_INVALID_TAGS = {
    "emails": INVALID_EMAIL,
    "dates": INVALID_DATE,
    "ages": INVALID_AGE,
    "phones": INVALID_PHONE,
    "amounts": INVALID_AMOUNT,
}


@dataclass
class ReportSource:
    """Data a report is built from and where it came from."""

    data: str
    label: str
    record: KnowledgeRecord | None = None

    @property
    def record_count(self) -> int:
        return count_records(self.data)


def count_records(data: str) -> int:
    """Non-blank lines minus the header."""
    lines = [line for line in data.split("\n") if line.strip()]
    return max(0, len(lines) - 1)


def data_statistics(data: str) -> dict[str, Any]:
    """Record count, columns and validation-tag counts of CSV text."""
    lines = [line for line in data.split("\n") if line.strip()]
    headers = parse_line(lines[0]) if lines else []

    invalid_counts = {key: 0 for key in _INVALID_TAGS}
    for line in lines[1:]:
        for key, tag in _INVALID_TAGS.items():
            if tag in line:
                invalid_counts[key] += 1

    return {
        "totalRecords": max(0, len(lines) - 1),
        "columns": headers,
        "columnCount": len(headers),
        "invalidCounts": invalid_counts,
        "hasInvalidData": any(count > 0 for count in invalid_counts.values()),
    }


class ReportAgent(BaseAgent[ReportParams, Report]):
    """
    Report Agent - Summaries, insights and statistics.

    Data comes from a stored record (by id or filename) or is given inline.
    """

    def __init__(
        self,
        llm: LanguageModel,
        store: RecordStore,
        extractor: ResilientJSONExtractor | None = None,
        settings: Settings | None = None,
    ):
        super().__init__(llm, extractor)
        self.store = store
        self.settings = settings or config

    @property
    def agent_card(self) -> AgentCard:
        return AgentCard(
            name="Reporter",
            description="Data analyst that writes structured reports",
            role=AgentRole.REPORTER,
            capabilities=[
                "report_generation",
                "summary_creation",
                "statistics",
            ],
        )

    async def process(self, input_data: ReportParams) -> Report:
        return await self.generate_report(input_data)

    async def load_source(self, params: SourceParams) -> ReportSource:
        """
        Resolve the report data. Priority: recordId, then filename, then inline data.

        Raises:
            RecordNotFoundError: The referenced record does not exist
            InvalidParamsError: No source was given
        """
        if params.record_id:
            record = await self.store.get_by_id(params.record_id)
            return ReportSource(record.content, record.filename or record.title, record)
        if params.filename:
            record = await self.store.get_by_title(strip_extension(params.filename))
            return ReportSource(record.content, record.filename or record.title, record)
        if params.data:
            return ReportSource(params.data, DIRECT_SOURCE)
        raise InvalidParamsError("Must provide either recordId, filename, or data")

    async def generate_report(self, params: ReportParams) -> Report:
        """Build a full report; degrades to a basic report if a model call fails."""
        source = await self.load_source(params)
        record_count = source.record_count
        data, truncated = truncate_data(source.data, self.settings.report.max_data_chars)
        if truncated:
            logger.warning(
                f"[Report] Data too large ({len(source.data)} chars), "
                f"truncated to {self.settings.report.max_data_chars}"
            )

        metadata = ReportMetadata(
            title=f"Data Analysis Report - {source.label}",
            data_source=source.label,
            record_count=record_count,
            report_type=params.report_type or self.settings.report.default_report_type,
            record_id=source.record.id if source.record else None,
            filename=source.record.filename if source.record else params.filename,
        )

        try:
            summary = await self.invoke_for(self._summary_prompt(data), SummaryResult)
            insights = await self.invoke_for(
                self._insights_prompt(data, summary.summary), InsightsResult
            )
        except Exception as e:
            logger.error(f"[Report] Report generation failed: {e}")
            return self.fallback_report(metadata)

        sections = [
            ReportSection(
                title="Executive Summary",
                content=summary.summary or "Summary not available",
                insights=summary.key_points,
            ),
            ReportSection(
                title="Data Quality Assessment",
                content=summary.data_quality or "Data quality assessment not available",
            ),
            ReportSection(
                title="Key Insights",
                content="Analysis of the dataset reveals the following insights:",
                insights=insights.insights,
            ),
        ]
        if insights.trends:
            sections.append(ReportSection(
                title="Trends and Patterns",
                content="The following trends were identified:",
                insights=insights.trends,
            ))
        if insights.anomalies:
            sections.append(ReportSection(
                title="Anomalies and Outliers",
                content="The following anomalies were detected:",
                insights=insights.anomalies,
            ))
        if truncated:
            sections.append(ReportSection(
                title="Note",
                content="This analysis was performed on a sample of the data due to size constraints.",
            ))

        logger.info(f"[Report] Generated report for {source.label} ({len(sections)} sections)")
        return Report(
            metadata=metadata,
            sections=sections,
            summary=summary.summary or "Summary not available",
            recommendations=insights.recommendations,
        )

    def fallback_report(self, metadata: ReportMetadata) -> Report:
        """Basic report used when synthesis fails."""
        logger.warning("[Report] Generating fallback report")
        source = metadata.data_source
        count = metadata.record_count
        return Report(
            metadata=metadata.model_copy(update={"report_type": "fallback"}),
            sections=[
                ReportSection(
                    title="Report Generation Error",
                    content="An error occurred while generating the detailed analysis.",
                ),
                ReportSection(
                    title="Basic Information",
                    content=f"The dataset contains {count} records from {source}.",
                ),
            ],
            summary=f"Basic report for {source} with {count} records.",
            recommendations=list(FALLBACK_RECOMMENDATIONS),
        )

    async def create_summary(self, params: SourceParams) -> SummaryResult:
        """Quick summary of the data (single model call)."""
        source = await self.load_source(params)
        data, _ = truncate_data(source.data, self.settings.report.max_data_chars)
        return await self.invoke_for(self._summary_prompt(data), SummaryResult)

    def get_statistics(self, data: str) -> dict[str, Any]:
        return data_statistics(data)

    # === Prompts ===

    def _summary_prompt(self, data: str) -> str:
        return f"""You are a data analyst creating concise summaries of processed datasets.

Analyze the following data and provide:
1. A brief summary (2-3 sentences) of what the data represents
2. Key points or notable patterns (3-5 bullet points)
3. Assessment of data quality (good/fair/poor with brief explanation)
4. Count of valid records

DATA:
{data}

{JSON_RULES}

Use this exact JSON format:
{self.extractor.format_instructions(SummaryResult)}

Respond with only the JSON object:"""

    def _insights_prompt(self, data: str, summary: str) -> str:
        return f"""You are a data analyst providing deep insights from processed data.

Analyze the data and identify:
1. Key insights (3-5 meaningful observations)
2. Trends or patterns (2-4 trends)
3. Anomalies or outliers (if any, 0-3)
4. Actionable recommendations (2-4 suggestions)

DATA:
{data}

SUMMARY CONTEXT:
{summary}

{JSON_RULES}

Use this exact JSON format:
{self.extractor.format_instructions(InsightsResult)}

Respond with only the JSON object:"""
