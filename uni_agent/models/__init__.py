"""
Data models module.

Pydantic models for knowledge records and generated reports.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KnowledgeRecord(BaseModel):
    """A stored dataset, owned by the record store."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    content: str
    raw_content: str | None = None
    filename: str | None = None
    file_type: str | None = None
    tags: str | list[str] | None = None
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")


class ReportMetadata(BaseModel):
    """Report header information."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    generated_at: datetime = Field(default_factory=_utcnow, alias="generatedAt")
    data_source: str = Field(alias="dataSource")
    record_count: int = Field(default=0, alias="recordCount")
    report_type: str = Field(default="standard", alias="reportType")
    # Where the report data came from, inherited by export tasks
    record_id: str | None = Field(default=None, alias="recordId")
    filename: str | None = None


class ReportSection(BaseModel):
    """One titled block of report content."""

    title: str
    content: str
    insights: list[str] | None = None


class Report(BaseModel):
    """Final report consumed by the export formatters."""

    metadata: ReportMetadata
    sections: list[ReportSection] = Field(default_factory=list)
    summary: str
    recommendations: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable form with camelCase metadata keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "KnowledgeRecord",
    "Report",
    "ReportMetadata",
    "ReportSection",
]
