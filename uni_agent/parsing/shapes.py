"""
Expected shapes for language-model JSON output.

Every shape is lenient (missing fields take defaults, null lists become
empty) and knows its own fallback value for when nothing usable can be
recovered from the model's text.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


def _none_to_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


class ExtractionShape(BaseModel):
    """Base class for shapes the resilient extractor can return."""

    @classmethod
    def fallback(cls) -> "ExtractionShape":
        """Value returned when extraction fails completely."""
        return cls()


class SummaryResult(ExtractionShape):
    """Output of the summary call."""

    summary: str = Field(default="", description="2-3 sentence summary of what the data represents")
    key_points: list[str] = Field(default_factory=list, description="3-5 notable patterns")
    data_quality: str = Field(default="unknown", description="good/fair/poor with a brief explanation")
    record_count: int = Field(default=0, description="Count of valid records")

    @field_validator("key_points", mode="before")
    @classmethod
    def coerce_lists(cls, value: Any) -> Any:
        return _none_to_list(value)

    @classmethod
    def fallback(cls) -> "SummaryResult":
        return cls(
            summary="Analysis could not be completed",
            key_points=["Parsing error occurred"],
            data_quality="unknown",
            record_count=0,
        )


class InsightsResult(ExtractionShape):
    """Output of the insights call."""

    insights: list[str] = Field(default_factory=list, description="3-5 meaningful observations")
    trends: list[str] = Field(default_factory=list, description="2-4 trends or patterns")
    anomalies: list[str] = Field(default_factory=list, description="0-3 anomalies or outliers")
    recommendations: list[str] = Field(default_factory=list, description="2-4 actionable suggestions")
    summary: str | None = Field(default=None, description="Optional one-line summary")

    @field_validator("insights", "trends", "anomalies", "recommendations", mode="before")
    @classmethod
    def coerce_lists(cls, value: Any) -> Any:
        return _none_to_list(value)

    @classmethod
    def fallback(cls) -> "InsightsResult":
        return cls(
            insights=["Unable to parse insights from LLM response"],
            trends=["Data analysis in progress"],
            anomalies=[],
            recommendations=["Review data quality and retry"],
            summary="Analysis could not be completed",
        )


class DataAnalysis(ExtractionShape):
    """Which processing passes a raw data blob needs."""

    needs_cleaning: bool = Field(
        default=True, description="NULL, N/A, empty values or whitespace issues exist"
    )
    needs_transformation: bool = Field(
        default=True, description="dates, emails, phones or currency need standardization"
    )
    needs_validation: bool = Field(
        default=True, description="integrity checks are needed (emails, ages, dates)"
    )
    raw_text_allowed: bool | None = Field(
        default=None, description="true if the data is NOT tabular/CSV"
    )
    explanation: str = Field(default="", description="Short reasoning for the flags")

    @classmethod
    def fallback(cls) -> "DataAnalysis":
        return cls(explanation="Analysis unavailable; running all processing passes")


class TaskSpec(BaseModel):
    """One planned task as the model writes it."""

    action: str = Field(description="Action name from the catalogue")
    params: dict[str, Any] = Field(default_factory=dict, description="Action parameters")
    dependencies: list[int] = Field(
        default_factory=list, description="0-based indices of tasks this one depends on"
    )

    @field_validator("params", mode="before")
    @classmethod
    def coerce_params(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("dependencies", mode="before")
    @classmethod
    def coerce_dependencies(cls, value: Any) -> Any:
        return [] if value is None else value


class PlanSchema(ExtractionShape):
    """Workflow plan as the model writes it."""

    tasks: list[TaskSpec] = Field(default_factory=list, description="Ordered tasks")
    reasoning: str = Field(default="", description="Why this plan answers the request")
