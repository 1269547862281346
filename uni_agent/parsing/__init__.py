"""Parsing module: resilient extraction of JSON from language-model output."""

from .json_extractor import (
    Extraction,
    ExtractionPath,
    ResilientJSONExtractor,
    repair_json,
    response_text,
    slice_object,
    strip_noise,
)
from .shapes import (
    DataAnalysis,
    ExtractionShape,
    InsightsResult,
    PlanSchema,
    SummaryResult,
    TaskSpec,
)

__all__ = [
    "ResilientJSONExtractor",
    "Extraction",
    "ExtractionPath",
    "repair_json",
    "response_text",
    "slice_object",
    "strip_noise",
    "ExtractionShape",
    "DataAnalysis",
    "InsightsResult",
    "PlanSchema",
    "SummaryResult",
    "TaskSpec",
]
