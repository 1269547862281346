"""Tabular processing module: CSV codec, field transforms and text-level passes."""

from .csv_codec import ParsedTable, parse_csv, parse_line, reconstruct_csv
from .pipeline import PASSES, PassPath, PassResult, run_pass, run_stages
from .transforms import clean, deduplicate, normalize, transform, validate

__all__ = [
    "ParsedTable",
    "parse_csv",
    "parse_line",
    "reconstruct_csv",
    "clean",
    "transform",
    "validate",
    "deduplicate",
    "normalize",
    "PASSES",
    "PassPath",
    "PassResult",
    "run_pass",
    "run_stages",
]
