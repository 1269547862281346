"""
Text-level processing passes.

Each pass parses CSV text, applies the table transform and reconstructs the
text. When the text cannot be parsed as a table the pass falls back to a
best-effort regex rewrite of the raw text; the path taken is reported on
the result.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from uni_agent.exceptions import MalformedInputError

from . import transforms
from .csv_codec import ParsedTable, parse_csv

logger = logging.getLogger(__name__)


class PassPath(str, Enum):
    """How a pass produced its output."""

    STRUCTURED = "structured"
    FALLBACK = "fallback"


@dataclass
class PassResult:
    """Output of one processing pass."""

    data: str
    path: PassPath
    row_count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": self.data,
            "path": self.path.value,
            "rowCount": self.row_count,
        }


# === Raw-text fallbacks ===

_NULL_WORDS = re.compile(
    r"(?<![\w/-])(?:null|n/a|na|pending|tbd|undefined|nil|none|--)(?![\w/-])",
    re.IGNORECASE,
)
_US_DATE = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")
_EMAIL = re.compile(r"[a-zA-Z0-9._-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


def _fallback_clean(data: str) -> str:
    cleaned = _NULL_WORDS.sub(transforms.UNKNOWN, data)
    lines = [re.sub(r"[ \t]+", " ", line).strip() for line in cleaned.splitlines()]
    return "\n".join(line for line in lines if line)


def _fallback_transform(data: str) -> str:
    transformed = _US_DATE.sub(
        lambda m: f"{m.group(3)}-{m.group(1).zfill(2)}-{m.group(2).zfill(2)}", data
    )
    return _EMAIL.sub(lambda m: m.group(0).lower(), transformed)


def _fallback_deduplicate(data: str) -> str:
    seen: set[str] = set()
    unique: list[str] = []
    for line in data.splitlines():
        line = line.strip()
        if line and line not in seen:
            seen.add(line)
            unique.append(line)
    return "\n".join(unique)


TablePass = Callable[[ParsedTable], ParsedTable]
TextFallback = Callable[[str], str]

PASSES: dict[str, tuple[TablePass, TextFallback]] = {
    "clean": (transforms.clean, _fallback_clean),
    "transform": (transforms.transform, _fallback_transform),
    # Unparseable text cannot be validated cell by cell
    "validate": (transforms.validate, lambda data: data),
    "deduplicate": (transforms.deduplicate, _fallback_deduplicate),
    "normalize": (transforms.normalize, lambda data: data.strip()),
}


def run_pass(name: str, data: str) -> PassResult:
    """
    Run a named pass over CSV text.

    Args:
        name: One of clean, transform, validate, deduplicate, normalize
        data: CSV text

    Returns:
        PassResult with the new text and the path taken
    """
    table_pass, fallback = PASSES[name]
    try:
        table = parse_csv(data)
    except MalformedInputError as e:
        logger.warning(f"[Transform] {name}: CSV parsing failed ({e}); using text fallback")
        return PassResult(data=fallback(data), path=PassPath.FALLBACK)

    result = table_pass(table)
    return PassResult(
        data=result.to_text(),
        path=PassPath.STRUCTURED,
        row_count=len(result.rows),
    )


def run_stages(
    data: str,
    *,
    cleaning: bool,
    transformation: bool,
    validation: bool,
) -> str:
    """Run the analysis-selected passes in order: clean, transform, validate."""
    result = data
    for name, enabled in (
        ("clean", cleaning),
        ("transform", transformation),
        ("validate", validation),
    ):
        if enabled:
            result = run_pass(name, result).data
            logger.info(f"[Transform] After {name}: {result[:120]!r}")
    return result
