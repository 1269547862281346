"""
CSV Codec.

Quote-aware parsing of delimited text into a header/row table, and the
plain reconstruction back to text.

Usage:
    from uni_agent.processing import parse_csv, reconstruct_csv

    table = parse_csv("name,age\\nJohn,30")
    text = reconstruct_csv(table.headers, table.rows)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from uni_agent.exceptions import MalformedInputError

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class ParsedTable:
    """Header names plus rows, every row exactly as wide as the header."""

    headers: list[str]
    rows: list[list[str]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def to_text(self) -> str:
        return reconstruct_csv(self.headers, self.rows)


def parse_line(line: str) -> list[str]:
    """
    Split one line into trimmed fields.

    A double quote toggles quoting; inside quotes a doubled quote is a
    literal quote and commas are kept as data.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0

    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current).strip())
    return fields


def parse_csv(text: str) -> ParsedTable:
    """
    Parse CSV text into a ParsedTable.

    Literal backslash-n sequences count as line breaks. Headers are
    lower-cased and fix the column count: short rows are padded with empty
    strings, long rows are truncated.

    Raises:
        MalformedInputError: fewer than two non-blank lines
    """
    normalized = text.replace("\\n", "\n")
    lines = [line for line in _LINE_BREAK.split(normalized.strip()) if line.strip()]

    if len(lines) < 2:
        raise MalformedInputError("Invalid CSV: needs header and at least one row")

    headers = [h.lower() for h in parse_line(lines[0])]
    width = len(headers)
    rows: list[list[str]] = []

    for line_number, line in enumerate(lines[1:], start=2):
        cells = parse_line(line)
        if len(cells) < width:
            logger.warning(
                f"[CSV] Row {line_number} has {len(cells)} cells, expected {width}; padding"
            )
            cells.extend([""] * (width - len(cells)))
        elif len(cells) > width:
            logger.warning(
                f"[CSV] Row {line_number} has {len(cells)} cells, expected {width}; "
                f"dropping extra values: {', '.join(cells[width:])}"
            )
            cells = cells[:width]
        rows.append(cells)

    return ParsedTable(headers=headers, rows=rows)


def reconstruct_csv(headers: list[str], rows: list[list[str]]) -> str:
    """Join cells with commas and rows with newlines, header first. No quoting."""
    return "\n".join([",".join(headers), *(",".join(row) for row in rows)])
