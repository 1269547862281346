"""
Field Transform Library.

Pure per-cell passes over a ParsedTable. Each pass returns a new table and
uses the column header as a hint for what a cell holds.
"""

from __future__ import annotations

import re
from typing import Callable

from .csv_codec import ParsedTable

UNKNOWN = "Unknown"

NULL_SENTINELS = frozenset(
    {"null", "n/a", "na", "pending", "tbd", "undefined", "nil", "none", "--", ""}
)

US_STATES = frozenset(
    {
        "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
        "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
        "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
        "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
        "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
    }
)

# Sentinel tags written by validate()
INVALID_EMAIL = "[INVALID_EMAIL]"
INVALID_AGE = "[INVALID_AGE]"
INVALID_DATE = "[INVALID_DATE]"
INVALID_PHONE = "[INVALID_PHONE]"
INVALID_AMOUNT = "[INVALID_AMOUNT]"

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PHONE_PATTERN = re.compile(r"\+?1?[-.\s]?\(?(\d{3})\)?[-.\s]?(\d{3})[-.\s]?(\d{4})")
ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
FORMATTED_PHONE_PATTERN = re.compile(r"^(\d{3})-(\d{3})-(\d{4})$")
AMOUNT_PATTERN = re.compile(r"^-?\$?(\d{1,3}(?:,\d{3})+|\d+)(\.\d+)?$")
CURRENCY_PATTERN = re.compile(r"^\$?(\d{1,3}(?:,\d{3})+|\d+)(\.\d+)?$")
AGE_HEADER_PATTERN = re.compile(r"(?:^|[^a-z])age(?:[^a-z]|$)")
AGE_VALUE_PATTERN = re.compile(r"\d{1,3}", re.ASCII)

# (pattern, group order as (year, month, day))
DATE_REWRITES: list[tuple[re.Pattern[str], tuple[int, int, int]]] = [
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), (3, 1, 2)),  # MM/DD/YYYY
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$"), (3, 2, 1)),  # DD-MM-YYYY
    (re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$"), (1, 2, 3)),  # YYYY/MM/DD
]

AMOUNT_MAX = 10_000_000

CellFn = Callable[[str, str], str]


def _map_cells(table: ParsedTable, fn: CellFn) -> ParsedTable:
    """Apply fn(header, cell) to every cell."""
    headers = list(table.headers)
    rows = [
        [fn(headers[idx] if idx < len(headers) else "", cell) for idx, cell in enumerate(row)]
        for row in table.rows
    ]
    return ParsedTable(headers=headers, rows=rows)


def _is_unknown(cell: str) -> bool:
    return cell.lower() == UNKNOWN.lower()


def _is_amount_header(header: str) -> bool:
    return any(hint in header for hint in ("salary", "price", "amount"))


# =========================================================================
# Clean
# =========================================================================

def clean_cell(cell: str) -> str:
    """Null sentinels become Unknown; whitespace runs collapse to one space."""
    collapsed = re.sub(r"\s+", " ", cell).strip()
    if collapsed.lower() in NULL_SENTINELS:
        return UNKNOWN
    return collapsed


def clean(table: ParsedTable) -> ParsedTable:
    return _map_cells(table, lambda _header, cell: clean_cell(cell))


# =========================================================================
# Transform
# =========================================================================

def normalize_date(cell: str) -> str:
    """Rewrite MM/DD/YYYY, DD-MM-YYYY and YYYY/MM/DD to YYYY-MM-DD."""
    for pattern, (y_idx, m_idx, d_idx) in DATE_REWRITES:
        match = pattern.match(cell)
        if not match:
            continue
        year, month, day = match.group(y_idx), match.group(m_idx), match.group(d_idx)
        if int(month) > 12 or int(day) > 31:
            return cell
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    return cell


def transform_cell(header: str, cell: str) -> str:
    cell = normalize_date(cell)

    if "email" in header and EMAIL_PATTERN.match(cell):
        cell = cell.lower()

    if "phone" in header:
        cell = PHONE_PATTERN.sub(r"\1-\2-\3", cell, count=1)

    if _is_amount_header(header):
        match = CURRENCY_PATTERN.match(cell)
        if match:
            cell = match.group(1).replace(",", "") + (match.group(2) or "")

    return cell


def transform(table: ParsedTable) -> ParsedTable:
    return _map_cells(table, transform_cell)


# =========================================================================
# Validate
# =========================================================================

def _valid_iso_date(cell: str) -> bool:
    match = ISO_DATE_PATTERN.match(cell)
    if not match:
        return False
    year, month, day = (int(part) for part in match.groups())
    if not (1900 <= year <= 2100 and 1 <= month <= 12 and 1 <= day <= 31):
        return False
    if month == 2 and day > 29:
        return False
    if month in (4, 6, 9, 11) and day > 30:
        return False
    return True


def _valid_phone(cell: str) -> bool:
    match = FORMATTED_PHONE_PATTERN.match(cell)
    # NANP area codes never start with 0 or 1
    return bool(match) and match.group(1)[0] not in "01"


def _valid_amount(cell: str) -> bool:
    if not AMOUNT_PATTERN.match(cell):
        return False
    value = float(cell.replace("$", "").replace(",", ""))
    return 0 <= value <= AMOUNT_MAX


def validate_cell(header: str, cell: str) -> str:
    """Return the cell, or the sentinel tag for the first failed check."""
    if _is_unknown(cell):
        return cell

    if "email" in header:
        return cell if EMAIL_PATTERN.match(cell) else INVALID_EMAIL

    if AGE_HEADER_PATTERN.search(header):
        if not AGE_VALUE_PATTERN.fullmatch(cell) or int(cell) > 120:
            return INVALID_AGE
        return cell

    if "date" in header:
        return cell if _valid_iso_date(cell) else INVALID_DATE

    if "phone" in header:
        return cell if _valid_phone(cell) else INVALID_PHONE

    if _is_amount_header(header):
        return cell if _valid_amount(cell) else INVALID_AMOUNT

    return cell


def validate(table: ParsedTable) -> ParsedTable:
    return _map_cells(table, validate_cell)


# =========================================================================
# Deduplicate / Normalize
# =========================================================================

def deduplicate(table: ParsedTable) -> ParsedTable:
    """Drop rows already seen; the first occurrence wins."""
    seen: set[str] = set()
    unique: list[list[str]] = []
    for row in table.rows:
        key = "|".join(row)
        if key in seen:
            continue
        seen.add(key)
        unique.append(list(row))
    return ParsedTable(headers=list(table.headers), rows=unique)


def title_case(cell: str) -> str:
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), cell.lower())


def normalize_cell(header: str, cell: str) -> str:
    if "name" in header:
        cell = title_case(cell)
    if "state" in header and cell.strip().upper() in US_STATES:
        cell = cell.strip().upper()
    return cell.strip()


def normalize(table: ParsedTable) -> ParsedTable:
    return _map_cells(table, normalize_cell)
