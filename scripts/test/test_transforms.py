"""Tests for the per-cell field transforms and the text-level passes."""

import pytest

from uni_agent.processing import (
    PassPath,
    clean,
    deduplicate,
    normalize,
    parse_csv,
    run_pass,
    run_stages,
    transform,
    validate,
)
from uni_agent.processing.transforms import (
    INVALID_AGE,
    INVALID_AMOUNT,
    INVALID_DATE,
    INVALID_EMAIL,
    INVALID_PHONE,
    normalize_date,
)

MESSY = parse_csv(
    "name,email,notes\n"
    "  John   Smith ,JOHN@EXAMPLE.COM,N/A\n"
    "Jane,null,  two   spaces \n"
    "Bob,--,TBD"
)


# === Clean ===

def test_clean_replaces_null_sentinels_and_collapses_whitespace():
    cleaned = clean(MESSY)

    assert cleaned.rows[0] == ["John Smith", "JOHN@EXAMPLE.COM", "Unknown"]
    assert cleaned.rows[1] == ["Jane", "Unknown", "two spaces"]
    assert cleaned.rows[2] == ["Bob", "Unknown", "Unknown"]


def test_clean_is_idempotent():
    once = clean(MESSY)
    assert clean(once) == once


def test_clean_returns_new_table():
    clean(MESSY)
    assert MESSY.rows[2] == ["Bob", "--", "TBD"]


# === Transform ===

def test_dates_are_rewritten_regardless_of_header():
    assert normalize_date("03/15/2024") == "2024-03-15"
    assert normalize_date("15-03-2024") == "2024-03-15"
    assert normalize_date("2024/3/5") == "2024-03-05"


def test_date_rewrite_rejected_for_impossible_month_or_day():
    assert normalize_date("13/45/2024") == "13/45/2024"


def test_transform_uses_header_hints():
    table = parse_csv(
        "email,phone,salary,start_date\n"
        "JOHN@EXAMPLE.COM,(555) 123-4567,\"$75,000\",1/2/2023"
    )

    assert transform(table).rows[0] == [
        "john@example.com",
        "555-123-4567",
        "75000",
        "2023-01-02",
    ]


def test_email_outside_email_column_keeps_case():
    table = parse_csv("contact\nJOHN@EXAMPLE.COM")
    assert transform(table).rows[0] == ["JOHN@EXAMPLE.COM"]


# === Validate ===

def test_out_of_range_age_is_tagged_and_valid_row_untouched():
    table = parse_csv("name,age\nJohn,200\nJane,30")
    validated = validate(table)

    assert validated.rows[0] == ["John", INVALID_AGE]
    assert validated.rows[1] == ["Jane", "30"]


@pytest.mark.parametrize("age", ["²", "3³", "٣٠", "-5", "30.5", "thirty"])
def test_non_ascii_or_non_integer_age_is_tagged(age):
    validated = validate(parse_csv(f"name,age\nJohn,{age}"))

    assert validated.rows[0] == ["John", INVALID_AGE]


def test_validate_tags_each_failed_field():
    table = parse_csv(
        "email,age,birth_date,phone,amount\n"
        "not-an-email,abc,2024-02-30,123-456-7890,-5\n"
        "a@b.co,42,2024-02-29,555-123-4567,1500.50"
    )
    validated = validate(table)

    assert validated.rows[0] == [INVALID_EMAIL, INVALID_AGE, INVALID_DATE, INVALID_PHONE, INVALID_AMOUNT]
    assert validated.rows[1] == ["a@b.co", "42", "2024-02-29", "555-123-4567", "1500.50"]


def test_unknown_is_exempt_from_validation():
    table = parse_csv("email,age\nUnknown,Unknown")
    assert validate(table).rows[0] == ["Unknown", "Unknown"]


def test_age_check_ignores_headers_that_merely_contain_age():
    table = parse_csv("page,usage\nabc,xyz")
    assert validate(table).rows[0] == ["abc", "xyz"]


def test_validate_preserves_row_lengths():
    table = parse_csv("name,age,email\nJohn,200,bad\nJane\nBob,1,b@c.de,extra")
    validated = validate(table)

    assert [len(row) for row in validated.rows] == [len(row) for row in table.rows]


# === Deduplicate / Normalize ===

def test_deduplicate_keeps_first_occurrence_in_order():
    table = parse_csv("name,age\nJohn,30\nJane,25\nJohn,30\nBob,40\nJane,25")
    unique = deduplicate(table)

    assert unique.headers == ["name", "age"]
    assert unique.rows == [["John", "30"], ["Jane", "25"], ["Bob", "40"]]
    assert deduplicate(unique) == unique


def test_normalize_title_cases_names_and_upper_cases_states():
    table = parse_csv("full_name,state,city\njOHN smith,ca,boston\nJane,zz,Denver")
    normalized = normalize(table)

    assert normalized.rows[0] == ["John Smith", "CA", "boston"]
    assert normalized.rows[1] == ["Jane", "zz", "Denver"]


# === Text-level passes ===

def test_run_pass_reports_structured_path():
    result = run_pass("validate", "name,age\nJohn,200")

    assert result.path is PassPath.STRUCTURED
    assert result.row_count == 1
    assert result.to_dict() == {"data": "name,age\nJohn,[INVALID_AGE]", "path": "structured", "rowCount": 1}


def test_run_pass_falls_back_for_unparseable_text():
    result = run_pass("clean", "just   one line with N/A")

    assert result.path is PassPath.FALLBACK
    assert result.row_count is None
    assert result.data == "just one line with Unknown"


def test_transform_fallback_rewrites_dates_and_emails_in_raw_text():
    result = run_pass("transform", "Met JOHN@EXAMPLE.COM on 3/5/2024")

    assert result.path is PassPath.FALLBACK
    assert result.data == "Met john@example.com on 2024-03-05"


def test_run_stages_applies_selected_passes_in_order():
    data = "name,email,age\nJohn,JOHN@X.COM,N/A\nJane,bad,200"

    assert run_stages(data, cleaning=True, transformation=True, validation=True) == (
        "name,email,age\nJohn,john@x.com,Unknown\nJane,[INVALID_EMAIL],[INVALID_AGE]"
    )
    assert run_stages(data, cleaning=False, transformation=False, validation=False) == data
