"""Tests for quote-aware CSV parsing and reconstruction."""

import pytest

from uni_agent.exceptions import MalformedInputError
from uni_agent.processing import ParsedTable, parse_csv, parse_line, reconstruct_csv


def test_parse_lowercases_headers_and_splits_rows():
    table = parse_csv("Name,City\nJohn,Boston\nJane,Denver")

    assert table.headers == ["name", "city"]
    assert table.rows == [["John", "Boston"], ["Jane", "Denver"]]
    assert table.column_count == 2


def test_quoted_fields_keep_commas_and_escaped_quotes():
    assert parse_line('"Smith, John","He said ""hi""", 42 ') == [
        "Smith, John",
        'He said "hi"',
        "42",
    ]


def test_literal_backslash_n_counts_as_line_break():
    table = parse_csv("name,age\\nJohn,30\\nJane,25")
    assert table.rows == [["John", "30"], ["Jane", "25"]]


def test_blank_lines_and_crlf_are_ignored():
    table = parse_csv("name,age\r\n\r\nJohn,30\r\n   \nJane,25\n")
    assert table.rows == [["John", "30"], ["Jane", "25"]]


def test_short_rows_are_padded_and_long_rows_truncated():
    table = parse_csv("a,b,c\n1\n1,2,3,4,5")

    assert table.rows == [["1", "", ""], ["1", "2", "3"]]
    assert all(len(row) == len(table.headers) for row in table.rows)


@pytest.mark.parametrize("text", ["", "   \n  ", "name,age", "name,age\n\n"])
def test_fewer_than_two_lines_is_malformed(text):
    with pytest.raises(MalformedInputError):
        parse_csv(text)


def test_reconstruct_joins_header_first():
    assert reconstruct_csv(["name", "age"], [["John", "30"]]) == "name,age\nJohn,30"


@pytest.mark.parametrize(
    "headers,rows",
    [
        (["name", "city"], [["John", "Boston"], ["Jane", "Denver"]]),
        (["id"], [["1"], ["2"], ["3"]]),
        (["a", "b", "c"], [["x y", "", "z"]]),
    ],
)
def test_parse_inverts_reconstruct(headers, rows):
    assert parse_csv(reconstruct_csv(headers, rows)) == ParsedTable(headers, rows)


def test_text_round_trip_without_special_characters():
    text = "name,age,city\nJohn,30,Boston\nJane,25,Denver"
    assert parse_csv(text).to_text() == text
