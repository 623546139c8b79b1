"""Tests for CSVFormatter."""

import csv
from io import StringIO

import pytest

from catalog_tool.core.models import QueryResult
from catalog_tool.formatters.base import Formatter
from catalog_tool.formatters.csv import CSVFormatter


def _make_result(records=None):
    if records is None:
        records = [{"id": 1, "name": "alice"}, {"id": 2, "name": "bob"}]
    return QueryResult(records=records)


@pytest.mark.unit
def test_csv_formatter_implements_protocol():
    assert isinstance(CSVFormatter(), Formatter)


@pytest.mark.unit
def test_csv_formatter_outputs_header_and_data():
    lines = list(CSVFormatter().format(_make_result()))
    assert lines == ["id,name", "1,alice", "2,bob"]


@pytest.mark.unit
def test_csv_formatter_no_header():
    lines = list(CSVFormatter(no_header=True).format(_make_result()))
    assert lines == ["1,alice", "2,bob"]


@pytest.mark.unit
def test_csv_formatter_empty_result():
    assert list(CSVFormatter().format(_make_result([]))) == []


@pytest.mark.unit
def test_csv_formatter_missing_keys_and_nulls():
    records = [{"id": 1, "year": None}, {"id": 2, "title": "Emma"}]
    lines = list(CSVFormatter().format(_make_result(records)))
    assert lines == ["id,year,title", "1,,", "2,,Emma"]


@pytest.mark.unit
def test_csv_formatter_embedded_record_quoted():
    records = [{"id": 1, "author": {"name": "Austen, Jane"}}]
    lines = list(CSVFormatter().format(_make_result(records)))
    parsed = list(csv.reader(StringIO("\n".join(lines))))
    assert parsed[1] == ["1", '{"name":"Austen, Jane"}']
