"""CSV formatter for QueryResult output (RFC 4180 compliant)."""

from __future__ import annotations

import csv
from io import StringIO
from typing import TYPE_CHECKING

from catalog_tool.formatters.base import cell_text, registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from catalog_tool.core.models import QueryResult


def _write_row(values: list[str]) -> str:
    buf = StringIO()
    writer = csv.writer(buf)
    writer.writerow(values)
    return buf.getvalue().rstrip("\r\n")


class CSVFormatter:
    def __init__(self, no_header: bool = False) -> None:
        self.no_header = no_header

    def format(self, result: QueryResult) -> Iterator[str]:
        columns = result.columns()
        if not columns:
            return
        if not self.no_header:
            yield _write_row(columns)

        for record in result.records:
            yield _write_row([cell_text(record.get(col)) for col in columns])


registry.register("csv", CSVFormatter)
