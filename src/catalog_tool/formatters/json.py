"""JSON formatter for QueryResult output."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from catalog_tool.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from catalog_tool.core.models import QueryResult


class JSONFormatter:
    def __init__(self, compact: bool = False) -> None:
        self.compact = compact

    def format(self, result: QueryResult) -> Iterator[str]:
        if self.compact:
            yield json.dumps(result.records, default=str)
        else:
            yield json.dumps(result.records, indent=2, default=str)


registry.register("json", JSONFormatter)
