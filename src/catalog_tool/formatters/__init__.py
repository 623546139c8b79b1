"""Output formatters for Catalog Tool."""

from catalog_tool.formatters.base import Formatter, FormatterRegistry, registry
from catalog_tool.formatters.csv import CSVFormatter
from catalog_tool.formatters.json import JSONFormatter
from catalog_tool.formatters.table import TableFormatter
