"""Catalog Tool - client and CLI for a PostgREST library catalog."""

from catalog_tool.__about__ import __version__

__all__ = ["__version__"]
