"""Request body resolution for Catalog Tool.

Resolves the JSON body for create, update and rpc. The inline --data
flag wins over a file path, and a file path wins over stdin.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from catalog_tool.core.exceptions import InputError


def read_body_text(inline: str | None, file_path: str | None) -> str | None:
    """Return raw body text, or None when no source is available.

    Precedence: inline > file > stdin.
    """
    if inline is not None:
        return inline

    if file_path is not None:
        p = Path(file_path)
        if not p.exists():
            msg = (
                f"Body file not found: {file_path}\n"
                "Use --data for inline JSON or pipe it via stdin."
            )
            raise InputError(msg)
        return p.read_text()

    if not sys.stdin.isatty():
        return sys.stdin.read()

    return None


def resolve_body(
    inline: str | None,
    file_path: str | None,
    *,
    allow_list: bool = False,
) -> Any:
    """Resolve and decode a JSON record (or list of records when allowed)."""
    text = read_body_text(inline, file_path)
    if text is None or not text.strip():
        msg = "No request body provided. Use --data, a file path, or pipe JSON to stdin."
        raise InputError(msg)

    try:
        body = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON body: {e}"
        raise InputError(msg) from e

    if isinstance(body, dict):
        return body
    if allow_list and isinstance(body, list) and all(isinstance(b, dict) for b in body):
        return body
    expected = "a JSON object or a list of objects" if allow_list else "a JSON object"
    msg = f"Invalid request body: expected {expected}"
    raise InputError(msg)


def parse_assignments(pairs: list[str]) -> dict[str, Any]:
    """Parse ``key=value`` pairs; values that parse as JSON keep their type."""
    result: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            msg = f"Invalid argument {pair!r}. Expected key=value"
            raise InputError(msg)
        try:
            result[key] = json.loads(raw)
        except json.JSONDecodeError:
            result[key] = raw
    return result
