"""Expand JSON documents that were serialized into string values."""

from __future__ import annotations

import json
from typing import Any


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def auto_parse_nested_json(value: Any, max_depth: int = 5, current_depth: int = 0) -> Any:
    """Recursively replace strings holding JSON objects or arrays with their parsed value.

    Recursion stops once ``current_depth`` reaches ``max_depth``; anything
    deeper is returned unchanged.
    """
    if current_depth >= max_depth:
        return value

    deeper = current_depth + 1

    if isinstance(value, list):
        return [auto_parse_nested_json(item, max_depth, deeper) for item in value]

    if isinstance(value, dict):
        return {key: auto_parse_nested_json(item, max_depth, deeper) for key, item in value.items()}

    if isinstance(value, str):
        trimmed = value.strip()
        if trimmed.startswith(("{", "[")) and trimmed.endswith(("}", "]")):
            try:
                parsed = json.loads(trimmed, parse_constant=_reject_constant)
            except ValueError:
                return value
            return auto_parse_nested_json(parsed, max_depth, deeper)
        return value

    return value