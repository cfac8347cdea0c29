"""Plain-text pretty printing of JSON values with sorted object keys."""

from __future__ import annotations

import json
import math
from decimal import Decimal
from typing import Any


def _format_float(number: float) -> str:
    if not math.isfinite(number):
        raise ValueError(f"JSON cannot represent {number!r}")
    if number == 0:
        return "-0.0" if math.copysign(1.0, number) < 0 else "0.0"

    sign = "-" if number < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(number))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    stripped = digits.rstrip("0")
    exponent += len(digits) - len(stripped)
    digits = stripped

    length = len(digits)
    point = length + exponent

    if exponent >= 0 and point <= 21:
        body = digits + "0" * exponent + ".0"
    elif 0 < point <= 21:
        body = digits[:point] + "." + digits[point:]
    elif -6 < point <= 0:
        body = "0." + "0" * (-point) + digits
    elif length == 1:
        body = f"{digits}e{point - 1}"
    else:
        body = f"{digits[0]}.{digits[1:]}e{point - 1}"
    return sign + body


def _render(value: Any, indent: int, space: int) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)

    inner_indent = indent + space
    inner_pad = " " * inner_indent
    closing_pad = " " * indent

    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        items = [inner_pad + _render(item, inner_indent, space) for item in value]
        return "[\n" + ",\n".join(items) + "\n" + closing_pad + "]"

    if isinstance(value, dict):
        if not value:
            return "{}"
        entries = [
            f"{inner_pad}{json.dumps(key, ensure_ascii=False)}: {_render(value[key], inner_indent, space)}"
            for key in sorted(value)
        ]
        return "{\n" + ",\n".join(entries) + "\n" + closing_pad + "}"

    raise TypeError(f"value of type {type(value).__name__} is not JSON")


def pretty(value: Any, space: int = 2) -> str:
    """Render a JSON value over several lines, indenting by ``space`` per level."""
    return _render(value, 0, space)