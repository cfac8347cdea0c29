"""Decoding of base64 function-call arguments into a readable form."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ArgsKind(Enum):
    """What a decoded argument blob turned out to be."""

    JSON = "json"
    TEXT = "text"
    BYTES = "bytes"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class DecodedArgs:
    """Result of decoding arguments.

    ``value`` holds the parsed JSON for JSON, the string for TEXT and the
    message for ERROR. ``hex`` and ``preview`` are set for BYTES.
    """

    kind: ArgsKind
    value: Any = None
    hex: str = ""
    preview: str = ""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def _try_json(data: bytes) -> tuple[bool, Any]:
    try:
        return True, json.loads(data.decode("utf-8"), parse_constant=_reject_constant)
    except ValueError:
        return False, None


def decode_args_base64(b64: str | None, preview_len: int) -> DecodedArgs:
    """Decode base64 arguments as JSON, printable text, or a hex/ASCII preview."""
    if b64 is None or not b64.strip():
        return DecodedArgs(ArgsKind.EMPTY)

    try:
        data = base64.b64decode(b64, validate=True)
    except (binascii.Error, ValueError) as exc:
        return DecodedArgs(ArgsKind.ERROR, value=f"base64: {exc}")

    if not data:
        return DecodedArgs(ArgsKind.EMPTY)

    ok, parsed = _try_json(data)
    if ok:
        return DecodedArgs(ArgsKind.JSON, value=parsed)

    text = data.decode("utf-8", errors="replace")
    printable = sum(1 for ch in text if " " <= ch <= "~")
    if printable / max(len(text.encode("utf-8")), 1) > 0.85:
        return DecodedArgs(ArgsKind.TEXT, value=text)

    head = data[: max(preview_len, 0)]
    preview = "".join(chr(b) if 0x20 <= b <= 0x7E else "." for b in head)
    return DecodedArgs(ArgsKind.BYTES, hex=head.hex(), preview=preview)