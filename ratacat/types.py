"""Data types shared across the dashboard: stream payloads, blocks, transactions, events."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Union

from .near_args import DecodedArgs

_U64_MAX = 2**64 - 1


@dataclass
class TxAction:
    type: str
    method: str | None = None


@dataclass
class TxSummary:
    hash: str
    signer: str | None = None
    receiver: str | None = None
    actions: list[TxAction] = field(default_factory=list)


@dataclass(frozen=True)
class BlockPayload:
    """Announcement of a new block height."""

    data: int


@dataclass
class TxPayload:
    """A transaction summary pushed by the stream."""

    identifier: str | None = None
    data: TxSummary | None = None


WsPayload = Union[BlockPayload, TxPayload]


@dataclass
class TxLite:
    hash: str
    signer_id: str | None = None
    receiver_id: str | None = None
    actions: list[ActionSummary] | None = None
    nonce: int | None = None


@dataclass
class BlockRow:
    height: int
    hash: str
    timestamp: int
    tx_count: int
    when: str
    transactions: list[TxLite] = field(default_factory=list)


@dataclass(frozen=True)
class CreateAccount:
    pass


@dataclass(frozen=True)
class DeployContract:
    code_len: int


@dataclass(frozen=True)
class FunctionCall:
    method_name: str
    args_base64: str
    args_decoded: DecodedArgs
    gas: int
    deposit: int


@dataclass(frozen=True)
class Transfer:
    deposit: int


@dataclass(frozen=True)
class Stake:
    stake: int
    public_key: str


@dataclass(frozen=True)
class AddKey:
    public_key: str
    access_key: str


@dataclass(frozen=True)
class DeleteKey:
    public_key: str


@dataclass(frozen=True)
class DeleteAccount:
    beneficiary_id: str


@dataclass(frozen=True)
class Delegate:
    sender_id: str
    receiver_id: str
    actions: tuple[ActionSummary, ...] = ()


ActionSummary = Union[
    CreateAccount,
    DeployContract,
    FunctionCall,
    Transfer,
    Stake,
    AddKey,
    DeleteKey,
    DeleteAccount,
    Delegate,
]


@dataclass
class TxDetailed:
    """Full transaction details."""

    hash: str
    signer_id: str
    receiver_id: str
    actions: list[ActionSummary]
    nonce: int
    public_key: str
    raw_transaction: bytes | None = None


@dataclass(frozen=True)
class FromWs:
    payload: WsPayload


@dataclass(frozen=True)
class NewBlock:
    block: BlockRow


@dataclass(frozen=True)
class Quit:
    pass


AppEvent = Union[FromWs, NewBlock, Quit]


def _required_str(obj: dict[str, Any], key: str) -> str:
    if key not in obj:
        raise ValueError(f"missing field {key!r}")
    value = obj[key]
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _optional_str(obj: dict[str, Any], key: str) -> str | None:
    value = obj.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string or null")
    return value


def _u64(obj: dict[str, Any], key: str) -> int:
    if key not in obj:
        raise ValueError(f"missing field {key!r}")
    value = obj[key]
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U64_MAX:
        raise ValueError(f"field {key!r} must be an unsigned 64-bit integer")
    return value


def _object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be an object")
    return value


def _tx_action(value: Any) -> TxAction:
    obj = _object(value, "action")
    return TxAction(type=_required_str(obj, "type"), method=_optional_str(obj, "method"))


def _tx_summary(value: Any) -> TxSummary:
    obj = _object(value, "transaction summary")
    if "actions" not in obj:
        raise ValueError("missing field 'actions'")
    actions = obj["actions"]
    if not isinstance(actions, list):
        raise ValueError("field 'actions' must be an array")
    return TxSummary(
        hash=_required_str(obj, "hash"),
        signer=_optional_str(obj, "signer"),
        receiver=_optional_str(obj, "receiver"),
        actions=[_tx_action(a) for a in actions],
    )


def parse_ws_payload(text: str | bytes) -> WsPayload:
    """Parse a stream message tagged by its ``type`` field; raise ValueError if malformed."""
    obj = _object(json.loads(text), "payload")
    kind = obj.get("type")
    if kind == "block":
        return BlockPayload(data=_u64(obj, "data"))
    if kind == "tx":
        data = obj.get("data")
        return TxPayload(
            identifier=_optional_str(obj, "identifier"),
            data=None if data is None else _tx_summary(data),
        )
    raise ValueError(f"unknown payload type: {kind!r}")


def _summary_to_obj(summary: TxSummary) -> dict[str, Any]:
    return {
        "hash": summary.hash,
        "signer": summary.signer,
        "receiver": summary.receiver,
        "actions": [{"type": a.type, "method": a.method} for a in summary.actions],
    }


def ws_payload_to_json(payload: WsPayload) -> str:
    """Serialize a payload to compact JSON with the ``type`` tag first."""
    if isinstance(payload, BlockPayload):
        obj: dict[str, Any] = {"type": "block", "data": payload.data}
    elif isinstance(payload, TxPayload):
        obj = {
            "type": "tx",
            "identifier": payload.identifier,
            "data": None if payload.data is None else _summary_to_obj(payload.data),
        }
    else:
        raise TypeError(f"not a stream payload: {type(payload).__name__}")
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)