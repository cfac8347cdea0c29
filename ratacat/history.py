"""SQLite-backed history of blocks, transactions and jump marks, with query search."""

from __future__ import annotations

import contextlib
import json
import re
import sqlite3
import threading
from dataclasses import dataclass, field
from typing import Any

_SEARCH_LIMIT_CAP = 500
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_INT_RE = re.compile(r"[+-]?[0-9]+")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS blocks(
    height INTEGER PRIMARY KEY,
    hash   TEXT NOT NULL,
    ts_ms  INTEGER NOT NULL,
    tx_count INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS txs(
    hash     TEXT PRIMARY KEY,
    height   INTEGER NOT NULL,
    signer   TEXT,
    receiver TEXT,
    actions_json TEXT,
    raw_json TEXT,
    FOREIGN KEY(height) REFERENCES blocks(height) ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS idx_txs_signer   ON txs(signer);
CREATE INDEX IF NOT EXISTS idx_txs_receiver ON txs(receiver);
CREATE INDEX IF NOT EXISTS idx_txs_height   ON txs(height);
CREATE INDEX IF NOT EXISTS idx_txs_hash     ON txs(hash);
CREATE INDEX IF NOT EXISTS idx_blocks_height ON blocks(height);
CREATE TABLE IF NOT EXISTS marks(
    label    TEXT PRIMARY KEY,
    pane     INTEGER NOT NULL,
    height   INTEGER,
    tx       TEXT,
    when_ms  INTEGER NOT NULL,
    pinned   INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_marks_pinned ON marks(pinned) WHERE pinned = 1;
"""

_FREE_TEXT_EXPR = (
    "(LOWER(t.signer)||' '||LOWER(t.receiver)||' '||LOWER(t.hash)||' '||LOWER(t.actions_json)) LIKE ?"
)


@dataclass
class TxPersist:
    hash: str
    height: int
    signer: str | None = None
    receiver: str | None = None
    actions_json: str | None = None
    raw_json: str | None = None


@dataclass
class BlockPersist:
    height: int
    hash: str
    ts_ms: int
    txs: list[TxPersist] = field(default_factory=list)


@dataclass
class HistoryHit:
    hash: str
    height: int
    ts_ms: int
    signer: str | None
    receiver: str | None
    methods: str | None


@dataclass
class PersistedMark:
    label: str
    pane: int
    height: int | None
    tx: str | None
    when_ms: int
    pinned: bool = False


@dataclass
class SearchQuery:
    """A parsed search query: ``key:value`` filters plus free-text terms."""

    signer: list[str] = field(default_factory=list)
    receiver: list[str] = field(default_factory=list)
    acct: list[str] = field(default_factory=list)
    method: list[str] = field(default_factory=list)
    action: list[str] = field(default_factory=list)
    hash: list[str] = field(default_factory=list)
    from_height: int | None = None
    to_height: int | None = None
    free: list[str] = field(default_factory=list)


def _parse_i64(text: str) -> int | None:
    if not _INT_RE.fullmatch(text):
        return None
    number = int(text)
    return number if _I64_MIN <= number <= _I64_MAX else None


def parse_search_query(query: str) -> SearchQuery:
    """Split a query into filters (signer:, receiver:/rcv:, acct:/account:, method:,
    action:, hash:, from:, to:) and lower-cased free-text terms."""
    sq = SearchQuery()
    targets = {
        "signer": sq.signer,
        "receiver": sq.receiver,
        "rcv": sq.receiver,
        "acct": sq.acct,
        "account": sq.acct,
        "method": sq.method,
        "action": sq.action,
        "hash": sq.hash,
    }
    for token in query.split():
        key, sep, value = token.partition(":")
        if not sep:
            sq.free.append(token.lower())
            continue
        key = key.lower()
        value = value.lower()
        if key in targets:
            targets[key].append(value)
        elif key == "from":
            sq.from_height = _parse_i64(value)
        elif key == "to":
            sq.to_height = _parse_i64(value)
        else:
            sq.free.append(token.lower())
    return sq


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def summarize_methods(actions_json: str) -> str:
    """Comma-joined method names (or action type names) from an actions JSON array."""
    try:
        actions = json.loads(actions_json, parse_constant=_reject_constant)
    except ValueError:
        return ""
    if not isinstance(actions, list):
        return ""
    methods: list[str] = []
    for action in actions:
        if not isinstance(action, dict):
            continue
        if "FunctionCall" in action:
            call = action["FunctionCall"]
            if isinstance(call, dict) and isinstance(call.get("method_name"), str):
                methods.append(call["method_name"])
        elif action:
            methods.append(min(action))
    return ", ".join(methods)


def _build_search(sq: SearchQuery, limit: int) -> tuple[str, list[Any]]:
    sql = (
        "SELECT t.hash, t.height, b.ts_ms, t.signer, t.receiver, t.actions_json "
        "FROM txs t JOIN blocks b ON b.height = t.height"
    )
    clauses: list[str] = []
    params: list[Any] = []

    for account in sq.acct:
        clauses.append("(LOWER(t.signer) LIKE ? OR LOWER(t.receiver) LIKE ?)")
        pattern = f"%{account}%"
        params.extend((pattern, pattern))

    def any_of(expr: str, values: list[str], wrap: bool = True) -> None:
        if values:
            clauses.append("(" + " OR ".join([expr] * len(values)) + ")")
            params.extend(f"%{v}%" if wrap else v for v in values)

    any_of("LOWER(t.signer) LIKE ?", sq.signer)
    any_of("LOWER(t.receiver) LIKE ?", sq.receiver)
    any_of("LOWER(t.hash) = ?", sq.hash, wrap=False)

    if sq.from_height is not None:
        clauses.append("t.height >= ?")
        params.append(sq.from_height)
    if sq.to_height is not None:
        clauses.append("t.height <= ?")
        params.append(sq.to_height)

    any_of("LOWER(t.actions_json) LIKE ?", sq.method)
    any_of("LOWER(t.actions_json) LIKE ?", sq.action)

    if sq.free:
        clauses.append("(" + " AND ".join([_FREE_TEXT_EXPR] * len(sq.free)) + ")")
        params.extend(f"%{term}%" for term in sq.free)

    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    sql += " ORDER BY t.height DESC, t.hash LIMIT ?"
    params.append(min(max(limit, 0), _SEARCH_LIMIT_CAP))
    return sql, params


class History:
    """Persistent store of seen blocks, transactions and jump marks."""

    def __init__(self, db_path: str) -> None:
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(db_path, check_same_thread=False, isolation_level=None)
        try:
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA synchronous=NORMAL")
            self._conn.execute("PRAGMA busy_timeout=250")
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error:
            self._conn.close()
            raise

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> History:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def persist_block(self, block: BlockPersist) -> None:
        """Store a block and its transactions in one transaction, replacing earlier rows."""
        with self._lock:
            conn = self._conn
            conn.execute("BEGIN")
            try:
                conn.execute(
                    "INSERT OR REPLACE INTO blocks(height,hash,ts_ms,tx_count) VALUES (?,?,?,?)",
                    (block.height, block.hash, block.ts_ms, len(block.txs)),
                )
                conn.executemany(
                    "INSERT OR REPLACE INTO txs(hash,height,signer,receiver,actions_json,raw_json) "
                    "VALUES (?,?,?,?,?,?)",
                    [
                        (t.hash, block.height, t.signer, t.receiver, t.actions_json, t.raw_json)
                        for t in block.txs
                    ],
                )
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")

    def search(self, query: str, limit: int) -> list[HistoryHit]:
        """Find transactions matching the query, newest first, at most 500; [] on failure."""
        sql, params = _build_search(parse_search_query(query), limit)
        try:
            with self._lock:
                rows = self._conn.execute(sql, params).fetchall()
        except sqlite3.Error:
            return []
        return [
            HistoryHit(
                hash=tx_hash,
                height=height,
                ts_ms=ts_ms,
                signer=signer,
                receiver=receiver,
                methods=None if actions is None else summarize_methods(actions),
            )
            for tx_hash, height, ts_ms, signer, receiver, actions in rows
            if isinstance(tx_hash, str)
        ]

    def get_tx(self, tx_hash: str) -> str | None:
        """Raw JSON stored for a transaction hash, or None."""
        try:
            with self._lock:
                row = self._conn.execute("SELECT raw_json FROM txs WHERE hash = ?", (tx_hash,)).fetchone()
        except sqlite3.Error:
            return None
        return None if row is None else row[0]

    def list_marks(self) -> list[PersistedMark]:
        """All stored marks, most recent first; [] on failure."""
        try:
            with self._lock:
                rows = self._conn.execute(
                    "SELECT label, pane, height, tx, when_ms, pinned FROM marks ORDER BY when_ms DESC"
                ).fetchall()
        except sqlite3.Error:
            return []
        return [
            PersistedMark(label=label, pane=pane, height=height, tx=tx, when_ms=when_ms, pinned=pinned != 0)
            for label, pane, height, tx, when_ms, pinned in rows
        ]

    def _write(self, sql: str, params: tuple[Any, ...]) -> None:
        with contextlib.suppress(sqlite3.Error), self._lock:
            self._conn.execute(sql, params)

    def put_mark(self, mark: PersistedMark) -> None:
        self._write(
            "INSERT OR REPLACE INTO marks(label,pane,height,tx,when_ms,pinned) VALUES (?,?,?,?,?,?)",
            (mark.label, mark.pane, mark.height, mark.tx, mark.when_ms, int(mark.pinned)),
        )

    def del_mark(self, label: str) -> None:
        self._write("DELETE FROM marks WHERE label = ?", (label,))

    def set_mark_pinned(self, label: str, pinned: bool) -> None:
        self._write("UPDATE marks SET pinned = ? WHERE label = ?", (int(pinned), label))

    def clear_marks(self) -> None:
        self._write("DELETE FROM marks", ())