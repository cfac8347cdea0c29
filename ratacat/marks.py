"""Jump marks: labelled bookmarks of a pane position, persisted through History."""

from __future__ import annotations

import time
from dataclasses import dataclass

from .history import History, PersistedMark

LABELS = tuple("123456789abcdefghijklmnopqrstuvwxyz")


@dataclass
class Mark:
    label: str
    pane: int
    height: int | None
    tx_hash: str | None
    when_ms: int
    pinned: bool = False


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class JumpMarks:
    """In-memory set of marks with write-through persistence and a cycling cursor."""

    def __init__(self, history: History) -> None:
        self._marks: list[Mark] = []
        self._cursor = 0
        self._history = history

    def load_from_persistence(self) -> None:
        self._marks = [
            Mark(p.label, p.pane, p.height, p.tx, p.when_ms, p.pinned) for p in self._history.list_marks()
        ]

    def list(self) -> list[Mark]:
        """Marks sorted newest first."""
        return sorted(self._marks, key=lambda m: m.when_ms, reverse=True)

    def _find(self, label: str) -> Mark | None:
        return next((m for m in self._marks if m.label == label), None)

    def get_by_label(self, label: str) -> Mark | None:
        return self._find(label)

    def next_auto_label(self) -> str:
        """First free label; if all are taken, the label of the oldest mark."""
        used = {m.label for m in self._marks}
        free = next((label for label in LABELS if label not in used), None)
        if free is not None:
            return free
        if not self._marks:
            return "a"
        return min(self._marks, key=lambda m: m.when_ms).label

    def add_or_replace(self, label: str, pane: int, height: int | None, tx_hash: str | None) -> None:
        """Set a mark, keeping the pinned state of a mark it replaces."""
        now = _now_ms()
        existing = self._find(label)
        pinned = existing.pinned if existing is not None else False
        mark = Mark(label, pane, height, tx_hash, now, pinned)
        if existing is not None:
            self._marks[self._marks.index(existing)] = mark
        else:
            self._marks.append(mark)
        self._cursor = 0
        self._history.put_mark(PersistedMark(label, pane, height, tx_hash, now, pinned))

    def remove_by_label(self, label: str) -> None:
        self._marks = [m for m in self._marks if m.label != label]
        if self._cursor >= len(self._marks) and self._cursor > 0:
            self._cursor = max(len(self._marks) - 1, 0)
        self._history.del_mark(label)

    def next(self) -> Mark | None:
        """Advance the cursor through the newest-first list, wrapping around."""
        ordered = self.list()
        if not ordered:
            return None
        self._cursor = (self._cursor + 1) % len(ordered)
        return ordered[self._cursor]

    def prev(self) -> Mark | None:
        """Move the cursor back through the newest-first list, wrapping around."""
        ordered = self.list()
        if not ordered:
            return None
        self._cursor = len(ordered) - 1 if self._cursor == 0 else self._cursor - 1
        return ordered[self._cursor]

    def find_by_context(self, pane: int, height: int | None, tx_hash: str | None) -> str | None:
        """Label of a mark at this context: by tx hash, else height and pane, else pane alone."""

        def matches(m: Mark) -> bool:
            if tx_hash is not None:
                return m.tx_hash == tx_hash
            if height is not None:
                return m.height == height and m.pane == pane and m.tx_hash is None
            return m.pane == pane and m.height is None and m.tx_hash is None

        found = next((m for m in self._marks if matches(m)), None)
        return None if found is None else found.label

    def toggle_pin(self, label: str) -> None:
        mark = self._find(label)
        if mark is not None:
            mark.pinned = not mark.pinned
            self._history.set_mark_pinned(label, mark.pinned)

    def set_pinned(self, label: str, pinned: bool) -> None:
        mark = self._find(label)
        if mark is not None:
            mark.pinned = pinned
            self._history.set_mark_pinned(label, pinned)