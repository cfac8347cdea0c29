"""Domain model for projects and todo items."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, IntEnum
from functools import total_ordering


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@total_ordering
class TodoStatus(Enum):
    """Lifecycle state of a todo, ordered from Pending to Archived."""

    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TodoStatus):
            return NotImplemented
        members = list(TodoStatus)
        return members.index(self) < members.index(other)

    def __str__(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    TodoStatus.PENDING: "Pending",
    TodoStatus.IN_PROGRESS: "In Progress",
    TodoStatus.COMPLETED: "Completed",
    TodoStatus.ARCHIVED: "Archived",
}


class Priority(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    def __str__(self) -> str:
        return self.name.capitalize()


class Color(Enum):
    RED = "Red"
    ORANGE = "Orange"
    YELLOW = "Yellow"
    GREEN = "Green"
    BLUE = "Blue"
    PURPLE = "Purple"
    PINK = "Pink"
    GRAY = "Gray"


class SortMode(Enum):
    PRIORITY = "Priority"
    DUE_DATE = "Due Date"
    CREATED = "Created"
    ALPHABETICAL = "A-Z"
    STATUS = "Status"

    def next(self) -> SortMode:
        """The following sort mode, wrapping from the last back to the first."""
        members = list(SortMode)
        return members[(members.index(self) + 1) % len(members)]

    def __str__(self) -> str:
        return self.value


@dataclass
class Project:
    id: uuid.UUID
    name: str
    color: Color
    created_at: datetime = field(default_factory=_utc_now)
    todo_count: int = 0
    completed_count: int = 0

    @classmethod
    def create(cls, name: str, color: Color) -> Project:
        """A new empty project with a fresh id, created now."""
        return cls(id=uuid.uuid4(), name=name, color=color)

    def progress_percentage(self) -> float:
        if self.todo_count == 0:
            return 0.0
        return self.completed_count / self.todo_count * 100.0


@dataclass
class Todo:
    id: uuid.UUID
    project_id: uuid.UUID
    title: str
    description: str = ""
    status: TodoStatus = TodoStatus.PENDING
    priority: Priority = Priority.MEDIUM
    tags: list[str] = field(default_factory=list)
    due_date: datetime | None = None
    created_at: datetime = field(default_factory=_utc_now)
    completed_at: datetime | None = None
    parent_id: uuid.UUID | None = None

    @classmethod
    def create(cls, project_id: uuid.UUID, title: str) -> Todo:
        """A new pending, medium-priority todo with a fresh id."""
        return cls(id=uuid.uuid4(), project_id=project_id, title=title)

    def toggle_complete(self) -> None:
        if self.status is TodoStatus.COMPLETED:
            self.status = TodoStatus.PENDING
            self.completed_at = None
        else:
            self.status = TodoStatus.COMPLETED
            self.completed_at = _utc_now()

    def is_overdue(self) -> bool:
        if self.due_date is None:
            return False
        return self.due_date < _utc_now() and self.status is not TodoStatus.COMPLETED

    def status_icon(self) -> str:
        return {
            TodoStatus.PENDING: "[ ]",
            TodoStatus.IN_PROGRESS: "[~]",
            TodoStatus.COMPLETED: "[✓]",
            TodoStatus.ARCHIVED: "[×]",
        }[self.status]

    def priority_icon(self) -> str:
        return {
            Priority.CRITICAL: "🔴",
            Priority.HIGH: "🟠",
            Priority.MEDIUM: "🟡",
            Priority.LOW: "🟢",
        }[self.priority]