"""SQLite persistence for projects, todos and their tags."""

from __future__ import annotations

import json
import os
import re
import sqlite3
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .models import Color, Priority, Project, Todo, TodoStatus

_RFC3339_RE = re.compile(r"^(.*?\d{2}:\d{2}:\d{2})(?:\.(\d+))?(.*)$")

_TODO_COLUMNS = (
    "id, project_id, title, description, status, priority, "
    "due_date, created_at, completed_at, parent_id"
)


def default_db_path() -> Path:
    """Location of the todo database in the user's local data directory."""
    home = Path.home()
    if sys.platform == "win32":
        base = os.environ.get("LOCALAPPDATA")
        data_dir = Path(base) if base else None
    elif sys.platform == "darwin":
        data_dir = home / "Library" / "Application Support"
    else:
        xdg = os.environ.get("XDG_DATA_HOME")
        data_dir = Path(xdg) if xdg and Path(xdg).is_absolute() else home / ".local" / "share"
    if data_dir is None:
        data_dir = Path(".")
    return data_dir / "ratacat" / "todos.db"


def _to_rfc3339(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat()


def _parse_rfc3339(text: str) -> datetime:
    value = text.strip()
    if value[-1:] in ("Z", "z"):
        value = value[:-1] + "+00:00"
    match = _RFC3339_RE.match(value)
    if match is None:
        raise ValueError(f"invalid RFC 3339 timestamp: {text!r}")
    head, fraction, tail = match.groups()
    if fraction is not None:
        value = f"{head}.{(fraction + '000000')[:6]}{tail}"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp without offset: {text!r}")
    return parsed.astimezone(timezone.utc)


def _optional_datetime(text: str | None) -> datetime | None:
    if text is None:
        return None
    try:
        return _parse_rfc3339(text)
    except ValueError:
        return None


def _optional_uuid(text: str | None) -> uuid.UUID | None:
    if text is None:
        return None
    try:
        return uuid.UUID(text)
    except ValueError:
        return None


def _status(name: str) -> TodoStatus:
    try:
        return TodoStatus(name)
    except ValueError:
        return TodoStatus.PENDING


def _priority(level: int) -> Priority:
    try:
        return Priority(level)
    except ValueError:
        return Priority.MEDIUM


def _todo_from_row(row: tuple[Any, ...]) -> Todo:
    (todo_id, project_id, title, description, status, priority,
     due_date, created_at, completed_at, parent_id) = row
    return Todo(
        id=uuid.UUID(todo_id),
        project_id=uuid.UUID(project_id),
        title=title,
        description=description,
        status=_status(status),
        priority=_priority(priority),
        tags=[],
        due_date=_optional_datetime(due_date),
        created_at=_parse_rfc3339(created_at),
        completed_at=_optional_datetime(completed_at),
        parent_id=_optional_uuid(parent_id),
    )


class Storage:
    """Todo database; creates the schema and an "Inbox" project on first use."""

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        db_path = Path(path) if path is not None else default_db_path()
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(db_path)
        try:
            self._init_db()
        except BaseException:
            self._conn.close()
            raise

    def _init_db(self) -> None:
        with self._conn:
            self._conn.execute(
                """CREATE TABLE IF NOT EXISTS projects (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    color TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )"""
            )
            self._conn.execute(
                """CREATE TABLE IF NOT EXISTS todos (
                    id TEXT PRIMARY KEY,
                    project_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT,
                    status TEXT NOT NULL,
                    priority INTEGER NOT NULL,
                    due_date TEXT,
                    created_at TEXT NOT NULL,
                    completed_at TEXT,
                    parent_id TEXT,
                    FOREIGN KEY (project_id) REFERENCES projects(id)
                )"""
            )
            self._conn.execute(
                """CREATE TABLE IF NOT EXISTS tags (
                    todo_id TEXT NOT NULL,
                    tag TEXT NOT NULL,
                    PRIMARY KEY (todo_id, tag),
                    FOREIGN KEY (todo_id) REFERENCES todos(id) ON DELETE CASCADE
                )"""
            )
        (count,) = self._conn.execute("SELECT COUNT(*) FROM projects").fetchone()
        if count == 0:
            self.save_project(Project.create("Inbox", Color.BLUE))

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> Storage:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def save_project(self, project: Project) -> None:
        with self._conn:
            self._conn.execute(
                "INSERT OR REPLACE INTO projects (id, name, color, created_at) VALUES (?1, ?2, ?3, ?4)",
                (
                    str(project.id),
                    project.name,
                    json.dumps(project.color.value),
                    _to_rfc3339(project.created_at),
                ),
            )

    def get_projects(self) -> list[Project]:
        """All projects in creation order, with their todo and completed counts."""
        rows = self._conn.execute(
            """SELECT p.id, p.name, p.color, p.created_at,
                      COUNT(CASE WHEN t.id IS NOT NULL THEN 1 END) as todo_count,
                      COUNT(CASE WHEN t.status = 'Completed' THEN 1 END) as completed_count
               FROM projects p
               LEFT JOIN todos t ON p.id = t.project_id
               GROUP BY p.id, p.name, p.color, p.created_at
               ORDER BY p.created_at"""
        ).fetchall()
        return [
            Project(
                id=uuid.UUID(pid),
                name=name,
                color=Color(json.loads(color)),
                created_at=_parse_rfc3339(created_at),
                todo_count=todo_count,
                completed_count=completed_count,
            )
            for pid, name, color, created_at, todo_count, completed_count in rows
        ]

    def delete_project(self, project_id: uuid.UUID) -> None:
        """Delete a project together with its todos and their tags."""
        key = str(project_id)
        with self._conn:
            self._conn.execute(
                "DELETE FROM tags WHERE todo_id IN (SELECT id FROM todos WHERE project_id = ?1)", (key,)
            )
            self._conn.execute("DELETE FROM todos WHERE project_id = ?1", (key,))
            self._conn.execute("DELETE FROM projects WHERE id = ?1", (key,))

    def save_todo(self, todo: Todo) -> None:
        """Insert or replace a todo and replace its tags."""
        key = str(todo.id)
        with self._conn:
            self._conn.execute(
                f"INSERT OR REPLACE INTO todos ({_TODO_COLUMNS}) "
                "VALUES (?1, ?2, ?3, ?4, ?5, ?6, ?7, ?8, ?9, ?10)",
                (
                    key,
                    str(todo.project_id),
                    todo.title,
                    todo.description,
                    todo.status.value,
                    int(todo.priority),
                    None if todo.due_date is None else _to_rfc3339(todo.due_date),
                    _to_rfc3339(todo.created_at),
                    None if todo.completed_at is None else _to_rfc3339(todo.completed_at),
                    None if todo.parent_id is None else str(todo.parent_id),
                ),
            )
            self._conn.execute("DELETE FROM tags WHERE todo_id = ?1", (key,))
            self._conn.executemany(
                "INSERT INTO tags (todo_id, tag) VALUES (?1, ?2)", [(key, tag) for tag in todo.tags]
            )

    def get_todos_by_project(self, project_id: uuid.UUID) -> list[Todo]:
        """Todos of a project, each with its tags."""
        rows = self._conn.execute(
            f"SELECT {_TODO_COLUMNS} FROM todos WHERE project_id = ?1", (str(project_id),)
        ).fetchall()
        todos = [_todo_from_row(row) for row in rows]
        for todo in todos:
            todo.tags = [
                tag
                for (tag,) in self._conn.execute(
                    "SELECT tag FROM tags WHERE todo_id = ?1", (str(todo.id),)
                )
            ]
        return todos

    def delete_todo(self, todo_id: uuid.UUID) -> None:
        key = str(todo_id)
        with self._conn:
            self._conn.execute("DELETE FROM tags WHERE todo_id = ?1", (key,))
            self._conn.execute("DELETE FROM todos WHERE id = ?1", (key,))

    def archive_completed(self, project_id: uuid.UUID) -> int:
        """Archive a project's completed todos; return how many were changed."""
        with self._conn:
            cursor = self._conn.execute(
                "UPDATE todos SET status = 'Archived' WHERE project_id = ?1 AND status = 'Completed'",
                (str(project_id),),
            )
        return cursor.rowcount

    def search_todos(self, query: str) -> list[Todo]:
        """Todos whose title, description or a tag contains the query (tags not loaded)."""
        pattern = f"%{query}%"
        columns = ", ".join(f"t.{c.strip()}" for c in _TODO_COLUMNS.split(","))
        rows = self._conn.execute(
            f"""SELECT DISTINCT {columns}
                FROM todos t
                LEFT JOIN tags tg ON t.id = tg.todo_id
                WHERE t.title LIKE ?1 OR t.description LIKE ?1 OR tg.tag LIKE ?1""",
            (pattern,),
        ).fetchall()
        return [_todo_from_row(row) for row in rows]