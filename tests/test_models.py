import uuid
from datetime import datetime, timedelta, timezone

import pytest

from ratacat.models import Color, Priority, Project, SortMode, Todo, TodoStatus


def test_project_create_defaults():
    project = Project.create("Inbox", Color.BLUE)
    assert project.name == "Inbox"
    assert project.color is Color.BLUE
    assert project.todo_count == 0
    assert project.completed_count == 0
    assert project.created_at.tzinfo is not None
    assert isinstance(project.id, uuid.UUID)


def test_project_ids_are_unique():
    ids = {Project.create("a", Color.RED).id for _ in range(5)}
    assert len(ids) == 5


def test_progress_percentage_empty():
    assert Project.create("x", Color.RED).progress_percentage() == 0.0


def test_progress_percentage_all_done():
    project = Project.create("x", Color.RED)
    project.todo_count = 4
    project.completed_count = 4
    assert project.progress_percentage() == 100.0


def test_progress_percentage_partial_between_bounds():
    project = Project.create("x", Color.RED)
    project.todo_count = 3
    project.completed_count = 1
    assert 0.0 < project.progress_percentage() < 100.0


def test_todo_create_defaults():
    pid = uuid.uuid4()
    todo = Todo.create(pid, "write")
    assert todo.project_id == pid
    assert todo.title == "write"
    assert todo.description == ""
    assert todo.status is TodoStatus.PENDING
    assert todo.priority is Priority.MEDIUM
    assert todo.tags == []
    assert todo.due_date is None
    assert todo.completed_at is None
    assert todo.parent_id is None


def test_toggle_complete_round_trip():
    todo = Todo.create(uuid.uuid4(), "t")
    todo.toggle_complete()
    assert todo.status is TodoStatus.COMPLETED
    assert todo.completed_at is not None and todo.completed_at.tzinfo is not None
    todo.toggle_complete()
    assert todo.status is TodoStatus.PENDING
    assert todo.completed_at is None


def test_toggle_from_in_progress_completes():
    todo = Todo.create(uuid.uuid4(), "t")
    todo.status = TodoStatus.IN_PROGRESS
    todo.toggle_complete()
    assert todo.status is TodoStatus.COMPLETED


def test_is_overdue():
    todo = Todo.create(uuid.uuid4(), "t")
    assert todo.is_overdue() is False
    todo.due_date = datetime.now(timezone.utc) - timedelta(days=1)
    assert todo.is_overdue() is True
    todo.status = TodoStatus.COMPLETED
    assert todo.is_overdue() is False
    todo.status = TodoStatus.PENDING
    todo.due_date = datetime.now(timezone.utc) + timedelta(days=1)
    assert todo.is_overdue() is False


@pytest.mark.parametrize(
    "status, icon",
    [
        (TodoStatus.PENDING, "[ ]"),
        (TodoStatus.IN_PROGRESS, "[~]"),
        (TodoStatus.COMPLETED, "[✓]"),
        (TodoStatus.ARCHIVED, "[×]"),
    ],
)
def test_status_icon(status, icon):
    todo = Todo.create(uuid.uuid4(), "t")
    todo.status = status
    assert todo.status_icon() == icon


@pytest.mark.parametrize(
    "priority, icon",
    [
        (Priority.CRITICAL, "🔴"),
        (Priority.HIGH, "🟠"),
        (Priority.MEDIUM, "🟡"),
        (Priority.LOW, "🟢"),
    ],
)
def test_priority_icon(priority, icon):
    todo = Todo.create(uuid.uuid4(), "t")
    todo.priority = priority
    assert todo.priority_icon() == icon


def test_display_strings_of_new_todo():
    todo = Todo.create(uuid.uuid4(), "t")
    assert str(todo.status) == "Pending"
    assert str(todo.priority) == "Medium"
    todo.toggle_complete()
    assert str(todo.status) == "Completed"


def test_display_strings_of_sort_modes():
    assert str(SortMode.PRIORITY.next()) == "Due Date"
    assert str(SortMode.CREATED.next()) == "A-Z"
    assert str(SortMode.DUE_DATE.next()) == "Created"
    assert str(SortMode.ALPHABETICAL.next()) == "Status"
    assert str(SortMode.STATUS.next()) == "Priority"


def test_todos_sort_by_priority_and_status():
    todos = []
    for priority in (Priority.CRITICAL, Priority.LOW, Priority.HIGH, Priority.MEDIUM):
        todo = Todo.create(uuid.uuid4(), str(priority))
        todo.priority = priority
        todos.append(todo)
    ordered = [t.title for t in sorted(todos, key=lambda t: t.priority)]
    assert ordered == ["Low", "Medium", "High", "Critical"]

    done = Todo.create(uuid.uuid4(), "done")
    done.toggle_complete()
    waiting = Todo.create(uuid.uuid4(), "waiting")
    assert [t.title for t in sorted([done, waiting], key=lambda t: t.status)] == ["waiting", "done"]


def test_sort_mode_next_sequence():
    assert SortMode.PRIORITY.next() is SortMode.DUE_DATE
    assert SortMode.DUE_DATE.next() is SortMode.CREATED
    assert SortMode.CREATED.next() is SortMode.ALPHABETICAL
    assert SortMode.ALPHABETICAL.next() is SortMode.STATUS
    assert SortMode.STATUS.next() is SortMode.PRIORITY


def test_sort_mode_cycle_returns_to_start():
    mode = SortMode.CREATED
    for _ in range(len(SortMode)):
        mode = mode.next()
    assert mode is SortMode.CREATED