"""
Transfer objects for the todo API.

Transfer objects are the wire representation of tasks and task lists,
decoupled from the persisted shape in :mod:`todo_app.models`. They are
immutable dataclasses with ``from_dict`` (parse a JSON body) and
``to_dict`` (render a JSON-safe dictionary) helpers.

Parsing only checks the *shape* of incoming values (types, enum
membership, date format). Business rules such as required titles or
default priorities live in :mod:`todo_app.services`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, TypeVar

from .exceptions import InvalidArgumentError
from .models import TaskPriority, TaskStatus

TITLE_MAX_LENGTH = 200

E = TypeVar("E", bound=Enum)


# -----------------------------------------------------------------------------
# Helper Functions
# -----------------------------------------------------------------------------

def ensure_utc(value: datetime) -> datetime:
    """Normalize datetimes to timezone-aware UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_utc_iso(value: datetime | None) -> str | None:
    """
    Convert datetime to an ISO-8601 UTC string.

    SQLite commonly returns naive datetime values even when timezone-aware
    columns are declared. For API contracts, always normalize to UTC.
    """
    if value is None:
        return None
    return ensure_utc(value).isoformat()


def parse_due_date(value: Any) -> datetime | None:
    """
    Parse an optional ISO-8601 date string into a UTC datetime.

    Args:
        value: ISO format date string, or None/empty.

    Returns:
        Timezone-aware UTC datetime or None.

    Raises:
        InvalidArgumentError: If the value is not an ISO-8601 string.
    """
    if value is None or value == "":
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return ensure_utc(parsed)
    except (ValueError, AttributeError, OverflowError):
        raise InvalidArgumentError(
            "Invalid dueDate format. Use ISO format (YYYY-MM-DDTHH:MM:SS)"
        ) from None


def parse_uuid(value: Any, field: str) -> uuid.UUID | None:
    """Parse an optional identifier; empty strings count as absent."""
    if value is None or value == "":
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise InvalidArgumentError(f"'{field}' must be a valid UUID") from None


def parse_enum(enum_cls: type[E], value: Any, field: str) -> E | None:
    """Parse an optional enum value given by its wire name."""
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        valid_values = [member.value for member in enum_cls]
        raise InvalidArgumentError(
            f"Invalid {field}. Must be one of: {valid_values}"
        ) from None


def parse_text(value: Any, field: str, max_length: int | None = None) -> str | None:
    """Parse an optional string field, enforcing an optional maximum length."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentError(f"'{field}' must be a string")
    if max_length is not None and len(value) > max_length:
        raise InvalidArgumentError(
            f"{field.capitalize()} must be {max_length} characters or less"
        )
    return value


def _enum_value(value: Enum | None) -> str | None:
    return None if value is None else value.value


# -----------------------------------------------------------------------------
# Transfer Objects
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TaskDto:
    """
    Wire representation of a task.

    Attributes:
        id: Task identifier (absent for creation requests).
        title: Task title.
        description: Optional description.
        due_date: Optional deadline (``dueDate`` on the wire).
        priority: Task priority; may be omitted on creation.
        status: Task status; ignored on creation.
    """

    id: uuid.UUID | None = None
    title: str | None = None
    description: str | None = None
    due_date: datetime | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskDto:
        """
        Build a TaskDto from a decoded JSON object.

        Raises:
            InvalidArgumentError: If any field has the wrong shape.
        """
        return cls(
            id=parse_uuid(data.get("id"), "id"),
            title=parse_text(data.get("title"), "title", TITLE_MAX_LENGTH),
            description=parse_text(data.get("description"), "description"),
            due_date=parse_due_date(data.get("dueDate")),
            priority=parse_enum(TaskPriority, data.get("priority"), "priority"),
            status=parse_enum(TaskStatus, data.get("status"), "status"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": None if self.id is None else str(self.id),
            "title": self.title,
            "description": self.description,
            "dueDate": to_utc_iso(self.due_date),
            "priority": _enum_value(self.priority),
            "status": _enum_value(self.status),
        }


@dataclass(frozen=True)
class TaskListDto:
    """
    Wire representation of a task list.

    ``count`` and ``progress`` are derived from the owned tasks when a
    list is rendered; they are ignored when a request body is parsed.
    ``progress`` is a fraction between 0 and 1, or None for a list
    without tasks.
    """

    id: uuid.UUID | None = None
    title: str | None = None
    description: str | None = None
    count: int | None = None
    progress: float | None = None
    tasks: tuple[TaskDto, ...] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskListDto:
        """
        Build a TaskListDto from a decoded JSON object.

        Raises:
            InvalidArgumentError: If any field, or any nested task, has
                the wrong shape.
        """
        raw_tasks = data.get("tasks")
        tasks = None
        if raw_tasks is not None:
            if not isinstance(raw_tasks, list) or not all(
                isinstance(item, dict) for item in raw_tasks
            ):
                raise InvalidArgumentError("'tasks' must be a list of task objects")
            tasks = tuple(TaskDto.from_dict(item) for item in raw_tasks)

        return cls(
            id=parse_uuid(data.get("id"), "id"),
            title=parse_text(data.get("title"), "title", TITLE_MAX_LENGTH),
            description=parse_text(data.get("description"), "description"),
            tasks=tasks,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": None if self.id is None else str(self.id),
            "title": self.title,
            "description": self.description,
            "count": self.count,
            "progress": self.progress,
            "tasks": None if self.tasks is None else [task.to_dict() for task in self.tasks],
        }


@dataclass(frozen=True)
class ErrorResponse:
    """Error body returned by every failing API call."""

    status: int
    message: str
    details: str

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "message": self.message, "details": self.details}
