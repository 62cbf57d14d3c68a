"""
Database models for the todo application.

This module defines the SQLAlchemy models for the task-list aggregate:
a ``TaskList`` exclusively owns its ``Task`` rows, and each ``Task``
keeps a back-reference to the list it belongs to.

Identity (``id``) is generated on first flush and ``created_date`` is
stamped by the creation operations; neither may be reassigned once set.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy.orm import validates

from . import db


class TaskStatus(str, Enum):
    """Enumeration of possible task statuses."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class TaskPriority(str, Enum):
    """Enumeration of possible task priorities."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


def _guard_immutable(entity: Any, key: str, value: Any) -> Any:
    """Reject reassignment of a write-once attribute."""
    current = getattr(entity, key)
    if current is not None and value != current:
        raise ValueError(f"{type(entity).__name__}.{key} cannot be changed once set")
    return value


class TaskList(db.Model):
    """
    Named collection of tasks; the unit of cascade deletion.

    Attributes:
        id: UUID primary key, generated on first flush.
        title: Required title.
        description: Optional free text.
        tasks: Owned tasks. Saving a list saves any new task it references.
        created_date: Timestamp set when the list is created.
        updated_date: Timestamp refreshed on every update.
    """

    __tablename__ = "task_lists"

    id: uuid.UUID = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    title: str = db.Column(db.String(200), nullable=False)
    description: str | None = db.Column(db.Text, nullable=True)
    created_date: datetime = db.Column(db.DateTime(timezone=True), nullable=False)
    updated_date: datetime = db.Column(db.DateTime(timezone=True), nullable=False)

    tasks = db.relationship(
        "Task",
        back_populates="task_list",
        cascade="save-update, merge",
        order_by="Task.created_date",
    )

    @validates("id", "created_date")
    def _validate_write_once(self, key: str, value: Any) -> Any:
        return _guard_immutable(self, key, value)

    def __repr__(self) -> str:
        """Return string representation of the task list."""
        return f"<TaskList {self.id}: {self.title}>"


class Task(db.Model):
    """
    Task model representing a to-do item owned by one task list.

    Attributes:
        id: UUID primary key, generated on first flush.
        title: Short title describing the task.
        description: Detailed description of the task.
        due_date: Optional deadline for the task.
        status: Current status (OPEN, CLOSED).
        priority: Task priority level (HIGH, MEDIUM, LOW).
        task_list_id: Foreign key of the owning task list.
        created_date: Timestamp when the task was created.
        updated_date: Timestamp when the task was last modified.
    """

    __tablename__ = "tasks"

    id: uuid.UUID = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    title: str = db.Column(db.String(200), nullable=False)
    description: str | None = db.Column(db.Text, nullable=True)
    due_date: datetime | None = db.Column(db.DateTime(timezone=True), nullable=True)
    status: TaskStatus = db.Column(
        db.Enum(TaskStatus, native_enum=False, length=20),
        nullable=False,
    )
    priority: TaskPriority = db.Column(
        db.Enum(TaskPriority, native_enum=False, length=20),
        nullable=False,
    )
    task_list_id: uuid.UUID = db.Column(
        db.Uuid,
        db.ForeignKey("task_lists.id"),
        nullable=False,
        index=True,
    )
    created_date: datetime = db.Column(db.DateTime(timezone=True), nullable=False)
    updated_date: datetime = db.Column(db.DateTime(timezone=True), nullable=False)

    # Navigation only; ownership flows from TaskList.tasks.
    task_list = db.relationship("TaskList", back_populates="tasks")

    @validates("id", "created_date")
    def _validate_write_once(self, key: str, value: Any) -> Any:
        return _guard_immutable(self, key, value)

    def __repr__(self) -> str:
        """Return string representation of the task."""
        return f"<Task {self.id}: {self.title}>"
