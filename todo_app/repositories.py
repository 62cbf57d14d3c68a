"""
Persistence access for tasks and task lists.

Repositories wrap a SQLAlchemy session and expose the explicit queries the
services need. They add, flush and execute statements but never commit:
transaction boundaries belong to the calling service, so that a
multi-step operation either lands completely or not at all.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, scoped_session

from .models import Task, TaskList

logger = logging.getLogger(__name__)

SessionLike = Session | scoped_session


class TaskRepository:
    """Queries over the ``tasks`` table."""

    def __init__(self, session: SessionLike) -> None:
        self.session = session

    def save(self, task: Task) -> Task:
        """Persist ``task``, assigning its id if it has none, and return it."""
        self.session.add(task)
        self.session.flush()
        return task

    def find_by_id(self, task_id: uuid.UUID) -> Task | None:
        return self.session.get(Task, task_id)

    def find_by_task_list_id(self, task_list_id: uuid.UUID) -> list[Task]:
        stmt = (
            select(Task)
            .where(Task.task_list_id == task_list_id)
            .order_by(Task.created_date, Task.id)
        )
        return list(self.session.scalars(stmt).all())

    def find_by_task_list_id_and_id(
        self, task_list_id: uuid.UUID, task_id: uuid.UUID
    ) -> Task | None:
        stmt = select(Task).where(Task.task_list_id == task_list_id, Task.id == task_id)
        return self.session.scalar(stmt)

    def delete_by_task_list_id_and_id(
        self, task_list_id: uuid.UUID, task_id: uuid.UUID
    ) -> None:
        """Delete the matching task, if any. Deleting nothing is not an error."""
        result = self.session.execute(
            delete(Task).where(Task.task_list_id == task_list_id, Task.id == task_id)
        )
        logger.debug("Deleted %s task row(s) for list %s", result.rowcount, task_list_id)


class TaskListRepository:
    """Queries over the ``task_lists`` table and its owned tasks."""

    def __init__(self, session: SessionLike) -> None:
        self.session = session

    def save(self, task_list: TaskList) -> TaskList:
        """Persist ``task_list`` together with any new task it references."""
        self.session.add(task_list)
        self.session.flush()
        return task_list

    def find_all(self) -> list[TaskList]:
        stmt = select(TaskList).order_by(TaskList.created_date, TaskList.id)
        return list(self.session.scalars(stmt).all())

    def find_by_id(self, task_list_id: uuid.UUID) -> TaskList | None:
        return self.session.get(TaskList, task_list_id)

    def delete_by_id(self, task_list_id: uuid.UUID) -> None:
        """
        Delete a task list and every task it owns.

        Children go first so no task is ever left pointing at a missing
        list. Both statements run in the caller's transaction.
        """
        tasks_result = self.session.execute(
            delete(Task).where(Task.task_list_id == task_list_id)
        )
        self.session.execute(delete(TaskList).where(TaskList.id == task_list_id))
        logger.debug(
            "Deleted task list %s and %s owned task(s)", task_list_id, tasks_result.rowcount
        )
