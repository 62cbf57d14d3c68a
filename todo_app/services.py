"""
Business rules for creating, updating and deleting tasks and task lists.

Services receive their repositories and the session that delimits a
transaction as constructor arguments. Every write runs inside
:func:`unit_of_work`, which commits on success and rolls back on any
exception, so a failure after the parent lookup never leaves partial rows.

All rejections raise :class:`~todo_app.exceptions.InvalidArgumentError`.
Lookups that find nothing return ``None`` rather than raising.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from .exceptions import InvalidArgumentError
from .models import Task, TaskList, TaskPriority, TaskStatus
from .repositories import SessionLike, TaskListRepository, TaskRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def unit_of_work(session: SessionLike) -> Iterator[None]:
    """Commit the enclosed work, or roll all of it back if anything raises."""
    try:
        yield
        session.commit()
    except Exception:
        session.rollback()
        raise


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _reject(message: str) -> InvalidArgumentError:
    logger.warning("Rejected request: %s", message)
    return InvalidArgumentError(message)


def _check_new_task(task: Task) -> None:
    if task.id is not None:
        raise _reject("Task already has an ID!")
    if _is_blank(task.title):
        raise _reject("Task title is empty!")


def _build_new_task(task: Task, now: datetime, task_list: TaskList | None = None) -> Task:
    """Copy a validated candidate into a fresh OPEN task stamped with ``now``."""
    new_task = Task(
        title=task.title,
        description=task.description,
        due_date=task.due_date,
        status=TaskStatus.OPEN,
        priority=task.priority or TaskPriority.MEDIUM,
        created_date=now,
        updated_date=now,
    )
    if task_list is not None:
        new_task.task_list = task_list
    return new_task


class TaskService:
    """Operations on the tasks of a task list."""

    def __init__(
        self,
        task_repository: TaskRepository,
        task_list_repository: TaskListRepository,
        session: SessionLike,
        clock: Clock = utc_now,
    ) -> None:
        self.task_repository = task_repository
        self.task_list_repository = task_list_repository
        self.session = session
        self.clock = clock

    def list_tasks(self, task_list_id: uuid.UUID) -> list[Task]:
        return self.task_repository.find_by_task_list_id(task_list_id)

    def create_task(self, task_list_id: uuid.UUID, task: Task) -> Task:
        """
        Create a task under an existing task list.

        The candidate must not carry an id and must have a non-blank title.
        Priority defaults to MEDIUM; status is always OPEN whatever the
        candidate says. Both timestamps get the same instant.

        Raises:
            InvalidArgumentError: On a rejected candidate or an unknown
                task list id.
        """
        _check_new_task(task)

        with unit_of_work(self.session):
            task_list = self.task_list_repository.find_by_id(task_list_id)
            if task_list is None:
                raise _reject("Invalid ToDo List ID!")

            saved = self.task_repository.save(
                _build_new_task(task, self.clock(), task_list)
            )

        logger.info("Created task %s in list %s", saved.id, task_list_id)
        return saved

    def get_task(self, task_list_id: uuid.UUID, task_id: uuid.UUID) -> Task | None:
        return self.task_repository.find_by_task_list_id_and_id(task_list_id, task_id)

    def update_task(self, task_list_id: uuid.UUID, task_id: uuid.UUID, task: Task) -> Task:
        """
        Overwrite an existing task with the candidate's full state.

        The candidate must carry the same id as ``task_id`` and must supply
        priority and status. ``id``, ``created_date`` and the owning list
        are never changed; ``updated_date`` is refreshed.

        Raises:
            InvalidArgumentError: On a rejected candidate or when no task
                matches (task_list_id, task_id).
        """
        if task.id is None:
            raise _reject("Task ID is empty!")
        if task.id != task_id:
            raise _reject("Task ID does not match!")
        if _is_blank(task.title):
            raise _reject("Task title is empty!")
        if task.priority is None:
            raise _reject("Task priority is empty!")
        if task.status is None:
            raise _reject("Task status is empty!")

        with unit_of_work(self.session):
            existing_task = self.task_repository.find_by_task_list_id_and_id(
                task_list_id, task_id
            )
            if existing_task is None:
                raise _reject("Task not found!")

            existing_task.title = task.title
            existing_task.description = task.description
            existing_task.due_date = task.due_date
            existing_task.priority = task.priority
            existing_task.status = task.status
            existing_task.updated_date = self.clock()

            saved = self.task_repository.save(existing_task)

        logger.info("Updated task %s in list %s", task_id, task_list_id)
        return saved

    def delete_task(self, task_list_id: uuid.UUID, task_id: uuid.UUID) -> None:
        with unit_of_work(self.session):
            self.task_repository.delete_by_task_list_id_and_id(task_list_id, task_id)
        logger.info("Deleted task %s from list %s", task_id, task_list_id)


class TaskListService:
    """Operations on task lists."""

    def __init__(
        self,
        task_list_repository: TaskListRepository,
        session: SessionLike,
        clock: Clock = utc_now,
    ) -> None:
        self.task_list_repository = task_list_repository
        self.session = session
        self.clock = clock

    def list_task_lists(self) -> list[TaskList]:
        return self.task_list_repository.find_all()

    def create_task_list(self, task_list: TaskList) -> TaskList:
        """
        Create a task list, together with any tasks the candidate carries.

        Nested tasks follow the same rules as ``TaskService.create_task``
        and share the list's creation timestamp.

        Raises:
            InvalidArgumentError: If the candidate or one of its tasks
                already has an id or has a blank title.
        """
        if task_list.id is not None:
            raise _reject("Task list already has an ID!")
        if _is_blank(task_list.title):
            raise _reject("Task list title is empty!")
        candidate_tasks = list(task_list.tasks or [])
        for task in candidate_tasks:
            _check_new_task(task)

        now = self.clock()
        new_task_list = TaskList(
            title=task_list.title,
            description=task_list.description,
            created_date=now,
            updated_date=now,
        )
        new_task_list.tasks = [_build_new_task(task, now) for task in candidate_tasks]

        with unit_of_work(self.session):
            saved = self.task_list_repository.save(new_task_list)

        logger.info("Created task list %s with %d task(s)", saved.id, len(candidate_tasks))
        return saved

    def get_task_list(self, task_list_id: uuid.UUID) -> TaskList | None:
        return self.task_list_repository.find_by_id(task_list_id)

    def update_task_list(self, task_list_id: uuid.UUID, task_list: TaskList) -> TaskList:
        """
        Overwrite the title and description of an existing task list.

        Tasks carried by the candidate are ignored; tasks change only
        through ``TaskService``.

        Raises:
            InvalidArgumentError: On a missing or mismatched id, a blank
                title, or an unknown task list.
        """
        if task_list.id is None:
            raise _reject("Task list ID is empty!")
        if task_list.id != task_list_id:
            raise _reject("Task list ID does not match!")
        if _is_blank(task_list.title):
            raise _reject("Task list title is empty!")

        with unit_of_work(self.session):
            existing_task_list = self.task_list_repository.find_by_id(task_list_id)
            if existing_task_list is None:
                raise _reject("Task list not found!")

            existing_task_list.title = task_list.title
            existing_task_list.description = task_list.description
            existing_task_list.updated_date = self.clock()

            saved = self.task_list_repository.save(existing_task_list)

        logger.info("Updated task list %s", task_list_id)
        return saved

    def delete_task_list(self, task_list_id: uuid.UUID) -> None:
        """Delete a task list and all of its tasks in one transaction."""
        with unit_of_work(self.session):
            self.task_list_repository.delete_by_id(task_list_id)
        logger.info("Deleted task list %s", task_list_id)
