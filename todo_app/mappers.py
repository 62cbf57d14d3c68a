"""
Conversion between persisted entities and transfer objects.

Mapping a transfer object back to an entity copies the scalar fields
only. The owning task list and the timestamps are left unset: those are
assigned exclusively by the create/update operations in
:mod:`todo_app.services`.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm.attributes import set_committed_value

from .models import Task, TaskList, TaskPriority, TaskStatus
from .schemas import TaskDto, TaskListDto


def calculate_task_list_progress(tasks: Sequence[Task] | None) -> float | None:
    """
    Return the fraction of ``tasks`` that are CLOSED.

    Returns None (not 0, not NaN) when there are no tasks to divide by.
    """
    if not tasks:
        return None
    closed_task_count = sum(1 for task in tasks if task.status == TaskStatus.CLOSED)
    return closed_task_count / len(tasks)


class TaskMapper:
    """Maps ``Task`` entities to and from ``TaskDto``."""

    def from_dto(self, task_dto: TaskDto) -> Task:
        return Task(
            id=task_dto.id,
            title=task_dto.title,
            description=task_dto.description,
            due_date=task_dto.due_date,
            priority=task_dto.priority,
            status=task_dto.status,
        )

    def to_dto(self, task: Task) -> TaskDto:
        return TaskDto(
            id=task.id,
            title=task.title,
            description=task.description,
            due_date=task.due_date,
            priority=None if task.priority is None else TaskPriority(task.priority),
            status=None if task.status is None else TaskStatus(task.status),
        )


class TaskListMapper:
    """
    Maps ``TaskList`` entities to and from ``TaskListDto``.

    Rendering a list also derives ``count`` and ``progress`` from its
    tasks; nested tasks are mapped through the given ``TaskMapper``.
    """

    def __init__(self, task_mapper: TaskMapper) -> None:
        self.task_mapper = task_mapper

    def from_dto(self, task_list_dto: TaskListDto) -> TaskList:
        task_list = TaskList(
            id=task_list_dto.id,
            title=task_list_dto.title,
            description=task_list_dto.description,
        )
        if task_list_dto.tasks is not None:
            # Bypasses the backref so nested tasks keep no parent.
            set_committed_value(task_list, "tasks", [
                self.task_mapper.from_dto(task_dto) for task_dto in task_list_dto.tasks
            ])
        return task_list

    def to_dto(self, task_list: TaskList) -> TaskListDto:
        tasks = task_list.tasks
        return TaskListDto(
            id=task_list.id,
            title=task_list.title,
            description=task_list.description,
            count=0 if tasks is None else len(tasks),
            progress=calculate_task_list_progress(tasks),
            tasks=None if tasks is None else tuple(
                self.task_mapper.to_dto(task) for task in tasks
            ),
        )
