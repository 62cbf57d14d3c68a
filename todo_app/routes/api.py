"""
REST API endpoints for task lists and tasks.

The blueprint is built by :func:`create_api_blueprint`, which receives the
services and mappers it dispatches to. Handlers only translate between
HTTP and the core: parse the JSON body into a transfer object, map it to
an entity, call the service, and map the result back.

Endpoints:
    GET    /api/health                                   - Health check
    GET    /api/task-lists                               - List all task lists
    POST   /api/task-lists                               - Create a task list
    GET    /api/task-lists/<id>                          - Get a task list
    PUT    /api/task-lists/<id>                          - Update a task list
    DELETE /api/task-lists/<id>                          - Delete a task list and its tasks
    GET    /api/task-lists/<id>/tasks                    - List tasks of a list
    POST   /api/task-lists/<id>/tasks                    - Create a task in a list
    GET    /api/task-lists/<id>/tasks/<task_id>          - Get a task
    PUT    /api/task-lists/<id>/tasks/<task_id>          - Update a task
    DELETE /api/task-lists/<id>/tasks/<task_id>          - Delete a task
"""

from __future__ import annotations

import logging
import os
import uuid
from typing import Any

from flask import Blueprint, Response, jsonify, request

from ..errors import error_response
from ..exceptions import InvalidArgumentError
from ..mappers import TaskListMapper, TaskMapper
from ..schemas import TaskDto, TaskListDto
from ..services import TaskListService, TaskService

logger = logging.getLogger(__name__)


def _json_body() -> dict[str, Any]:
    """Return the request body as a JSON object or reject the request."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidArgumentError("Request body must be JSON")
    return data


def create_api_blueprint(
    task_list_service: TaskListService,
    task_service: TaskService,
    task_list_mapper: TaskListMapper,
    task_mapper: TaskMapper,
) -> Blueprint:
    """
    Build the API blueprint bound to the given services and mappers.

    Args:
        task_list_service: Service handling task-list operations.
        task_service: Service handling task operations.
        task_list_mapper: Mapper between TaskList entities and DTOs.
        task_mapper: Mapper between Task entities and DTOs.

    Returns:
        Blueprint ready to be registered under ``/api``.
    """
    api_bp = Blueprint("api", __name__)

    @api_bp.route("/health", methods=["GET"])
    def health_check() -> tuple[Response, int]:
        """Health check endpoint for deployment verification."""
        return jsonify({
            "status": "healthy",
            "service": "todo",
            "environment": os.getenv("ENVIRONMENT", "unknown"),
        }), 200

    # -------------------------------------------------------------------------
    # Task lists
    # -------------------------------------------------------------------------

    @api_bp.route("/task-lists", methods=["GET"])
    def list_task_lists() -> tuple[Response, int]:
        logger.info("GET /api/task-lists - Fetching all task lists")
        task_lists = task_list_service.list_task_lists()
        return jsonify([
            task_list_mapper.to_dto(task_list).to_dict() for task_list in task_lists
        ]), 200

    @api_bp.route("/task-lists", methods=["POST"])
    def create_task_list() -> tuple[Response, int]:
        logger.info("POST /api/task-lists - Creating new task list")
        task_list_dto = TaskListDto.from_dict(_json_body())
        created = task_list_service.create_task_list(task_list_mapper.from_dto(task_list_dto))
        return jsonify(task_list_mapper.to_dto(created).to_dict()), 201

    @api_bp.route("/task-lists/<uuid:task_list_id>", methods=["GET"])
    def get_task_list(task_list_id: uuid.UUID) -> tuple[Response, int]:
        logger.info("GET /api/task-lists/%s - Fetching task list", task_list_id)
        task_list = task_list_service.get_task_list(task_list_id)
        if task_list is None:
            logger.warning("Task list %s not found", task_list_id)
            return error_response(404, "Task list not found")
        return jsonify(task_list_mapper.to_dto(task_list).to_dict()), 200

    @api_bp.route("/task-lists/<uuid:task_list_id>", methods=["PUT"])
    def update_task_list(task_list_id: uuid.UUID) -> tuple[Response, int]:
        logger.info("PUT /api/task-lists/%s - Updating task list", task_list_id)
        task_list_dto = TaskListDto.from_dict(_json_body())
        updated = task_list_service.update_task_list(
            task_list_id, task_list_mapper.from_dto(task_list_dto)
        )
        return jsonify(task_list_mapper.to_dto(updated).to_dict()), 200

    @api_bp.route("/task-lists/<uuid:task_list_id>", methods=["DELETE"])
    def delete_task_list(task_list_id: uuid.UUID) -> tuple[Response, int]:
        logger.info("DELETE /api/task-lists/%s - Deleting task list", task_list_id)
        task_list_service.delete_task_list(task_list_id)
        return jsonify({"message": "Task list deleted successfully"}), 200

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    @api_bp.route("/task-lists/<uuid:task_list_id>/tasks", methods=["GET"])
    def list_tasks(task_list_id: uuid.UUID) -> tuple[Response, int]:
        logger.info("GET /api/task-lists/%s/tasks - Fetching tasks", task_list_id)
        tasks = task_service.list_tasks(task_list_id)
        return jsonify([task_mapper.to_dto(task).to_dict() for task in tasks]), 200

    @api_bp.route("/task-lists/<uuid:task_list_id>/tasks", methods=["POST"])
    def create_task(task_list_id: uuid.UUID) -> tuple[Response, int]:
        logger.info("POST /api/task-lists/%s/tasks - Creating new task", task_list_id)
        task_dto = TaskDto.from_dict(_json_body())
        created = task_service.create_task(task_list_id, task_mapper.from_dto(task_dto))
        return jsonify(task_mapper.to_dto(created).to_dict()), 201

    @api_bp.route("/task-lists/<uuid:task_list_id>/tasks/<uuid:task_id>", methods=["GET"])
    def get_task(task_list_id: uuid.UUID, task_id: uuid.UUID) -> tuple[Response, int]:
        logger.info("GET /api/task-lists/%s/tasks/%s - Fetching task", task_list_id, task_id)
        task = task_service.get_task(task_list_id, task_id)
        if task is None:
            logger.warning("Task %s not found in list %s", task_id, task_list_id)
            return error_response(404, "Task not found")
        return jsonify(task_mapper.to_dto(task).to_dict()), 200

    @api_bp.route("/task-lists/<uuid:task_list_id>/tasks/<uuid:task_id>", methods=["PUT"])
    def update_task(task_list_id: uuid.UUID, task_id: uuid.UUID) -> tuple[Response, int]:
        logger.info("PUT /api/task-lists/%s/tasks/%s - Updating task", task_list_id, task_id)
        task_dto = TaskDto.from_dict(_json_body())
        updated = task_service.update_task(
            task_list_id, task_id, task_mapper.from_dto(task_dto)
        )
        return jsonify(task_mapper.to_dto(updated).to_dict()), 200

    @api_bp.route("/task-lists/<uuid:task_list_id>/tasks/<uuid:task_id>", methods=["DELETE"])
    def delete_task(task_list_id: uuid.UUID, task_id: uuid.UUID) -> tuple[Response, int]:
        logger.info("DELETE /api/task-lists/%s/tasks/%s - Deleting task", task_list_id, task_id)
        task_service.delete_task(task_list_id, task_id)
        return jsonify({"message": "Task deleted successfully"}), 200

    return api_bp
