"""
Flask application factory module.

This module creates and configures the Flask application using
the factory pattern, allowing for different configurations
(development, testing, production).

The factory wires the todo core explicitly: repositories are built on
top of the Flask-SQLAlchemy session, services receive their repositories
as constructor arguments, and the API blueprint receives the services
and mappers it dispatches to.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from flask import Flask
from flask_sqlalchemy import SQLAlchemy

from config import get_config

# Initialize SQLAlchemy without binding to app
db = SQLAlchemy()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _ensure_sqlite_db_parent_exists(database_uri: str) -> None:
    """Create parent directories for file-based SQLite URIs when missing."""
    sqlite_prefix = "sqlite:///"
    if not database_uri.startswith(sqlite_prefix):
        return

    sqlite_path = database_uri[len(sqlite_prefix):].split("?", 1)[0]
    if sqlite_path in ("", ":memory:"):
        return

    Path(sqlite_path).parent.mkdir(parents=True, exist_ok=True)


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     If None, uses FLASK_ENV environment variable.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    logging.getLogger().setLevel(app.config.get("LOG_LEVEL", "INFO"))
    app.json.sort_keys = False

    logger.info("Creating todo app with config: %s", config_class.__name__)

    os.makedirs(app.instance_path, exist_ok=True)
    _ensure_sqlite_db_parent_exists(app.config.get("SQLALCHEMY_DATABASE_URI", ""))

    # Initialize extensions
    db.init_app(app)

    from .errors import register_error_handlers
    from .mappers import TaskListMapper, TaskMapper
    from .repositories import TaskListRepository, TaskRepository
    from .routes.api import create_api_blueprint
    from .services import TaskListService, TaskService

    task_repository = TaskRepository(db.session)
    task_list_repository = TaskListRepository(db.session)
    task_mapper = TaskMapper()

    api_bp = create_api_blueprint(
        task_list_service=TaskListService(task_list_repository, db.session),
        task_service=TaskService(task_repository, task_list_repository, db.session),
        task_list_mapper=TaskListMapper(task_mapper),
        task_mapper=task_mapper,
    )
    app.register_blueprint(api_bp, url_prefix="/api")
    register_error_handlers(app)

    # Create database tables
    with app.app_context():
        db.create_all()
        logger.info("Database tables created")

    return app
