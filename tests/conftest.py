"""
Shared pytest fixtures for the todo test suite.

This module contains fixtures that are shared across all test modules.
Fixtures follow the Arrange-Act-Assert (AAA) pattern and ensure
test isolation by providing fresh data for each test.

Key Concepts Demonstrated:
- Fixture scopes (function, session)
- Fixture dependencies
- Test data factories
- Database setup/teardown
- Explicitly constructed services sharing the test session
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from faker import Faker

# Set testing environment before importing app
os.environ["FLASK_ENV"] = "testing"

from todo_app import create_app, db
from todo_app.mappers import TaskListMapper, TaskMapper
from todo_app.models import Task, TaskList, TaskPriority, TaskStatus
from todo_app.repositories import TaskListRepository, TaskRepository
from todo_app.services import TaskListService, TaskService


# Initialize Faker for generating test data
fake = Faker()


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def app():
    """
    Create application instance for the test session.

    The 'session' scope means the same app instance is reused
    for all tests, improving performance.

    Yields:
        Flask application instance configured for testing.
    """
    application = create_app("testing")
    yield application


@pytest.fixture(scope="function")
def client(app):
    """
    Create a test client for making HTTP requests.

    Args:
        app: Flask application fixture.

    Yields:
        Flask test client for making HTTP requests.
    """
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture(scope="function")
def db_session(app):
    """
    Create a fresh database session for each test.

    This fixture ensures test isolation by:
    1. Creating all tables before the test
    2. Providing a clean database session
    3. Rolling back and dropping all tables after the test

    Args:
        app: Flask application fixture.

    Yields:
        Flask-SQLAlchemy extension bound to the app context.
    """
    with app.app_context():
        db.create_all()
        yield db
        db.session.rollback()
        db.drop_all()


# -----------------------------------------------------------------------------
# Core Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def task_repository(db_session) -> TaskRepository:
    return TaskRepository(db_session.session)


@pytest.fixture
def task_list_repository(db_session) -> TaskListRepository:
    return TaskListRepository(db_session.session)


@pytest.fixture
def task_service(db_session, task_repository, task_list_repository) -> TaskService:
    """Provide a TaskService wired to the test database session."""
    return TaskService(task_repository, task_list_repository, db_session.session)


@pytest.fixture
def task_list_service(db_session, task_list_repository) -> TaskListService:
    """Provide a TaskListService wired to the test database session."""
    return TaskListService(task_list_repository, db_session.session)


@pytest.fixture
def task_mapper() -> TaskMapper:
    return TaskMapper()


@pytest.fixture
def task_list_mapper(task_mapper) -> TaskListMapper:
    return TaskListMapper(task_mapper)


# -----------------------------------------------------------------------------
# Test Data Factory Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def task_list_factory(db_session):
    """
    Factory fixture for creating persisted TaskList instances.

    Rows are written straight through the session so that tests of the
    services start from a known state without going through them.

    Example:
        def test_something(task_list_factory):
            task_list = task_list_factory(title="Groceries")
            assert task_list.id is not None
    """

    def _create_task_list(
        title: str | None = None,
        description: str | None = None,
    ) -> TaskList:
        now = datetime.now(timezone.utc)
        task_list = TaskList(
            title=title or fake.sentence(nb_words=3),
            description=description or fake.paragraph(),
            created_date=now,
            updated_date=now,
        )
        db_session.session.add(task_list)
        db_session.session.commit()
        return task_list

    return _create_task_list


@pytest.fixture
def task_factory(db_session):
    """
    Factory fixture for creating persisted Task instances in a list.

    Example:
        def test_something(task_list_factory, task_factory):
            task = task_factory(task_list_factory(), title="Milk")
    """

    def _create_task(
        task_list: TaskList,
        title: str | None = None,
        description: str | None = None,
        status: TaskStatus = TaskStatus.OPEN,
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: datetime | None = None,
    ) -> Task:
        now = datetime.now(timezone.utc)
        task = Task(
            title=title or fake.sentence(nb_words=4),
            description=description or fake.paragraph(),
            status=status,
            priority=priority,
            due_date=due_date,
            task_list=task_list,
            created_date=now,
            updated_date=now,
        )
        db_session.session.add(task)
        db_session.session.commit()
        return task

    return _create_task


@pytest.fixture
def sample_task_list(task_list_factory) -> TaskList:
    """Create a single task list for tests that need one."""
    return task_list_factory(title="Groceries", description="Weekly shopping")


@pytest.fixture
def sample_task(sample_task_list, task_factory) -> Task:
    """Create a single OPEN task inside ``sample_task_list``."""
    return task_factory(
        sample_task_list,
        title="Milk",
        description="Two litres",
        status=TaskStatus.OPEN,
        priority=TaskPriority.MEDIUM,
    )


@pytest.fixture
def mixed_task_list(task_list_factory, task_factory) -> TaskList:
    """
    Create a task list holding four tasks, one of which is CLOSED.

    Useful for count and progress assertions (progress == 0.25).
    """
    task_list = task_list_factory(title="Release checklist")
    task_factory(task_list, title="Write changelog", status=TaskStatus.CLOSED,
                 priority=TaskPriority.HIGH)
    task_factory(task_list, title="Tag release", priority=TaskPriority.HIGH,
                 due_date=datetime.now(timezone.utc) + timedelta(days=1))
    task_factory(task_list, title="Publish packages")
    task_factory(task_list, title="Announce", priority=TaskPriority.LOW)
    return task_list


# -----------------------------------------------------------------------------
# Test Data Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def valid_task_data() -> dict[str, Any]:
    """
    Provide valid task data for POST requests.

    Returns:
        Dictionary with valid task field values in wire format.
    """
    return {
        "title": "Test Task",
        "description": "This is a test task description",
        "priority": TaskPriority.HIGH.value,
        "dueDate": (datetime.now(timezone.utc) + timedelta(days=7)).isoformat(),
    }


@pytest.fixture
def minimal_task_data() -> dict[str, str]:
    """Provide minimal valid task data (only required fields)."""
    return {"title": "Minimal Task"}


@pytest.fixture
def api_headers() -> dict[str, str]:
    """
    Provide common headers for API requests.

    Returns:
        Dictionary of HTTP headers.
    """
    return {
        "Content-Type": "application/json",
        "Accept": "application/json"
    }
