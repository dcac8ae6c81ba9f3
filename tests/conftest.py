"""
Pytest fixtures for the project tracker test suite.

Provides:
- an in-memory MongoDB collection (mongomock) behind the real ProjectRepository
- a ProjectService pinned to a fixed date
- a FastAPI TestClient wired to that service
"""

from datetime import date, timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from database import ProjectRepository
from main import app, get_service
from schemas import ProjectCreate, TaskCreate
from service import ProjectService

TODAY = date(2025, 3, 15)
YESTERDAY = TODAY - timedelta(days=1)
TOMORROW = TODAY + timedelta(days=1)


@pytest.fixture
def collection():
    return mongomock.MongoClient().db.projects


@pytest.fixture
def repository(collection):
    return ProjectRepository(collection)


@pytest.fixture
def service(repository):
    return ProjectService(repository, today=lambda: TODAY)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_project(service):
    """Create a stored project, optionally with tasks in the given statuses."""

    def _make(title="Compilers lab", statuses=(), **fields):
        project = service.create_project(ProjectCreate(title=title, **fields))
        for i, status in enumerate(statuses):
            project = service.add_task(project.id, TaskCreate(title=f"task {i}", status=status))
        return project

    return _make
