"""Shared pytest fixtures for gitsourcing tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from gitsourcing.events.index import StreamIndex
from gitsourcing.events.projector import StateProjector
from gitsourcing.events.store import EventStore
from gitsourcing.main import app
from gitsourcing.projections.store import ProjectionStore
from gitsourcing.storage.files import StorageRoot
from gitsourcing.storage.layout import ensure_storage
from gitsourcing.todolists.router import get_todo_list_service
from gitsourcing.todolists.service import TodoListService
from tests.fixtures import RecordingCommitter


@pytest.fixture
def committer():
    """Fake committer that records (root, message) calls."""
    return RecordingCommitter()


@pytest.fixture
async def storage(tmp_path, committer):
    """Initialized storage tree in a temp directory."""
    root = StorageRoot(tmp_path / "storage")
    await ensure_storage(root, committer)
    return root


@pytest.fixture
def event_store(storage):
    return EventStore(storage)


@pytest.fixture
def stream_index(storage):
    return StreamIndex(storage)


@pytest.fixture
def projections(storage):
    return ProjectionStore(storage)


@pytest.fixture
def projector(projections):
    return StateProjector(projections)


@pytest.fixture
def service(storage, committer):
    return TodoListService(storage, committer)


@pytest.fixture
async def client(service):
    """Async test client with temp storage wired into the app."""
    app.dependency_overrides[get_todo_list_service] = lambda: service
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()
