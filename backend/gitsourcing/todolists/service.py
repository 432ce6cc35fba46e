"""Todo list service: validates commands and runs the store/apply/commit pipeline."""

import asyncio
import logging
from datetime import UTC, datetime
from uuid import uuid4

from gitsourcing.events.index import StreamIndex
from gitsourcing.events.projector import StateProjector
from gitsourcing.events.store import EventStore
from gitsourcing.models import (
    CreateTodoList,
    EventEnvelope,
    StreamEntry,
    TodoListCreatedPayload,
    TodoListSummary,
)
from gitsourcing.projections.store import ProjectionStore
from gitsourcing.snapshots.committer import Committer
from gitsourcing.storage.files import StorageRoot

logger = logging.getLogger(__name__)


def validate_create_todo_list(command: CreateTodoList) -> None:
    """Reject commands that must not produce an event."""
    if command.name == "":
        raise CommandValidationError("Command validation failed")


class TodoListService:
    """Coordinates event store, index, projector and committer.

    One write pipeline runs at a time: store -> index -> apply -> commit.
    The first failing step aborts the rest; nothing already written is rolled
    back, and nothing is committed.
    """

    def __init__(self, storage: StorageRoot, committer: Committer) -> None:
        self._storage = storage
        self._committer = committer
        self._store = EventStore(storage)
        self._index = StreamIndex(storage)
        self._projections = ProjectionStore(storage)
        self._projector = StateProjector(self._projections)
        self._write_lock = asyncio.Lock()

    async def create_todo_list(self, name: str) -> CreateTodoList:
        """Create a todo list. Emits TodoListCreated and returns the command."""
        command = CreateTodoList(id=str(uuid4()), name=name)
        validate_create_todo_list(command)

        payload = TodoListCreatedPayload(id=command.id, name=command.name)
        event = EventEnvelope(
            event_id=str(uuid4()),
            aggregate_id=command.id,
            timestamp=datetime.now(UTC),
            event_type="TodoListCreated",
            payload=payload.model_dump(),
        )
        await self.store_event(event)
        return command

    async def store_event(self, event: EventEnvelope) -> StreamEntry:
        """Persist, index, project and checkpoint one event."""
        async with self._write_lock:
            entry = await self._store.append(event)
            await self._index.record(entry.reference)
            await self._projector.apply(event)
            await self._committer.commit(self._storage.root, event.aggregate_id)
        logger.info("Stored %s", entry.reference)
        return entry

    async def list_todo_lists(self) -> list[TodoListSummary]:
        return await self._projections.read_todo_lists()

    async def count_todo_lists(self) -> int:
        return await self._projections.read_todo_lists_count()


class CommandValidationError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
