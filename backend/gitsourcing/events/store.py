"""Append-only event store backed by one directory per aggregate stream."""

import asyncio
import logging
from collections import OrderedDict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from gitsourcing.models import EventEnvelope, StreamEntry
from gitsourcing.storage.files import StorageRoot
from gitsourcing.storage.layout import EVENTS_DIR, INDEX_FILE

logger = logging.getLogger(__name__)

SEQUENCE_WIDTH = 6
MAX_SEQUENCE_NUM = 10**SEQUENCE_WIDTH - 1
SEQUENCE_CACHE_SIZE = 1024


def entry_name(sequence_num: int, event_type: str) -> str:
    """File name of a stream entry, e.g. ``000001_TodoListCreated``.

    The zero-padded prefix keeps lexical order equal to write order.
    """
    return f"{sequence_num:0{SEQUENCE_WIDTH}d}_{event_type}"


def _is_stream_name(aggregate_id: str) -> bool:
    """A stream directory must be a single plain path segment, not the index."""
    return (
        bool(aggregate_id)
        and aggregate_id != INDEX_FILE
        and not aggregate_id.startswith(".")
        and "/" not in aggregate_id
        and "\\" not in aggregate_id
    )


class EventStore:
    """Append-only event store. The write side of the CQRS pattern.

    Each aggregate's stream is ``events/<aggregate_id>/``, one file per event.
    Appends to the same aggregate are serialized by a per-aggregate lock that
    is dropped once no append for that aggregate is pending. The last
    sequence number of the most recently used streams is cached; a stream
    that fell out of the cache is rescanned from disk.
    """

    def __init__(self, storage: StorageRoot, cache_size: int = SEQUENCE_CACHE_SIZE) -> None:
        self._storage = storage
        self._cache_size = cache_size
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._last_seq: OrderedDict[str, int] = OrderedDict()

    @asynccontextmanager
    async def _stream_lock(self, aggregate_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(aggregate_id, asyncio.Lock())
        self._lock_users[aggregate_id] = self._lock_users.get(aggregate_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[aggregate_id] -= 1
            if self._lock_users[aggregate_id] == 0:
                del self._lock_users[aggregate_id]
                del self._locks[aggregate_id]

    def _remember(self, aggregate_id: str, seq: int) -> None:
        self._last_seq[aggregate_id] = seq
        self._last_seq.move_to_end(aggregate_id)
        while len(self._last_seq) > self._cache_size:
            self._last_seq.popitem(last=False)

    async def append(self, envelope: EventEnvelope) -> StreamEntry:
        """Append an event to its aggregate's stream.

        Raises DuplicateSequenceError if the computed entry already exists,
        e.g. because another process wrote to the same stream.
        """
        aggregate_id = envelope.aggregate_id
        if not _is_stream_name(aggregate_id):
            raise InvalidAggregateIdError(aggregate_id)

        async with self._stream_lock(aggregate_id):
            last = self._last_seq.get(aggregate_id)
            if last is None:
                entries = await self._storage.list_entries(EVENTS_DIR, aggregate_id)
                last = len(entries)
                await self._storage.mkdir(EVENTS_DIR, aggregate_id)

            seq = last + 1
            if seq > MAX_SEQUENCE_NUM:
                raise StreamFullError(aggregate_id)

            name = entry_name(seq, envelope.event_type)
            stored = envelope.model_copy(update={"sequence_num": seq})
            try:
                await self._storage.create_file(
                    EVENTS_DIR, aggregate_id, name,
                    content=stored.model_dump_json(),
                )
            except FileExistsError as e:
                # Resync from disk on the next append
                self._last_seq.pop(aggregate_id, None)
                raise DuplicateSequenceError(aggregate_id, seq) from e

            self._remember(aggregate_id, seq)

        reference = self._storage.relative(self._storage.path(EVENTS_DIR, aggregate_id, name))
        logger.debug("Appended %s", reference)
        return StreamEntry(reference=reference, sequence_num=seq)

    async def get_events(self, aggregate_id: str) -> list[EventEnvelope]:
        """Get all events for an aggregate, ordered by sequence_num."""
        names = await self._storage.list_entries(EVENTS_DIR, aggregate_id)
        events = []
        for name in names:
            raw = await self._storage.read_text(EVENTS_DIR, aggregate_id, name)
            events.append(EventEnvelope.model_validate_json(raw))
        return events


class DuplicateSequenceError(Exception):
    def __init__(self, aggregate_id: str, sequence_num: int) -> None:
        self.aggregate_id = aggregate_id
        self.sequence_num = sequence_num
        super().__init__(
            f"Sequence number {sequence_num} already taken in stream {aggregate_id}"
        )


class StreamFullError(Exception):
    def __init__(self, aggregate_id: str) -> None:
        self.aggregate_id = aggregate_id
        super().__init__(f"Stream {aggregate_id} has reached {MAX_SEQUENCE_NUM} events")


class InvalidAggregateIdError(ValueError):
    def __init__(self, aggregate_id: str) -> None:
        self.aggregate_id = aggregate_id
        super().__init__(f"Invalid aggregate id: {aggregate_id!r}")
