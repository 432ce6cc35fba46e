"""Shared test helpers."""

from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

from gitsourcing.models import EventEnvelope, TodoListCreatedPayload
from gitsourcing.snapshots.committer import CommitError


class RecordingCommitter:
    """Committer stand-in: records calls, optionally fails on demand."""

    def __init__(self) -> None:
        self.commits: list[tuple[Path, str]] = []
        self.fail_next = False

    @property
    def messages(self) -> list[str]:
        return [message for _, message in self.commits]

    async def commit(self, root: Path, message: str) -> None:
        if self.fail_next:
            self.fail_next = False
            raise CommitError(["git", "commit", "-m", message], "simulated failure", 1)
        self.commits.append((root, message))


def make_todo_list_created_envelope(
    aggregate_id: str | None = None,
    name: str = "Groceries",
) -> EventEnvelope:
    """Create a TodoListCreated EventEnvelope for testing."""
    aggregate_id = aggregate_id or str(uuid4())
    payload = TodoListCreatedPayload(id=aggregate_id, name=name)
    return EventEnvelope(
        event_id=str(uuid4()),
        aggregate_id=aggregate_id,
        timestamp=datetime.now(UTC),
        event_type="TodoListCreated",
        payload=payload.model_dump(),
    )


def make_envelope(
    event_type: str,
    aggregate_id: str | None = None,
    **payload: Any,
) -> EventEnvelope:
    """Create an envelope of an arbitrary (possibly unregistered) event type."""
    return EventEnvelope(
        event_id=str(uuid4()),
        aggregate_id=aggregate_id or str(uuid4()),
        timestamp=datetime.now(UTC),
        event_type=event_type,
        payload=payload,
    )
