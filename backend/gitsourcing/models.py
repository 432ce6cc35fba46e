"""Canonical data structures and event types for gitsourcing.

Defined once here, referenced everywhere else. Event payloads carry the
kind-specific content of each event; the EventEnvelope wraps them with the
owning aggregate and stream metadata.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class CreateTodoList(BaseModel):
    """Command to create a todo list. The identifier is system-generated."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="ID")
    name: str = Field(alias="Name")


# ---------------------------------------------------------------------------
# Event payloads — one per event type
# ---------------------------------------------------------------------------


class TodoListCreatedPayload(BaseModel):
    id: str
    name: str


# ---------------------------------------------------------------------------
# Event type registry
# ---------------------------------------------------------------------------

EVENT_TYPES: dict[str, type[BaseModel]] = {
    "TodoListCreated": TodoListCreatedPayload,
}


# ---------------------------------------------------------------------------
# Event envelope
# ---------------------------------------------------------------------------


class EventEnvelope(BaseModel):
    """Wraps every event with metadata. Written as one file per event."""

    model_config = ConfigDict(frozen=True)

    event_id: str
    aggregate_id: str
    timestamp: datetime
    event_type: str
    payload: dict[str, Any]
    sequence_num: int | None = None  # assigned by the stream writer

    def typed_payload(self) -> BaseModel:
        """Deserialize payload into the correct Pydantic model based on event_type."""
        payload_cls = EVENT_TYPES[self.event_type]
        return payload_cls.model_validate(self.payload)


class StreamEntry(BaseModel):
    """Where an appended event landed.

    ``reference`` is relative to the storage root, e.g.
    ``events/<aggregate_id>/000001_TodoListCreated``.
    """

    reference: str
    sequence_num: int


# ---------------------------------------------------------------------------
# Projection records
# ---------------------------------------------------------------------------


class TodoListSummary(BaseModel):
    """One entry of the todoLists projection, stored as {"Name": ...}."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="Name")
