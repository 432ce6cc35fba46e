"""Event sourcing: append-only event streams, stream index, and projection."""

from gitsourcing.events.index import StreamIndex
from gitsourcing.events.projector import StateProjector
from gitsourcing.events.store import EventStore

__all__ = ["EventStore", "StateProjector", "StreamIndex"]
