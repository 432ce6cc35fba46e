"""State projector: applies stored events to the projection files.

The read side of the CQRS pattern. Dispatch is a table keyed by event_type;
event types without a handler are accepted and ignored.
"""

import logging
from collections.abc import Awaitable, Callable

from gitsourcing.models import EventEnvelope, TodoListCreatedPayload, TodoListSummary
from gitsourcing.projections.store import ProjectionStore
from gitsourcing.storage.layout import TODO_LISTS, TODO_LISTS_COUNT

logger = logging.getLogger(__name__)


class StateProjector:
    """Projects events into the projection files (todoLists, todoListsCount)."""

    def __init__(self, projections: ProjectionStore) -> None:
        self._projections = projections
        self._handlers: dict[str, Callable[[EventEnvelope], Awaitable[None]]] = {
            "TodoListCreated": self._handle_todo_list_created,
        }

    async def apply(self, event: EventEnvelope) -> bool:
        """Apply one event. Returns False if no handler is registered for it."""
        handler = self._handlers.get(event.event_type)
        if handler is None:
            logger.warning("No projection handler for %r, skipping", event.event_type)
            return False
        await handler(event)
        return True

    async def _handle_todo_list_created(self, event: EventEnvelope) -> None:
        """Append a summary to todoLists and bump todoListsCount.

        Both projections are read and recomputed before either is written, so
        a read or decode failure leaves both untouched. Only a failure of the
        second write can leave them out of step.
        """
        payload = event.typed_payload()
        assert isinstance(payload, TodoListCreatedPayload)

        todo_lists = await self._projections.read_todo_lists()
        count = await self._projections.read_todo_lists_count()

        await self._projections.write(
            TODO_LISTS, [*todo_lists, TodoListSummary(name=payload.name)]
        )
        try:
            await self._projections.write(TODO_LISTS_COUNT, count + 1)
        except Exception:
            logger.error(
                "todoListsCount not updated after todoLists for event %s; "
                "projections are out of step",
                event.event_id,
            )
            raise
