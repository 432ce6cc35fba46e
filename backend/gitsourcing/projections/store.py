"""Projection store: named read models, each one JSON file replaced whole."""

from typing import Any

from pydantic import TypeAdapter, ValidationError

from gitsourcing.models import TodoListSummary
from gitsourcing.storage.files import StorageRoot
from gitsourcing.storage.layout import PROJECTIONS_DIR, TODO_LISTS, TODO_LISTS_COUNT

PROJECTION_TYPES: dict[str, TypeAdapter[Any]] = {
    TODO_LISTS: TypeAdapter(list[TodoListSummary]),
    TODO_LISTS_COUNT: TypeAdapter(int),
}


class ProjectionStore:
    """Reads and writes projections under ``projections/<name>``."""

    def __init__(self, storage: StorageRoot) -> None:
        self._storage = storage

    async def read(self, name: str) -> Any:
        """Read and decode a projection.

        Raises ProjectionDecodeError if the stored content doesn't parse as
        the projection's type, OSError if it can't be read at all.
        """
        adapter = _adapter(name)
        raw = await self._storage.read_bytes(PROJECTIONS_DIR, name)
        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            raise ProjectionDecodeError(name, str(e)) from e

    async def write(self, name: str, value: Any) -> None:
        """Replace a projection with a new full value."""
        adapter = _adapter(name)
        content = adapter.dump_json(value, by_alias=True).decode()
        await self._storage.write_text(PROJECTIONS_DIR, name, content=content)

    async def read_todo_lists(self) -> list[TodoListSummary]:
        return await self.read(TODO_LISTS)

    async def read_todo_lists_count(self) -> int:
        return await self.read(TODO_LISTS_COUNT)


def _adapter(name: str) -> TypeAdapter[Any]:
    try:
        return PROJECTION_TYPES[name]
    except KeyError:
        raise UnknownProjectionError(name) from None


class ProjectionDecodeError(Exception):
    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Projection {name} could not be decoded: {detail}")


class UnknownProjectionError(KeyError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown projection: {name}")
