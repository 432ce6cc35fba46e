"""Stream index: global append-only ledger of every event written."""

from gitsourcing.storage.files import StorageRoot
from gitsourcing.storage.layout import EVENTS_DIR, INDEX_FILE


class StreamIndex:
    """One line per stored event reference, in write order. Never rewritten."""

    def __init__(self, storage: StorageRoot) -> None:
        self._storage = storage

    async def record(self, reference: str) -> None:
        """Append an entry reference to the ledger, creating it if absent."""
        await self._storage.append_line(EVENTS_DIR, INDEX_FILE, line=reference)

    async def entries(self) -> list[str]:
        """All recorded references, oldest first. Empty before the first write."""
        if not await self._storage.exists(EVENTS_DIR, INDEX_FILE):
            return []
        content = await self._storage.read_text(EVENTS_DIR, INDEX_FILE)
        return content.splitlines()
