"""Async file-tree wrapper: the storage primitive under events and projections."""

import asyncio
import os
from pathlib import Path


class StorageRoot:
    """Thin async wrapper around a storage directory.

    Paths are given as parts relative to the root. Blocking filesystem calls
    run in a worker thread so the event loop is never blocked on disk.
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def path(self, *parts: str) -> Path:
        """Resolve parts against the root."""
        return self._root.joinpath(*parts)

    def relative(self, path: Path) -> str:
        """Root-relative, forward-slash form of a path under the root."""
        return path.relative_to(self._root).as_posix()

    async def exists(self, *parts: str) -> bool:
        return await asyncio.to_thread(self.path(*parts).exists)

    async def mkdir(self, *parts: str, exist_ok: bool = True) -> None:
        """Create a directory (and parents). Idempotent unless exist_ok is False."""
        target = self.path(*parts)
        await asyncio.to_thread(target.mkdir, parents=True, exist_ok=exist_ok)

    async def read_text(self, *parts: str) -> str:
        return await asyncio.to_thread(self.path(*parts).read_text, encoding="utf-8")

    async def read_bytes(self, *parts: str) -> bytes:
        return await asyncio.to_thread(self.path(*parts).read_bytes)

    async def write_text(self, *parts: str, content: str) -> None:
        """Replace a file's whole content.

        Writes a sibling temp file and renames it over the target, so readers
        see either the old value or the new one, never a partial write.
        """
        await asyncio.to_thread(_replace_file, self.path(*parts), content)

    async def create_file(self, *parts: str, content: str = "") -> None:
        """Create a new file with content. Raises FileExistsError if present."""
        await asyncio.to_thread(_create_exclusive, self.path(*parts), content)

    async def append_line(self, *parts: str, line: str) -> None:
        """Append ``line`` plus a newline, creating the file if absent."""
        await asyncio.to_thread(_append, self.path(*parts), line + "\n")

    async def list_entries(self, *parts: str) -> list[str]:
        """Sorted entry names of a directory. Empty if it doesn't exist."""
        return await asyncio.to_thread(_list_dir, self.path(*parts))


def _replace_file(target: Path, content: str) -> None:
    tmp = target.with_name(f".{target.name}.tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        f.write(content)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, target)


def _create_exclusive(target: Path, content: str) -> None:
    with open(target, "x", encoding="utf-8") as f:
        f.write(content)


def _append(target: Path, text: str) -> None:
    with open(target, "a", encoding="utf-8") as f:
        f.write(text)


def _list_dir(directory: Path) -> list[str]:
    if not directory.is_dir():
        return []
    return sorted(entry.name for entry in directory.iterdir())
