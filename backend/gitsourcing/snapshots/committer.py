"""Snapshot committers: checkpoint the whole storage tree as one revision.

The core only depends on the Committer protocol. GitCommitter is the
production implementation; it shells out to git, staging everything under
the root and recording one commit with the given message.
"""

import asyncio
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class Committer(Protocol):
    """Durably checkpoints the current state of a storage tree."""

    async def commit(self, root: Path, message: str) -> None:
        """Record everything under ``root`` as one revision labelled ``message``.

        Raises CommitError on failure.
        """
        ...


class GitCommitter:
    """Checkpoints a storage tree as a git commit.

    The repository is initialized on first use. Author identity is passed per
    invocation so commits don't depend on the host's git config.
    """

    def __init__(
        self,
        git_binary: str = "git",
        author_name: str = "gitsourcing",
        author_email: str = "gitsourcing@localhost",
    ) -> None:
        self._git = git_binary
        self._author_name = author_name
        self._author_email = author_email

    async def commit(self, root: Path, message: str) -> None:
        if not (root / ".git").exists():
            await self._run(root, "init")
        await self._run(root, "add", ".")
        await self._run(root, "commit", "-m", message)
        logger.info("Committed %s: %s", root, message)

    async def _run(self, root: Path, command: str, *args: str) -> str:
        argv = [
            self._git,
            "-C", str(root),
            "-c", f"user.name={self._author_name}",
            "-c", f"user.email={self._author_email}",
            command,
            *args,
        ]
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CommitError(argv, str(e)) from e

        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            logger.error(
                "git %s failed (exit %s): %s",
                command, proc.returncode, stderr.decode(errors="replace").strip(),
            )
            raise CommitError(argv, stderr.decode(errors="replace"), proc.returncode)
        return stdout.decode(errors="replace")


class CommitError(Exception):
    def __init__(self, argv: list[str], stderr: str, returncode: int | None = None) -> None:
        self.argv = argv
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(f"Commit failed: {' '.join(argv)} (exit {returncode}): {stderr.strip()}")
