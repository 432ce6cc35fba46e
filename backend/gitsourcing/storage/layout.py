"""Storage layout and one-time initialization.

    <root>/
        events/.gitignore
        events/<aggregate_id>/NNNNNN_<EventType>
        events/index
        projections/.gitignore
        projections/<name>
"""

import logging

from gitsourcing.snapshots.committer import Committer
from gitsourcing.storage.files import StorageRoot

logger = logging.getLogger(__name__)

EVENTS_DIR = "events"
PROJECTIONS_DIR = "projections"
INDEX_FILE = "index"
IGNORE_MARKER = ".gitignore"

TODO_LISTS = "todoLists"
TODO_LISTS_COUNT = "todoListsCount"

# Serialized seed value of every projection.
SEED_PROJECTIONS: dict[str, str] = {
    TODO_LISTS: "[]",
    TODO_LISTS_COUNT: "0",
}

INITIAL_COMMIT_MESSAGE = "Initial commit"


async def ensure_storage(storage: StorageRoot, committer: Committer) -> bool:
    """Create the storage tree and seed projections if the root is missing.

    Returns True if the tree was created, False if the root already existed
    (in which case nothing is touched). A failing step propagates as-is;
    whatever was created before it is left in place.
    """
    if await storage.exists():
        return False

    await storage.mkdir()
    await storage.mkdir(EVENTS_DIR, exist_ok=False)
    await storage.mkdir(PROJECTIONS_DIR, exist_ok=False)
    await storage.create_file(PROJECTIONS_DIR, IGNORE_MARKER)
    await storage.create_file(EVENTS_DIR, IGNORE_MARKER)

    for name, seed in SEED_PROJECTIONS.items():
        await storage.write_text(PROJECTIONS_DIR, name, content=seed)

    await committer.commit(storage.root, INITIAL_COMMIT_MESSAGE)
    logger.info("Initialized storage at %s", storage.root)
    return True
