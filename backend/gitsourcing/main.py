"""gitsourcing FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gitsourcing.config import Settings, load_env_file
from gitsourcing.snapshots.committer import GitCommitter
from gitsourcing.storage.files import StorageRoot
from gitsourcing.storage.layout import ensure_storage
from gitsourcing.todolists.router import get_todo_list_service
from gitsourcing.todolists.router import router as todo_lists_router
from gitsourcing.todolists.service import TodoListService

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize storage and wire services."""
    settings: Settings = app.state.settings
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    storage = StorageRoot(settings.storage_root)
    committer = GitCommitter(
        git_binary=settings.git_binary,
        author_name=settings.git_author_name,
        author_email=settings.git_author_email,
    )
    created = await ensure_storage(storage, committer)
    if not created:
        logger.info("Using existing storage at %s", storage.root)

    service = TodoListService(storage, committer)
    app.dependency_overrides[get_todo_list_service] = lambda: service

    yield

    app.dependency_overrides.pop(get_todo_list_service, None)


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        load_env_file()
        settings = Settings.load()

    application = FastAPI(
        title="gitsourcing",
        description="Event-sourced todo lists with a git-backed audit trail",
        version=VERSION,
        lifespan=lifespan,
    )
    application.state.settings = settings

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(todo_lists_router)

    @application.get("/api/health")
    async def health() -> dict:
        return {"status": "ok", "version": VERSION}

    return application


app = create_app()
