"""FastAPI routes for creating and listing todo lists."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from gitsourcing.events.store import DuplicateSequenceError, StreamFullError
from gitsourcing.projections.store import ProjectionDecodeError
from gitsourcing.snapshots.committer import CommitError
from gitsourcing.todolists.schemas import CreateTodoListRequest, TodoListCountResponse
from gitsourcing.todolists.service import CommandValidationError, TodoListService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/todo-lists", tags=["todo-lists"])

# Anything that means "storage or checkpoint is broken", reported opaquely.
_INTERNAL_FAILURES = (
    OSError,
    CommitError,
    ProjectionDecodeError,
    DuplicateSequenceError,
    StreamFullError,
)


def get_todo_list_service() -> TodoListService:
    """Dependency placeholder — replaced at app startup."""
    raise RuntimeError("TodoListService not initialized")


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal Server Error",
    )


@router.get("")
async def list_todo_lists(
    service: TodoListService = Depends(get_todo_list_service),
) -> JSONResponse:
    try:
        todo_lists = await service.list_todo_lists()
    except _INTERNAL_FAILURES:
        logger.exception("list_todo_lists: reading todoLists failed")
        raise _internal_error()
    return JSONResponse(content=[t.model_dump(by_alias=True) for t in todo_lists])


@router.get("/count")
async def count_todo_lists(
    service: TodoListService = Depends(get_todo_list_service),
) -> TodoListCountResponse:
    try:
        count = await service.count_todo_lists()
    except _INTERNAL_FAILURES:
        logger.exception("count_todo_lists: reading todoListsCount failed")
        raise _internal_error()
    return TodoListCountResponse(count=count)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_todo_list(
    request: CreateTodoListRequest,
    service: TodoListService = Depends(get_todo_list_service),
) -> JSONResponse:
    try:
        command = await service.create_todo_list(request.name)
    except CommandValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except _INTERNAL_FAILURES:
        logger.exception("create_todo_list: storing event failed")
        raise _internal_error()
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=command.model_dump(by_alias=True),
    )
