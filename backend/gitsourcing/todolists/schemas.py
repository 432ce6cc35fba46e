"""Request and response schemas for todo list endpoints."""

from pydantic import BaseModel

# -- Requests --


class CreateTodoListRequest(BaseModel):
    """Empty names pass schema validation; the service rejects them."""

    name: str = ""


# -- Responses --


class TodoListCountResponse(BaseModel):
    count: int
