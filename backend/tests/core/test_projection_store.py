"""Contract tests for the ProjectionStore."""

import pytest

from gitsourcing.models import TodoListSummary
from gitsourcing.projections.store import ProjectionDecodeError, UnknownProjectionError


class TestProjectionSeeds:
    async def test_seed_values(self, projections):
        assert await projections.read_todo_lists() == []
        assert await projections.read_todo_lists_count() == 0


class TestProjectionRoundtrip:
    async def test_todo_lists_roundtrip(self, projections):
        value = [TodoListSummary(name="Groceries"), TodoListSummary(name="Chores")]

        await projections.write("todoLists", value)

        assert await projections.read("todoLists") == value

    async def test_count_roundtrip(self, projections):
        await projections.write("todoListsCount", 42)

        assert await projections.read("todoListsCount") == 42

    async def test_todo_lists_serialized_with_name_field(self, projections, storage):
        await projections.write("todoLists", [TodoListSummary(name="Groceries")])

        content = storage.path("projections", "todoLists").read_text()
        assert content == '[{"Name":"Groceries"}]'

    async def test_write_replaces_whole_value(self, projections):
        await projections.write("todoLists", [TodoListSummary(name="A")])
        await projections.write("todoLists", [TodoListSummary(name="B")])

        assert await projections.read_todo_lists() == [TodoListSummary(name="B")]

    async def test_no_temp_file_left_behind(self, projections, storage):
        await projections.write("todoListsCount", 1)

        names = sorted(p.name for p in storage.path("projections").iterdir())
        assert names == [".gitignore", "todoLists", "todoListsCount"]


class TestProjectionErrors:
    async def test_corrupt_count_raises_decode_error(self, projections, storage):
        storage.path("projections", "todoListsCount").write_text("not a number")

        with pytest.raises(ProjectionDecodeError) as exc_info:
            await projections.read_todo_lists_count()
        assert exc_info.value.name == "todoListsCount"

    async def test_invalid_utf8_raises_decode_error(self, projections, storage):
        """Bytes that aren't UTF-8 are a decode failure, not a raw UnicodeDecodeError."""
        storage.path("projections", "todoListsCount").write_bytes(b"\xff\xfe")

        with pytest.raises(ProjectionDecodeError):
            await projections.read_todo_lists_count()

    async def test_invalid_utf8_inside_string_raises_decode_error(self, projections, storage):
        storage.path("projections", "todoLists").write_bytes(b'[{"Name": "\xff"}]')

        with pytest.raises(ProjectionDecodeError):
            await projections.read_todo_lists()

    async def test_corrupt_list_raises_decode_error(self, projections, storage):
        storage.path("projections", "todoLists").write_text('[{"Title": "x"}]')

        with pytest.raises(ProjectionDecodeError):
            await projections.read_todo_lists()

    async def test_missing_file_raises_oserror(self, projections, storage):
        storage.path("projections", "todoLists").unlink()

        with pytest.raises(OSError):
            await projections.read_todo_lists()

    async def test_unknown_projection(self, projections):
        with pytest.raises(UnknownProjectionError):
            await projections.read("nope")
        with pytest.raises(UnknownProjectionError):
            await projections.write("nope", 1)
