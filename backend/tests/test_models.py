"""Tests for the event envelope and the event type registry."""

import pytest
from pydantic import ValidationError

from gitsourcing.models import EVENT_TYPES, TodoListCreatedPayload
from tests.fixtures import make_envelope, make_todo_list_created_envelope


class TestTypedPayload:
    def test_registered_type_validated(self):
        event = make_todo_list_created_envelope(aggregate_id="agg", name="Groceries")

        payload = event.typed_payload()

        assert isinstance(payload, TodoListCreatedPayload)
        assert payload.id == "agg"
        assert payload.name == "Groceries"

    def test_registry_covers_todo_list_created(self):
        assert EVENT_TYPES["TodoListCreated"] is TodoListCreatedPayload

    def test_unregistered_type_raises_key_error(self):
        with pytest.raises(KeyError):
            make_envelope("TodoListArchived", reason="done").typed_payload()

    def test_missing_field_raises_validation_error(self):
        with pytest.raises(ValidationError):
            make_envelope("TodoListCreated", id="agg").typed_payload()
