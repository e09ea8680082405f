"""Unit tests for consumer draft validation and payload preparation."""

import pytest

from consumer_console.api_schemas import (
    Consumer,
    ConsumerCreate,
    ConsumerUpdate,
    DeathQueue,
)
from consumer_console.enums import ConsumerStatus
from consumer_console.exceptions import ValidationError
from consumer_console.validation import (
    FieldChange,
    field_change,
    merge_update,
    sanitize_for_transmission,
    to_wire_payload,
    validate_for_create,
    validate_for_update,
)


@pytest.fixture
def create_draft():
    return {
        "name": "orders",
        "queue_name": "q1",
        "exchange_name": "ex1",
        "vhost": "/",
        "routing_key": "rk1",
        "callback": "http://cb/x",
        "queue_count": 1,
    }


@pytest.fixture
def existing(consumer_payload):
    return Consumer.model_validate(consumer_payload)


class TestValidateForCreate:
    def test_valid_draft(self, create_draft):
        result = validate_for_create(create_draft)

        assert result.is_valid
        assert result.draft.status == ConsumerStatus.RUNNING

    @pytest.mark.parametrize(
        "field",
        ["name", "queue_name", "exchange_name", "vhost", "routing_key", "callback"],
    )
    def test_required_fields(self, create_draft, field):
        create_draft[field] = "  "

        result = validate_for_create(create_draft)

        assert not result.is_valid
        assert result.errors == {field: "is required"}

    def test_missing_fields_are_all_reported(self):
        result = validate_for_create({})

        assert set(result.errors) == {
            "name",
            "queue_name",
            "exchange_name",
            "vhost",
            "routing_key",
            "callback",
        }

    def test_queue_count_defaults_to_one(self, create_draft):
        del create_draft["queue_count"]

        result = validate_for_create(create_draft)

        assert result.is_valid
        assert result.draft.queue_count == 1

    def test_queue_count_must_be_positive(self, create_draft):
        create_draft["queue_count"] = 0

        result = validate_for_create(create_draft)

        assert result.errors == {"queue_count": "must be at least 1"}

    def test_unparseable_queue_count_reported_not_raised(self, create_draft):
        create_draft["queue_count"] = "many"

        result = validate_for_create(create_draft)

        assert "queue_count" in result.errors

    def test_partial_death_queue_is_allowed(self, create_draft):
        create_draft["death_queue"] = {"x_death_queue_name": "q1.dead"}

        result = validate_for_create(create_draft)

        assert result.is_valid
        assert result.draft.death_queue.bind_exchange is None

    def test_accepts_model(self, create_draft):
        result = validate_for_create(ConsumerCreate(**create_draft))
        assert result.is_valid

    def test_raise_for_errors(self):
        result = validate_for_create({"name": "x"})

        with pytest.raises(ValidationError) as exc_info:
            result.raise_for_errors()

        assert "queue_name" in exc_info.value.errors


class TestValidateForUpdate:
    @pytest.mark.parametrize(
        "field,value",
        [
            ("queue_name", "q2"),
            ("exchange_name", "ex2"),
            ("vhost", "/other"),
            ("routing_key", "rk2"),
            ("death_queue", {"x_death_queue_name": "other.dead"}),
        ],
    )
    def test_rejects_changes_to_binding(self, existing, field, value):
        result = validate_for_update({field: value}, existing)

        assert not result.is_valid
        assert result.errors == {field: "cannot be changed after creation"}

    def test_same_binding_values_are_accepted(self, existing, consumer_payload):
        draft = {
            "queue_name": "q1",
            "vhost": "/",
            "death_queue": consumer_payload["death_queue"],
            "callback": "http://cb/y",
        }

        result = validate_for_update(draft, existing)

        assert result.is_valid

    def test_clearing_death_queue_is_rejected(self, existing):
        result = validate_for_update({"death_queue": {}}, existing)

        assert result.errors == {"death_queue": "cannot be changed after creation"}

    def test_blank_death_queue_matches_missing_one(self, existing):
        existing = existing.model_copy(update={"death_queue": None})

        result = validate_for_update(
            {"death_queue": {"x_death_queue_name": "", "x_message_ttl": None}}, existing
        )

        assert result.is_valid

    def test_callback_cannot_be_blanked(self, existing):
        result = validate_for_update({"callback": ""}, existing)

        assert result.errors == {"callback": "is required"}

    def test_queue_count_must_stay_positive(self, existing):
        result = validate_for_update({"queue_count": 0}, existing)

        assert result.errors == {"queue_count": "must be at least 1"}

    def test_name_cannot_be_blanked(self, existing):
        result = validate_for_update({"name": " "}, existing)

        assert result.errors == {"name": "cannot be empty"}


class TestFieldChange:
    def test_three_states(self, existing):
        draft = ConsumerUpdate(name="orders", callback="http://cb/y")

        assert field_change(draft, existing, "status") is FieldChange.UNSET
        assert field_change(draft, existing, "name") is FieldChange.UNCHANGED
        assert field_change(draft, existing, "callback") is FieldChange.SET

    def test_explicit_none_is_untouched(self, existing):
        draft = ConsumerUpdate(status=None)

        assert field_change(draft, existing, "status") is FieldChange.UNSET


class TestMergeUpdate:
    def test_omitted_status_is_preserved(self, existing):
        stopped = existing.model_copy(update={"status": ConsumerStatus.STOPPED})

        merged = merge_update(ConsumerUpdate(callback="http://cb/y"), stopped)

        assert merged.status == ConsumerStatus.STOPPED
        assert merged.callback == "http://cb/y"

    def test_editable_fields_applied(self, existing):
        draft = ConsumerUpdate(name="orders-v2", status="stopped", queue_count=4)

        merged = merge_update(draft, existing)

        assert merged.name == "orders-v2"
        assert merged.status == ConsumerStatus.STOPPED
        assert merged.queue_count == 4
        assert merged.queue_name == existing.queue_name
        assert merged.death_queue == existing.death_queue


class TestSanitizeForTransmission:
    def test_replaces_none_at_every_level(self):
        record = {
            "name": None,
            "queue_count": 1,
            "death_queue": {"x_death_queue_name": "dq", "bind_exchange": None},
            "tags": [None, "a", {"k": None}],
        }

        assert sanitize_for_transmission(record) == {
            "name": "",
            "queue_count": 1,
            "death_queue": {"x_death_queue_name": "dq", "bind_exchange": ""},
            "tags": ["", "a", {"k": ""}],
        }

    def test_idempotent(self, consumer_payload):
        record = {
            **consumer_payload,
            "death_queue": {"x_message_ttl": None},
            "name": None,
        }

        once = sanitize_for_transmission(record)

        assert sanitize_for_transmission(once) == once

    def test_accepts_models(self):
        result = sanitize_for_transmission(DeathQueue(x_death_queue_name="dq"))

        assert result == {
            "x_death_queue_name": "dq",
            "bind_exchange": "",
            "bind_routing_key": "",
            "x_message_ttl": "",
        }

    def test_keeps_falsy_values(self):
        assert sanitize_for_transmission({"a": 0, "b": False, "c": ""}) == {
            "a": 0,
            "b": False,
            "c": "",
        }


class TestToWirePayload:
    def test_create_payload_has_explicit_keys(self, create_draft):
        draft = validate_for_create(create_draft).draft

        payload = to_wire_payload(draft)

        assert payload["status"] == "running"
        assert payload["death_queue"] == {
            "x_death_queue_name": "",
            "bind_exchange": "",
            "bind_routing_key": "",
            "x_message_ttl": "",
        }
        assert None not in payload.values()

    def test_consumer_payload_drops_id_and_retired_fields(self, existing):
        payload = to_wire_payload(existing)

        assert "id" not in payload
        assert "retry_mode" not in payload
        assert payload["death_queue"]["x_message_ttl"] == "1h30m"
