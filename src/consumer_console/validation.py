"""
Validation and payload preparation for consumer drafts.

Creation requires the full binding; updates may only touch the editable
fields (name, status, callback, queue_count). On update every field is in
one of three states relative to the stored consumer:

    UNSET      - the operator never supplied it; the stored value is kept
    UNCHANGED  - supplied, but equal to the stored value
    SET        - supplied with a new value
"""

import enum
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from consumer_console.api_schemas import (
    EDITABLE_FIELDS,
    IMMUTABLE_FIELDS,
    Consumer,
    ConsumerCreate,
    ConsumerUpdate,
    DeathQueue,
)
from consumer_console.exceptions import ValidationError

REQUIRED_ON_CREATE = (
    "name",
    "queue_name",
    "exchange_name",
    "vhost",
    "routing_key",
    "callback",
)


class FieldChange(str, enum.Enum):
    UNSET = "unset"
    UNCHANGED = "unchanged"
    SET = "set"


class ValidationResult(BaseModel):
    errors: dict[str, str] = {}
    # Normalized draft, only present when validation passed
    draft: ConsumerCreate | ConsumerUpdate | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ValidationError(self.errors)


def _parse(model: type[BaseModel], draft: Any) -> tuple[Any, dict[str, str]]:
    if isinstance(draft, model):
        return draft, {}
    if not isinstance(draft, Mapping):
        return None, {"__root__": f"expected {model.__name__} or mapping"}
    try:
        return model.model_validate(dict(draft)), {}
    except PydanticValidationError as e:
        errors = {}
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "__root__"
            errors[field] = error["msg"]
        return None, errors


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _normalize_death_queue(value: DeathQueue | None) -> dict | None:
    if value is None or value.is_empty():
        return None
    return {k: v or "" for k, v in value.model_dump().items()}


def field_change(draft: ConsumerUpdate, existing: Consumer, field: str) -> FieldChange:
    """Classify one field of an update draft against the stored consumer."""
    if field not in draft.model_fields_set:
        return FieldChange.UNSET
    new = getattr(draft, field)
    old = getattr(existing, field)
    if new is None:
        # An explicit null from a form control means "not touched"
        return FieldChange.UNSET
    if field == "death_queue":
        new, old = _normalize_death_queue(new), _normalize_death_queue(old)
    return FieldChange.UNCHANGED if new == old else FieldChange.SET


def validate_for_create(draft: ConsumerCreate | Mapping[str, Any]) -> ValidationResult:
    parsed, errors = _parse(ConsumerCreate, draft)
    if parsed is None:
        return ValidationResult(errors=errors)

    for field in REQUIRED_ON_CREATE:
        if _is_blank(getattr(parsed, field)):
            errors[field] = "is required"

    if parsed.queue_count is None:
        parsed = parsed.model_copy(update={"queue_count": 1})
    elif parsed.queue_count < 1:
        errors["queue_count"] = "must be at least 1"

    # Partial dead-letter configuration is accepted as-is

    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(draft=parsed)


def validate_for_update(
    draft: ConsumerUpdate | Mapping[str, Any], existing: Consumer
) -> ValidationResult:
    parsed, errors = _parse(ConsumerUpdate, draft)
    if parsed is None:
        return ValidationResult(errors=errors)

    for field in IMMUTABLE_FIELDS:
        if field_change(parsed, existing, field) is FieldChange.SET:
            errors[field] = "cannot be changed after creation"

    if field_change(parsed, existing, "callback") is FieldChange.UNSET:
        callback = existing.callback
    else:
        callback = parsed.callback
    if _is_blank(callback):
        errors["callback"] = "is required"

    if field_change(parsed, existing, "name") is FieldChange.SET and _is_blank(
        parsed.name
    ):
        errors["name"] = "cannot be empty"

    if (
        field_change(parsed, existing, "queue_count") is FieldChange.SET
        and parsed.queue_count < 1
    ):
        errors["queue_count"] = "must be at least 1"

    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(draft=parsed)


def merge_update(draft: ConsumerUpdate, existing: Consumer) -> Consumer:
    """Apply the editable fields the operator supplied on top of ``existing``."""
    updates = {
        field: getattr(draft, field)
        for field in EDITABLE_FIELDS
        if field_change(draft, existing, field) is FieldChange.SET
    }
    return existing.model_copy(update=updates)


def sanitize_for_transmission(record: Any) -> Any:
    """Replace every missing value with "" at every nesting level."""
    if isinstance(record, BaseModel):
        record = record.model_dump(mode="json")
    if isinstance(record, Mapping):
        return {key: sanitize_for_transmission(value) for key, value in record.items()}
    if isinstance(record, (list, tuple)):
        return [sanitize_for_transmission(item) for item in record]
    if record is None:
        return ""
    return record


def to_wire_payload(record: ConsumerCreate | Consumer) -> dict[str, Any]:
    """Sanitized JSON body for POST/PUT /consumers."""
    data = record.model_dump(mode="json", exclude={"id"})
    # The backend decodes death_queue as an object, never as a scalar
    if data.get("death_queue") is None:
        data["death_queue"] = DeathQueue().model_dump()
    return sanitize_for_transmission(data)
