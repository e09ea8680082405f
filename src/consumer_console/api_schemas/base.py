from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, field_validator


# Base Pydantic model configuration
class BaseSchema(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,  # Allows creating schemas from attribute objects
        populate_by_name=True,  # Allows using alias for field names if defined
    )


# Base schema for records that carry a creation timestamp
class CreatedAtSchema(BaseSchema):
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def ensure_timezone_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            # Assume naive datetime is UTC
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
