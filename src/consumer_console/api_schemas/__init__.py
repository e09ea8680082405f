# Re-export all api schemas for easier access from consumer_console.api_schemas

from .base import BaseSchema, CreatedAtSchema
from .connection import RabbitMQConfig, RabbitMQConfigUpdate
from .consumer import (
    EDITABLE_FIELDS,
    IMMUTABLE_FIELDS,
    Consumer,
    ConsumerBase,
    ConsumerCreate,
    ConsumerUpdate,
    DeathQueue,
)
from .failed_callback import BulkActionRequest, FailedCallback

__all__ = [
    "BaseSchema",
    "CreatedAtSchema",
    "RabbitMQConfig",
    "RabbitMQConfigUpdate",
    "EDITABLE_FIELDS",
    "IMMUTABLE_FIELDS",
    "Consumer",
    "ConsumerBase",
    "ConsumerCreate",
    "ConsumerUpdate",
    "DeathQueue",
    "BulkActionRequest",
    "FailedCallback",
]
