from ..duration import Duration, decode
from ..enums import ConsumerStatus
from .base import BaseSchema

# Binding coordinates fixed once a consumer exists
IMMUTABLE_FIELDS = (
    "vhost",
    "queue_name",
    "exchange_name",
    "routing_key",
    "death_queue",
)
# Fields an operator may change on an existing consumer
EDITABLE_FIELDS = ("name", "status", "callback", "queue_count")


# ========== Dead-letter Schemas ============


class DeathQueue(BaseSchema):
    x_death_queue_name: str | None = None
    bind_exchange: str | None = None
    bind_routing_key: str | None = None
    x_message_ttl: str | None = None  # Duration token, e.g. "1h30m"

    def is_empty(self) -> bool:
        return not any(
            (
                self.x_death_queue_name,
                self.bind_exchange,
                self.bind_routing_key,
                self.x_message_ttl,
            )
        )

    @property
    def ttl(self) -> Duration:
        return decode(self.x_message_ttl)


# ========= Consumer Schemas ==========


class ConsumerBase(BaseSchema):
    name: str
    status: ConsumerStatus = ConsumerStatus.RUNNING
    vhost: str
    queue_name: str
    exchange_name: str
    routing_key: str
    death_queue: DeathQueue | None = None
    callback: str
    queue_count: int = 1


class ConsumerCreate(BaseSchema):
    # Everything is optional here so the validator reports what is missing
    name: str | None = None
    status: ConsumerStatus = ConsumerStatus.RUNNING
    vhost: str | None = None
    queue_name: str | None = None
    exchange_name: str | None = None
    routing_key: str | None = None
    death_queue: DeathQueue | None = None
    callback: str | None = None
    queue_count: int | None = None


class ConsumerUpdate(BaseSchema):  # Allow partial updates
    name: str | None = None
    status: ConsumerStatus | None = None
    vhost: str | None = None
    queue_name: str | None = None
    exchange_name: str | None = None
    routing_key: str | None = None
    death_queue: DeathQueue | None = None
    callback: str | None = None
    queue_count: int | None = None


class Consumer(ConsumerBase):
    id: int | str
