"""
Consumer registry: list and mutate consumer definitions on the backend.

Every successful mutation is followed by a fresh list; nothing is patched
locally. Refreshes are numbered when issued and a completion is applied
only if no later-issued refresh has already been applied.
"""

from collections.abc import Awaitable, Mapping
from typing import Any

from consumer_console.api_schemas import Consumer, ConsumerCreate, ConsumerUpdate
from consumer_console.exceptions import ValidationError
from consumer_console.logging import LogEventType, get_logger
from consumer_console.rest_client import BackendClient
from consumer_console.validation import (
    merge_update,
    to_wire_payload,
    validate_for_create,
    validate_for_update,
)

logger = get_logger(__name__)


class ConsumerRegistry:
    """Client-side view of the backend's consumer collection."""

    def __init__(self, client: BackendClient):
        self._client = client
        self.consumers: list[Consumer] = []
        self.last_error: Exception | None = None
        self._issued_seq = 0
        self._applied_seq = 0

    def get(self, consumer_id: int | str) -> Consumer | None:
        """Find a consumer in the last applied list."""
        for consumer in self.consumers:
            if str(consumer.id) == str(consumer_id):
                return consumer
        return None

    async def list_consumers(self) -> list[Consumer]:
        """
        Fetch the consumer list and apply it unless a newer refresh won.

        Raises:
            InvalidResponseShape: Backend did not return an array
            TransportError: No response obtained
            ServiceResponseError: Non-2xx response
        """
        self._issued_seq += 1
        seq = self._issued_seq

        consumers = await self._client.get_consumers()

        if seq > self._applied_seq:
            self._applied_seq = seq
            self.consumers = consumers
            logger.debug(
                "Consumer list applied",
                event_type=LogEventType.CONSUMER_LIST,
                seq=seq,
                count=len(consumers),
            )
        else:
            logger.debug(
                "Discarding stale consumer list",
                event_type=LogEventType.CONSUMER_LIST,
                seq=seq,
                applied_seq=self._applied_seq,
            )
        return list(self.consumers)

    async def _refresh_quietly(self) -> None:
        try:
            await self.list_consumers()
        except Exception as e:
            logger.warning(
                "Error refreshing consumers after mutation",
                event_type=LogEventType.CONSUMER_LIST,
                error=str(e),
            )

    async def _mutate(
        self, operation: str, call: Awaitable[Any], consumer_id: int | str | None = None
    ) -> bool:
        try:
            await call
        except Exception as e:
            self.last_error = e
            logger.error(
                "Consumer mutation failed",
                event_type=LogEventType.CONSUMER_MUTATION,
                operation=operation,
                consumer_id=consumer_id,
                error=str(e),
            )
            return False

        self.last_error = None
        logger.info(
            "Consumer mutation succeeded",
            event_type=LogEventType.CONSUMER_MUTATION,
            operation=operation,
            consumer_id=consumer_id,
        )
        await self._refresh_quietly()
        return True

    def _reject(self, operation: str, errors: dict[str, str]) -> bool:
        self.last_error = ValidationError(errors)
        logger.warning(
            "Consumer draft rejected",
            event_type=LogEventType.CONSUMER_MUTATION,
            operation=operation,
            errors=errors,
        )
        return False

    async def create(self, draft: ConsumerCreate | Mapping[str, Any]) -> bool:
        """Validate and create a consumer. Returns False on any failure."""
        result = validate_for_create(draft)
        if not result.is_valid:
            return self._reject("create", result.errors)

        payload = to_wire_payload(result.draft)
        return await self._mutate("create", self._client.create_consumer(payload))

    async def update(
        self, consumer_id: int | str, draft: ConsumerUpdate | Mapping[str, Any]
    ) -> bool:
        """
        Update the editable fields of a consumer.

        Fields the draft does not supply keep their stored values; the full
        merged record is sent so the backend never sees a cleared field.
        """
        existing = self.get(consumer_id)
        if existing is None:
            try:
                await self.list_consumers()
            except Exception as e:
                self.last_error = e
                logger.error(
                    "Error loading consumer for update",
                    event_type=LogEventType.CONSUMER_MUTATION,
                    consumer_id=consumer_id,
                    error=str(e),
                )
                return False
            existing = self.get(consumer_id)
        if existing is None:
            return self._reject("update", {"id": f"unknown consumer {consumer_id}"})

        result = validate_for_update(draft, existing)
        if not result.is_valid:
            return self._reject("update", result.errors)

        payload = to_wire_payload(merge_update(result.draft, existing))
        return await self._mutate(
            "update",
            self._client.update_consumer(existing.id, payload),
            consumer_id=existing.id,
        )

    async def delete(self, consumer_id: int | str) -> bool:
        return await self._mutate(
            "delete", self._client.delete_consumer(consumer_id), consumer_id
        )

    async def restart(self, consumer_id: int | str) -> bool:
        return await self._mutate(
            "restart", self._client.restart_consumer(consumer_id), consumer_id
        )

    async def enable(self, consumer_id: int | str) -> bool:
        return await self._mutate(
            "enable", self._client.enable_consumer(consumer_id), consumer_id
        )

    async def disable(self, consumer_id: int | str) -> bool:
        return await self._mutate(
            "disable", self._client.disable_consumer(consumer_id), consumer_id
        )
