"""
REST client for the consumer management backend using BaseServiceClient.

One method per backend endpoint; no state is kept here. The stateful
registry, recovery and settings services in ``consumer_console.services``
build on top of it.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from consumer_console.api_schemas import (
    BulkActionRequest,
    Consumer,
    FailedCallback,
    RabbitMQConfig,
    RabbitMQConfigUpdate,
)
from consumer_console.enums import BulkAction
from consumer_console.http_client import (
    BaseServiceClient,
    ClientConfig,
    InvalidResponseShape,
)
from consumer_console.settings import settings


class BackendClient(BaseServiceClient):
    """Client for the consumer management backend."""

    def __init__(self, base_url: str | None = None, config: ClientConfig | None = None):
        config = config or ClientConfig(
            timeout=settings.HTTP_TIMEOUT,
            connect_timeout=settings.HTTP_CONNECT_TIMEOUT,
            max_retries=settings.HTTP_MAX_RETRIES,
            circuit_breaker_fail_max=settings.CIRCUIT_BREAKER_FAIL_MAX,
            circuit_breaker_reset_timeout=settings.CIRCUIT_BREAKER_RESET_TIMEOUT,
        )
        super().__init__(
            base_url=(base_url or settings.API_BASE_URL).rstrip("/"),
            service_name="consumer_console",
            target_service="consumer_backend",
            config=config,
        )

    async def _get_list(self, endpoint: str) -> list[Any]:
        result = await self.request("GET", endpoint)
        # The backend encodes an empty collection as null
        if result is None:
            return []
        if not isinstance(result, list):
            raise InvalidResponseShape(endpoint, "array", result)
        return result

    # === Consumers ===

    async def get_consumers(self) -> list[Consumer]:
        """Get list of all consumers."""
        result = await self._get_list("/consumers")
        try:
            return [Consumer.model_validate(consumer) for consumer in result]
        except PydanticValidationError as e:
            raise InvalidResponseShape(
                "/consumers", "array of consumers", result
            ) from e

    async def create_consumer(self, payload: dict[str, Any]) -> dict | None:
        """Create a consumer from a sanitized payload."""
        return await self.request("POST", "/consumers", json=payload)

    async def update_consumer(
        self, consumer_id: int | str, payload: dict[str, Any]
    ) -> dict | None:
        """Replace a consumer's stored definition with a sanitized payload."""
        return await self.request("PUT", f"/consumers/{consumer_id}", json=payload)

    async def delete_consumer(self, consumer_id: int | str) -> None:
        """Delete a consumer."""
        await self.request("DELETE", f"/consumers/{consumer_id}")

    async def restart_consumer(self, consumer_id: int | str) -> None:
        """Restart a consumer's queue workers."""
        await self.request("PUT", f"/consumers/{consumer_id}/restart")

    async def enable_consumer(self, consumer_id: int | str) -> None:
        """Set a consumer's status to running."""
        await self.request("PUT", f"/consumers/{consumer_id}/enable")

    async def disable_consumer(self, consumer_id: int | str) -> None:
        """Set a consumer's status to stopped."""
        await self.request("PUT", f"/consumers/{consumer_id}/disable")

    # === Failed Callbacks ===

    async def get_failed_callbacks(self) -> list[FailedCallback]:
        """Get list of failed callback records, newest first."""
        result = await self._get_list("/failed-callbacks")
        try:
            return [FailedCallback.model_validate(item) for item in result]
        except PydanticValidationError as e:
            raise InvalidResponseShape(
                "/failed-callbacks", "array of failed callbacks", result
            ) from e

    async def retry_failed_callback(self, callback_id: int | str) -> None:
        """Ask the backend to redeliver one failed callback."""
        await self.request("POST", f"/failed-callbacks/{callback_id}/retry")

    async def delete_failed_callback(self, callback_id: int | str) -> None:
        """Delete one failed callback record."""
        await self.request("DELETE", f"/failed-callbacks/{callback_id}")

    async def bulk_failed_callbacks(
        self, ids: list[int | str], action: BulkAction
    ) -> None:
        """Retry or delete several failed callbacks in one call."""
        body = BulkActionRequest(ids=ids, action=action)
        await self.request(
            "POST", "/failed-callbacks/bulk", json=body.model_dump(mode="json")
        )

    # === Broker Connection Settings ===

    async def get_rabbitmq_config(self) -> RabbitMQConfig:
        """Get the persisted broker connection settings."""
        result = await self.request("GET", "/rabbitmq-config")
        if not isinstance(result, dict):
            raise InvalidResponseShape("/rabbitmq-config", "object", result)
        return RabbitMQConfig.model_validate(result)

    async def update_rabbitmq_config(self, config: RabbitMQConfigUpdate) -> None:
        """Persist broker connection settings."""
        await self.request(
            "PUT", "/rabbitmq-config", json=config.model_dump(mode="json")
        )

    async def test_rabbitmq_connection(self, candidate: RabbitMQConfigUpdate) -> None:
        """Probe a broker connection without persisting anything."""
        await self.request(
            "POST", "/test-rabbitmq-connection", json=candidate.model_dump(mode="json")
        )
