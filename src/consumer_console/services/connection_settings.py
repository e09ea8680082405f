"""Broker connection settings: read, persist and probe."""

from collections.abc import Mapping
from typing import Any

from consumer_console.api_schemas import RabbitMQConfig, RabbitMQConfigUpdate
from consumer_console.exceptions import FetchError
from consumer_console.logging import LogEventType, get_logger
from consumer_console.rest_client import BackendClient

logger = get_logger(__name__)

ConfigInput = RabbitMQConfig | RabbitMQConfigUpdate | Mapping[str, Any]


def _coerce(config: ConfigInput) -> RabbitMQConfigUpdate:
    if isinstance(config, RabbitMQConfigUpdate):
        return config
    if isinstance(config, RabbitMQConfig):
        return RabbitMQConfigUpdate.from_config(config)
    return RabbitMQConfigUpdate.model_validate(dict(config))


class ConnectionSettings:
    """Reads and writes the backend's broker connection settings."""

    def __init__(self, client: BackendClient):
        self._client = client
        self.last_error: Exception | None = None

    async def read(self) -> RabbitMQConfig:
        """
        Fetch the persisted settings. Nothing is cached.

        Raises:
            FetchError: Settings could not be loaded
        """
        try:
            return await self._client.get_rabbitmq_config()
        except Exception as e:
            logger.error(
                "Error reading broker settings",
                event_type=LogEventType.CONNECTION_CONFIG,
                error=str(e),
            )
            raise FetchError("broker settings", e) from e

    async def write(self, config: ConfigInput) -> bool:
        """Persist settings. Does not check that the broker is reachable."""
        try:
            await self._client.update_rabbitmq_config(_coerce(config))
        except Exception as e:
            self.last_error = e
            logger.error(
                "Error saving broker settings",
                event_type=LogEventType.CONNECTION_CONFIG,
                error=str(e),
            )
            return False
        self.last_error = None
        logger.info("Broker settings saved", event_type=LogEventType.CONNECTION_CONFIG)
        return True

    async def test_connection(self, candidate: ConfigInput) -> bool:
        """Probe candidate settings on the backend without persisting them."""
        try:
            await self._client.test_rabbitmq_connection(_coerce(candidate))
        except Exception as e:
            self.last_error = e
            logger.warning(
                "Broker connection test failed",
                event_type=LogEventType.CONNECTION_TEST,
                error=str(e),
            )
            return False
        self.last_error = None
        logger.info(
            "Broker connection test succeeded",
            event_type=LogEventType.CONNECTION_TEST,
        )
        return True
