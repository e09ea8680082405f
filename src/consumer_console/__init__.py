# Import models/schemas that should be accessible directly from consumer_console

from .api_schemas import (
    Consumer,
    ConsumerCreate,
    ConsumerUpdate,
    DeathQueue,
    FailedCallback,
    RabbitMQConfig,
    RabbitMQConfigUpdate,
)
from .enums import BulkAction, ConsumerStatus
from .exceptions import (
    ConsoleError,
    FetchError,
    InvalidResponseShape,
    NoSelectionError,
    ServiceClientError,
    ServiceResponseError,
    TransportError,
    ValidationError,
)
from .logging import (
    LogEventType,
    LogLevel,
    clear_context,
    configure_logging,
    get_correlation_id,
    get_logger,
    set_correlation_id,
)
from .preferences import DisplayPreferences, PreferencesStore
from .rest_client import BackendClient
from .services import (
    ConnectionSettings,
    ConsumerRegistry,
    FailedCallbackRecovery,
    ItemLoadingState,
)

__all__ = [
    # Logging
    "LogEventType",
    "LogLevel",
    "configure_logging",
    "get_logger",
    "set_correlation_id",
    "get_correlation_id",
    "clear_context",
    # Schemas
    "Consumer",
    "ConsumerCreate",
    "ConsumerUpdate",
    "DeathQueue",
    "FailedCallback",
    "RabbitMQConfig",
    "RabbitMQConfigUpdate",
    # Enums
    "BulkAction",
    "ConsumerStatus",
    # Errors
    "ConsoleError",
    "FetchError",
    "InvalidResponseShape",
    "NoSelectionError",
    "ServiceClientError",
    "ServiceResponseError",
    "TransportError",
    "ValidationError",
    # Clients and services
    "BackendClient",
    "ConnectionSettings",
    "ConsumerRegistry",
    "FailedCallbackRecovery",
    "ItemLoadingState",
    # Preferences
    "DisplayPreferences",
    "PreferencesStore",
]
