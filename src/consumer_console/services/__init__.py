from .connection_settings import ConnectionSettings
from .consumer_registry import ConsumerRegistry
from .failed_callbacks import FailedCallbackRecovery, ItemLoadingState

__all__ = [
    "ConnectionSettings",
    "ConsumerRegistry",
    "FailedCallbackRecovery",
    "ItemLoadingState",
]
