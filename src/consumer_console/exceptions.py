"""Client-side errors raised by the consumer console core.

HTTP-level failures live in ``consumer_console.http_client`` and are
re-exported here so callers can import the whole taxonomy from one place.
"""

from consumer_console.http_client import (
    InvalidResponseShape,
    ServiceClientError,
    ServiceResponseError,
    ServiceTimeoutError,
    ServiceUnavailableError,
    TransportError,
)


class ConsoleError(Exception):
    """Base exception for client-side console errors."""

    pass


class ValidationError(ConsoleError):
    """A draft failed validation before any call was made."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        details = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(f"Validation failed: {details}")


class NoSelectionError(ConsoleError):
    """A bulk action was requested with nothing selected."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"No items selected for bulk {action}")


class FetchError(ConsoleError):
    """Fetching a collection or settings from the backend failed."""

    def __init__(self, resource: str, cause: Exception):
        self.resource = resource
        self.cause = cause
        super().__init__(f"Failed to fetch {resource}: {cause}")


__all__ = [
    "ConsoleError",
    "FetchError",
    "InvalidResponseShape",
    "NoSelectionError",
    "ServiceClientError",
    "ServiceResponseError",
    "ServiceTimeoutError",
    "ServiceUnavailableError",
    "TransportError",
    "ValidationError",
]
