"""
Async HTTP access to the consumer management backend.

Every request goes through a pybreaker circuit breaker. Transport failures and
5xx responses count against it; 4xx responses and malformed bodies do not,
since they prove the backend is reachable. Once open, the breaker rejects
calls locally until ``circuit_breaker_reset_timeout`` has elapsed, then lets
one trial call through (half-open) and closes again if it succeeds.

Retries (tenacity) are available but off by default: a failed call is only
repeated when the operator asks for it.
"""

import re
import time
from typing import Any

import httpx
from prometheus_client import Counter, Gauge, Histogram
from pybreaker import (
    STATE_CLOSED,
    STATE_HALF_OPEN,
    STATE_OPEN,
    CircuitBreaker,
    CircuitBreakerError,
    CircuitBreakerListener,
)
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from consumer_console.logging import LogEventType, correlation_id_ctx, get_logger

logger = get_logger(__name__)

# === Prometheus Metrics ===

HTTP_REQUESTS_TOTAL = Counter(
    "http_client_requests_total",
    "Total HTTP requests made",
    ["service", "method", "endpoint", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "http_client_request_duration_seconds",
    "HTTP request duration in seconds",
    ["service", "method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

HTTP_RETRIES_TOTAL = Counter(
    "http_client_retries_total",
    "Total HTTP request retries",
    ["service", "method", "endpoint", "error_type"],
)

CIRCUIT_BREAKER_STATE = Gauge(
    "http_client_circuit_breaker_state",
    "Circuit breaker state (0=closed, 1=open, 2=half-open)",
    ["service", "target_service"],
)

BREAKER_STATE_VALUES = {STATE_CLOSED: 0, STATE_OPEN: 1, STATE_HALF_OPEN: 2}

# Failures worth retrying when retries are enabled
RETRYABLE_ERRORS = (
    httpx.TimeoutException,
    httpx.TransportError,
    httpx.HTTPStatusError,
)


# === Exceptions ===


class ServiceClientError(Exception):
    """Base exception for backend client errors."""

    pass


class TransportError(ServiceClientError):
    """No response was obtained (connection, DNS or network failure)."""

    pass


class ServiceTimeoutError(TransportError):
    """Request timed out."""

    pass


class ServiceUnavailableError(TransportError):
    """Request refused locally while the circuit breaker is open."""

    pass


class ServiceResponseError(ServiceClientError):
    """Backend answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: str, response_body: str | None = None):
        self.status_code = status_code
        self.detail = detail
        self.response_body = response_body
        super().__init__(f"HTTP {status_code}: {detail}")


class InvalidResponseShape(ServiceClientError):
    """Response parsed but does not have the expected structure."""

    def __init__(self, endpoint: str, expected: str, received: Any = None):
        self.endpoint = endpoint
        self.expected = expected
        self.received_type = type(received).__name__
        super().__init__(
            f"Unexpected response from {endpoint}: "
            f"expected {expected}, got {self.received_type}"
        )


# === Configuration ===


class ClientConfig:
    """Timeouts, retry and circuit breaker knobs for BaseServiceClient."""

    def __init__(
        self,
        timeout: float = 30.0,
        connect_timeout: float = 5.0,
        max_retries: int = 1,
        retry_min_wait: float = 1.0,
        retry_max_wait: float = 10.0,
        circuit_breaker_fail_max: int = 5,
        circuit_breaker_reset_timeout: float = 30.0,
    ):
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.max_retries = max_retries
        self.retry_min_wait = retry_min_wait
        self.retry_max_wait = retry_max_wait
        self.circuit_breaker_fail_max = circuit_breaker_fail_max
        self.circuit_breaker_reset_timeout = circuit_breaker_reset_timeout


class BreakerStateListener(CircuitBreakerListener):
    """Publishes breaker transitions to the state gauge and the log."""

    def __init__(self, service_name: str, target_service: str):
        self._gauge = CIRCUIT_BREAKER_STATE.labels(
            service=service_name, target_service=target_service
        )
        self._target_service = target_service
        self._gauge.set(BREAKER_STATE_VALUES[STATE_CLOSED])

    def state_change(self, cb, old_state, new_state) -> None:
        self._gauge.set(BREAKER_STATE_VALUES.get(new_state.name, -1))
        opened = new_state.name == STATE_OPEN
        log = logger.warning if opened else logger.info
        log(
            "Circuit breaker state changed",
            event_type=LogEventType.WARNING if opened else LogEventType.INFO,
            target=self._target_service,
            old_state=old_state.name if old_state else None,
            new_state=new_state.name,
            failures=cb.fail_counter,
        )


# === Base Client ===


class BaseServiceClient:
    """
    Base HTTP client for the management backend.

    Usage:
        class MyClient(BaseServiceClient):
            def __init__(self):
                super().__init__(
                    base_url="http://localhost:1981",
                    service_name="consumer_console",
                    target_service="consumer_backend",
                )

            async def get_consumers(self) -> list:
                return await self.request("GET", "/consumers")
    """

    def __init__(
        self,
        base_url: str,
        service_name: str,
        target_service: str,
        config: ClientConfig | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.service_name = service_name
        self.target_service = target_service
        self.config = config or ClientConfig()

        self._client: httpx.AsyncClient | None = None
        self._circuit_breaker = CircuitBreaker(
            fail_max=self.config.circuit_breaker_fail_max,
            reset_timeout=self.config.circuit_breaker_reset_timeout,
            # Reachable-backend errors must not trip the breaker
            exclude=[ServiceResponseError, InvalidResponseShape],
            listeners=[BreakerStateListener(service_name, target_service)],
            name=f"{service_name}_to_{target_service}",
            # Keep the original failure so it maps to the right client error
            throw_new_error_on_trip=False,
        )

        logger.info(
            "Service client initialized",
            event_type=LogEventType.STARTUP,
            service=service_name,
            target=target_service,
            base_url=self.base_url,
        )

    @property
    def circuit_state(self) -> str:
        return self._circuit_breaker.current_state

    async def _get_client(self) -> httpx.AsyncClient:
        """Lazy initialization of HTTP client."""
        if self._client is None or self._client.is_closed:
            timeout = httpx.Timeout(
                self.config.timeout,
                connect=self.config.connect_timeout,
            )
            self._client = httpx.AsyncClient(timeout=timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
            logger.info(
                "Service client closed",
                event_type=LogEventType.SHUTDOWN,
                service=self.service_name,
            )

    async def __aenter__(self) -> "BaseServiceClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> dict[str, Any] | list[Any] | None:
        """
        Send one request to the backend.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint (e.g., "/consumers/1")
            **kwargs: Additional arguments for httpx (json, params, headers, etc.)

        Returns:
            Parsed JSON body, or None for 204 No Content / empty body

        Raises:
            ServiceUnavailableError: Circuit breaker is open
            ServiceTimeoutError: Request timed out
            TransportError: No response obtained
            ServiceResponseError: Non-2xx response
            InvalidResponseShape: Body is not valid JSON
        """
        url = f"{self.base_url}{endpoint}"
        correlation_id = correlation_id_ctx.get()

        headers = kwargs.pop("headers", {})
        headers.setdefault("Content-Type", "application/json")
        if correlation_id:
            headers["X-Correlation-ID"] = correlation_id
        kwargs["headers"] = headers

        start_time = time.perf_counter()
        outcome = "error"
        try:
            with self._circuit_breaker.calling():
                result = await self._send_with_retry(method, url, endpoint, **kwargs)
            outcome = "success"
            return result

        except CircuitBreakerError as e:
            outcome = "circuit_open"
            logger.error(
                "Circuit breaker open, request blocked",
                event_type=LogEventType.ERROR,
                method=method,
                endpoint=endpoint,
                target=self.target_service,
            )
            raise ServiceUnavailableError(
                f"Service {self.target_service} is unavailable (circuit breaker open)"
            ) from e

        except httpx.TimeoutException as e:
            raise ServiceTimeoutError(f"Request to {url} timed out") from e

        except httpx.HTTPStatusError as e:
            outcome = str(e.response.status_code)
            raise self._response_error(e.response) from e

        except httpx.TransportError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        except ServiceResponseError as e:
            outcome = str(e.status_code)
            raise

        except InvalidResponseShape:
            outcome = "invalid_body"
            raise

        finally:
            self._observe(method, endpoint, outcome, start_time, correlation_id)

    def _observe(
        self,
        method: str,
        endpoint: str,
        outcome: str,
        start_time: float,
        correlation_id: str | None,
    ) -> None:
        duration = time.perf_counter() - start_time
        normalized = self._normalize_endpoint(endpoint)
        HTTP_REQUESTS_TOTAL.labels(
            service=self.service_name,
            method=method,
            endpoint=normalized,
            status=outcome,
        ).inc()
        HTTP_REQUEST_DURATION.labels(
            service=self.service_name, method=method, endpoint=normalized
        ).observe(duration)
        logger.debug(
            "HTTP request completed",
            event_type=LogEventType.REQUEST_OUT,
            method=method,
            endpoint=endpoint,
            status=outcome,
            duration_ms=round(duration * 1000),
            correlation_id=correlation_id,
        )

    async def _send_with_retry(
        self, method: str, url: str, endpoint: str, **kwargs: Any
    ) -> dict[str, Any] | list[Any] | None:
        def log_retry(retry_state) -> None:
            error = retry_state.outcome.exception()
            error_type = type(error).__name__
            HTTP_RETRIES_TOTAL.labels(
                service=self.service_name,
                method=method,
                endpoint=self._normalize_endpoint(endpoint),
                error_type=error_type,
            ).inc()
            logger.warning(
                "Retrying request",
                event_type=LogEventType.WARNING,
                method=method,
                endpoint=endpoint,
                attempt=retry_state.attempt_number,
                error_type=error_type,
                error=str(error),
            )

        retrying = retry(
            stop=stop_after_attempt(self.config.max_retries),
            wait=wait_exponential(
                multiplier=1,
                min=self.config.retry_min_wait,
                max=self.config.retry_max_wait,
            ),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=log_retry,
            reraise=True,
        )
        return await retrying(self._send)(method, url, endpoint, **kwargs)

    async def _send(
        self, method: str, url: str, endpoint: str, **kwargs: Any
    ) -> dict[str, Any] | list[Any] | None:
        client = await self._get_client()
        response = await client.request(method, url, **kwargs)

        # 5xx goes through httpx so it stays retryable and counts as a failure
        if response.status_code >= 500:
            response.raise_for_status()
        if response.status_code >= 400:
            raise self._response_error(response)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponseShape(endpoint, "JSON body", response.text) from e

    @staticmethod
    def _response_error(response: httpx.Response) -> ServiceResponseError:
        detail = response.text[:500] if response.text else "Unknown error"
        try:
            data = response.json()
        except ValueError:
            data = None
        # FastAPI-style "detail", the Go backend's "error", or a plain "message"
        if isinstance(data, dict):
            for key in ("detail", "error", "message"):
                if key in data:
                    detail = str(data[key])
                    break
        return ServiceResponseError(
            status_code=response.status_code,
            detail=detail,
            response_body=response.text,
        )

    @staticmethod
    def _normalize_endpoint(endpoint: str) -> str:
        """
        Replace ids with placeholders to keep metric label cardinality low.
        /consumers/123 -> /consumers/{id}
        /failed-callbacks/42/retry -> /failed-callbacks/{id}/retry
        """
        endpoint = re.sub(
            r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
            "{id}",
            endpoint,
            flags=re.IGNORECASE,
        )
        return re.sub(r"/\d+(?=/|$)", "/{id}", endpoint)
