from unittest.mock import AsyncMock, patch

import pytest

from consumer_console.rest_client import BackendClient


@pytest.fixture
def consumer_payload():
    """A consumer as the backend returns it from GET /consumers."""
    return {
        "id": 7,
        "name": "orders",
        "status": "running",
        "vhost": "/",
        "queue_name": "q1",
        "exchange_name": "ex1",
        "routing_key": "rk1",
        "death_queue": {
            "x_death_queue_name": "q1.dead",
            "bind_exchange": "ex1.dlx",
            "bind_routing_key": "rk1.dead",
            "x_message_ttl": "1h30m",
        },
        "callback": "http://cb/x",
        "queue_count": 2,
        "retry_mode": "10s,1m",
    }


@pytest.fixture
def failed_callback_payloads():
    return [
        {
            "id": 1,
            "queue_name": "q1",
            "request_data": '{"order": 1}',
            "response_code": 500,
            "response_content": "boom",
            "created_at": "2025-01-02T10:00:00Z",
        },
        {
            "id": 2,
            "queue_name": "q1",
            "request_data": '{"order": 2}',
            "response_code": 0,
            "response_content": "",
            "created_at": "2025-01-02T09:00:00",
        },
    ]


@pytest.fixture
def backend():
    """Backend client whose request method is mocked."""
    with patch.object(BackendClient, "request", new_callable=AsyncMock) as mock:
        client = BackendClient(base_url="http://test-backend:1981")
        client._mock_request = mock
        yield client
