"""
Fixtures for integration tests.

Provides:
- A scripted Pezesha API backed by httpx.MockTransport
- A client wired to it with test credentials
- Valid request payloads for each operation
"""

import json
from typing import Any, Dict, List

import httpx
import pytest

from pezesha import PezeshaClient


TEST_CONFIG = {
    "client_id": "test_client_id",
    "client_secret": "test_client_secret",
    "base_url": "https://api.test.pezesha.com",
    "channel": "test_channel",
}

TOKEN_RESPONSE = {
    "token_type": "Bearer",
    "expires_in": 3600,
    "access_token": "test_token",
}


# =============================================================================
# Mock API
# =============================================================================

class MockPezeshaAPI:
    """Replays queued responses and records every request it receives."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._queue: List[Any] = []

    def queue(self, body: Any, status_code: int = 200) -> None:
        """Queue a JSON response."""
        self._queue.append(httpx.Response(status_code, json=body))

    def queue_text(self, text: str, status_code: int = 200) -> None:
        """Queue a raw, non-JSON response."""
        self._queue.append(httpx.Response(status_code, text=text))

    def queue_token(self, token: str = "test_token") -> None:
        self.queue({**TOKEN_RESPONSE, "access_token": token})

    def queue_error(self, error_type: type, message: str) -> None:
        """Queue an httpx transport error, e.g. httpx.ConnectError."""
        self._queue.append((error_type, message))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._queue:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")

        item = self._queue.pop(0)
        if isinstance(item, tuple):
            error_type, message = item
            raise error_type(message, request=request)
        return item

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]

    def body(self, index: int) -> Dict[str, Any]:
        """Decoded JSON body of the request at index."""
        return json.loads(self.requests[index].content)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture
def api() -> MockPezeshaAPI:
    """Create a fresh scripted API."""
    return MockPezeshaAPI()


@pytest.fixture
def client(api: MockPezeshaAPI) -> PezeshaClient:
    """Create a client that talks to the scripted API."""
    with PezeshaClient(transport=api.transport, config=TEST_CONFIG) as pezesha:
        yield pezesha


# =============================================================================
# Payload Fixtures
# =============================================================================

@pytest.fixture
def user_data() -> Dict[str, Any]:
    """A complete borrower registration record."""
    return {
        "terms": True,
        "location": "Nairobi",
        "merchant_reg_date": "2023-01-15",
        "merchant_id": "MERCHANT123",
        "email": "jane@example.com",
        "dob": "1990-05-20",
        "phone": "+254712345678",
        "full_names": "Jane Wanjiku",
        "national_id": "12345678",
    }


def make_transaction(index: int = 0, **overrides: Any) -> Dict[str, Any]:
    """Helper to create a valid transaction record."""
    transaction = {
        "transaction_id": f"TXN{index:04d}",
        "merchant_id": "MERCHANT123",
        "face_amount": 1500.50,
        "transaction_time": "2024-03-01 14:30:00",
    }
    transaction.update(overrides)
    return transaction


@pytest.fixture
def loan_details() -> Dict[str, Any]:
    """A complete loan application."""
    return {
        "amount": "10000",
        "duration": "12",
        "interest": "1200",
        "rate": "12",
        "fee": "500",
        "payment_details": {
            "type": "mobile_money",
            "number": "254712345678",
            "callback_url": "https://example.com/callback",
        },
    }


@pytest.fixture
def transaction_factory():
    """Expose make_transaction to tests."""
    return make_transaction
