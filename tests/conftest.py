"""Shared test fixtures and configuration."""

import json
import os
import pytest
from typing import Any, Dict, List

import httpx

# Set up test environment variables before importing modules
os.environ.setdefault("API_KEY", "test_api_key_12345")

from itransact_connector.connectors.base import BillingAddress, CreditCard, PaymentOptions
from itransact_connector.connectors.itransact_connector import ItransactConnector
from itransact_connector.transport import HttpxTransport


SUCCESS_BODY = {
    "id": "tr_508LEItovSXZBSG8rD_DfQ",
    "amount": 1060,
    "status": "postauthed",
    "settled": True,
    "instrument": "cc",
    "metadata": [{"key": "email", "value": "email"}],
}

FAILURE_BODY = {
    "error": {
        "type": "TYPE",
        "message": "Cannot do something",
        "transaction_id": "tr_fBtcXiEj42sN3ynfTC2j4w",
    }
}


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code: int = 200, body: Any = None, content: bytes = None):
        self.status_code = status_code
        self.content = content if content is not None else json.dumps(body or {}).encode()
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.content)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_payload(self) -> Dict[str, Any]:
        return json.loads(self.last_request.content)


@pytest.fixture(autouse=True)
def clean_itransact_env(monkeypatch):
    """Keep ITRANSACT_* variables from the host out of the tests."""
    for name in ("ITRANSACT_API_KEY", "ITRANSACT_API_SECRET", "ITRANSACT_TEST_MODE", "ITRANSACT_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def credit_card() -> CreditCard:
    return CreditCard(
        number="4000100011112224",
        verification_value="123",
        month=9,
        year=2030,
        first_name="Longbob",
        last_name="Longsen",
        brand="visa",
    )


@pytest.fixture
def billing_address() -> BillingAddress:
    return BillingAddress(
        address1="456 My Street",
        address2="Apt 1",
        city="Ottawa",
        state="ON",
        zip="K1C2N6",
        country="CA",
        name="Jim Smith",
        phone="(555)555-5555",
    )


@pytest.fixture
def payment_options(billing_address) -> PaymentOptions:
    return PaymentOptions(
        email="name@domain.com",
        order_id="1",
        billing_address=billing_address,
        description="Store Purchase",
    )


@pytest.fixture
def success_handler() -> RecordingHandler:
    return RecordingHandler(200, SUCCESS_BODY)


@pytest.fixture
def failure_handler() -> RecordingHandler:
    return RecordingHandler(500, FAILURE_BODY)


def make_connector(handler: RecordingHandler, **kwargs) -> ItransactConnector:
    transport = HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))
    kwargs.setdefault("api_key", "key")
    kwargs.setdefault("api_secret", "secret")
    kwargs.setdefault("test_mode", True)
    return ItransactConnector(transport=transport, **kwargs)


@pytest.fixture
def connector(success_handler) -> ItransactConnector:
    return make_connector(success_handler)


@pytest.fixture
def failing_connector(failure_handler) -> ItransactConnector:
    return make_connector(failure_handler)
