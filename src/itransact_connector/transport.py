"""HTTPS transport for provider calls.

A transport performs exactly one round trip and returns either a
``SuccessfulResponse`` (2xx) or a ``ResponseError`` (any other status).
Network-level failures raise ``IntegrationError``.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Union

import httpx

from .config import DEFAULT_TIMEOUT
from .exceptions import IntegrationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuccessfulResponse:
    """A 2xx response from the provider."""
    status_code: int
    body: bytes


@dataclass(frozen=True)
class ResponseError:
    """A non-2xx response from the provider, carrying the raw body."""
    status_code: int
    body: bytes


TransportResult = Union[SuccessfulResponse, ResponseError]


class Transport(Protocol):
    def request(self, method: str, url: str, body: bytes, headers: Dict[str, str]) -> TransportResult:
        ...


class HttpxTransport:
    """Transport backed by a synchronous ``httpx.Client``.

    The client is thread-safe, so one transport can be shared by concurrent
    callers. Pass ``client`` to supply a preconfigured client (tests inject one
    built on ``httpx.MockTransport``).
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, client: Optional[httpx.Client] = None):
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def request(self, method: str, url: str, body: bytes, headers: Dict[str, str]) -> TransportResult:
        try:
            response = self._client.request(method, url, content=body, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"Timed out calling {method} {url}")
            raise IntegrationError(f"Request to {url} timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Transport failure calling {method} {url}: {type(e).__name__}")
            raise IntegrationError(f"Request to {url} failed: {e}") from e
        except httpx.InvalidURL as e:
            logger.error(f"Refusing to call malformed URL for {method}: {e}")
            raise IntegrationError(f"Invalid request URL: {e}") from e

        if response.is_success:
            return SuccessfulResponse(status_code=response.status_code, body=response.content)
        return ResponseError(status_code=response.status_code, body=response.content)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
