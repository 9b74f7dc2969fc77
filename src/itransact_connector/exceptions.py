"""Exception hierarchy for the iTransact connector.

Provider declines are not exceptions; they come back as a failed ``Result``.
The classes below cover programmer and operations errors only.
"""

from typing import Optional


class ConnectorError(Exception):
    """Base exception for all connector errors."""


class ConfigurationError(ConnectorError):
    """Required configuration (credentials, settings) is missing or invalid."""


class IntegrationError(ConnectorError):
    """The provider could not be reached or answered with an unexpected body.

    Raised for connection errors, timeouts, non-JSON bodies and bodies that
    lack the fields the connector relies on.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[bytes] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class InvalidAuthorizationError(ConnectorError, ValueError):
    """A transaction reference is empty or not safe to embed in a URL path."""
