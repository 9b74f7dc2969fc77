"""Payment provider connectors."""

from .base import (
    ConnectorBase,
    Credentials,
    CreditCard,
    BillingAddress,
    PaymentOptions,
    Result,
    coerce_options,
)
from .signing import (
    canonical_json,
    sign_body,
    sign_payload,
    signed_api_key,
    authorization_header,
    request_headers,
)
from .itransact_connector import ItransactConnector

__all__ = [
    # Base classes and models
    "ConnectorBase",
    "Credentials",
    "CreditCard",
    "BillingAddress",
    "PaymentOptions",
    "Result",
    "coerce_options",
    # Signing
    "canonical_json",
    "sign_body",
    "sign_payload",
    "signed_api_key",
    "authorization_header",
    "request_headers",
    # Connectors
    "ItransactConnector",
]
