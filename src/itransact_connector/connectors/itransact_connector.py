"""iTransact gateway connector.

The API username and access key are not the Merchant Control Panel login.
Request them from iTransact support ("API Access Key" ticket) together with
your GatewayID.

Recurring billing and transaction status lookup are not implemented.
"""

import json
import logging
import re
from typing import Optional, Dict, Any

from .base import (
    ConnectorBase,
    Credentials,
    CreditCard,
    OptionsLike,
    PaymentOptions,
    Result,
    coerce_options,
)
from .signing import canonical_json, request_headers
from ..config import LIVE_URL, TEST_URL, load_settings
from ..exceptions import IntegrationError, InvalidAuthorizationError
from ..transport import HttpxTransport, ResponseError, SuccessfulResponse, Transport

logger = logging.getLogger(__name__)

AUTHORIZATION_PATTERN = re.compile(r"[A-Za-z0-9_\-]+")


class ItransactConnector(ConnectorBase):
    """
    Connector for the iTransact JSON API.

    Every call is a single signed HTTPS round trip. Provider declines come back
    as ``Result(success=False)``; transport failures and unexpected bodies raise
    ``IntegrationError``.
    """

    live_url = LIVE_URL
    test_url = TEST_URL
    supported_countries = ["US"]
    supported_cardtypes = ["visa", "master", "american_express", "discover"]
    homepage_url = "http://www.itransact.com/"
    display_name = "iTransact"

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        test_mode: Optional[bool] = None,
        transport: Optional[Transport] = None,
        timeout: Optional[float] = None,
    ):
        """Create a connector.

        Args:
            api_key: iTransact API access username. Falls back to ITRANSACT_API_KEY.
            api_secret: iTransact API access key. Falls back to ITRANSACT_API_SECRET.
            test_mode: Send requests to the test endpoint. Falls back to ITRANSACT_TEST_MODE.
            transport: Transport to send requests through. Defaults to HttpxTransport.
            timeout: Request timeout in seconds for the default transport.

        Raises:
            ConfigurationError: If the API key or secret is missing.
        """
        settings = load_settings(api_key, api_secret, test_mode, timeout)
        self.validate_required(
            {"api_key": settings.api_key, "api_secret": settings.api_secret},
            "api_key",
            "api_secret",
        )
        self._credentials = Credentials(api_key=settings.api_key, api_secret=settings.api_secret)
        self._test_mode = settings.test_mode
        self._base_url = self.test_url if settings.test_mode else self.live_url
        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport(timeout=settings.timeout)
        logger.info(f"ItransactConnector initialized ({'test' if self._test_mode else 'live'} mode)")

    @property
    def test_mode(self) -> bool:
        return self._test_mode

    @property
    def base_url(self) -> str:
        return self._base_url

    def authorize(self, amount: int, card: CreditCard, options: OptionsLike = None) -> Result:
        """Reserve funds without settling them (a "PreAuth" in iTransact terms)."""
        payload = self._card_payload(amount, card, coerce_options(options), capture=False)
        return self._commit("POST", "/transactions", payload, "authorize")

    def purchase(self, amount: int, card: CreditCard, options: OptionsLike = None) -> Result:
        """Authorize and capture in one step (an "Auth" or "Sale")."""
        payload = self._card_payload(amount, card, coerce_options(options), capture=True)
        return self._commit("POST", "/transactions", payload, "purchase")

    def capture(self, amount: int, authorization: str, options: OptionsLike = None) -> Result:
        """Settle funds reserved by a previous authorize (a "PostAuth")."""
        authorization = self._validate_authorization(authorization)
        payload = {"id": authorization, "amount": self._validate_amount(amount)}
        return self._commit("PATCH", f"/transactions/{authorization}/capture", payload, "capture")

    def void(self, authorization: str, options: OptionsLike = None) -> Result:
        """Reverse a transaction that has not settled yet."""
        authorization = self._validate_authorization(authorization)
        payload = {"id": authorization}
        return self._commit("PATCH", f"/transactions/{authorization}/void", payload, "void")

    def refund(self, amount: int, authorization: str, options: OptionsLike = None) -> Result:
        """Return settled funds. ``amount`` may be less than the original for a partial refund."""
        authorization = self._validate_authorization(authorization)
        payload = {"id": authorization, "amount": self._validate_amount(amount)}
        return self._commit("PATCH", f"/transactions/{authorization}/credit", payload, "refund")

    def build_result(self, success: bool, raw: Dict[str, Any], **kwargs: Any) -> Result:
        return Result(success=success, raw=raw, test=self._test_mode, **kwargs)

    def health_check(self) -> Dict[str, Any]:
        return {
            "ok": True,
            "provider": "itransact",
            "mode": "test" if self._test_mode else "live",
            "base_url": self._base_url,
        }

    def close(self) -> None:
        """Release the default transport. An injected transport is left to its owner."""
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> "ItransactConnector":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # Payload construction

    def _card_payload(
        self, amount: int, card: CreditCard, options: PaymentOptions, capture: bool
    ) -> Dict[str, Any]:
        # metadata is a JSON string nested inside the JSON body
        metadata = json.dumps({"email": options.email}, separators=(",", ":"), ensure_ascii=False)

        payload: Dict[str, Any] = {
            "amount": self._validate_amount(amount),
            "card": {
                "number": card.number,
                "cvv": card.verification_value,
                "exp_month": card.month,
                "exp_year": card.year,
            },
            "capture": capture,
            "metadata": metadata,
        }

        address = options.billing_address
        if address is not None:
            payload["address"] = {
                "line1": address.address1,
                "line2": address.address2,
                "city": address.city,
                "state": address.state,
                "postal_code": address.zip,
            }
        return payload

    @staticmethod
    def _validate_amount(amount: int) -> int:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValueError(f"amount must be an integer in minor units, got {amount!r}")
        if amount < 0:
            raise ValueError("amount must not be negative")
        return amount

    @staticmethod
    def _validate_authorization(authorization: str) -> str:
        if not isinstance(authorization, str) or not AUTHORIZATION_PATTERN.fullmatch(authorization):
            raise InvalidAuthorizationError(f"Invalid transaction reference: {authorization!r}")
        return authorization

    # Transport and response normalization

    def _commit(self, method: str, path: str, payload: Dict[str, Any], action: str) -> Result:
        body = canonical_json(payload)
        headers = request_headers(
            self._credentials.api_key,
            self._credentials.api_secret.get_secret_value(),
            body,
        )
        url = self._base_url + path

        logger.info(f"iTransact {action}: {method} {path}")
        outcome = self._transport.request(method, url, body, headers)

        if isinstance(outcome, SuccessfulResponse):
            result = self._success_result(outcome)
            logger.info(f"iTransact {action} succeeded: {result.authorization}")
            return result
        if isinstance(outcome, ResponseError):
            result = self._failure_result(outcome)
            logger.warning(
                f"iTransact {action} declined (HTTP {outcome.status_code}): {result.message}"
            )
            return result
        raise IntegrationError(f"Transport returned unsupported outcome {type(outcome).__name__}")

    def _success_result(self, response: SuccessfulResponse) -> Result:
        raw = self._parse(response.body, response.status_code)
        transaction_id = raw.get("id")
        if not transaction_id or not isinstance(transaction_id, str):
            raise IntegrationError(
                "Success response has no string transaction id",
                status_code=response.status_code,
                body=response.body,
            )
        return self.build_result(True, raw, authorization=transaction_id)

    def _failure_result(self, response: ResponseError) -> Result:
        raw = self._parse(response.body, response.status_code)
        error = raw.get("error")
        if not isinstance(error, dict) or "message" not in error:
            raise IntegrationError(
                "Error response has no error message",
                status_code=response.status_code,
                body=response.body,
            )
        for field in ("message", "transaction_id", "type"):
            if error.get(field) is not None and not isinstance(error[field], str):
                raise IntegrationError(
                    f"Error response field {field!r} is not a string",
                    status_code=response.status_code,
                    body=response.body,
                )
        return self.build_result(
            False,
            raw,
            message=error["message"],
            authorization=error.get("transaction_id"),
            error_type=error.get("type"),
        )

    @staticmethod
    def _parse(body: bytes, status_code: int) -> Dict[str, Any]:
        try:
            parsed = json.loads(body)
        except (ValueError, UnicodeDecodeError) as e:
            raise IntegrationError(
                "Response body is not valid JSON", status_code=status_code, body=body
            ) from e
        if not isinstance(parsed, dict):
            raise IntegrationError(
                "Response body is not a JSON object", status_code=status_code, body=body
            )
        return parsed
