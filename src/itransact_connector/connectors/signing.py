"""Request signing for the iTransact API.

Every request carries ``Authorization: <base64(api_key)>:<base64(signature)>``
where the signature is HMAC-SHA256 over the exact JSON body bytes, keyed by
the API secret.
"""

import base64
import hashlib
import hmac
import json
from typing import Any, Dict


def canonical_json(payload: Any) -> bytes:
    """Serialize a payload the way the provider expects it signed.

    Compact separators, insertion order preserved, UTF-8 without ASCII escaping.
    """
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def signed_api_key(api_key: str) -> str:
    return base64.b64encode(api_key.encode("utf-8")).decode("ascii")


def sign_body(body: bytes, api_secret: str) -> str:
    """Return the Base64 HMAC-SHA256 digest of ``body`` keyed by ``api_secret``."""
    digest = hmac.new(api_secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def sign_payload(payload: Any, api_secret: str) -> str:
    return sign_body(canonical_json(payload), api_secret)


def authorization_header(api_key: str, api_secret: str, body: bytes) -> str:
    return f"{signed_api_key(api_key)}:{sign_body(body, api_secret)}"


def request_headers(api_key: str, api_secret: str, body: bytes) -> Dict[str, str]:
    """Headers sent with every request."""
    return {
        "Content-Type": "application/json",
        "Authorization": authorization_header(api_key, api_secret, body),
    }
