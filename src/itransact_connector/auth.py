"""Bearer-token authentication and rate limiting for the reference API."""

import secrets
import logging

from fastapi import HTTPException, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import load_api_token

logger = logging.getLogger(__name__)

security = HTTPBearer()

limiter = Limiter(key_func=get_remote_address)


async def verify_api_key(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Security(security),
) -> str:
    """Check the bearer token against API_KEY before any provider call is made.

    Raises:
        HTTPException: 500 when API_KEY is not configured, 401 on mismatch.
    """
    expected = load_api_token()
    if not expected:
        logger.error("API_KEY environment variable is not configured")
        raise HTTPException(status_code=500, detail="Server configuration error")
    if not secrets.compare_digest(credentials.credentials.encode(), expected.encode()):
        logger.warning(f"Rejected API key for {request.method} {request.url.path}")
        raise HTTPException(status_code=401, detail="Invalid API key")
    return credentials.credentials
