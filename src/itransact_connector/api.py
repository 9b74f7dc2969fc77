import logging
from functools import lru_cache
from typing import Optional

from fastapi import FastAPI, Request, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .auth import verify_api_key, limiter
from .config import load_rate_limit
from .connectors.base import BillingAddress, CreditCard, PaymentOptions
from .connectors.itransact_connector import ItransactConnector, AUTHORIZATION_PATTERN
from .exceptions import ConfigurationError, IntegrationError

logger = logging.getLogger(__name__)

app = FastAPI(title="iTransact Connector - Reference API")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

MAX_AMOUNT = 99_999_999


@lru_cache(maxsize=1)
def get_connector() -> ItransactConnector:
    """Connector built from ITRANSACT_* environment variables, created once."""
    return ItransactConnector()


class CreatePaymentBody(BaseModel):
    amount: int = Field(..., ge=0, le=MAX_AMOUNT)
    card: CreditCard
    capture: bool = False
    email: Optional[str] = None
    billing_address: Optional[BillingAddress] = None
    order_id: Optional[str] = None
    description: Optional[str] = None


class AmountBody(BaseModel):
    amount: int = Field(..., ge=0, le=MAX_AMOUNT)


def validate_authorization(authorization: str) -> str:
    if not AUTHORIZATION_PATTERN.fullmatch(authorization):
        raise HTTPException(status_code=400, detail="Invalid transaction reference")
    return authorization


@app.exception_handler(IntegrationError)
async def integration_error_handler(request: Request, exc: IntegrationError):
    logger.error(f"Provider integration failure on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": "Payment provider unavailable"})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Connector misconfigured: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Server configuration error"})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/health")
async def health(connector: ItransactConnector = Depends(get_connector)):
    return connector.health_check()


@app.post("/payments", dependencies=[Depends(verify_api_key)])
@limiter.limit(load_rate_limit)
def create_payment(
    request: Request,
    body: CreatePaymentBody,
    connector: ItransactConnector = Depends(get_connector),
):
    options = PaymentOptions(
        email=body.email,
        billing_address=body.billing_address,
        order_id=body.order_id,
        description=body.description,
    )
    if body.capture:
        result = connector.purchase(body.amount, body.card, options)
    else:
        result = connector.authorize(body.amount, body.card, options)
    return result.model_dump()


@app.post("/payments/{authorization}/capture", dependencies=[Depends(verify_api_key)])
@limiter.limit(load_rate_limit)
def capture_payment(
    request: Request,
    authorization: str,
    body: AmountBody,
    connector: ItransactConnector = Depends(get_connector),
):
    authorization = validate_authorization(authorization)
    return connector.capture(body.amount, authorization).model_dump()


@app.post("/payments/{authorization}/void", dependencies=[Depends(verify_api_key)])
@limiter.limit(load_rate_limit)
def void_payment(
    request: Request,
    authorization: str,
    connector: ItransactConnector = Depends(get_connector),
):
    authorization = validate_authorization(authorization)
    return connector.void(authorization).model_dump()


@app.post("/payments/{authorization}/refund", dependencies=[Depends(verify_api_key)])
@limiter.limit(load_rate_limit)
def refund_payment(
    request: Request,
    authorization: str,
    body: AmountBody,
    connector: ItransactConnector = Depends(get_connector),
):
    authorization = validate_authorization(authorization)
    return connector.refund(body.amount, authorization).model_dump()
