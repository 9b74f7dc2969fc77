from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, SecretStr

from ..exceptions import ConfigurationError

# Canonical models
class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: str
    api_secret: SecretStr


class CreditCard(BaseModel):
    number: str
    verification_value: Optional[str] = None
    month: int
    year: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    brand: Optional[str] = None  # visa|master|american_express|discover

    def __repr__(self) -> str:
        return f"CreditCard(last4={self.number[-4:]!r}, month={self.month}, year={self.year})"

    __str__ = __repr__


class BillingAddress(BaseModel):
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None


class PaymentOptions(BaseModel):
    # standard gateway option keys (ip, customer, invoice, currency...) are accepted and ignored
    model_config = ConfigDict(extra="allow")

    email: Optional[str] = None
    billing_address: Optional[BillingAddress] = None
    order_id: Optional[str] = None
    description: Optional[str] = None
    test_mode: Optional[bool] = None


OptionsLike = Union[PaymentOptions, Mapping[str, Any], None]


class Result(BaseModel):
    success: bool
    message: Optional[str] = None
    raw: Dict[str, Any] = {}
    test: bool = False
    authorization: Optional[str] = None
    error_type: Optional[str] = None


def coerce_options(options: OptionsLike) -> PaymentOptions:
    if options is None:
        return PaymentOptions()
    if isinstance(options, PaymentOptions):
        return options
    return PaymentOptions.model_validate(dict(options))


class ConnectorBase(ABC):
    """
    Minimal gateway capability interface. Implementations should be side-effect
    free until the method makes a network call to the provider.
    """

    @staticmethod
    def validate_required(options: Mapping[str, Any], *keys: str) -> None:
        """Raise ConfigurationError unless every key is present and non-empty."""
        missing = [key for key in keys if not options.get(key)]
        if missing:
            raise ConfigurationError(f"Missing required parameter: {', '.join(missing)}")

    @abstractmethod
    def build_result(self, success: bool, raw: Dict[str, Any], **kwargs: Any) -> Result:
        raise NotImplementedError

    @abstractmethod
    def authorize(self, amount: int, card: CreditCard, options: OptionsLike = None) -> Result:
        """
        Reserve funds on the card without settling them.
        """
        raise NotImplementedError

    @abstractmethod
    def purchase(self, amount: int, card: CreditCard, options: OptionsLike = None) -> Result:
        """
        Authorize and settle in a single step.
        """
        raise NotImplementedError

    @abstractmethod
    def capture(self, amount: int, authorization: str, options: OptionsLike = None) -> Result:
        raise NotImplementedError

    @abstractmethod
    def void(self, authorization: str, options: OptionsLike = None) -> Result:
        raise NotImplementedError

    @abstractmethod
    def refund(self, amount: int, authorization: str, options: OptionsLike = None) -> Result:
        raise NotImplementedError

    def health_check(self) -> Dict[str, Any]:
        return {"ok": True}
