# itransact_connector package
__version__ = "0.1.0"

from .connectors import (
    ItransactConnector,
    CreditCard,
    BillingAddress,
    PaymentOptions,
    Result,
)
from .exceptions import (
    ConnectorError,
    ConfigurationError,
    IntegrationError,
    InvalidAuthorizationError,
)
from .transport import HttpxTransport, SuccessfulResponse, ResponseError
