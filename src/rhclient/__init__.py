"""Async client for the Robinhood private REST API"""

from rhclient.core.config import Config
from rhclient.domain.models import (
    ApiResponse,
    InstrumentReference,
    OrderSide,
    OrderSpecification,
    ResponseMetadata,
)
from rhclient.infrastructure.brokers.robinhood import (
    RobinhoodClient,
    RobinhoodSessionManager,
    SessionState,
)
from rhclient.shared.exceptions import (
    ConfigurationError,
    OrderCancellationError,
    RobinhoodAuthenticationError,
    RobinhoodClientError,
    RobinhoodConnectionError,
    RobinhoodError,
    RobinhoodRequestError,
)

__version__ = "0.1.0"

__all__ = [
    "ApiResponse",
    "Config",
    "ConfigurationError",
    "InstrumentReference",
    "OrderCancellationError",
    "OrderSide",
    "OrderSpecification",
    "ResponseMetadata",
    "RobinhoodAuthenticationError",
    "RobinhoodClient",
    "RobinhoodClientError",
    "RobinhoodConnectionError",
    "RobinhoodError",
    "RobinhoodRequestError",
    "RobinhoodSessionManager",
    "SessionState",
]
