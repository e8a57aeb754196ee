"""Infrastructure brokers module."""

from rhclient.shared.exceptions import (
    RobinhoodAuthenticationError,
    RobinhoodClientError,
    RobinhoodConnectionError,
    RobinhoodRequestError,
)

from .protocols import (
    BrokerConnectionManager,
    MarketDataProvider,
    OrderManager,
)
from .robinhood.facade import RobinhoodClient

__all__ = [
    "RobinhoodClient",
    "RobinhoodAuthenticationError",
    "RobinhoodClientError",
    "RobinhoodConnectionError",
    "RobinhoodRequestError",
    "BrokerConnectionManager",
    "MarketDataProvider",
    "OrderManager",
]
