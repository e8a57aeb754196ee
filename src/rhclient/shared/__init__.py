"""Shared utilities and exceptions"""

from .exceptions import (
    ConfigurationError,
    OrderCancellationError,
    RobinhoodAuthenticationError,
    RobinhoodClientError,
    RobinhoodConnectionError,
    RobinhoodError,
    RobinhoodRequestError,
)

__all__ = [
    "ConfigurationError",
    "OrderCancellationError",
    "RobinhoodAuthenticationError",
    "RobinhoodClientError",
    "RobinhoodConnectionError",
    "RobinhoodError",
    "RobinhoodRequestError",
]
