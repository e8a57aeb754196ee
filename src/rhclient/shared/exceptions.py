"""Consolidated exceptions for the Robinhood client.

All custom exceptions are defined here to provide a single source of truth
for error handling across the library.
"""

from typing import Any


class RobinhoodError(Exception):
    """Base exception for rhclient errors"""

    pass


class RobinhoodClientError(RobinhoodError):
    """Base exception for Robinhood client errors"""

    pass


class RobinhoodRequestError(RobinhoodClientError):
    """Raised when the API answers with a non-success HTTP status"""

    def __init__(self, status_code: int, url: str | None = None) -> None:
        self.status_code = status_code
        self.url = url
        message = f"Request failed: {status_code}"
        if url:
            message = f"{message} - {url}"
        super().__init__(message)


class RobinhoodAuthenticationError(RobinhoodClientError):
    """Raised when the token login step fails"""

    pass


class RobinhoodConnectionError(RobinhoodClientError):
    """Raised when the session cannot be made ready"""

    pass


class OrderCancellationError(RobinhoodClientError):
    """Raised (or handed to a callback) when an order cannot be cancelled

    Built locally, no request is sent.
    """

    def __init__(self, message: str, order: Any) -> None:
        self.message = message
        self.order = order
        super().__init__(message)


class ConfigurationError(RobinhoodError, ValueError):
    """Raised when configuration is invalid or missing"""

    pass
