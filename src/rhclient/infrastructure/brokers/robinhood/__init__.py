"""Robinhood infrastructure module

RobinhoodSessionManager - Token login and primary account lookup
RobinhoodRequestClient - Request construction and single-shot execution
RobinhoodClient - Facade exposing one coroutine per API operation
"""

from rhclient.shared.exceptions import (
    OrderCancellationError,
    RobinhoodAuthenticationError,
    RobinhoodClientError,
    RobinhoodConnectionError,
    RobinhoodRequestError,
)

from .connection import RobinhoodSessionManager
from .encoding import encode_query_data
from .endpoints import BASE_URL, ENDPOINTS, Endpoint, endpoint_url
from .facade import RobinhoodClient
from .requests import (
    RequestBuilder,
    RequestDescriptor,
    RequestOptions,
    RobinhoodRequestClient,
)
from .session import Session, SessionState

__all__ = [
    "BASE_URL",
    "ENDPOINTS",
    "Endpoint",
    "OrderCancellationError",
    "RequestBuilder",
    "RequestDescriptor",
    "RequestOptions",
    "RobinhoodAuthenticationError",
    "RobinhoodClient",
    "RobinhoodClientError",
    "RobinhoodConnectionError",
    "RobinhoodRequestClient",
    "RobinhoodRequestError",
    "RobinhoodSessionManager",
    "Session",
    "SessionState",
    "encode_query_data",
    "endpoint_url",
]
