"""Broker protocols defining interfaces for broker integrations.

These protocols let callers depend on behaviour rather than on the
Robinhood client class.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class BrokerConnectionManager(Protocol):
    """Protocol for broker session lifecycle management."""

    async def connect(self) -> None:
        """Establish an authenticated session with the broker."""
        ...

    async def disconnect(self) -> None:
        """Disconnect from the broker and clean up resources."""
        ...

    def is_connected(self) -> bool:
        """Check if the session is authenticated."""
        ...

    def get_account(self) -> str:
        """Get the connected account reference."""
        ...


@runtime_checkable
class MarketDataProvider(Protocol):
    """Protocol for market data retrieval."""

    async def quote_data(self, symbol: str | Sequence[str]) -> Any:
        """Get quotes for one or more tickers."""
        ...

    async def instruments(self, symbol: str) -> Any:
        """Look up instruments for a ticker."""
        ...

    async def historicals(self, symbol: str, interval: str, span: str) -> Any:
        """Get historical quotes for a ticker."""
        ...


@runtime_checkable
class OrderManager(Protocol):
    """Protocol for order management operations."""

    async def place_buy_order(self, options: Any) -> Any:
        """Place a buy order."""
        ...

    async def place_sell_order(self, options: Any) -> Any:
        """Place a sell order."""
        ...

    async def orders(self) -> Any:
        """List orders."""
        ...

    async def cancel_order(self, order: Mapping[str, Any]) -> Any:
        """Cancel a specific order."""
        ...

    async def positions(self) -> Any:
        """Get all current positions."""
        ...
