"""RobinhoodClient - one coroutine per Robinhood API operation"""

import asyncio
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
from loguru import logger

from rhclient.core.config import Config
from rhclient.domain.models import ApiResponse, OrderSide, OrderSpecification
from rhclient.shared.exceptions import (
    ConfigurationError,
    OrderCancellationError,
    RobinhoodConnectionError,
)

from .connection import ReadyCallback, RobinhoodSessionManager
from .endpoints import endpoint_url
from .requests import Callback, RequestOptions, RobinhoodRequestClient, deliver
from .session import Session, SessionState


class RobinhoodClient:
    """Robinhood private API client (facade)

    Delegates the login handshake to RobinhoodSessionManager and every
    request to RobinhoodRequestClient.

    Every operation is a coroutine taking its arguments and an optional
    trailing ``callback(error, metadata, body)``. It returns the parsed
    body; with no callback, errors are raised instead of delivered.
    Operations issued while the login is still running wait for it.
    """

    def __init__(
        self,
        username: str | None = None,
        password: str | None = None,
        callback: ReadyCallback | None = None,
        *,
        config: Config | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client and begin logging in

        Inside a running event loop the login starts right away. Otherwise
        it starts on the first start() or connect(), which also fires the
        ``callback`` kept from here.

        Args:
            username: Robinhood username (ignored when ``config`` is given)
            password: Robinhood password (ignored when ``config`` is given)
            callback: Invoked without arguments once the session is ready
            config: Full configuration, e.g. from Config.from_env()
            transport: Optional httpx transport used for every request

        Raises:
            ConfigurationError: If neither credentials nor config are given
        """
        if config is None:
            if not username:
                raise ConfigurationError(
                    "A username (or a Config) is required to create a client"
                )
            config = Config(username=username, password=password or "")

        self._config = config
        self._session = Session(username=config.username, password=config.password)
        self._request_client = RobinhoodRequestClient(
            self._session, timeout=config.timeout, transport=transport
        )
        self._session_manager = RobinhoodSessionManager(
            self._session, self._request_client, config.api_url
        )

        self._pending_callback: ReadyCallback | None = callback
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop - login deferred to connect()")
        else:
            self.start()

    @classmethod
    def from_env(
        cls,
        callback: ReadyCallback | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "RobinhoodClient":
        """Create a client from ROBINHOOD_* environment variables"""
        return cls(
            callback=callback, config=Config.from_env(), transport=transport
        )

    @classmethod
    async def login(
        cls,
        username: str,
        password: str,
        callback: ReadyCallback | None = None,
        **kwargs: Any,
    ) -> "RobinhoodClient":
        """Create a client and wait for its login handshake"""
        client = cls(username, password, callback, **kwargs)
        await client.connect()
        return client

    async def __aenter__(self) -> "RobinhoodClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.disconnect()

    # ========== Session ==========

    @property
    def config(self) -> Config:
        return self._config

    @property
    def session(self) -> Session:
        return self._session

    @property
    def state(self) -> SessionState:
        return self._session_manager.state

    @property
    def account_url(self) -> str | None:
        """Primary account URL, None until the login resolved one"""
        return self._session_manager.account_url

    @property
    def request_client(self) -> RobinhoodRequestClient:
        """Access request client for testing"""
        return self._request_client

    def is_connected(self) -> bool:
        """Check if the session is authenticated"""
        return self._session_manager.is_connected

    def get_account(self) -> str:
        """Get the primary account URL

        Raises:
            RobinhoodConnectionError: If no account was resolved
        """
        if not self.account_url:
            raise RobinhoodConnectionError("Not connected - call connect() first")
        return self.account_url

    def start(self, callback: ReadyCallback | None = None) -> asyncio.Task:
        """Begin logging in without waiting; see RobinhoodSessionManager.start"""
        pending, self._pending_callback = self._pending_callback, None
        if pending is not None:
            self._session_manager.start(pending)
        return self._session_manager.start(callback)

    async def connect(self, callback: ReadyCallback | None = None) -> None:
        """Log in and resolve the primary account"""
        if self._pending_callback is not None:
            self.start()
        await self._session_manager.connect(callback)

    async def disconnect(self) -> None:
        await self._session_manager.disconnect()

    # ========== Request helpers ==========

    def _url(self, name: str) -> str:
        return endpoint_url(name, self._config.api_url)

    async def _fetch(
        self,
        url: str,
        options: RequestOptions | None = None,
        callback: Callback | None = None,
    ) -> Any:
        await self._session_manager.wait_until_ready()
        return await self._request_client.fetch(url, options, callback)

    async def _get(
        self,
        name: str,
        callback: Callback | None = None,
        query: Mapping[str, Any] | None = None,
    ) -> Any:
        return await self._fetch(
            self._url(name), RequestOptions(method="GET", query=query), callback
        )

    # ========== Account ==========

    async def accounts(self, callback: Callback | None = None) -> Any:
        return await self._get("accounts", callback)

    async def user(self, callback: Callback | None = None) -> Any:
        return await self._get("user", callback)

    async def user_basic_info(self, callback: Callback | None = None) -> Any:
        return await self._get("user_basic_info", callback)

    async def user_additional_info(self, callback: Callback | None = None) -> Any:
        return await self._get("user_additional_info", callback)

    async def user_employment(self, callback: Callback | None = None) -> Any:
        return await self._get("user_employment", callback)

    async def investment_profile(self, callback: Callback | None = None) -> Any:
        return await self._get("investment_profile", callback)

    async def dividends(self, callback: Callback | None = None) -> Any:
        return await self._get("dividends", callback)

    async def positions(self, callback: Callback | None = None) -> Any:
        return await self._get("positions", callback)

    async def notifications(self, callback: Callback | None = None) -> Any:
        return await self._get("notifications", callback)

    async def edocuments(self, callback: Callback | None = None) -> Any:
        return await self._get("edocuments", callback)

    async def ach_relationships(self, callback: Callback | None = None) -> Any:
        return await self._get("ach_relationships", callback)

    async def ach_transfers(self, callback: Callback | None = None) -> Any:
        return await self._get("ach_transfers", callback)

    # ========== Market data ==========

    async def fundamentals(self, ticker: str, callback: Callback | None = None) -> Any:
        return await self._get("fundamentals", callback, query={"symbols": ticker})

    async def instruments(self, symbol: str, callback: Callback | None = None) -> Any:
        """Search instruments by ticker (uppercased)"""
        return await self._get(
            "instruments", callback, query={"query": symbol.upper()}
        )

    async def quote_data(
        self, symbol: str | Sequence[str], callback: Callback | None = None
    ) -> Any:
        """Get quotes for one ticker or a list of tickers

        A list is sent as one comma-joined, uppercased ``symbols`` value.
        """
        if not isinstance(symbol, str):
            symbol = ",".join(symbol)
        return await self._get("quotes", callback, query={"symbols": symbol.upper()})

    async def historicals(
        self,
        symbol: str,
        interval: str,
        span: str,
        callback: Callback | None = None,
    ) -> Any:
        """Get historical quotes, e.g. interval="5minute", span="week"

        Requests quotes/historicals/<SYMBOL>/?interval=...&span=...
        """
        url = f"{self._url('quotes')}historicals/{symbol.upper()}/"
        options = RequestOptions(query={"interval": interval, "span": span})
        return await self._fetch(url, options, callback)

    async def news(self, symbol: str, callback: Callback | None = None) -> Any:
        url = f"{self._url('news')}{symbol.upper()}/"
        return await self._fetch(url, None, callback)

    async def markets(self, callback: Callback | None = None) -> Any:
        return await self._get("markets", callback)

    async def sp500_up(self, callback: Callback | None = None) -> Any:
        """S&P 500 movers going up"""
        return await self._get("sp500_up", callback)

    async def sp500_down(self, callback: Callback | None = None) -> Any:
        """S&P 500 movers going down"""
        return await self._get("sp500_down", callback)

    async def splits(self, instrument: str, callback: Callback | None = None) -> Any:
        """Get stock splits of an instrument id"""
        return await self._fetch(
            f"{self._url('instruments')}{instrument}/splits/", None, callback
        )

    # ========== Watchlists ==========

    async def watchlists(self, callback: Callback | None = None) -> Any:
        return await self._get("watchlists", callback)

    async def create_watch_list(
        self, name: str, callback: Callback | None = None
    ) -> Any:
        return await self._fetch(
            self._url("watchlists"),
            RequestOptions(method="POST", body={"name": name}),
            callback,
        )

    # ========== Orders ==========

    async def orders(self, callback: Callback | None = None) -> Any:
        return await self._get("orders", callback)

    async def cancel_order(
        self, order: Mapping[str, Any], callback: Callback | None = None
    ) -> Any:
        """Cancel an order returned by orders()

        The order's ``cancel`` URL is POSTed to. An order without one is
        rejected locally with OrderCancellationError, no request is sent.
        """
        cancel_url = order.get("cancel")
        if cancel_url:
            return await self._fetch(
                cancel_url, RequestOptions(method="POST"), callback
            )

        if order.get("state") == "cancelled":
            message = "Order already cancelled."
        else:
            message = "Order cannot be cancelled."
        logger.warning(f"{message} {order.get('id', '')}".rstrip())
        error = OrderCancellationError(message, order)
        return await deliver(ApiResponse(error=error), callback)

    async def place_buy_order(
        self,
        options: OrderSpecification | Mapping[str, Any],
        callback: Callback | None = None,
    ) -> Any:
        return await self._place_order(options, OrderSide.BUY, callback)

    async def place_sell_order(
        self,
        options: OrderSpecification | Mapping[str, Any],
        callback: Callback | None = None,
    ) -> Any:
        return await self._place_order(options, OrderSide.SELL, callback)

    async def _place_order(
        self,
        options: OrderSpecification | Mapping[str, Any],
        side: OrderSide,
        callback: Callback | None,
    ) -> Any:
        if not isinstance(options, OrderSpecification):
            options = OrderSpecification.from_mapping(options)
        spec = options.with_side(side)

        await self._session_manager.wait_until_ready()
        body = self._build_order_body(spec)
        logger.info(
            f"Placing {spec.order_type} {spec.side.value} order: "
            f"{spec.quantity} {body['symbol']} @ {spec.bid_price}"
        )
        return await self._fetch(
            self._url("orders"), RequestOptions(method="POST", body=body), callback
        )

    def _build_order_body(self, spec: OrderSpecification) -> dict[str, Any]:
        """Form fields of an order; unset prices are left out"""
        body: dict[str, Any] = {
            "account": self._session.primary_account_url,
            "instrument": spec.instrument.url,
            "price": spec.bid_price,
            "stop_price": spec.stop_price,
            "quantity": spec.quantity,
            "side": spec.side.value,
            "symbol": spec.instrument.symbol.upper(),
            "time_in_force": spec.time_in_force,
            "trigger": spec.trigger,
            "type": spec.order_type,
        }
        return {k: v for k, v in body.items() if v is not None}

    # ========== Generic ==========

    async def url(self, url: str, callback: Callback | None = None) -> Any:
        """GET any absolute API URL, e.g. a ``next`` pagination link"""
        return await self._fetch(url, None, callback)
