"""RobinhoodSessionManager - login handshake and session lifecycle"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

from rhclient.shared.exceptions import (
    RobinhoodAuthenticationError,
    RobinhoodConnectionError,
)

from .endpoints import BASE_URL, endpoint_url
from .requests import RequestOptions, RobinhoodRequestClient
from .session import Session, SessionState

ReadyCallback = Callable[[], Awaitable[Any] | Any]


class RobinhoodSessionManager:
    """Manages the Robinhood session lifecycle

    Responsibilities:
    - Token login (POST api-token-auth/)
    - Primary account lookup (GET accounts/)
    - Making callers wait for an in-flight login
    """

    def __init__(
        self,
        session: Session,
        request_client: RobinhoodRequestClient,
        base_url: str = BASE_URL,
    ) -> None:
        """Initialize session manager

        Args:
            session: Session to authenticate
            request_client: Request client used for the handshake
            base_url: API origin the endpoints are resolved against
        """
        self._session = session
        self._request_client = request_client
        self._base_url = base_url
        self._login_task: asyncio.Task | None = None
        self._ready_callbacks: list[ReadyCallback] = []

    @property
    def session(self) -> Session:
        return self._session

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def is_connected(self) -> bool:
        """True once the token and account lookup both succeeded"""
        return self._session.is_ready and self._session.bearer_token is not None

    @property
    def account_url(self) -> str | None:
        """Primary account URL, None until resolved"""
        return self._session.primary_account_url

    def start(self, callback: ReadyCallback | None = None) -> asyncio.Task:
        """Schedule the login handshake on the running event loop

        Returns the login task; awaiting it raises any login failure.
        Calling start() while a login is in flight returns the same task
        and queues ``callback`` behind the ones already waiting on it.
        """
        if callback is not None and not self._session.is_ready:
            self._ready_callbacks.append(callback)
        if self._login_task is None or (
            self._login_task.done() and not self._session.is_ready
        ):
            self._login_task = asyncio.ensure_future(self._login())
            self._login_task.add_done_callback(self._log_login_outcome)
        return self._login_task

    def _log_login_outcome(self, task: asyncio.Task) -> None:
        """Retrieve a background login failure so it is never left unseen"""
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Robinhood login failed: {error}")

    async def connect(self, callback: ReadyCallback | None = None) -> None:
        """Authenticate and resolve the primary account

        Steps:
        1. POST api-token-auth/ with the form-encoded credentials
        2. Store the token, send ``Authorization: Token <token>`` from now on
        3. GET accounts/ and keep the first result's url
        4. Invoke ``callback`` once, session is READY

        Args:
            callback: Invoked without arguments after the session is ready

        Raises:
            RobinhoodAuthenticationError: If the token login fails
            RobinhoodConnectionError: If the account lookup fails
        """
        if self._session.is_ready:
            logger.warning("Session already authenticated - ignoring connect()")
            return

        await self.start(callback)

    async def wait_until_ready(self) -> None:
        """Wait for the login started by start()/connect()

        Raises:
            RobinhoodConnectionError: If no login was ever started
            RobinhoodClientError: The login failure, if it failed
        """
        if self._session.is_ready:
            return
        if self._login_task is None:
            raise RobinhoodConnectionError(
                "Not connected - call connect() or start() first"
            )
        await asyncio.shield(self._login_task)

    async def disconnect(self) -> None:
        """Close the HTTP client and drop the session credentials"""
        logger.info("Disconnecting from Robinhood...")

        if self._login_task is not None and not self._login_task.done():
            self._login_task.cancel()
        self._login_task = None
        self._ready_callbacks.clear()

        await self._request_client.aclose()
        self._session.reset()

        logger.info("Disconnected from Robinhood")

    async def _login(self) -> None:
        logger.info(f"Logging in to Robinhood as {self._session.username}...")
        self._session.state = SessionState.AUTHENTICATING

        try:
            await self._authenticate()
            await self._resolve_account()
        except BaseException:
            self._session.reset()
            self._ready_callbacks.clear()
            raise

        self._session.state = SessionState.READY
        logger.info("Successfully connected to Robinhood")

        callbacks, self._ready_callbacks = self._ready_callbacks, []
        for callback in callbacks:
            outcome = callback()
            if inspect.isawaitable(outcome):
                await outcome

    async def _authenticate(self) -> None:
        try:
            body = await self._request_client.fetch(
                endpoint_url("login", self._base_url),
                RequestOptions(
                    method="POST",
                    body={
                        "password": self._session.password,
                        "username": self._session.username,
                    },
                ),
            )
        except Exception as e:
            raise RobinhoodAuthenticationError(f"Login failed: {e}") from e

        token = body.get("token") if isinstance(body, dict) else None
        if not token:
            raise RobinhoodAuthenticationError(
                "Login response did not contain a token"
            )

        self._session.authorize(token)
        logger.info("Token obtained")

    async def _resolve_account(self) -> None:
        logger.info("Retrieving primary account...")
        try:
            body = await self._request_client.fetch(
                endpoint_url("accounts", self._base_url)
            )
        except Exception as e:
            raise RobinhoodConnectionError(f"Account lookup failed: {e}") from e

        self._session.primary_account_url = self._parse_account_url(body)
        if self._session.primary_account_url is None:
            logger.warning(f"No account found in response: {body}")
        else:
            logger.info(f"Primary account: {self._session.primary_account_url}")

    def _parse_account_url(self, response: Any) -> str | None:
        """Return the first account url of an accounts listing"""
        if not isinstance(response, dict):
            return None
        results = response.get("results")
        if results and isinstance(results[0], dict):
            return results[0].get("url")
        return None
