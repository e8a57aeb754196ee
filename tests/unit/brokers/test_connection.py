"""Tests for RobinhoodSessionManager (login handshake)"""

import asyncio
from unittest.mock import Mock

import httpx
import pytest

from rhclient.infrastructure.brokers.robinhood.connection import (
    RobinhoodSessionManager,
)
from rhclient.infrastructure.brokers.robinhood.requests import (
    RobinhoodRequestClient,
)
from rhclient.infrastructure.brokers.robinhood.session import (
    Session,
    SessionState,
)
from rhclient.shared.exceptions import (
    RobinhoodAuthenticationError,
    RobinhoodConnectionError,
    RobinhoodRequestError,
)


@pytest.fixture
def session() -> Session:
    return Session(username="user", password="pass")


@pytest.fixture
def manager(session: Session, stub_api) -> RobinhoodSessionManager:
    request_client = RobinhoodRequestClient(
        session, transport=stub_api.transport
    )
    return RobinhoodSessionManager(session, request_client)


@pytest.mark.unit
def test_session_manager_initialization(manager: RobinhoodSessionManager):
    assert manager.state is SessionState.UNAUTHENTICATED
    assert manager.is_connected is False
    assert manager.account_url is None
    assert manager.session.bearer_token is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_login_reaches_ready(manager: RobinhoodSessionManager, stub_api):
    stub_api.add("GET", "/accounts/", json={"results": [{"url": "acct1"}]})
    callback = Mock()

    await manager.connect(callback)

    assert manager.state is SessionState.READY
    assert manager.is_connected is True
    assert manager.session.bearer_token == "abc"
    assert manager.account_url == "acct1"
    callback.assert_called_once_with()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_login_posts_form_credentials(
    manager: RobinhoodSessionManager, stub_api, decode_form
):
    await manager.connect()

    [login] = stub_api.calls("POST", "/api-token-auth/")
    assert login.content == b"password=pass&username=user"
    assert decode_form(login) == {"password": "pass", "username": "user"}
    assert "authorization" not in login.headers


@pytest.mark.unit
@pytest.mark.asyncio
async def test_account_lookup_carries_token(
    manager: RobinhoodSessionManager, stub_api
):
    await manager.connect()

    [accounts] = stub_api.calls("GET", "/accounts/")
    assert accounts.headers["Authorization"] == "Token abc"
    assert [r.url.path for r in stub_api.requests] == [
        "/api-token-auth/",
        "/accounts/",
    ]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_login_failure_raises_and_never_ready(
    manager: RobinhoodSessionManager, stub_api
):
    stub_api.add(
        "POST",
        "/api-token-auth/",
        status_code=400,
        json={"non_field_errors": ["Unable to log in"]},
    )
    callback = Mock()

    with pytest.raises(RobinhoodAuthenticationError) as exc_info:
        await manager.connect(callback)

    assert isinstance(exc_info.value.__cause__, RobinhoodRequestError)
    assert exc_info.value.__cause__.status_code == 400
    assert manager.state is SessionState.UNAUTHENTICATED
    assert manager.is_connected is False
    callback.assert_not_called()
    assert stub_api.calls("GET", "/accounts/") == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_login_without_token_raises(
    manager: RobinhoodSessionManager, stub_api
):
    stub_api.add("POST", "/api-token-auth/", json={"mfa_required": True})

    with pytest.raises(RobinhoodAuthenticationError, match="token"):
        await manager.connect()

    assert manager.state is SessionState.UNAUTHENTICATED


@pytest.mark.unit
@pytest.mark.asyncio
async def test_login_transport_fault_raises(
    manager: RobinhoodSessionManager, stub_api
):
    stub_api.add(
        "POST", "/api-token-auth/", error=httpx.ConnectError("unreachable")
    )

    with pytest.raises(RobinhoodAuthenticationError) as exc_info:
        await manager.connect()

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_account_failure_raises_and_clears_token(
    manager: RobinhoodSessionManager, stub_api
):
    stub_api.add("GET", "/accounts/", status_code=401)
    callback = Mock()

    with pytest.raises(RobinhoodConnectionError, match="Account lookup"):
        await manager.connect(callback)

    assert manager.state is SessionState.UNAUTHENTICATED
    assert manager.session.bearer_token is None
    assert "Authorization" not in manager.session.headers
    callback.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_empty_account_list_still_ready(
    manager: RobinhoodSessionManager, stub_api
):
    stub_api.add("GET", "/accounts/", json={"results": []})

    await manager.connect()

    assert manager.state is SessionState.READY
    assert manager.account_url is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_connect_when_ready_is_a_no_op(
    manager: RobinhoodSessionManager, stub_api
):
    await manager.connect()
    callback = Mock()

    await manager.connect(callback)

    assert len(stub_api.requests) == 2
    callback.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_async_ready_callback_is_awaited(
    manager: RobinhoodSessionManager,
):
    fired: list[str] = []

    async def on_ready() -> None:
        fired.append("ready")

    await manager.connect(on_ready)

    assert fired == ["ready"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_start_schedules_login_in_background(
    manager: RobinhoodSessionManager,
):
    task = manager.start()

    assert manager.start() is task
    assert manager.state is not SessionState.READY

    await manager.wait_until_ready()

    assert task.done()
    assert manager.state is SessionState.READY


@pytest.mark.unit
@pytest.mark.asyncio
async def test_wait_until_ready_without_login_raises(
    manager: RobinhoodSessionManager,
):
    with pytest.raises(RobinhoodConnectionError, match="Not connected"):
        await manager.wait_until_ready()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_wait_until_ready_reraises_login_failure(
    manager: RobinhoodSessionManager, stub_api
):
    stub_api.add("POST", "/api-token-auth/", status_code=503)
    task = manager.start()

    with pytest.raises(RobinhoodAuthenticationError):
        await manager.wait_until_ready()

    assert task.done()
    with pytest.raises(RobinhoodAuthenticationError):
        await manager.wait_until_ready()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failed_login_can_be_started_again(
    manager: RobinhoodSessionManager, stub_api
):
    stub_api.add("POST", "/api-token-auth/", status_code=503)
    with pytest.raises(RobinhoodAuthenticationError):
        await manager.connect()

    stub_api.add("POST", "/api-token-auth/", json={"token": "def"})
    await manager.connect()

    assert manager.session.bearer_token == "def"
    assert manager.state is SessionState.READY


@pytest.mark.unit
@pytest.mark.asyncio
async def test_disconnect_resets_session(manager: RobinhoodSessionManager):
    await manager.connect()

    await manager.disconnect()

    assert manager.state is SessionState.UNAUTHENTICATED
    assert manager.session.bearer_token is None
    assert manager.account_url is None
    with pytest.raises(RobinhoodConnectionError):
        await manager.wait_until_ready()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_disconnect_cancels_pending_login(
    manager: RobinhoodSessionManager,
):
    task = manager.start()

    await manager.disconnect()
    await asyncio.sleep(0)

    assert task.cancelled() or task.done()
    assert manager.state is SessionState.UNAUTHENTICATED


@pytest.mark.unit
@pytest.mark.asyncio
async def test_callbacks_queued_on_one_login_each_fire_once(
    manager: RobinhoodSessionManager, stub_api
):
    first, second = Mock(), Mock()

    task = manager.start(first)
    await manager.connect(second)

    assert manager.start() is task
    first.assert_called_once_with()
    second.assert_called_once_with()
    assert len(stub_api.calls("POST", "/api-token-auth/")) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failed_login_drops_queued_callbacks(
    manager: RobinhoodSessionManager, stub_api
):
    stale = Mock()
    stub_api.add("POST", "/api-token-auth/", status_code=503)
    with pytest.raises(RobinhoodAuthenticationError):
        await manager.connect(stale)

    stub_api.add("POST", "/api-token-auth/", json={"token": "def"})
    await manager.connect()

    assert manager.state is SessionState.READY
    stale.assert_not_called()
