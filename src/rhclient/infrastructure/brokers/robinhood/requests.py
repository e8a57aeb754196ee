"""RobinhoodRequestClient - request construction and single-shot execution"""

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import httpx
from loguru import logger

from rhclient.domain.models import ApiResponse, ResponseMetadata
from rhclient.shared.exceptions import RobinhoodRequestError

from .encoding import encode_query_data
from .session import Session

Callback = Callable[
    [BaseException | None, ResponseMetadata | None, Any], Awaitable[Any] | Any
]


class _LoguruHandler(logging.Handler):
    """Bridge stdlib logging into loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(
            level, record.getMessage()
        )


@dataclass(frozen=True)
class RequestOptions:
    """Per-call request intent

    Merged over the baseline and the session headers, in that order.
    """

    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | Mapping[str, Any] | None = None
    query: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class RequestDescriptor:
    """Fully resolved request handed to the transport

    ``url`` already carries the encoded ``query``; the mapping is kept for
    logging and inspection.
    """

    url: str
    method: str
    headers: Mapping[str, str]
    body: str | None = None
    query: Mapping[str, Any] | None = None


class RequestBuilder:
    """Merges per-call options with the session defaults"""

    BASE_METHOD = "GET"

    def __init__(self, session: Session) -> None:
        self._session = session

    def build(
        self, url: str, options: RequestOptions | None = None
    ) -> RequestDescriptor:
        """Produce a request descriptor for ``url``

        Args:
            url: Absolute URL, may already carry a query string
            options: Method, header overrides, body and query for this call

        Returns:
            Descriptor with merged headers, encoded body and query
        """
        options = options or RequestOptions()

        headers = httpx.Headers({"Host": httpx.URL(url).host})
        headers.update(self._session.headers)
        headers.update(options.headers)

        body = options.body
        if body is not None and not isinstance(body, str):
            body = encode_query_data(body)
        if isinstance(body, str):
            headers["Content-Length"] = str(len(body.encode("utf-8")))

        query = (
            MappingProxyType(dict(options.query)) if options.query else None
        )
        if query:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}{encode_query_data(query)}"

        return RequestDescriptor(
            url=url,
            method=(options.method or self.BASE_METHOD).upper(),
            headers=MappingProxyType(dict(headers.items())),
            body=body,
            query=query,
        )


async def deliver(result: ApiResponse, callback: Callback | None) -> Any:
    """Hand a result to its callback, or raise its error without one

    Returns:
        The parsed body (None when an error went to the callback)
    """
    if callback is None:
        if result.error is not None:
            raise result.error
        return result.body

    outcome = callback(*result.as_tuple())
    if inspect.isawaitable(outcome):
        await outcome
    return result.body


class RobinhoodRequestClient:
    """Executes one request per call against an httpx transport

    Responsibilities:
    - Request construction (via RequestBuilder)
    - Status interpretation and JSON parsing
    - Exactly-once callback delivery
    """

    _logging_bridge_installed = False

    def __init__(
        self,
        session: Session,
        timeout: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize request client

        Args:
            session: Session whose headers are sent with every request
            timeout: Transport timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self._session = session
        self._builder = RequestBuilder(session)
        self._timeout = timeout
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None
        self.install_logging_bridge()

    @classmethod
    def install_logging_bridge(cls) -> None:
        """Forward httpx's stdlib log records into loguru once

        The httpx logger's level and propagation are left to the application.
        """
        if cls._logging_bridge_installed:
            return

        logging.getLogger("httpx").addHandler(_LoguruHandler())

        cls._logging_bridge_installed = True

    @property
    def builder(self) -> RequestBuilder:
        return self._builder

    def _build_http_client(self) -> httpx.AsyncClient:
        """Create an AsyncClient with httpx request/response logging hooks."""
        return httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            event_hooks={
                "request": [self._log_httpx_request],
                "response": [self._log_httpx_response],
            },
        )

    async def _log_httpx_request(self, request: httpx.Request) -> None:
        """Log outbound httpx requests with headers (auth masked)."""
        headers = {
            k: ("***" if k.lower() == "authorization" else v)
            for k, v in request.headers.items()
        }
        logger.debug(f"HTTPX request: {request.method} {request.url} {headers}")

    async def _log_httpx_response(self, response: httpx.Response) -> None:
        logger.debug(
            f"HTTPX response: status={response.status_code} url={response.url}"
        )

    @property
    def http_client(self) -> httpx.AsyncClient:
        """HTTP client, created on first use"""
        if self._http_client is None:
            self._http_client = self._build_http_client()
        return self._http_client

    def set_http_client(self, client: httpx.AsyncClient) -> None:
        """Set the HTTP client (for testing or external management)"""
        self._http_client = client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch(
        self,
        url: str,
        options: RequestOptions | None = None,
        callback: Callback | None = None,
    ) -> Any:
        """Execute one request and resolve it exactly once

        Success calls ``callback(None, metadata, body)``; an HTTP error
        status, a transport fault or an unparsable body calls
        ``callback(error, None, None)``. Without a callback the error is
        raised instead.

        Args:
            url: Absolute request URL
            options: Method, headers, body and query for this call
            callback: Optional error-first callback (sync or async)

        Returns:
            Parsed JSON body, or None when an error went to the callback

        Raises:
            RobinhoodRequestError: On a non-success status and no callback
            httpx.HTTPError: On a transport fault and no callback
        """
        descriptor = self._builder.build(url, options)
        logger.debug(f"{descriptor.method} {descriptor.url}")

        try:
            response = await self.http_client.request(
                descriptor.method,
                descriptor.url,
                headers=dict(descriptor.headers),
                content=descriptor.body,
            )
            if not response.is_success:
                raise RobinhoodRequestError(response.status_code, descriptor.url)
            body = self._parse_body(response)
        except RobinhoodRequestError as e:
            logger.warning(
                f"HTTP error {e.status_code}: {descriptor.method} {descriptor.url}"
            )
            result = ApiResponse(error=e)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Request to {descriptor.url} failed: {e!r}")
            result = ApiResponse(error=e)
        else:
            result = ApiResponse(
                metadata=ResponseMetadata(
                    status_code=response.status_code,
                    reason=response.reason_phrase,
                    url=str(response.url),
                ),
                body=body,
            )

        return await deliver(result, callback)

    def _parse_body(self, response: httpx.Response) -> Any:
        """Parse a JSON body; an empty body parses to an empty dict"""
        if not response.content:
            return {}
        return response.json()
