"""aiohttp transport and a client that follows redirects through it."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Optional

import aiohttp

from ..models.events import EventEmitter
from ..models.messages import HeadersInput, Request, Response
from ..redirect.driver import RedirectCallback, run
from .protocols import Transport

logger = logging.getLogger(__name__)


class AiohttpTransport:
    """
    Single-hop HTTP transport backed by aiohttp.

    Redirects are never followed here; the caller sees every 3xx
    response and decides what to do with it.

    Example:
        async with AiohttpTransport() as transport:
            response = await transport.dispatch(Request.build("GET", "https://example.com"))
            print(response.status_code)
    """

    MAX_CONTENT_SIZE = 50 * 1024 * 1024  # 50 MB

    def __init__(
        self,
        max_content_size: int = MAX_CONTENT_SIZE,
        user_agent: str | None = None,
        proxy: str | None = None,
        default_timeout: float = 30.0,
    ) -> None:
        """
        Initialize the transport.

        Args:
            max_content_size: Maximum response size in bytes
            user_agent: Custom User-Agent string
            proxy: Proxy URL (http:// or socks5://)
            default_timeout: Default request timeout in seconds
        """
        self._max_content_size = max_content_size
        self._proxy = proxy
        self._default_timeout = default_timeout

        if user_agent is None:
            from .. import __version__

            user_agent = f"redirector/{__version__}"
        self._user_agent = user_agent

        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> AiohttpTransport:
        """Enter async context and create session."""
        self._session = aiohttp.ClientSession(headers={"User-Agent": self._user_agent})
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def dispatch(self, request: Request, *, timeout: float | None = None) -> Response:
        """
        Send one request without following redirects.

        Args:
            request: The request to send
            timeout: Request timeout in seconds (uses default if None)

        Returns:
            Response with status, headers and body

        Raises:
            aiohttp.ClientError: On network errors
            asyncio.TimeoutError: When the timeout expires
            ValueError: On content size exceeded
        """
        if self._session is None:
            raise RuntimeError("Transport not initialized. Use 'async with' context manager.")

        timeout_val = timeout or self._default_timeout

        async with self._session.request(
            request.method,
            request.url,
            headers=request.headers,
            data=request.body,
            timeout=aiohttp.ClientTimeout(total=timeout_val),
            proxy=self._proxy,
            allow_redirects=False,
        ) as response:
            # Check Content-Length if available
            content_length = response.headers.get("Content-Length")
            if content_length and content_length.isdigit() and int(content_length) > self._max_content_size:
                raise ValueError(f"Content too large: {content_length} bytes")

            # Read content with size limit
            content = b""
            if request.method != "HEAD":
                async for chunk in response.content.iter_chunked(8192):
                    content += chunk
                    if len(content) > self._max_content_size:
                        raise ValueError(f"Content size limit exceeded: >{self._max_content_size} bytes")

            logger.debug(f"{request.method} {request.url} -> {response.status} ({len(content)} bytes)")

            return Response.build(
                status_code=response.status,
                headers=response.headers,
                body=content,
                url=request.url,
            )


class RedirectingClient:
    """
    HTTP client that follows redirects according to a RedirectConfig.

    Example:
        async with AiohttpTransport() as transport:
            client = RedirectingClient(transport, {"max": 3, "track_history": True})
            response = await client.get("http://example.com/old")
            print(response.redirect_history)
    """

    def __init__(
        self,
        transport: Transport,
        redirects: Any = True,
        on_redirect: Optional[RedirectCallback] = None,
        emit: Optional[EventEmitter] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            transport: Transport used for every hop
            redirects: Default redirect options (see ``RedirectConfig.coerce``)
            on_redirect: Optional callback run before each redirect is followed
            emit: Optional callback for chain events
        """
        self._transport = transport
        self._redirects = redirects
        self._on_redirect = on_redirect
        self._emit = emit

    async def send(self, request: Request, *, redirects: Any = None) -> Response:
        """
        Send a request, following redirects.

        Args:
            request: The request to send
            redirects: Per-request redirect options overriding the default

        Returns:
            Final response
        """
        options = self._redirects if redirects is None else redirects
        return await run(
            request,
            options,
            self._transport.dispatch,
            on_redirect=self._on_redirect,
            emit=self._emit,
        )

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: HeadersInput = None,
        body: bytes | str | None = None,
        redirects: Any = None,
    ) -> Response:
        """Build and send a request."""
        return await self.send(Request.build(method, url, headers=headers, body=body), redirects=redirects)

    async def get(self, url: str, *, headers: HeadersInput = None, redirects: Any = None) -> Response:
        """Perform an HTTP GET request."""
        return await self.request("GET", url, headers=headers, redirects=redirects)

    async def head(self, url: str, *, headers: HeadersInput = None, redirects: Any = None) -> Response:
        """Perform an HTTP HEAD request."""
        return await self.request("HEAD", url, headers=headers, redirects=redirects)

    async def post(
        self,
        url: str,
        *,
        headers: HeadersInput = None,
        body: bytes | str | None = None,
        redirects: Any = None,
    ) -> Response:
        """Perform an HTTP POST request."""
        return await self.request("POST", url, headers=headers, body=body, redirects=redirects)
