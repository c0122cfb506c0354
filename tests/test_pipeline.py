"""Tests for the handler stack and redirect middleware."""

import pytest
from redirector.errors import TooManyRedirectsError
from redirector.models.events import EventType
from redirector.models.messages import Request, Response
from redirector.pipeline.base import Handler, HandlerStack, Middleware
from redirector.pipeline.steps import RedirectMiddleware


class HeaderMiddleware:
    """Adds a header on the way in and records the order it ran in."""

    def __init__(self, name: str, calls: list[str]) -> None:
        self.name = name
        self._calls = calls

    def wrap(self, handler: Handler) -> Handler:
        async def handle(request: Request) -> Response:
            self._calls.append(self.name)
            headers = request.mutable_headers()
            headers.add("X-Stage", self.name)
            return await handler(request.replace(headers=headers))

        return handle


class TestHandlerStack:
    """Tests for HandlerStack."""

    @pytest.mark.asyncio
    async def test_empty_stack_calls_transport(self, mock_transport):
        transport = mock_transport([Response.build(200)])
        stack = HandlerStack(transport.dispatch)
        response = await stack(Request.build("GET", "http://example.com"))
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_first_pushed_runs_first(self, mock_transport):
        transport = mock_transport([Response.build(200)])
        calls: list[str] = []
        stack = HandlerStack(transport.dispatch).push(HeaderMiddleware("outer", calls)).push(HeaderMiddleware("inner", calls))

        await stack(Request.build("GET", "http://example.com"))

        assert calls == ["outer", "inner"]
        assert transport.last_request.headers.getall("X-Stage") == ["outer", "inner"]

    def test_remove_by_name(self, mock_transport):
        stack = HandlerStack(mock_transport([]).dispatch)
        stack.push(RedirectMiddleware()).push(HeaderMiddleware("other", []))
        stack.remove("redirect")
        assert [m.name for m in stack.middlewares] == ["other"]

    def test_middleware_protocol(self):
        assert isinstance(RedirectMiddleware(), Middleware)


class TestRedirectMiddleware:
    """Tests for RedirectMiddleware."""

    @pytest.mark.asyncio
    async def test_follows_redirects(self, mock_transport):
        transport = mock_transport(
            [
                Response.build(302, {"Location": "/foo"}),
                Response.build(200),
            ]
        )
        stack = HandlerStack(transport.dispatch).push(RedirectMiddleware({"max": 2}))
        response = await stack(Request.build("GET", "http://example.com?a=b"))
        assert response.status_code == 200
        assert transport.last_request.url == "http://example.com/foo"

    @pytest.mark.asyncio
    async def test_inner_middleware_runs_every_hop(self, mock_transport):
        transport = mock_transport(
            [
                Response.build(302, {"Location": "/a"}),
                Response.build(302, {"Location": "/b"}),
                Response.build(200),
            ]
        )
        calls: list[str] = []
        stack = HandlerStack(transport.dispatch)
        stack.push(RedirectMiddleware()).push(HeaderMiddleware("inner", calls))

        await stack(Request.build("GET", "http://example.com"))

        assert calls == ["inner", "inner", "inner"]

    @pytest.mark.asyncio
    async def test_disabled_is_pass_through(self, mock_transport):
        transport = mock_transport([Response.build(301, {"Location": "/a"})])
        middleware = RedirectMiddleware(False)
        assert middleware.config is None

        stack = HandlerStack(transport.dispatch).push(middleware)
        response = await stack(Request.build("GET", "http://example.com"))
        assert response.status_code == 301

    @pytest.mark.asyncio
    async def test_failure_propagates(self, mock_transport):
        transport = mock_transport(
            [
                Response.build(302, {"Location": "/a"}),
                Response.build(302, {"Location": "/b"}),
            ]
        )
        stack = HandlerStack(transport.dispatch).push(RedirectMiddleware({"max": 1}))
        with pytest.raises(TooManyRedirectsError):
            await stack(Request.build("GET", "http://example.com"))

    @pytest.mark.asyncio
    async def test_emits_events(self, mock_transport):
        transport = mock_transport(
            [
                Response.build(302, {"Location": "/a"}),
                Response.build(200),
            ]
        )
        events = []
        stack = HandlerStack(transport.dispatch).push(RedirectMiddleware(emit=events.append))
        await stack(Request.build("GET", "http://example.com"))
        assert EventType.REDIRECT_FOLLOWED in [e.type for e in events]
