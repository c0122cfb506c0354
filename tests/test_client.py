"""Integration tests for the aiohttp transport and redirecting client."""

import pytest
from aiohttp import test_utils, web
from redirector.errors import InvalidProtocolError, TooManyRedirectsError
from redirector.http import AiohttpTransport, RedirectingClient
from redirector.models.messages import Request


def _create_app() -> web.Application:
    async def start(request: web.Request) -> web.Response:
        raise web.HTTPFound("/middle?step=1")

    async def middle(request: web.Request) -> web.Response:
        raise web.HTTPMovedPermanently("/final")

    async def final(request: web.Request) -> web.Response:
        return web.json_response(
            {
                "method": request.method,
                "referer": request.headers.get("Referer"),
                "authorization": request.headers.get("Authorization"),
                "body": (await request.text()) or None,
            }
        )

    async def form(request: web.Request) -> web.Response:
        raise web.HTTPSeeOther("/final")

    async def temporary(request: web.Request) -> web.Response:
        raise web.HTTPTemporaryRedirect("/final")

    async def loop(request: web.Request) -> web.Response:
        raise web.HTTPFound("/loop")

    async def ftp(request: web.Request) -> web.Response:
        raise web.HTTPFound("ftp://files.example.com/file")

    app = web.Application()
    app.router.add_get("/start", start)
    app.router.add_get("/middle", middle)
    app.router.add_route("*", "/final", final)
    app.router.add_post("/form", form)
    app.router.add_post("/temporary", temporary)
    app.router.add_get("/loop", loop)
    app.router.add_get("/ftp", ftp)
    return app


class TestAiohttpTransport:
    """Tests for AiohttpTransport."""

    @pytest.mark.asyncio
    async def test_does_not_follow_redirects(self):
        async with test_utils.TestServer(_create_app()) as server:
            async with AiohttpTransport() as transport:
                response = await transport.dispatch(Request.build("GET", str(server.make_url("/start"))))

        assert response.status_code == 302
        assert response.location == "/middle?step=1"

    @pytest.mark.asyncio
    async def test_requires_context(self):
        transport = AiohttpTransport()
        with pytest.raises(RuntimeError):
            await transport.dispatch(Request.build("GET", "http://example.com"))

    @pytest.mark.asyncio
    async def test_content_size_limit(self):
        async with test_utils.TestServer(_create_app()) as server:
            async with AiohttpTransport(max_content_size=5) as transport:
                with pytest.raises(ValueError):
                    await transport.dispatch(Request.build("GET", str(server.make_url("/final"))))


class TestRedirectingClient:
    """End-to-end redirect following over HTTP."""

    @pytest.mark.asyncio
    async def test_follows_chain_with_history(self):
        async with test_utils.TestServer(_create_app()) as server:
            async with AiohttpTransport() as transport:
                client = RedirectingClient(transport, {"track_history": True, "referer": True})
                response = await client.get(str(server.make_url("/start")))

        assert response.status_code == 200
        assert response.redirect_status_history == (302, 301)
        assert response.redirect_history[-1].endswith("/final")
        assert response.url.endswith("/final")
        data = response.body.decode()
        assert "middle?step=1" in data

    @pytest.mark.asyncio
    async def test_see_other_switches_to_get(self):
        async with test_utils.TestServer(_create_app()) as server:
            async with AiohttpTransport() as transport:
                client = RedirectingClient(transport)
                response = await client.post(str(server.make_url("/form")), body="a=b")

        assert response.status_code == 200
        assert b'"method": "GET"' in response.body
        assert b'"body": null' in response.body

    @pytest.mark.asyncio
    async def test_temporary_redirect_keeps_post(self):
        async with test_utils.TestServer(_create_app()) as server:
            async with AiohttpTransport() as transport:
                client = RedirectingClient(transport)
                response = await client.post(str(server.make_url("/temporary")), body="a=b")

        assert b'"method": "POST"' in response.body
        assert b'"body": "a=b"' in response.body

    @pytest.mark.asyncio
    async def test_loop_hits_limit(self):
        async with test_utils.TestServer(_create_app()) as server:
            async with AiohttpTransport() as transport:
                client = RedirectingClient(transport, {"max": 3})
                with pytest.raises(TooManyRedirectsError, match="more than 3 redirects"):
                    await client.get(str(server.make_url("/loop")))

    @pytest.mark.asyncio
    async def test_refuses_unsupported_protocol(self):
        async with test_utils.TestServer(_create_app()) as server:
            async with AiohttpTransport() as transport:
                client = RedirectingClient(transport)
                with pytest.raises(InvalidProtocolError):
                    await client.get(str(server.make_url("/ftp")))

    @pytest.mark.asyncio
    async def test_per_request_disable(self):
        async with test_utils.TestServer(_create_app()) as server:
            async with AiohttpTransport() as transport:
                client = RedirectingClient(transport)
                response = await client.get(str(server.make_url("/start")), redirects=False)

        assert response.status_code == 302
