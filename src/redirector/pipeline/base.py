"""Base classes for the request-handling pipeline."""

from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Callable, Protocol, runtime_checkable

from ..models.messages import Request, Response

# Type alias for an async request handler
Handler = Callable[[Request], Awaitable[Response]]


@runtime_checkable
class Middleware(Protocol):
    """
    Protocol for pipeline stages.

    A middleware receives the next handler in the stack and returns a
    handler that wraps it. It may replace the request on the way in,
    the response on the way out, or call the inner handler several
    times (as redirect following does).

    Error Handling Contract:
    - Never swallow errors from the inner handler
    - Raise for conditions the caller must see

    Example implementation:
        class UserAgentMiddleware:
            name = "user_agent"

            def wrap(self, handler: Handler) -> Handler:
                async def handle(request: Request) -> Response:
                    headers = request.mutable_headers()
                    headers.setdefault("User-Agent", "redirector")
                    return await handler(request.replace(headers=headers))

                return handle
    """

    name: str

    def wrap(self, handler: Handler) -> Handler:
        """
        Wrap the next handler in the stack.

        Args:
            handler: The inner handler

        Returns:
            A handler with this stage applied
        """
        ...


@dataclass
class HandlerStack:
    """
    Ordered middleware around a transport handler.

    Middleware run in the order they were pushed: the first one pushed
    sees the request first and the response last.

    Example:
        stack = HandlerStack(transport.dispatch)
        stack.push(RedirectMiddleware(RedirectConfig(max=3)))

        handler = stack.resolve()
        response = await handler(Request.build("GET", "https://example.com"))
    """

    transport: Handler
    middlewares: list[Middleware] = field(default_factory=list)

    def push(self, middleware: Middleware) -> "HandlerStack":
        """
        Add a middleware to the stack (fluent API).

        Args:
            middleware: The middleware to add

        Returns:
            Self for chaining
        """
        self.middlewares.append(middleware)
        return self

    def remove(self, name: str) -> "HandlerStack":
        """Remove every middleware registered under ``name``."""
        self.middlewares = [m for m in self.middlewares if m.name != name]
        return self

    def resolve(self) -> Handler:
        """Compose the stack into a single handler."""
        handler = self.transport
        for middleware in reversed(self.middlewares):
            handler = middleware.wrap(handler)
        return handler

    async def __call__(self, request: Request) -> Response:
        """Resolve the stack and send a request through it."""
        return await self.resolve()(request)
