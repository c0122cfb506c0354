"""
redirector - Redirect following for async HTTP request pipelines.

Usage:
    from redirector import AiohttpTransport, RedirectConfig, RedirectingClient

    async with AiohttpTransport() as transport:
        client = RedirectingClient(transport, RedirectConfig(max=3, referer=True))
        response = await client.get("http://example.com/old-path")
        print(response.status_code, response.url)
"""

__version__ = "1.0.0"

from .errors import (
    FailureKind,
    InvalidLocationError,
    InvalidProtocolError,
    RedirectError,
    TooManyRedirectsError,
)
from .http import AiohttpTransport, RedirectingClient, Transport
from .models import (
    DEFAULT_PROTOCOLS,
    EventType,
    RedirectConfig,
    RedirectEvent,
    Request,
    Response,
)
from .pipeline import HandlerStack, Middleware
from .pipeline.steps import RedirectMiddleware
from .redirect import (
    Decision,
    Failure,
    Follow,
    RedirectContext,
    RedirectDriver,
    Terminal,
    evaluate,
    run,
)

__all__ = [
    "__version__",
    # Core
    "evaluate",
    "run",
    "RedirectContext",
    "RedirectDriver",
    "Decision",
    "Terminal",
    "Follow",
    "Failure",
    # Config
    "DEFAULT_PROTOCOLS",
    "RedirectConfig",
    # Messages
    "Request",
    "Response",
    # Events
    "EventType",
    "RedirectEvent",
    # Errors
    "FailureKind",
    "RedirectError",
    "TooManyRedirectsError",
    "InvalidProtocolError",
    "InvalidLocationError",
    # Pipeline
    "HandlerStack",
    "Middleware",
    "RedirectMiddleware",
    # HTTP
    "AiohttpTransport",
    "RedirectingClient",
    "Transport",
]
