"""HTTP transport and redirect-following client."""

from .client import AiohttpTransport, RedirectingClient
from .protocols import Transport

__all__ = [
    "AiohttpTransport",
    "RedirectingClient",
    "Transport",
]
