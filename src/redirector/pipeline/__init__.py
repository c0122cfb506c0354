"""Pipeline architecture for request handling."""

from .base import Handler, HandlerStack, Middleware

__all__ = ["Handler", "HandlerStack", "Middleware"]
