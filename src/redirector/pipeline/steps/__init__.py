"""Pipeline stages for request handling."""

from .redirect import RedirectMiddleware

__all__ = ["RedirectMiddleware"]
