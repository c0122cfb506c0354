"""Redirector configuration, message and event models."""

from .config import DEFAULT_PROTOCOLS, RedirectConfig
from .events import EventEmitter, EventType, RedirectEvent
from .messages import REDIRECT_STATUS_CODES, Request, Response, freeze_headers

__all__ = [
    # Config
    "DEFAULT_PROTOCOLS",
    "RedirectConfig",
    # Events
    "EventEmitter",
    "EventType",
    "RedirectEvent",
    # Messages
    "REDIRECT_STATUS_CODES",
    "Request",
    "Response",
    "freeze_headers",
]
