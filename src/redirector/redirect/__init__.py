"""Redirect policy engine and hop driver."""

from ..errors import FailureKind
from .context import RedirectContext
from .driver import Dispatch, RedirectCallback, RedirectDriver, run
from .policy import Decision, Failure, Follow, Terminal, evaluate
from .uri import LocationError, resolve_location

__all__ = [
    "Decision",
    "Dispatch",
    "Failure",
    "FailureKind",
    "Follow",
    "LocationError",
    "RedirectCallback",
    "RedirectContext",
    "RedirectDriver",
    "Terminal",
    "evaluate",
    "resolve_location",
    "run",
]
