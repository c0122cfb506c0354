"""Exceptions raised when a redirect chain is aborted."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

from .models.messages import Request, Response

if TYPE_CHECKING:
    from .redirect.policy import Failure


class FailureKind(str, Enum):
    """Reasons a redirect chain is aborted."""

    TOO_MANY_REDIRECTS = "too_many_redirects"
    INVALID_PROTOCOL = "invalid_protocol"
    INVALID_LOCATION = "invalid_location"


class RedirectError(Exception):
    """
    Base class for redirect chain failures.

    Attributes:
        request: Request whose response triggered the failure
        response: The redirect response that was refused
    """

    kind: FailureKind

    def __init__(
        self,
        message: str,
        request: Optional[Request] = None,
        response: Optional[Response] = None,
    ) -> None:
        super().__init__(message)
        self.request = request
        self.response = response


class TooManyRedirectsError(RedirectError):
    """The chain went past the configured maximum number of redirects."""

    kind = FailureKind.TOO_MANY_REDIRECTS


class InvalidProtocolError(RedirectError):
    """A redirect pointed at a scheme outside the allowed protocols."""

    kind = FailureKind.INVALID_PROTOCOL


class InvalidLocationError(RedirectError):
    """A ``Location`` header could not be parsed as a URI reference."""

    kind = FailureKind.INVALID_LOCATION


_ERRORS_BY_KIND: dict[FailureKind, type[RedirectError]] = {
    FailureKind.TOO_MANY_REDIRECTS: TooManyRedirectsError,
    FailureKind.INVALID_PROTOCOL: InvalidProtocolError,
    FailureKind.INVALID_LOCATION: InvalidLocationError,
}


def error_for_failure(
    failure: Failure,
    request: Optional[Request] = None,
    response: Optional[Response] = None,
) -> RedirectError:
    """Build the exception matching a Failure decision."""
    return _ERRORS_BY_KIND[failure.kind](failure.detail, request=request, response=response)
