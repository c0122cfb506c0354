"""Redirect policy: decide whether a response is followed and build the next request."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from ..errors import FailureKind
from ..models.config import RedirectConfig
from ..models.messages import Request, Response
from .context import RedirectContext
from .uri import LocationError, authority_of, host_of, referer_for, resolve_location, scheme_of

logger = logging.getLogger(__name__)

# Statuses that always rewrite the follow-up request to GET
SEE_OTHER = 303
# Statuses rewritten to GET unless strict mode is on
LEGACY_REWRITE_CODES = frozenset({301, 302})

# Headers describing a body; dropped along with it
BODY_HEADERS = ("Content-Length", "Content-Type", "Transfer-Encoding")

# Credentials scoped to the host they were sent to
HOST_CREDENTIAL_HEADERS = ("Authorization", "Cookie")


@dataclass(frozen=True)
class Terminal:
    """The response is final and goes back to the caller unchanged."""

    response: Response


@dataclass(frozen=True)
class Follow:
    """
    The response is a redirect to follow.

    Attributes:
        request: Next request to dispatch
        target: Resolved redirect URI
        status_code: Status of the redirect response
    """

    request: Request
    target: str
    status_code: int


@dataclass(frozen=True)
class Failure:
    """The chain must stop; nothing more is dispatched."""

    kind: FailureKind
    detail: str


Decision = Union[Terminal, Follow, Failure]


def rewrite_method(method: str, status_code: int, strict: bool) -> str:
    """
    Method for the follow-up request.

    303 always becomes GET. 301 and 302 become GET unless ``strict`` is
    set or the original method was HEAD. 307 and 308 keep the method.
    """
    if status_code == SEE_OTHER:
        return "GET"
    if status_code in LEGACY_REWRITE_CODES and not strict and method != "HEAD":
        return "GET"
    return method


def is_downgrade(from_url: str, to_url: str) -> bool:
    """True when a redirect goes from https to plain http."""
    return scheme_of(from_url) == "https" and scheme_of(to_url) == "http"


def format_protocols(protocols: frozenset[str]) -> str:
    return ", ".join(sorted(protocols))


def evaluate(
    request: Request,
    response: Response,
    context: RedirectContext,
    config: RedirectConfig,
) -> Decision:
    """
    Decide what to do with the response to ``request``.

    The only side effects are on ``context``: the hop counter is bumped
    for every redirect response, and the history grows when tracking is
    enabled. Requests are never modified; a follow-up is a new value.

    Args:
        request: The request that was just dispatched
        response: The response received for it
        context: State of the current chain
        config: Active redirect policy

    Returns:
        Terminal, Follow or Failure
    """
    if not response.is_redirect:
        return Terminal(response)

    context.hops += 1
    if context.hops > config.max:
        return Failure(
            FailureKind.TOO_MANY_REDIRECTS,
            f"Will not follow more than {config.max} redirects",
        )

    location = response.location or ""
    try:
        target = resolve_location(request.url, location)
    except LocationError as e:
        return Failure(
            FailureKind.INVALID_LOCATION,
            f"Redirect URI, {location!r}, is not a valid URI: {e}",
        )

    if scheme_of(target) not in config.protocols:
        return Failure(
            FailureKind.INVALID_PROTOCOL,
            f"Redirect URI, {target}, uses an unsupported protocol; "
            f"allowed: {format_protocols(config.protocols)}",
        )

    method = rewrite_method(request.method, response.status_code, config.strict)
    headers = request.mutable_headers()
    body = request.body

    if response.status_code == SEE_OTHER or method != request.method:
        body = None
        for name in BODY_HEADERS:
            headers.popall(name, None)

    if host_of(target) != host_of(request.url):
        for name in HOST_CREDENTIAL_HEADERS:
            headers.popall(name, None)

    # A caller-set Host must name the server the request now goes to
    if "Host" in headers and authority_of(target) != authority_of(request.url):
        headers["Host"] = authority_of(target)

    if config.referer:
        headers.popall("Referer", None)
        if not is_downgrade(request.url, target):
            headers["Referer"] = referer_for(request.url)

    if config.track_history:
        context.record(target, response.status_code)

    logger.debug(f"Redirect {response.status_code} {request.method} {request.url} -> {method} {target}")

    next_request = request.replace(method=method, url=target, headers=headers, body=body)
    return Follow(request=next_request, target=target, status_code=response.status_code)
