"""Immutable request and response values passed between pipeline stages."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Union

from multidict import CIMultiDict, CIMultiDictProxy

HeadersInput = Union[Mapping[str, str], Iterable[tuple[str, str]], None]

# Statuses this package treats as followable redirects
REDIRECT_STATUS_CODES = frozenset({301, 302, 303, 307, 308})


def freeze_headers(headers: Any = None) -> CIMultiDictProxy[str]:
    """
    Build a read-only, case-insensitive header mapping.

    Accepts a plain dict, a list of ``(name, value)`` pairs (repeated
    names keep every value), or any multidict.
    """
    if isinstance(headers, CIMultiDictProxy):
        return headers
    if headers is None:
        return CIMultiDictProxy(CIMultiDict())
    return CIMultiDictProxy(CIMultiDict(headers))


@dataclass(frozen=True)
class Request:
    """
    Outgoing HTTP request.

    Instances are never mutated once built; redirects and middleware
    produce new ones via :meth:`replace`.

    Attributes:
        method: Upper-case HTTP method
        url: Absolute target URL
        headers: Case-insensitive, multi-value header mapping
        body: Optional request body
    """

    method: str
    url: str
    headers: CIMultiDictProxy[str] = field(default_factory=freeze_headers)
    body: bytes | None = None

    @classmethod
    def build(
        cls,
        method: str,
        url: str,
        headers: HeadersInput = None,
        body: bytes | str | None = None,
    ) -> Request:
        """Create a request from plain values."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        return cls(method=method.upper(), url=url, headers=freeze_headers(headers), body=body)

    def replace(self, **changes: Any) -> Request:
        """Return a copy with the given fields changed."""
        if "headers" in changes:
            changes["headers"] = freeze_headers(changes["headers"])
        if "method" in changes:
            changes["method"] = changes["method"].upper()
        return replace(self, **changes)

    def mutable_headers(self) -> CIMultiDict[str]:
        """Return a writable copy of the headers."""
        return CIMultiDict(self.headers)


@dataclass(frozen=True)
class Response:
    """
    HTTP response produced by a transport.

    Attributes:
        status_code: HTTP status code
        headers: Case-insensitive, multi-value header mapping
        body: Raw response content
        url: URL of the request that produced this response
        redirect_history: Redirect targets followed to reach this response
            (only populated when history tracking is enabled)
        redirect_status_history: Status codes of the followed redirects,
            in the same order as ``redirect_history``
    """

    status_code: int
    headers: CIMultiDictProxy[str] = field(default_factory=freeze_headers)
    body: bytes = b""
    url: str = ""
    redirect_history: tuple[str, ...] = ()
    redirect_status_history: tuple[int, ...] = ()

    @classmethod
    def build(
        cls,
        status_code: int,
        headers: HeadersInput = None,
        body: bytes = b"",
        url: str = "",
    ) -> Response:
        """Create a response from plain values."""
        return cls(status_code=status_code, headers=freeze_headers(headers), body=body, url=url)

    @property
    def location(self) -> str | None:
        """The ``Location`` header, or None when absent. Empty values count as present."""
        return self.headers.get("Location")

    @property
    def is_redirect(self) -> bool:
        """True for a followable redirect status carrying a ``Location``."""
        return self.status_code in REDIRECT_STATUS_CODES and self.location is not None

    def with_history(self, uris: Iterable[str], statuses: Iterable[int]) -> Response:
        """Return a copy annotated with the redirect chain that led here."""
        return replace(
            self,
            redirect_history=tuple(uris),
            redirect_status_history=tuple(statuses),
        )
