"""Resolution of ``Location`` values against the request that was redirected."""

from __future__ import annotations

from urllib.parse import urljoin, urlsplit, urlunsplit

# Schemes that are meaningless without an authority component
HIERARCHICAL_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})


class LocationError(ValueError):
    """A ``Location`` header value that cannot be turned into a URI."""


def _check_characters(value: str) -> None:
    for char in value:
        if char.isspace() or ord(char) < 0x20 or ord(char) == 0x7F:
            raise LocationError(f"contains illegal character {char!r}")


def resolve_location(base_url: str, location: str) -> str:
    """
    Resolve a ``Location`` value to an absolute URI.

    Absolute values are returned as given. Relative references are
    resolved against ``base_url`` per RFC 3986 section 5, so scheme and
    authority come from the base, and the path and query from the
    reference. A fragment on the base is carried over when the
    reference has none (RFC 7231 section 7.1.2).

    Args:
        base_url: URL of the request that received the redirect
        location: Raw ``Location`` header value

    Returns:
        Absolute target URI

    Raises:
        LocationError: If the value is empty or not a valid URI reference
    """
    value = location.strip()
    if not value:
        raise LocationError("empty value")
    _check_characters(value)

    try:
        reference = urlsplit(value)
        # Accessing port validates it
        reference.port
    except ValueError as e:
        raise LocationError(str(e)) from e

    if reference.scheme:
        target = value
    else:
        target = urljoin(base_url, value)

    parsed = urlsplit(target)
    if parsed.scheme in HIERARCHICAL_SCHEMES and not parsed.hostname:
        raise LocationError("absolute URI has no host")

    base_fragment = urlsplit(base_url).fragment
    if base_fragment and not parsed.fragment and not target.endswith("#"):
        target = f"{target}#{base_fragment}"

    return target


def scheme_of(url: str) -> str:
    """Lower-case scheme of a URL ('' if none)."""
    return urlsplit(url).scheme.lower()


def host_of(url: str) -> str:
    """Lower-case hostname of a URL ('' if none)."""
    return urlsplit(url).hostname or ""


def authority_of(url: str) -> str:
    """Lower-case ``host[:port]`` of a URL, without userinfo."""
    return urlsplit(url).netloc.rpartition("@")[2].lower()


def referer_for(url: str) -> str:
    """
    Value for a ``Referer`` header pointing at ``url``.

    Userinfo and fragment are removed, the query is kept.
    """
    parts = urlsplit(url)
    netloc = parts.netloc.rpartition("@")[2]
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, ""))
