"""Protocol definitions for transport abstraction."""

from __future__ import annotations

from typing import Protocol

from ..models.messages import Request, Response


class Transport(Protocol):
    """
    Protocol for transports.

    A transport sends exactly one request and returns exactly one
    response; it never follows redirects itself.

    This abstraction allows for:
    - Mock implementations in tests
    - Different backends (aiohttp, httpx, etc.)
    """

    async def dispatch(self, request: Request) -> Response:
        """
        Send a request.

        Args:
            request: The request to send

        Returns:
            Response with status, headers and body

        Raises:
            Exception on network errors
        """
        ...
