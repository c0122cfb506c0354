"""Shared fixtures for redirector tests."""

from collections import deque

import pytest
from redirector.models.messages import Request, Response


class MockTransport:
    """Transport returning queued responses and recording every request sent."""

    def __init__(self, responses: list[Response]) -> None:
        self._responses = deque(responses)
        self.requests: list[Request] = []

    async def dispatch(self, request: Request) -> Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        response = self._responses.popleft()
        return Response.build(response.status_code, response.headers, response.body, url=request.url)

    @property
    def last_request(self) -> Request:
        return self.requests[-1]


@pytest.fixture
def mock_transport():
    """Factory building a MockTransport from a list of responses."""
    return MockTransport
