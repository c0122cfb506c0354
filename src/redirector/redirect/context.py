"""Per-chain redirect state."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..models.messages import Request


@dataclass
class RedirectContext:
    """
    Mutable state for one redirect chain.

    A context belongs to a single in-flight chain and is discarded when
    the chain ends; it is never shared between concurrent requests.

    Attributes:
        origin_url: URL of the request that started the chain
        hops: Number of redirects followed so far
        history: Followed redirect targets, in hop order
        status_history: Status codes of the followed redirects
    """

    origin_url: str
    hops: int = 0
    history: list[str] = field(default_factory=list)
    status_history: list[int] = field(default_factory=list)

    @classmethod
    def for_request(cls, request: Request) -> RedirectContext:
        """Create a fresh context rooted at the given request."""
        return cls(origin_url=request.url)

    def record(self, target: str, status_code: int) -> None:
        """Append a followed hop to the history."""
        self.history.append(target)
        self.status_history.append(status_code)

    def reset(self) -> None:
        """Forget every followed hop."""
        self.hops = 0
        self.history.clear()
        self.status_history.clear()
