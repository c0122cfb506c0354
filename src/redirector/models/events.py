"""Event types emitted while a redirect chain is followed."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional


class EventType(str, Enum):
    """Types of events emitted by the hop driver."""

    CHAIN_STARTED = "chain_started"
    REDIRECT_FOLLOWED = "redirect_followed"
    REDIRECT_REFUSED = "redirect_refused"
    CHAIN_COMPLETED = "chain_completed"


@dataclass
class RedirectEvent:
    """
    Event emitted during a redirect chain.

    Example:
        def log_event(event: RedirectEvent) -> None:
            if event.type == EventType.REDIRECT_FOLLOWED:
                print(f"{event.status_code} {event.url} -> {event.target}")

        await run(request, config, transport.dispatch, emit=log_event)
    """

    type: EventType

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    url: Optional[str] = None
    target: Optional[str] = None
    status_code: Optional[int] = None
    hop: Optional[int] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.type == EventType.REDIRECT_REFUSED


# Type alias for event emitter function
EventEmitter = Callable[[RedirectEvent], None]
