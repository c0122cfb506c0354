"""RedirectMiddleware - redirect-following pipeline stage."""

import logging
from typing import Any, Optional

from ...models.config import RedirectConfig
from ...models.events import EventEmitter
from ...models.messages import Request, Response
from ...redirect.driver import RedirectCallback, run
from ..base import Handler

logger = logging.getLogger(__name__)


class RedirectMiddleware:
    """
    Pipeline stage that follows redirects returned by the inner handler.

    Each request gets its own chain state, so one middleware instance
    can serve concurrent requests.

    Example:
        stack = HandlerStack(transport.dispatch)
        stack.push(RedirectMiddleware({"max": 2, "referer": True}))
        response = await stack(Request.build("GET", "http://example.com"))
    """

    name = "redirect"

    def __init__(
        self,
        config: Any = True,
        on_redirect: Optional[RedirectCallback] = None,
        emit: Optional[EventEmitter] = None,
    ) -> None:
        """
        Initialize the redirect stage.

        Args:
            config: Redirect options (see ``RedirectConfig.coerce``);
                a falsy value makes the stage a pass-through
            on_redirect: Optional callback run before each redirect is followed
            emit: Optional callback for chain events
        """
        self._config = RedirectConfig.coerce(config)
        self._on_redirect = on_redirect
        self._emit = emit

    @property
    def config(self) -> Optional[RedirectConfig]:
        return self._config

    def wrap(self, handler: Handler) -> Handler:
        if self._config is None:
            logger.debug("Redirect following disabled; stage is a pass-through")
            return handler

        async def handle(request: Request) -> Response:
            return await run(
                request,
                self._config,
                handler,
                on_redirect=self._on_redirect,
                emit=self._emit,
            )

        return handle
