"""Hop driver: dispatch requests and follow redirects until a final response."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable
from typing import Any, Callable, Optional, Union

from ..errors import error_for_failure
from ..models.config import RedirectConfig
from ..models.events import EventEmitter, EventType, RedirectEvent
from ..models.messages import Request, Response
from .context import RedirectContext
from .policy import Failure, Terminal, evaluate

logger = logging.getLogger(__name__)

# Type alias for the transport the driver sends requests through
Dispatch = Callable[[Request], Awaitable[Response]]

# Called before each redirect is followed: (request, response, target)
RedirectCallback = Callable[[Request, Response, str], Union[None, Awaitable[None]]]


async def _notify(callback: Optional[RedirectCallback], request: Request, response: Response, target: str) -> None:
    if callback is None:
        return
    result = callback(request, response, target)
    if inspect.isawaitable(result):
        await result


async def run(
    initial_request: Request,
    config: Any,
    dispatch: Dispatch,
    *,
    on_redirect: Optional[RedirectCallback] = None,
    emit: Optional[EventEmitter] = None,
) -> Response:
    """
    Send a request and follow redirects until a final response.

    Hops run strictly one after another: a follow-up request is only
    dispatched once the previous response has been evaluated. The
    dispatch is the only suspension point, so cancelling the caller
    cancels the pending dispatch and no further hop is sent.

    Args:
        initial_request: Request that starts the chain
        config: RedirectConfig, dict of options, True for defaults,
            or a falsy value to return the first response as-is
        dispatch: Async transport callable
        on_redirect: Optional callback run before each redirect is followed
        emit: Optional callback for chain events

    Returns:
        The final response, annotated with the redirect history when
        ``track_history`` is enabled

    Raises:
        TooManyRedirectsError: More than ``config.max`` redirects
        InvalidProtocolError: Redirect to a scheme not in ``config.protocols``
        InvalidLocationError: Unparsable ``Location`` header
        Exception: Whatever the transport raises, unchanged
    """
    redirect_config = RedirectConfig.coerce(config)
    if redirect_config is None:
        return await dispatch(initial_request)

    context = RedirectContext.for_request(initial_request)
    request = initial_request

    if emit:
        emit(RedirectEvent(type=EventType.CHAIN_STARTED, url=request.url, hop=0))

    response = await dispatch(request)

    while True:
        decision = evaluate(request, response, context, redirect_config)

        if isinstance(decision, Terminal):
            final = decision.response
            if redirect_config.track_history:
                final = final.with_history(context.history, context.status_history)
            if emit:
                emit(
                    RedirectEvent(
                        type=EventType.CHAIN_COMPLETED,
                        url=request.url,
                        status_code=final.status_code,
                        hop=context.hops,
                        message=f"Completed after {context.hops} redirect(s)",
                    )
                )
            return final

        if isinstance(decision, Failure):
            logger.warning(f"Refusing redirect from {request.url}: {decision.detail}")
            if emit:
                emit(
                    RedirectEvent(
                        type=EventType.REDIRECT_REFUSED,
                        url=request.url,
                        status_code=response.status_code,
                        hop=context.hops,
                        error=decision.detail,
                    )
                )
            raise error_for_failure(decision, request=request, response=response)

        await _notify(on_redirect, request, response, decision.target)

        logger.debug(f"Following {decision.status_code} redirect {context.hops}/{redirect_config.max} to {decision.target}")
        if emit:
            emit(
                RedirectEvent(
                    type=EventType.REDIRECT_FOLLOWED,
                    url=request.url,
                    target=decision.target,
                    status_code=decision.status_code,
                    hop=context.hops,
                )
            )

        request = decision.request
        response = await dispatch(request)


class RedirectDriver:
    """
    Reusable hop driver bound to a transport.

    Example:
        async with AiohttpTransport() as transport:
            driver = RedirectDriver(transport.dispatch, RedirectConfig(max=3))
            response = await driver(Request.build("GET", "https://example.com"))
    """

    def __init__(
        self,
        dispatch: Dispatch,
        config: Any = True,
        on_redirect: Optional[RedirectCallback] = None,
    ) -> None:
        """
        Initialize the driver.

        Args:
            dispatch: Async transport callable
            config: Default redirect options (see ``RedirectConfig.coerce``)
            on_redirect: Optional callback run before each redirect is followed
        """
        self._dispatch = dispatch
        self._config = RedirectConfig.coerce(config)
        self._on_redirect = on_redirect

    @property
    def config(self) -> Optional[RedirectConfig]:
        return self._config

    async def __call__(
        self,
        request: Request,
        config: Any = None,
        emit: Optional[EventEmitter] = None,
    ) -> Response:
        """Run a chain, using ``config`` in place of the default when given."""
        active = self._config if config is None else config
        return await run(request, active, self._dispatch, on_redirect=self._on_redirect, emit=emit)
