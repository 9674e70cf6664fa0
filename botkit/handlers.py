"""Handler and middleware contracts, and chain composition.

A handler is an ``async`` callable taking a :class:`~botkit.context.Context`.
It reports an error by raising a :class:`~botapi.exceptions.BotError`.

A middleware takes the next handler and returns a new handler wrapping it.
It decides whether and when to call ``next_handler``, and with which
(derived) context.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence, runtime_checkable

from botapi.exceptions import BotError
from botkit.context import Context


@runtime_checkable
class Handler(Protocol):
    """Processes one update."""
    async def __call__(self, ctx: Context) -> None: ...  # noqa: E704


@runtime_checkable
class Middleware(Protocol):
    """Wraps a handler into another handler."""
    def __call__(self, next_handler: Handler) -> Handler: ...  # noqa: E704


@runtime_checkable
class CommandHandler(Protocol):
    """Processes one routed command or callback with its argument."""
    async def __call__(self, ctx: Context, arg: str) -> None: ...  # noqa: E704


# Receives errors raised by the chain; must not raise itself.
ErrorFunc = Callable[[Context, BotError], None]


async def empty_handler(ctx: Context) -> None:
    """Does nothing."""


def build_chain(handler: Optional[Handler], middleware: Sequence[Middleware]) -> Handler:
    """Compose ``middleware[0](middleware[1](...(middleware[-1](handler))))``.

    The first middleware is the outermost one: it runs first on the way in
    and last on the way out.  A missing handler is replaced by
    :func:`empty_handler`.
    """
    chain: Handler = handler or empty_handler
    for wrap in reversed(middleware):
        chain = wrap(chain)
    return chain
