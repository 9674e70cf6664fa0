"""Bot — update dispatcher.

Owns the middleware list and the final handler, composes them into one chain
and feeds it updates, either from long polling (:meth:`Bot.serve`) or from a
webhook (:meth:`Bot.webhook`).

Updates are processed one at a time, in arrival order.  A
:class:`~botapi.exceptions.BotError` raised by the chain goes to the error
function; any other exception propagates to the caller of the dispatch loop
unless a :func:`~botkit.recover.recover` middleware absorbs it.
"""

from __future__ import annotations

import contextlib
import logging
from typing import List, Optional

from botapi.client import BotClient
from botapi.exceptions import BotError
from botapi.methods import UpdateConfig
from botapi.models import Update, User
from botapi.polling import DEFAULT_RETRY_DELAY, UpdatePoller
from botkit.context import Context
from botkit.handlers import ErrorFunc, Handler, Middleware, build_chain
from botkit.webhook import WebhookReceiver
from core.logger import get_child_logger


class Bot:
    """Usage::

        bot = Bot(BotClient(token))
        bot.use(recover(), commands({"start": start}))
        bot.handle(echo)
        await bot.serve()
    """

    def __init__(
        self,
        api: BotClient,
        *,
        poll_config: Optional[UpdateConfig] = None,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._api = api
        self._poll_config = poll_config or UpdateConfig()
        self._retry_delay = retry_delay
        self._logger = logger or get_child_logger("bot")
        self._middleware: List[Middleware] = []
        self._handler: Optional[Handler] = None
        self._error_func: ErrorFunc = self._log_error
        self._chain: Optional[Handler] = None
        self.poller: Optional[UpdatePoller] = None
        self.me: Optional[User] = None

    @property
    def api(self) -> BotClient:
        return self._api

    # ------------------------------------------------------------------
    #  Configuration
    # ------------------------------------------------------------------

    def use(self, *middleware: Middleware) -> None:
        """Append middleware; the first one added is the outermost."""
        self._middleware.extend(middleware)
        self._chain = None

    def handle(self, handler: Optional[Handler]) -> Optional[Handler]:
        """Set the final handler.  Usable as a decorator."""
        self._handler = handler
        self._chain = None
        return handler

    def error_func(self, func: ErrorFunc) -> ErrorFunc:
        """Set the function receiving chain errors.  Usable as a decorator."""
        self._error_func = func
        return func

    @property
    def chain(self) -> Handler:
        if self._chain is None:
            self._chain = build_chain(self._handler, self._middleware)
        return self._chain

    def _log_error(self, ctx: Context, exc: BotError) -> None:
        self._logger.error(
            "Update handling failed",
            extra={**ctx.log_extra(), "error": str(exc), "error_type": type(exc).__name__},
        )

    # ------------------------------------------------------------------
    #  Dispatch
    # ------------------------------------------------------------------

    async def process_update(self, update: Update, *, via_webhook: bool = False) -> None:
        """Run one update through the chain."""
        ctx = Context.for_update(self._api, update, via_webhook=via_webhook)
        self._logger.debug("Dispatching update", extra={**ctx.log_extra(), "kind": update.kind})
        try:
            await self.chain(ctx)
        except BotError as exc:
            self._error_func(ctx, exc)

    async def update_me(self) -> User:
        """Fetch the bot's own user and remember it as :attr:`me`."""
        self.me = await self._api.get_me()
        self._logger.info("Authorized", extra={"bot_id": self.me.id, "username": self.me.username})
        return self.me

    async def serve(self) -> None:
        """Long-poll and dispatch until cancelled or a permanent API error.

        Raises:
            PermanentAPIError: If the token is rejected or the bot is forbidden.
        """
        await self.update_me()
        self.poller = UpdatePoller(self._api, self._poll_config, retry_delay=self._retry_delay)
        async with contextlib.aclosing(self.poller.updates()) as updates:
            async for update in updates:
                await self.process_update(update)

    async def webhook(self, secret_token: Optional[str] = None) -> WebhookReceiver:
        """Prepare webhook mode and return the request receiver."""
        await self.update_me()
        return WebhookReceiver(self, secret_token=secret_token)
