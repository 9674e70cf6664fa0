"""Long-poll update loop with offset tracking.

:class:`UpdatePoller` repeatedly calls ``getUpdates`` and yields the updates
one by one.  The offset advances past an update *before* it is yielded, so the
next request confirms everything that was handed out.

Failure policy:

- ``asyncio.CancelledError`` (the consumer was cancelled) ends the stream and
  propagates;
- :class:`~botapi.exceptions.PermanentAPIError` (revoked token, forbidden)
  ends the stream and propagates;
- any other :class:`~botapi.exceptions.TransportError` or
  :class:`~botapi.exceptions.APIException` is reported to ``on_error`` and the
  request is retried after ``retry_delay`` seconds.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, AsyncIterator, Callable, List, Optional

from botapi.exceptions import APIException, BotError, PermanentAPIError, TransportError
from botapi.methods import UpdateConfig
from botapi.models import Update
from core.logger import get_child_logger

if TYPE_CHECKING:
    from botapi.client import BotClient

DEFAULT_RETRY_DELAY: float = 3.0

ErrorObserver = Callable[[BotError], None]


class UpdatePoller:
    """Turns ``getUpdates`` long polling into an async stream of updates.

    Usage::

        poller = UpdatePoller(client, UpdateConfig(timeout=30))
        async with contextlib.aclosing(poller.updates()) as updates:
            async for update in updates:
                ...

    Only one stream may be active per poller: the remote API accepts a
    single long-poll consumer per bot.
    """

    def __init__(
        self,
        api: "BotClient",
        config: Optional[UpdateConfig] = None,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        on_error: Optional[ErrorObserver] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._config = config or UpdateConfig()
        self._config.validate_params()
        self._api = api
        self._retry_delay = retry_delay
        self._logger = logger or get_child_logger("polling")
        self._on_error = on_error or self._log_error
        self._running = False
        self.offset: int = self._config.offset
        self.closed: bool = False

    @property
    def running(self) -> bool:
        return self._running

    def reset(self, offset: int) -> None:
        """Move the cursor explicitly, e.g. to a negative "replay last N" offset."""
        if self._running:
            raise RuntimeError("cannot reset the offset of a running poller")
        self.offset = offset

    def _log_error(self, exc: BotError) -> None:
        self._logger.warning(
            "getUpdates failed, retrying",
            extra={"api_endpoint": "getUpdates", "offset": self.offset, "error": str(exc), "retry_delay": self._retry_delay},
        )

    def _backoff(self, exc: BotError) -> float:
        if isinstance(exc, APIException) and exc.retry_after is not None:
            return max(self._retry_delay, float(exc.retry_after))
        return self._retry_delay

    async def _fetch(self) -> Optional[List[Update]]:
        """One getUpdates round trip; ``None`` after a transient failure."""
        config = self._config.model_copy(update={"offset": self.offset})
        try:
            return await self._api.get_updates(config)
        except PermanentAPIError as exc:
            self._logger.error("getUpdates rejected permanently", extra={"api_endpoint": "getUpdates", "offset": self.offset, "error": str(exc)})
            raise
        except (TransportError, APIException) as exc:
            self._on_error(exc)
            await asyncio.sleep(self._backoff(exc))
            return None

    async def updates(self) -> AsyncIterator[Update]:
        """Yield updates forever, in the order the API returned them.

        Updates whose id is below the current offset are dropped, so nothing
        is delivered twice.
        """
        if self._running:
            raise RuntimeError("poller is already running")
        self._running = True
        self.closed = False
        self._logger.info("Polling for updates", extra={"offset": self.offset, "limit": self._config.limit, "timeout": self._config.timeout})
        try:
            while True:
                batch = await self._fetch()
                if not batch:
                    continue
                self._logger.debug("Received updates", extra={"count": len(batch), "offset": self.offset})
                for update in batch:
                    if update.update_id < self.offset:
                        continue
                    self.offset = update.update_id + 1
                    yield update
        finally:
            self._running = False
            self.closed = True
            self._logger.info("Update stream closed", extra={"offset": self.offset})
