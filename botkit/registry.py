"""Command and callback routing middleware.

Routers map a key to a :class:`~botkit.handlers.CommandHandler`:

- :class:`CommandRouter` keys on the slash-command of a message
  (``/start@my_bot payload`` → key ``"start"``, argument ``"payload"``);
- :class:`CallbackRouter` keys on the callback data prefix before the first
  ``:`` (``"color:red"`` → key ``"color"``, argument ``"red"``).

Lookup rules, shared by both:

- an unknown key falls back to the default entry registered under ``""``;
- with no default, or when the matched entry has no handler, the update
  continues down the chain unchanged;
- updates that do not carry a routable payload always continue down the
  chain.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Dict, Mapping, Optional, Tuple

from botapi.models import Update
from botkit.context import Context
from botkit.handlers import CommandHandler, Handler, Middleware
from core.logger import get_child_logger

# Key of the fallback entry.
DEFAULT_ROUTE = ""


# ── Registry entry ───────────────────────────────────────────────────────────

@dataclasses.dataclass(frozen=True, slots=True)
class RouteEntry:
    """A registered key, its handler and the text shown in ``/help``."""
    key: str
    handler: Optional[CommandHandler]
    description: str = ""


# ── Routers ──────────────────────────────────────────────────────────────────

class Router:
    """Base router; subclasses decide how a key is extracted from an update.

    Usage::

        router = CommandRouter()

        @router.register("start", description="Say hello")
        async def start(ctx: Context, arg: str) -> None: ...

        bot.use(router.middleware())
    """

    kind = "route"

    def __init__(
        self,
        routes: Optional[Mapping[str, Optional[CommandHandler]]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._entries: Dict[str, RouteEntry] = {}
        self._logger = logger
        for key, handler in (routes or {}).items():
            self.add(key, handler)

    @property
    def logger(self) -> logging.Logger:
        # Resolved on first use: creating a router must not configure logging.
        if self._logger is None:
            self._logger = get_child_logger("router")
        return self._logger

    @staticmethod
    def normalize(key: str) -> str:
        return key

    # ── registration ─────────────────────────────────────────────────────

    def add(self, key: str, handler: Optional[CommandHandler], description: str = "") -> None:
        """Bind *handler* to *key*; ``None`` explicitly passes the update on."""
        key = self.normalize(key)
        self._entries[key] = RouteEntry(key=key, handler=handler, description=description)

    def register(self, key: str, *, description: str = "") -> Callable[[CommandHandler], CommandHandler]:
        """Decorator form of :meth:`add`."""
        def decorator(func: CommandHandler) -> CommandHandler:
            self.add(key, func, description)
            return func
        return decorator

    # ── lookup helpers ───────────────────────────────────────────────────

    def get(self, key: str) -> Optional[RouteEntry]:
        return self._entries.get(self.normalize(key))

    def entries(self) -> Dict[str, RouteEntry]:
        """Return a copy of all registered entries."""
        return dict(self._entries)

    def resolve(self, key: str) -> Optional[CommandHandler]:
        """Handler for *key*, the default handler, or ``None``."""
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries.get(DEFAULT_ROUTE)
        return entry.handler if entry is not None else None

    def extract(self, update: Update) -> Optional[Tuple[str, str]]:
        """Return ``(key, argument)`` or ``None`` if the update is not routable."""
        raise NotImplementedError

    # ── middleware ───────────────────────────────────────────────────────

    def middleware(self) -> Middleware:
        def wrap(next_handler: Handler) -> Handler:
            async def route(ctx: Context) -> None:
                extracted = self.extract(ctx.update)
                if extracted is None:
                    await next_handler(ctx)
                    return
                key, arg = extracted
                handler = self.resolve(key)
                if handler is None:
                    await next_handler(ctx)
                    return
                self.logger.debug("Routing %s", self.kind, extra={**ctx.log_extra(), "route": key})
                await handler(ctx, arg)
            return route
        return wrap


class CommandRouter(Router):
    """Routes messages by slash-command name."""

    kind = "command"

    @staticmethod
    def normalize(key: str) -> str:
        return key[1:] if key.startswith("/") else key

    def extract(self, update: Update) -> Optional[Tuple[str, str]]:
        if update.message is None:
            return None
        command, arg = update.message.command()
        if not command:
            return None
        return command, arg


class CallbackRouter(Router):
    """Routes callback queries by the data prefix before ``:``."""

    kind = "callback"

    def extract(self, update: Update) -> Optional[Tuple[str, str]]:
        query = update.callback_query
        if query is None or query.data is None:
            return None
        prefix, _, arg = query.data.partition(":")
        return prefix, arg


def commands(routes: Mapping[str, Optional[CommandHandler]]) -> Middleware:
    """Middleware routing messages by command; see :class:`CommandRouter`."""
    return CommandRouter(routes).middleware()


def callbacks(routes: Mapping[str, Optional[CommandHandler]]) -> Middleware:
    """Middleware routing callback queries by data prefix; see :class:`CallbackRouter`."""
    return CallbackRouter(routes).middleware()
