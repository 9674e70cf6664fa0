"""Per-conversation session middleware.

The middleware loads the stored session bytes before the handlers run, decodes
them into a dict available as ``ctx.session``, and writes the re-encoded dict
back once the handlers are done, but only if it actually changed.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import Awaitable, Callable, Dict, Optional, Tuple

from botapi.exceptions import BotError
from botkit.context import Context, SessionData
from botkit.handlers import Handler, Middleware
from core.logger import get_child_logger

UpdateFunc = Callable[[bytes], Awaitable[None]]
GetSessionFunc = Callable[[Context], Awaitable[Tuple[Optional[bytes], UpdateFunc]]]


class SessionError(BotError):
    """The stored session could not be decoded."""


def encode_json(data: SessionData) -> bytes:
    # Sorted keys make equal sessions encode to equal bytes.
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def decode_json(raw: bytes) -> SessionData:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"session must decode to an object, got {type(data).__name__}")
    return data


@dataclasses.dataclass(frozen=True)
class SessionConfig:
    """How sessions are loaded, decoded and encoded."""

    get_session: GetSessionFunc
    encode: Callable[[SessionData], bytes] = encode_json
    decode: Callable[[bytes], SessionData] = decode_json


def session_with_config(config: SessionConfig, logger: Optional[logging.Logger] = None) -> Middleware:
    log = logger or get_child_logger("session")

    def wrap(next_handler: Handler) -> Handler:
        async def with_session(ctx: Context) -> None:
            raw, update = await config.get_session(ctx)
            try:
                data = config.decode(raw) if raw else {}
            except ValueError as exc:
                raise SessionError(f"cannot decode session: {exc}") from exc

            try:
                await next_handler(ctx.replace(session=data))
            finally:
                try:
                    # Nothing stored and nothing set: no write.
                    if data or raw is not None:
                        encoded = config.encode(data)
                        if encoded != raw:
                            await update(encoded)
                except (BotError, OSError, TypeError, ValueError) as exc:
                    log.warning("Session not saved", extra={**ctx.log_extra(), "error": str(exc)})
        return with_session
    return wrap


def session(get_session: GetSessionFunc) -> Middleware:
    """Session middleware with JSON encoding."""
    return session_with_config(SessionConfig(get_session=get_session))


def chat_key(ctx: Context) -> str:
    """Session key of one user in one chat."""
    chat = ctx.update.chat
    user = ctx.update.from_user
    return f"{chat.id if chat else ''}:{user.id if user else ''}"


class MemorySessionStore:
    """In-process session storage, lost on restart.

    Usage::

        store = MemorySessionStore()
        bot.use(session(store.get_session))
    """

    def __init__(self, key_func: Callable[[Context], str] = chat_key) -> None:
        self._key_func = key_func
        self._data: Dict[str, bytes] = {}

    def __len__(self) -> int:
        return len(self._data)

    def raw(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    async def get_session(self, ctx: Context) -> Tuple[Optional[bytes], UpdateFunc]:
        key = self._key_func(ctx)

        async def update(data: bytes) -> None:
            self._data[key] = data

        return self._data.get(key), update
