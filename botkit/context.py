"""Request-scoped context threaded through the handler chain.

A :class:`Context` is created by the dispatcher for every update and is
immutable: middleware that wants to pass extra state to the handlers below it
derives a new context with :meth:`Context.replace` or
:meth:`Context.with_value` and hands that one to ``next_handler``.
"""

from __future__ import annotations

import dataclasses
import uuid
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from botapi.models import Update

if TYPE_CHECKING:
    from botapi.client import BotClient

SessionData = Dict[str, Any]

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def new_trace_id() -> str:
    return uuid.uuid4().hex


@dataclasses.dataclass(frozen=True, slots=True)
class Context:
    """Everything a handler needs to process one update."""

    api: "BotClient"
    update: Update
    trace_id: str = dataclasses.field(default_factory=new_trace_id)
    via_webhook: bool = False
    session: Optional[SessionData] = None
    values: Mapping[str, Any] = dataclasses.field(default_factory=lambda: _EMPTY)

    @classmethod
    def for_update(cls, api: "BotClient", update: Update, *, via_webhook: bool = False) -> "Context":
        return cls(api=api, update=update, via_webhook=via_webhook)

    @property
    def update_id(self) -> int:
        return self.update.update_id

    def replace(self, **changes: Any) -> "Context":
        """Return a copy of this context with *changes* applied."""
        return dataclasses.replace(self, **changes)

    def with_value(self, key: str, value: Any) -> "Context":
        """Return a copy carrying *value* under *key* in ``values``."""
        values = dict(self.values)
        values[key] = value
        return self.replace(values=MappingProxyType(values))

    def value(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def log_extra(self) -> Dict[str, Any]:
        """Structured logging fields identifying this request."""
        return {"update_id": self.update.update_id, "trace_id": self.trace_id, "via_webhook": self.via_webhook}
