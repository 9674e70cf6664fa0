"""Request configs: one pydantic model per Bot API method.

Every config implements the :class:`Method` contract consumed by
:meth:`botapi.client.BotClient.invoke`:

- ``method_name`` — the API method, e.g. ``"sendMessage"``;
- :meth:`Method.params` — the form parameters, after local validation.

Values are sent as ``application/x-www-form-urlencoded``; nested objects
(reply markups, lists) are JSON-encoded strings, ``None`` values are omitted.
"""

from __future__ import annotations

import json
from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import BaseModel

from botapi.constants import CHAT_ACTIONS, DEFAULT_POLL_TIMEOUT, MAX_UPDATES_LIMIT
from botapi.exceptions import ParamValidationError, RequiredParamError
from botapi.models import (
    ForceReply,
    InlineKeyboardMarkup,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
)

ChatId = Union[int, str]
ReplyMarkup = Union[InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove, ForceReply]


def _encode_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class Method(BaseModel):
    """Base class of all request configs."""

    method_name: ClassVar[str] = ""

    model_config = {"populate_by_name": True, "frozen": True}

    def validate_params(self) -> None:
        """Raise :class:`~botapi.exceptions.BotError` for values the API would reject."""

    def params(self) -> Dict[str, str]:
        """Return the validated, encoded request parameters."""
        self.validate_params()
        raw = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return {key: _encode_value(value) for key, value in raw.items()}

    def extra_timeout(self) -> float:
        """Seconds the server may hold the request open on purpose."""
        return 0


class GetMe(Method):
    """getMe — basic information about the bot."""

    method_name: ClassVar[str] = "getMe"


class UpdateConfig(Method):
    """getUpdates — receive incoming updates using long polling.

    ``offset`` is the identifier of the first update to be returned; an update
    is confirmed as soon as getUpdates is called with a higher offset.  A
    negative offset retrieves updates starting from ``-offset`` updates from
    the end of the queue.  ``limit`` accepts 1-100, ``0`` leaves it to the
    server (100).  ``timeout`` is the long-poll timeout in seconds.
    """

    method_name: ClassVar[str] = "getUpdates"

    offset: int = 0
    limit: int = 0
    timeout: int = DEFAULT_POLL_TIMEOUT
    allowed_updates: Optional[List[str]] = None

    def validate_params(self) -> None:
        if self.limit < 0 or self.limit > MAX_UPDATES_LIMIT:
            raise ParamValidationError("limit", "should be between 1 and 100")
        if self.timeout < 0:
            raise ParamValidationError("timeout", "should not be negative")

    def params(self) -> Dict[str, str]:
        self.validate_params()
        # Zero values are the server defaults and stay out of the request.
        params: Dict[str, str] = {}
        if self.offset != 0:
            params["offset"] = str(self.offset)
        if self.limit > 0:
            params["limit"] = str(self.limit)
        if self.timeout > 0:
            params["timeout"] = str(self.timeout)
        if self.allowed_updates is not None:
            params["allowed_updates"] = _encode_value(self.allowed_updates)
        return params

    def extra_timeout(self) -> float:
        return self.timeout


class MessageConfig(Method):
    """sendMessage — send a text message."""

    method_name: ClassVar[str] = "sendMessage"

    chat_id: ChatId
    text: str
    parse_mode: Optional[str] = None
    disable_web_page_preview: Optional[bool] = None
    disable_notification: Optional[bool] = None
    reply_to_message_id: Optional[int] = None
    reply_markup: Optional[ReplyMarkup] = None

    def validate_params(self) -> None:
        if not self.text:
            raise RequiredParamError("text")


class ForwardMessageConfig(Method):
    """forwardMessage — forward a message of any kind."""

    method_name: ClassVar[str] = "forwardMessage"

    chat_id: ChatId
    from_chat_id: ChatId
    message_id: int
    disable_notification: Optional[bool] = None


class ChatActionConfig(Method):
    """sendChatAction — tell the user that something is happening on the bot's side."""

    method_name: ClassVar[str] = "sendChatAction"

    chat_id: ChatId
    action: str

    def validate_params(self) -> None:
        if self.action not in CHAT_ACTIONS:
            raise ParamValidationError("action", f"unknown chat action {self.action!r}")


class AnswerCallbackConfig(Method):
    """answerCallbackQuery — acknowledge a callback button press."""

    method_name: ClassVar[str] = "answerCallbackQuery"

    callback_query_id: str
    text: Optional[str] = None
    show_alert: Optional[bool] = None
    url: Optional[str] = None
    cache_time: Optional[int] = None


class EditMessageTextConfig(Method):
    """editMessageText — change the text of a sent message.

    Either ``chat_id`` with ``message_id`` or ``inline_message_id`` is
    required.
    """

    method_name: ClassVar[str] = "editMessageText"

    text: str
    chat_id: Optional[ChatId] = None
    message_id: Optional[int] = None
    inline_message_id: Optional[str] = None
    parse_mode: Optional[str] = None
    disable_web_page_preview: Optional[bool] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None

    def validate_params(self) -> None:
        if self.inline_message_id:
            return
        if self.chat_id is None or self.message_id is None:
            raise RequiredParamError("chat_id and message_id", "inline_message_id")


class GetChatConfig(Method):
    """getChat — up to date information about a chat."""

    method_name: ClassVar[str] = "getChat"

    chat_id: ChatId


class WebhookConfig(Method):
    """setWebhook — receive incoming updates via an outgoing webhook."""

    method_name: ClassVar[str] = "setWebhook"

    url: str
    max_connections: Optional[int] = None
    allowed_updates: Optional[List[str]] = None
    drop_pending_updates: Optional[bool] = None
    secret_token: Optional[str] = None

    def validate_params(self) -> None:
        if not self.url.startswith("https://"):
            raise ParamValidationError("url", "webhook url must use https")


class DeleteWebhookConfig(Method):
    """deleteWebhook — switch back to getUpdates."""

    method_name: ClassVar[str] = "deleteWebhook"

    drop_pending_updates: Optional[bool] = None


class FileConfig(Method):
    """getFile — basic info about a file and a path to download it."""

    method_name: ClassVar[str] = "getFile"

    file_id: str

    def validate_params(self) -> None:
        if not self.file_id:
            raise RequiredParamError("file_id")
