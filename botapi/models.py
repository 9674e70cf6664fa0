"""Pydantic models for the Bot API objects this library decodes or sends.

Response objects are frozen: an :class:`Update` is decoded once, handed to the
dispatcher and never modified afterwards.  Field names follow the API; the
Python keyword ``from`` is exposed as ``from_field``.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, model_validator

_FROZEN = {"populate_by_name": True, "frozen": True}

_WHITESPACE = re.compile(r"\s")


class ResponseParameters(BaseModel):
    """Contains information about why a request was unsuccessful."""

    migrate_to_chat_id: Optional[int] = None
    retry_after: Optional[int] = None

    model_config = _FROZEN


class User(BaseModel):
    """This object represents a Telegram user or bot."""

    id: int
    is_bot: bool = False
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None

    model_config = _FROZEN


class Chat(BaseModel):
    """This object represents a chat."""

    id: int
    type: str
    title: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    model_config = _FROZEN


class MessageEntity(BaseModel):
    """One special entity in a text message, e.g. a hashtag or a bot command."""

    type: str
    offset: int
    length: int
    url: Optional[str] = None
    user: Optional["User"] = None

    model_config = _FROZEN


class Location(BaseModel):
    """This object represents a point on the map."""

    longitude: float
    latitude: float

    model_config = _FROZEN


class Message(BaseModel):
    """This object represents a message."""

    message_id: int
    date: int
    chat: "Chat"
    from_field: Optional["User"] = Field(None, alias="from")
    forward_from: Optional["User"] = None
    forward_from_chat: Optional["Chat"] = None
    forward_date: Optional[int] = None
    reply_to_message: Optional["Message"] = None
    edit_date: Optional[int] = None
    text: Optional[str] = None
    entities: Optional[List["MessageEntity"]] = None
    caption: Optional[str] = None
    location: Optional["Location"] = None

    model_config = _FROZEN

    def is_command(self) -> bool:
        """True when the text starts with ``/``."""
        return bool(self.text) and self.text.startswith("/")

    def command(self) -> Tuple[str, str]:
        """Split a command message into ``(command, argument)``.

        The argument is everything after the first whitespace character and
        the command loses its ``@botname`` suffix::

            "/start@my_bot hello world" -> ("start", "hello world")

        Returns ``("", "")`` when the message is not a command.
        """
        if not self.is_command():
            return "", ""
        text = self.text or ""
        match = _WHITESPACE.search(text)
        if match is None:
            command, arg = text[1:], ""
        else:
            command, arg = text[1:match.start()], text[match.end():]
        command = command.split("@", 1)[0]
        return command, arg


class InlineQuery(BaseModel):
    """An incoming inline query."""

    id: str
    from_field: "User" = Field(..., alias="from")
    query: str = ""
    offset: str = ""
    location: Optional["Location"] = None

    model_config = _FROZEN


class ChosenInlineResult(BaseModel):
    """A result of an inline query that was chosen by the user."""

    result_id: str
    from_field: "User" = Field(..., alias="from")
    query: str = ""
    inline_message_id: Optional[str] = None
    location: Optional["Location"] = None

    model_config = _FROZEN


class CallbackQuery(BaseModel):
    """An incoming callback query from a callback button in an inline keyboard."""

    id: str
    from_field: "User" = Field(..., alias="from")
    chat_instance: str
    message: Optional["Message"] = None
    inline_message_id: Optional[str] = None
    data: Optional[str] = None

    model_config = _FROZEN


UPDATE_KINDS: Tuple[str, ...] = (
    "message",
    "edited_message",
    "inline_query",
    "chosen_inline_result",
    "callback_query",
)


class Update(BaseModel):
    """An incoming update.

    At most **one** of the optional payload fields is present.  Updates of
    kinds this library does not model decode with every payload field unset
    and ``kind`` equal to ``None``.
    """

    update_id: int
    message: Optional["Message"] = None
    edited_message: Optional["Message"] = None
    inline_query: Optional["InlineQuery"] = None
    chosen_inline_result: Optional["ChosenInlineResult"] = None
    callback_query: Optional["CallbackQuery"] = None

    model_config = _FROZEN

    @model_validator(mode="after")
    def _single_payload(self) -> "Update":
        present = [name for name in UPDATE_KINDS if getattr(self, name) is not None]
        if len(present) > 1:
            raise ValueError(f"update carries more than one payload: {', '.join(present)}")
        return self

    @property
    def kind(self) -> Optional[str]:
        """Name of the populated payload field."""
        for name in UPDATE_KINDS:
            if getattr(self, name) is not None:
                return name
        return None

    @property
    def from_user(self) -> Optional["User"]:
        """Sender of the message, query or chosen result."""
        if self.message is not None:
            return self.message.from_field
        if self.edited_message is not None:
            return self.edited_message.from_field
        if self.callback_query is not None:
            return self.callback_query.from_field
        if self.inline_query is not None:
            return self.inline_query.from_field
        if self.chosen_inline_result is not None:
            return self.chosen_inline_result.from_field
        return None

    @property
    def chat(self) -> Optional["Chat"]:
        """Chat of the message, or of the message a callback button belongs to."""
        if self.message is not None:
            return self.message.chat
        if self.edited_message is not None:
            return self.edited_message.chat
        if self.callback_query is not None and self.callback_query.message is not None:
            return self.callback_query.message.chat
        return None


class File(BaseModel):
    """A file ready to be downloaded.

    ``link`` is not part of the API object; the client fills it from
    ``file_path`` and the bot token.
    """

    file_id: str
    file_unique_id: Optional[str] = None
    file_size: Optional[int] = None
    file_path: Optional[str] = None
    link: Optional[str] = None

    model_config = _FROZEN


# ── Reply markups ────────────────────────────────────────────────────────────


class KeyboardButton(BaseModel):
    """One button of the reply keyboard."""

    text: str
    request_contact: Optional[bool] = None
    request_location: Optional[bool] = None

    model_config = _FROZEN


class ReplyKeyboardMarkup(BaseModel):
    """A custom keyboard with reply options."""

    keyboard: List[List["KeyboardButton"]]
    resize_keyboard: Optional[bool] = None
    one_time_keyboard: Optional[bool] = None
    selective: Optional[bool] = None

    model_config = _FROZEN


class ReplyKeyboardRemove(BaseModel):
    """Asks clients to remove the custom keyboard."""

    remove_keyboard: bool = True
    selective: Optional[bool] = None

    model_config = _FROZEN


class ForceReply(BaseModel):
    """Asks clients to display a reply interface to the user."""

    force_reply: bool = True
    selective: Optional[bool] = None

    model_config = _FROZEN


class InlineKeyboardButton(BaseModel):
    """One button of an inline keyboard. Use exactly one of the optional fields."""

    text: str
    url: Optional[str] = None
    callback_data: Optional[str] = None
    switch_inline_query: Optional[str] = None
    switch_inline_query_current_chat: Optional[str] = None

    model_config = _FROZEN


class InlineKeyboardMarkup(BaseModel):
    """An inline keyboard that appears right next to the message it belongs to."""

    inline_keyboard: List[List["InlineKeyboardButton"]]

    model_config = _FROZEN


def horizontal_inline_keyboard(prefix: str, texts: List[str], data: List[str]) -> InlineKeyboardMarkup:
    """One row of callback buttons: ``[ first ] [ second ] [ third ]``.

    Each button's ``callback_data`` is ``prefix + data[i]``, which pairs with
    the ``prefix:`` keys understood by :func:`botkit.registry.callbacks`.
    """
    row = [InlineKeyboardButton(text=text, callback_data=prefix + item) for text, item in zip(texts, data)]
    return InlineKeyboardMarkup(inline_keyboard=[row])


def vertical_inline_keyboard(prefix: str, texts: List[str], data: List[str]) -> InlineKeyboardMarkup:
    """One callback button per row."""
    rows = [[InlineKeyboardButton(text=text, callback_data=prefix + item)] for text, item in zip(texts, data)]
    return InlineKeyboardMarkup(inline_keyboard=rows)
