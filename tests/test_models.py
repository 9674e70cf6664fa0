"""Tests for the Pydantic Bot API models."""

import sys
import os

import pytest
from pydantic import ValidationError

# Ensure the project root is importable.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from botapi.models import (
    CallbackQuery,
    Chat,
    File,
    InlineKeyboardMarkup,
    Message,
    Update,
    User,
    horizontal_inline_keyboard,
    vertical_inline_keyboard,
)

USER = {"id": 7, "is_bot": False, "first_name": "Ann"}
CHAT = {"id": 42, "type": "private"}


def _message(text=None, **extra) -> dict:
    data = {"message_id": 1, "date": 1700000000, "chat": CHAT, "from": USER}
    if text is not None:
        data["text"] = text
    data.update(extra)
    return data


# ── User / Chat ──────────────────────────────────────────────────────────────


class TestUserModel:
    """Validate the User schema."""

    def test_required_fields(self) -> None:
        user = User.model_validate(USER)
        assert user.id == 7
        assert user.first_name == "Ann"
        assert user.username is None

    def test_missing_first_name_raises(self) -> None:
        with pytest.raises(ValidationError):
            User.model_validate({"id": 7})

    def test_frozen(self) -> None:
        user = User.model_validate(USER)
        with pytest.raises(ValidationError):
            user.first_name = "Bob"  # type: ignore[misc]


class TestChatModel:
    def test_minimal(self) -> None:
        chat = Chat.model_validate(CHAT)
        assert chat.id == 42
        assert chat.title is None


# ── Message ──────────────────────────────────────────────────────────────────


class TestMessageModel:
    """Validate the Message schema and command parsing."""

    def test_from_alias(self) -> None:
        msg = Message.model_validate(_message("hi"))
        assert msg.from_field is not None
        assert msg.from_field.id == 7

    def test_alias_round_trip(self) -> None:
        msg = Message.model_validate(_message("hi"))
        dumped = msg.model_dump(by_alias=True, exclude_none=True)
        assert "from" in dumped
        assert "from_field" not in dumped

    def test_nested_reply(self) -> None:
        msg = Message.model_validate(_message("hi", reply_to_message=_message("earlier")))
        assert msg.reply_to_message is not None
        assert msg.reply_to_message.text == "earlier"

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("/start", ("start", "")),
            ("/start payload", ("start", "payload")),
            ("/start@my_bot hello world", ("start", "hello world")),
            ("/echo\nline two", ("echo", "line two")),
            ("hello", ("", "")),
        ],
    )
    def test_command(self, text: str, expected: tuple) -> None:
        assert Message.model_validate(_message(text)).command() == expected

    def test_command_without_text(self) -> None:
        msg = Message.model_validate(_message())
        assert msg.is_command() is False
        assert msg.command() == ("", "")


# ── CallbackQuery ────────────────────────────────────────────────────────────


class TestCallbackQueryModel:
    def test_requires_sender(self) -> None:
        with pytest.raises(ValidationError):
            CallbackQuery.model_validate({"id": "q1", "chat_instance": "c"})

    def test_data(self) -> None:
        query = CallbackQuery.model_validate({"id": "q1", "from": USER, "chat_instance": "c", "data": "color:red"})
        assert query.data == "color:red"
        assert query.from_field.first_name == "Ann"


# ── Update ───────────────────────────────────────────────────────────────────


class TestUpdateModel:
    """Validate the Update schema and its derived accessors."""

    def test_message_update(self) -> None:
        update = Update.model_validate({"update_id": 100, "message": _message("hi")})
        assert update.kind == "message"
        assert update.from_user is not None and update.from_user.id == 7
        assert update.chat is not None and update.chat.id == 42

    def test_callback_update_chat(self) -> None:
        update = Update.model_validate({
            "update_id": 101,
            "callback_query": {"id": "q1", "from": USER, "chat_instance": "c", "message": _message("menu")},
        })
        assert update.kind == "callback_query"
        assert update.chat is not None and update.chat.id == 42

    def test_inline_query_has_no_chat(self) -> None:
        update = Update.model_validate({"update_id": 102, "inline_query": {"id": "i1", "from": USER, "query": "cats"}})
        assert update.kind == "inline_query"
        assert update.chat is None
        assert update.from_user is not None

    def test_unknown_kind(self) -> None:
        update = Update.model_validate({"update_id": 103, "poll": {"id": "p"}})
        assert update.kind is None
        assert update.from_user is None

    def test_two_payloads_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Update.model_validate({"update_id": 104, "message": _message("a"), "edited_message": _message("b")})

    def test_missing_update_id_raises(self) -> None:
        with pytest.raises(ValidationError):
            Update.model_validate({"message": _message("hi")})


# ── File / keyboards ─────────────────────────────────────────────────────────


class TestFileModel:
    def test_link_defaults_to_none(self) -> None:
        assert File.model_validate({"file_id": "f", "file_path": "docs/a.txt"}).link is None


class TestInlineKeyboards:
    def test_horizontal(self) -> None:
        markup = horizontal_inline_keyboard("color:", ["Red", "Blue"], ["red", "blue"])
        assert isinstance(markup, InlineKeyboardMarkup)
        assert len(markup.inline_keyboard) == 1
        assert [b.callback_data for b in markup.inline_keyboard[0]] == ["color:red", "color:blue"]

    def test_vertical(self) -> None:
        markup = vertical_inline_keyboard("color:", ["Red", "Blue"], ["red", "blue"])
        assert len(markup.inline_keyboard) == 2
        assert markup.inline_keyboard[1][0].text == "Blue"
