"""Tests for request configs: parameter encoding and local validation."""

import json
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from botapi.exceptions import BotError, ParamValidationError, RequiredParamError
from botapi.methods import (
    AnswerCallbackConfig,
    ChatActionConfig,
    EditMessageTextConfig,
    FileConfig,
    GetMe,
    MessageConfig,
    UpdateConfig,
    WebhookConfig,
)
from botapi.models import horizontal_inline_keyboard


class TestUpdateConfig:
    """Validate getUpdates parameters."""

    def test_defaults(self) -> None:
        config = UpdateConfig()
        assert config.method_name == "getUpdates"
        assert config.params() == {"timeout": "30"}

    def test_zero_values_omitted(self) -> None:
        assert UpdateConfig(timeout=0).params() == {}

    def test_all_values(self) -> None:
        params = UpdateConfig(offset=101, limit=50, timeout=5, allowed_updates=["message"]).params()
        assert params == {"offset": "101", "limit": "50", "timeout": "5", "allowed_updates": '["message"]'}

    def test_negative_offset_kept(self) -> None:
        assert UpdateConfig(offset=-1, timeout=0).params() == {"offset": "-1"}

    @pytest.mark.parametrize("limit", [-1, 101])
    def test_limit_out_of_range(self, limit: int) -> None:
        with pytest.raises(ParamValidationError) as exc_info:
            UpdateConfig(limit=limit).params()
        assert exc_info.value.field == "limit"
        assert str(exc_info.value) == "field limit is invalid: should be between 1 and 100"

    def test_extra_timeout_is_poll_timeout(self) -> None:
        assert UpdateConfig(timeout=25).extra_timeout() == 25


class TestMessageConfig:
    """Validate sendMessage parameters."""

    def test_basic(self) -> None:
        assert MessageConfig(chat_id=42, text="hi").params() == {"chat_id": "42", "text": "hi"}

    def test_username_chat_id(self) -> None:
        assert MessageConfig(chat_id="@channel", text="hi").params()["chat_id"] == "@channel"

    def test_reply_markup_json_encoded(self) -> None:
        markup = horizontal_inline_keyboard("c:", ["A"], ["a"])
        params = MessageConfig(chat_id=1, text="x", reply_markup=markup).params()
        assert json.loads(params["reply_markup"]) == {"inline_keyboard": [[{"text": "A", "callback_data": "c:a"}]]}

    def test_bool_encoded(self) -> None:
        assert MessageConfig(chat_id=1, text="x", disable_notification=True).params()["disable_notification"] == "true"

    def test_empty_text_required(self) -> None:
        with pytest.raises(RequiredParamError) as exc_info:
            MessageConfig(chat_id=1, text="").params()
        assert str(exc_info.value) == "text required"

    def test_validation_errors_are_bot_errors(self) -> None:
        assert issubclass(RequiredParamError, BotError)
        assert issubclass(ParamValidationError, ValueError)


class TestOtherConfigs:
    def test_get_me_has_no_params(self) -> None:
        assert GetMe().params() == {}
        assert GetMe.method_name == "getMe"

    def test_chat_action_known(self) -> None:
        assert ChatActionConfig(chat_id=1, action="typing").params()["action"] == "typing"

    def test_chat_action_unknown(self) -> None:
        with pytest.raises(ParamValidationError):
            ChatActionConfig(chat_id=1, action="dancing").params()

    def test_answer_callback(self) -> None:
        assert AnswerCallbackConfig(callback_query_id="q1").params() == {"callback_query_id": "q1"}

    def test_edit_requires_target(self) -> None:
        with pytest.raises(RequiredParamError) as exc_info:
            EditMessageTextConfig(text="x", chat_id=1).params()
        assert str(exc_info.value) == "chat_id and message_id or inline_message_id required"

    def test_edit_inline(self) -> None:
        assert EditMessageTextConfig(text="x", inline_message_id="im").params() == {"text": "x", "inline_message_id": "im"}

    def test_webhook_requires_https(self) -> None:
        with pytest.raises(ParamValidationError):
            WebhookConfig(url="http://example.com/hook").params()

    def test_file_id_required(self) -> None:
        with pytest.raises(RequiredParamError):
            FileConfig(file_id="").params()
