"""Tests for settings loading and the example bot wiring."""

import logging
import sys
import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from botapi.models import Message, Update
from config import Settings, load_settings

TOKEN = "110201543:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsawq"


class TestLoadSettings:
    """Validate environment parsing."""

    def test_defaults(self) -> None:
        settings = load_settings({})
        assert settings == Settings()
        assert settings.bot_token is None

    def test_values(self) -> None:
        settings = load_settings({
            "BOT_TOKEN": TOKEN,
            "API_ENDPOINT": "http://localhost:8081",
            "REQUEST_TIMEOUT": "20",
            "POLL_TIMEOUT": "5",
            "POLL_LIMIT": "10",
            "POLL_OFFSET": "-1",
            "RETRY_DELAY": "0.5",
            "LOG_LEVEL": "debug",
            "LOG_DIR": "",
            "DEBUG": "true",
        })
        assert settings.bot_token == TOKEN
        assert settings.api_endpoint == "http://localhost:8081"
        assert settings.request_timeout == 20
        assert settings.poll_timeout == 5
        assert settings.poll_limit == 10
        assert settings.poll_offset == -1
        assert settings.retry_delay == 0.5
        assert settings.log_level == logging.DEBUG
        assert settings.log_dir is None
        assert settings.debug is True

    def test_invalid_numbers_fall_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="botkit"):
            settings = load_settings({"POLL_TIMEOUT": "soon", "LOG_LEVEL": "LOUD"})
        assert settings.poll_timeout == Settings().poll_timeout
        assert settings.log_level == logging.INFO
        assert "Invalid value, using default" in caplog.messages


class TestExampleBot:
    """Validate the wiring of the example bot in main.py."""

    @pytest.mark.asyncio
    async def test_start_command_routed(self) -> None:
        import main

        bot = main.build_bot(Settings(bot_token=TOKEN), logging.getLogger("test"))
        with patch.object(bot.api, "send_text", AsyncMock(return_value=[])) as send_text:
            await bot.process_update(Update.model_validate({
                "update_id": 1,
                "message": {
                    "message_id": 1, "date": 1700000000, "text": "/start",
                    "chat": {"id": 42, "type": "private"},
                    "from": {"id": 7, "first_name": "Ann"},
                },
            }))
        send_text.assert_awaited_once()
        assert send_text.call_args.args == (42, "Hello, Ann! Send /help to see what I can do.")

    @pytest.mark.asyncio
    async def test_plain_messages_counted(self) -> None:
        import main

        bot = main.build_bot(Settings(bot_token=TOKEN), logging.getLogger("test"))
        update = {
            "message_id": 1, "date": 1700000000, "text": "hello",
            "chat": {"id": 42, "type": "private"},
            "from": {"id": 7, "first_name": "Ann"},
        }
        with patch.object(bot.api, "send_text", AsyncMock(return_value=[MagicMock(spec=Message)])) as send_text:
            await bot.process_update(Update.model_validate({"update_id": 1, "message": update}))
            await bot.process_update(Update.model_validate({"update_id": 2, "message": update}))
        assert send_text.call_args.args == (42, "#2: hello")

    def test_main_requires_token(self) -> None:
        import main

        with patch("main.load_settings", return_value=Settings()):
            with pytest.raises(EnvironmentError):
                main.main()
