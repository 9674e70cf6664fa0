"""Telegram Bot API client — pydantic models, method configs, transport and polling.

Usage::

    from botapi import BotClient, UpdatePoller
    from botapi.methods import MessageConfig, UpdateConfig

    client = BotClient(token)
    await client.send_message(MessageConfig(chat_id=42, text="hello"))
"""

from botapi.client import BotClient
from botapi.exceptions import (
    APIException,
    BotError,
    ForbiddenError,
    ParamValidationError,
    PermanentAPIError,
    RequiredParamError,
    TransportError,
    UnauthorizedError,
)
from botapi.polling import UpdatePoller
from botapi.utils import is_valid_token, split_message

__all__ = [
    "BotClient",
    "UpdatePoller",
    "split_message",
    "is_valid_token",
    "BotError",
    "APIException",
    "PermanentAPIError",
    "UnauthorizedError",
    "ForbiddenError",
    "TransportError",
    "ParamValidationError",
    "RequiredParamError",
]
