"""Webhook receiver, independent of any HTTP framework.

Mount :meth:`WebhookReceiver.handle` in whatever server receives the POST
requests: pass it the raw request body and the value of the
``X-Telegram-Bot-Api-Secret-Token`` header, and answer ``200`` when it returns
``True`` (``403`` / ``400`` otherwise).
"""

from __future__ import annotations

import hmac
import logging
from typing import TYPE_CHECKING, Optional, Union

from pydantic import ValidationError

from botapi.models import Update
from core.logger import get_child_logger

if TYPE_CHECKING:
    from botkit.bot import Bot

SECRET_TOKEN_HEADER = "X-Telegram-Bot-Api-Secret-Token"


class WebhookReceiver:
    """Decodes webhook bodies and dispatches them through a :class:`~botkit.bot.Bot`."""

    def __init__(self, bot: "Bot", secret_token: Optional[str] = None, logger: Optional[logging.Logger] = None) -> None:
        self._bot = bot
        self._secret_token = secret_token
        self._logger = logger or get_child_logger("webhook")

    def authorized(self, secret_token: Optional[str]) -> bool:
        if self._secret_token is None:
            return True
        return hmac.compare_digest((secret_token or "").encode(), self._secret_token.encode())

    async def handle(self, body: Union[bytes, str], secret_token: Optional[str] = None) -> bool:
        """Process one webhook request body.

        Returns:
            ``True`` if the update was dispatched, ``False`` if the request was
            rejected (bad secret) or the body is not a valid update.
        """
        if not self.authorized(secret_token):
            self._logger.warning("Webhook request with invalid secret token")
            return False
        try:
            update = Update.model_validate_json(body)
        except ValidationError as exc:
            self._logger.warning("Undecodable webhook body", extra={"error": str(exc)})
            return False
        await self._bot.process_update(update, via_webhook=True)
        return True
