"""BotClient — transport invoker for the Telegram Bot API.

:meth:`BotClient.invoke` is the single entry point to the remote API: it takes
any :class:`~botapi.methods.Method`, POSTs its form parameters with the
``requests`` library and decodes the ``{ok, result | description}``
envelope into either the raw ``result`` or a typed
:class:`~botapi.exceptions.BotError`.

The typed ``async`` wrappers (``get_me``, ``get_updates``, ``send_message`` …)
offload the blocking call via :func:`asyncio.to_thread` so the event loop is
never blocked, and decode results into the models of :mod:`botapi.models`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

import requests
from pydantic import BaseModel, ValidationError

from botapi.constants import API_ENDPOINT, FILE_URL_TEMPLATE, MAX_MESSAGE_LENGTH, METHOD_URL_TEMPLATE
from botapi.exceptions import (
    APIException,
    ForbiddenError,
    TransportError,
    UnauthorizedError,
)
from botapi.methods import (
    AnswerCallbackConfig,
    ChatActionConfig,
    ChatId,
    DeleteWebhookConfig,
    EditMessageTextConfig,
    FileConfig,
    ForwardMessageConfig,
    GetChatConfig,
    GetMe,
    MessageConfig,
    Method,
    UpdateConfig,
    WebhookConfig,
)
from botapi.models import Chat, File, Message, Update, User
from botapi.utils import split_message
from core.logger import get_child_logger

M = TypeVar("M", bound=BaseModel)


def _decode(method_name: str, model: Type[M], result: Any) -> M:
    """Validate *result* into *model*; a malformed result is a transport failure."""
    try:
        return model.model_validate(result)
    except ValidationError as exc:
        raise TransportError(method_name, f"malformed {model.__name__} result") from exc


def _json_or_empty(response: requests.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class BotClient:
    """Client-side service layer for the Telegram Bot API.

    Args:
        token: Bot token issued by BotFather.
        timeout: Default request timeout in seconds.  Long-poll requests add
            their own server-side timeout on top of it.
        endpoint: API root, e.g. a local Bot API server.
        debug: Log every request and response at DEBUG level.
        logger: Logger to use instead of the project default.
    """

    _DEFAULT_TIMEOUT: int = 10

    def __init__(
        self,
        token: str,
        timeout: int = _DEFAULT_TIMEOUT,
        endpoint: str = API_ENDPOINT,
        debug: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._token = token
        self._timeout = timeout
        self._endpoint = endpoint.rstrip("/")
        self._debug = debug
        self._logger = logger or get_child_logger("client")

    # ------------------------------------------------------------------
    #  Internal helpers
    # ------------------------------------------------------------------

    def method_url(self, method_name: str) -> str:
        return METHOD_URL_TEMPLATE.format(endpoint=self._endpoint, token=self._token, method=method_name)

    def file_url(self, file_path: str) -> str:
        return FILE_URL_TEMPLATE.format(endpoint=self._endpoint, token=self._token, path=file_path)

    def _post(self, method_name: str, params: Dict[str, str], timeout: float) -> Any:
        """POST *params* to *method_name* and return the decoded ``result``.

        Raises:
            TransportError: On connection failures or a non-JSON body.
            UnauthorizedError: If the token is rejected.
            ForbiddenError: If the bot may not perform the request.
            APIException: For any other ``ok: false`` response.
        """
        if self._debug:
            self._logger.debug("API request", extra={"api_endpoint": method_name, "params": params})
        try:
            response = requests.post(self.method_url(method_name), data=params, timeout=timeout)
        except requests.RequestException as exc:
            raise TransportError(method_name, str(exc)) from exc

        if response.status_code == 401:
            raise UnauthorizedError(_json_or_empty(response) or None)
        if response.status_code == 403:
            raise ForbiddenError(_json_or_empty(response) or None)

        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(method_name, f"undecodable response (HTTP {response.status_code})") from exc
        if not isinstance(body, dict):
            raise TransportError(method_name, f"unexpected response type {type(body).__name__}")

        if self._debug:
            self._logger.debug("API response", extra={"api_endpoint": method_name, "status_code": response.status_code, "api_response": body})

        if not body.get("ok"):
            error_code = body.get("error_code", response.status_code)
            if error_code == 401:
                raise UnauthorizedError(body)
            if error_code == 403:
                raise ForbiddenError(body)
            raise APIException(response.status_code, body)
        return body.get("result")

    # ------------------------------------------------------------------
    #  Generic invocation
    # ------------------------------------------------------------------

    def invoke(self, method: Method) -> Any:
        """Validate *method*, send it and return the raw ``result`` value.

        Useful for API methods that have no typed wrapper below.
        """
        params = method.params()
        return self._post(method.method_name, params, self._timeout + method.extra_timeout())

    async def ainvoke(self, method: Method) -> Any:
        """Run :meth:`invoke` inside a thread to keep the event loop free."""
        return await asyncio.to_thread(self.invoke, method)

    # ------------------------------------------------------------------
    #  Typed wrappers
    # ------------------------------------------------------------------

    async def get_me(self) -> User:
        """A simple method for testing your bot's auth token."""
        return _decode(GetMe.method_name, User, await self.ainvoke(GetMe()))

    async def get_updates(self, config: UpdateConfig) -> List[Update]:
        """Long-poll for incoming updates.

        Updates that cannot be decoded are logged and left out of the batch;
        they stay unconfirmed until a later update moves the offset past them.
        """
        result = await self.ainvoke(config)
        if result is None:
            result = []
        if not isinstance(result, list):
            raise TransportError(config.method_name, f"malformed result: expected a list, got {type(result).__name__}")
        updates: List[Update] = []
        for item in result:
            try:
                updates.append(Update.model_validate(item))
            except ValidationError as exc:
                update_id = item.get("update_id") if isinstance(item, dict) else None
                self._logger.warning("Skipping undecodable update", extra={"api_endpoint": "getUpdates", "update_id": update_id, "error": str(exc)})
        return updates

    async def send_message(self, config: MessageConfig) -> Message:
        """Send a text message. The sent message is returned."""
        return _decode(config.method_name, Message, await self.ainvoke(config))

    async def send_text(
        self,
        chat_id: ChatId,
        text: str,
        max_size: int = MAX_MESSAGE_LENGTH,
        **options: Any,
    ) -> List[Message]:
        """Send *text*, split into as many messages as the size limit needs.

        *options* are passed to every :class:`MessageConfig`, except
        ``reply_markup`` which is attached to the last message only.
        """
        reply_markup = options.pop("reply_markup", None)
        chunks = list(split_message(text, max_size))
        sent: List[Message] = []
        for index, chunk in enumerate(chunks):
            markup = reply_markup if index == len(chunks) - 1 else None
            sent.append(await self.send_message(MessageConfig(chat_id=chat_id, text=chunk, reply_markup=markup, **options)))
        self._logger.debug("Text sent", extra={"chat_id": chat_id, "api_endpoint": "sendMessage", "chunks": len(sent)})
        return sent

    async def forward_message(self, config: ForwardMessageConfig) -> Message:
        return _decode(config.method_name, Message, await self.ainvoke(config))

    async def send_chat_action(self, config: ChatActionConfig) -> bool:
        return bool(await self.ainvoke(config))

    async def answer_callback_query(self, config: AnswerCallbackConfig) -> bool:
        """Acknowledge a callback query so the spinner disappears for the user."""
        return bool(await self.ainvoke(config))

    async def edit_message_text(self, config: EditMessageTextConfig) -> Union[Message, bool]:
        """Edit a message text.

        Returns the edited :class:`Message` when the bot sent it, otherwise
        ``True`` (inline messages).
        """
        result = await self.ainvoke(config)
        if isinstance(result, dict):
            return _decode(config.method_name, Message, result)
        return bool(result)

    async def get_chat(self, config: GetChatConfig) -> Chat:
        return _decode(config.method_name, Chat, await self.ainvoke(config))

    async def set_webhook(self, config: WebhookConfig) -> bool:
        """Route updates to *config.url*. getUpdates stops working while it is set."""
        return bool(await self.ainvoke(config))

    async def delete_webhook(self, config: Optional[DeleteWebhookConfig] = None) -> bool:
        return bool(await self.ainvoke(config or DeleteWebhookConfig()))

    async def get_file(self, config: FileConfig) -> File:
        """Resolve a ``file_id``; the returned model carries a download ``link``."""
        file = _decode(config.method_name, File, await self.ainvoke(config))
        if file.file_path:
            file = file.model_copy(update={"link": self.file_url(file.file_path)})
        return file

    async def download_file(self, config: FileConfig) -> bytes:
        """Download the raw bytes of a file.

        Raises:
            APIException: If the file server answers with a non-2xx status.
            TransportError: On connection failures or a file without a path.
        """
        file = await self.get_file(config)
        if not file.link:
            raise TransportError("getFile", f"file {config.file_id} has no file_path")
        try:
            response = await asyncio.to_thread(requests.get, file.link, timeout=self._timeout)
        except requests.RequestException as exc:
            raise TransportError("downloadFile", str(exc)) from exc
        if not response.ok:
            raise APIException(response.status_code, _json_or_empty(response))
        return response.content
