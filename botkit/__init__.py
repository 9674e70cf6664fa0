"""Bot framework: dispatcher, middleware chain, routers and built-in middleware."""

from botkit.bot import Bot
from botkit.context import Context
from botkit.handlers import CommandHandler, Handler, Middleware, build_chain, empty_handler
from botkit.recover import RecoverConfig, recover
from botkit.registry import CallbackRouter, CommandRouter, callbacks, commands
from botkit.session import MemorySessionStore, SessionConfig, SessionError, session, session_with_config
from botkit.webhook import WebhookReceiver

__all__ = [
    "Bot",
    "Context",
    "Handler",
    "CommandHandler",
    "Middleware",
    "build_chain",
    "empty_handler",
    "recover",
    "RecoverConfig",
    "commands",
    "callbacks",
    "CommandRouter",
    "CallbackRouter",
    "session",
    "session_with_config",
    "SessionConfig",
    "SessionError",
    "MemorySessionStore",
    "WebhookReceiver",
]
