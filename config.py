"""Application configuration — environment variables resolved into ``Settings``.

Loads ``.env`` via ``python-dotenv`` and reads ``BOT_TOKEN``, ``API_ENDPOINT``,
``REQUEST_TIMEOUT``, ``POLL_TIMEOUT``, ``POLL_LIMIT``, ``POLL_OFFSET``,
``RETRY_DELAY``, ``LOG_LEVEL``, ``LOG_DIR`` and ``DEBUG``.  Nothing is read at
import time; call :func:`load_settings` once at startup and pass the result
down explicitly.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import dataclasses
import logging
import os
from typing import Callable, Mapping, Optional, TypeVar

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── project ──────────────────────────────────────────────────────────────────
from botapi.constants import API_ENDPOINT, DEFAULT_POLL_TIMEOUT
from botapi.polling import DEFAULT_RETRY_DELAY
from core.logger import BotLogger

T = TypeVar("T")

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclasses.dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    bot_token: Optional[str] = None
    api_endpoint: str = API_ENDPOINT
    request_timeout: int = 10
    poll_timeout: int = DEFAULT_POLL_TIMEOUT
    poll_limit: int = 0
    poll_offset: int = 0
    retry_delay: float = DEFAULT_RETRY_DELAY
    log_level: int = logging.INFO
    log_dir: Optional[str] = "logs"
    debug: bool = False


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse(
    env: Mapping[str, str],
    name: str,
    convert: Callable[[str], T],
    default: T,
    invalid: list,
) -> T:
    """Convert ``env[name]``; fall back to *default* and note the name if invalid."""
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return convert(raw.strip())
    except ValueError:
        invalid.append(name)
        return default


def _parse_bool(raw: str) -> bool:
    return raw.lower() in _TRUE_VALUES


def _parse_level(raw: str) -> int:
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level {raw!r}")
    return level


# ── Public API ───────────────────────────────────────────────────────────────


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from *env* (default: ``.env`` + ``os.environ``).

    Also initialises the shared logger with the configured level and
    directory, then logs startup diagnostics.  Invalid numeric values fall
    back to their defaults with a warning.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    invalid: list = []
    defaults = Settings()
    log_dir = env.get("LOG_DIR", defaults.log_dir) or None
    settings = Settings(
        bot_token=env.get("BOT_TOKEN") or None,
        api_endpoint=env.get("API_ENDPOINT") or defaults.api_endpoint,
        request_timeout=_parse(env, "REQUEST_TIMEOUT", int, defaults.request_timeout, invalid),
        poll_timeout=_parse(env, "POLL_TIMEOUT", int, defaults.poll_timeout, invalid),
        poll_limit=_parse(env, "POLL_LIMIT", int, defaults.poll_limit, invalid),
        poll_offset=_parse(env, "POLL_OFFSET", int, defaults.poll_offset, invalid),
        retry_delay=_parse(env, "RETRY_DELAY", float, defaults.retry_delay, invalid),
        log_level=_parse(env, "LOG_LEVEL", _parse_level, defaults.log_level, invalid),
        log_dir=log_dir,
        debug=_parse(env, "DEBUG", _parse_bool, defaults.debug, invalid),
    )

    logger = BotLogger.get_logger(settings.log_level, settings.log_dir).getChild("config")
    for name in invalid:
        logger.warning("Invalid value, using default", extra={"variable": name})
    if settings.bot_token:
        logger.info("Config loaded — BOT_TOKEN is set", extra={"api_endpoint": settings.api_endpoint})
    else:
        logger.warning("Config loaded — BOT_TOKEN is NOT set")
    return settings
