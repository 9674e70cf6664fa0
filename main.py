"""Example bot built on ``botkit``: commands, an inline keyboard and sessions.

Run with ``python main.py`` after setting ``BOT_TOKEN`` (or putting it in
``.env``).
"""

import asyncio
import logging

from botapi import BotClient, PermanentAPIError, is_valid_token
from botapi.constants import ACTION_TYPING
from botapi.methods import AnswerCallbackConfig, ChatActionConfig, EditMessageTextConfig, UpdateConfig
from botapi.models import vertical_inline_keyboard
from botkit import Bot, CallbackRouter, CommandRouter, Context, MemorySessionStore, recover, session
from config import Settings, load_settings
from core.logger import get_child_logger

COLORS = ["red", "green", "blue"]

commands = CommandRouter()
buttons = CallbackRouter()


# ── Commands ─────────────────────────────────────────────────────────────────

@commands.register("start", description="Say hello")
async def handle_start(ctx: Context, arg: str) -> None:
    user = ctx.update.from_user
    name = user.first_name if user else "there"
    await ctx.api.send_text(ctx.update.chat.id, f"Hello, {name}! Send /help to see what I can do.")


@commands.register("help", description="Show available commands")
async def handle_help(ctx: Context, arg: str) -> None:
    lines = [f"/{entry.key} — {entry.description}" for entry in commands.entries().values() if entry.key]
    await ctx.api.send_text(ctx.update.chat.id, "\n".join(lines))


@commands.register("echo", description="Repeat the text after the command")
async def handle_echo(ctx: Context, arg: str) -> None:
    await ctx.api.send_chat_action(ChatActionConfig(chat_id=ctx.update.chat.id, action=ACTION_TYPING))
    await ctx.api.send_text(ctx.update.chat.id, arg or "Nothing to echo.")


@commands.register("color", description="Pick a color")
async def handle_color(ctx: Context, arg: str) -> None:
    keyboard = vertical_inline_keyboard("color:", [c.title() for c in COLORS], COLORS)
    await ctx.api.send_text(ctx.update.chat.id, "Which color?", reply_markup=keyboard)


@commands.register("", description="Unknown command")
async def handle_unknown(ctx: Context, arg: str) -> None:
    await ctx.api.send_text(ctx.update.chat.id, "Unknown command. Send /help for the list.")


# ── Callback buttons ─────────────────────────────────────────────────────────

@buttons.register("color")
async def handle_color_choice(ctx: Context, arg: str) -> None:
    query = ctx.update.callback_query
    ctx.session["color"] = arg
    await ctx.api.answer_callback_query(AnswerCallbackConfig(callback_query_id=query.id, text=f"You chose {arg}"))
    if query.message is not None:
        await ctx.api.edit_message_text(EditMessageTextConfig(
            chat_id=query.message.chat.id,
            message_id=query.message.message_id,
            text=f"Color: {arg}",
        ))


# ── Plain messages ───────────────────────────────────────────────────────────

async def handle_message(ctx: Context) -> None:
    """Count the user's messages in the session and echo plain text."""
    message = ctx.update.message
    if message is None or not message.text:
        return
    ctx.session["messages"] = ctx.session.get("messages", 0) + 1
    color = ctx.session.get("color")
    suffix = f" (favourite color: {color})" if color else ""
    await ctx.api.send_text(message.chat.id, f"#{ctx.session['messages']}: {message.text}{suffix}")


def build_bot(settings: Settings, logger: logging.Logger) -> Bot:
    """Wire the client, middleware and handlers of the example bot."""
    client = BotClient(
        settings.bot_token,
        timeout=settings.request_timeout,
        endpoint=settings.api_endpoint,
        debug=settings.debug,
    )
    bot = Bot(
        client,
        poll_config=UpdateConfig(offset=settings.poll_offset, limit=settings.poll_limit, timeout=settings.poll_timeout),
        retry_delay=settings.retry_delay,
        logger=logger,
    )
    store = MemorySessionStore()
    bot.use(recover(), session(store.get_session), commands.middleware(), buttons.middleware())
    bot.handle(handle_message)
    return bot


def main() -> None:
    settings = load_settings()
    logger = get_child_logger("main")
    if not settings.bot_token:
        raise EnvironmentError("BOT_TOKEN is not set. Add it to your .env file.")
    if not is_valid_token(settings.bot_token):
        logger.warning("BOT_TOKEN does not look like a bot token")

    bot = build_bot(settings, logger)
    logger.info("Bot starting")
    try:
        asyncio.run(bot.serve())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except PermanentAPIError as exc:
        logger.error("Bot stopped", extra={"error": str(exc), "error_code": exc.error_code})
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
