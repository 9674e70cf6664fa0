"""Fault-isolation middleware.

:func:`recover` stops an unexpected exception raised further down the chain
from escaping the dispatcher.  The fault is reported to a log function together
with a formatted stack trace, and the update counts as handled.

:class:`~botapi.exceptions.BotError` is an ordinary handler error, not a
fault: it passes through untouched and reaches the bot's error function.
Task cancellation is never intercepted.
"""

from __future__ import annotations

import asyncio
import dataclasses
import io
import queue
import sys
import threading
import traceback
from typing import Callable, List, Optional

from botapi.exceptions import BotError
from botkit.context import Context
from botkit.handlers import Handler, Middleware
from core.logger import get_child_logger

DEFAULT_STACK_SIZE = 4 << 10

# Receives the context, the fault and the stack bytes (``None`` when stacks
# are disabled).  The view is only valid for the duration of the call.
StackLogFunc = Callable[[Context, BaseException, Optional[memoryview]], None]


def default_log_func(ctx: Context, cause: BaseException, stack: Optional[memoryview]) -> None:
    """Log the fault and its stack through the project logger."""
    get_child_logger("recover").error(
        "Panic recovered",
        extra={
            **ctx.log_extra(),
            "error": repr(cause),
            "stack": bytes(stack).decode("utf-8", "replace") if stack is not None else None,
        },
    )


@dataclasses.dataclass(frozen=True)
class RecoverConfig:
    """Settings of the :func:`recover` middleware.

    Attributes:
        stack_size: Upper bound, in bytes, of the captured stack.
        stack_all: Also capture the stacks of every other thread and task.
        print_stack: Capture a stack at all.
        log_func: Called for every fault; defaults to :func:`default_log_func`.
    """

    stack_size: int = DEFAULT_STACK_SIZE
    stack_all: bool = False
    print_stack: bool = True
    log_func: Optional[StackLogFunc] = None


DEFAULT_RECOVER_CONFIG = RecoverConfig()


class _BufferPool:
    """Reusable fixed-size stack buffers, shared by concurrent faults."""

    def __init__(self, size: int) -> None:
        self._size = size
        self._free: "queue.SimpleQueue[bytearray]" = queue.SimpleQueue()

    def get(self) -> bytearray:
        try:
            return self._free.get_nowait()
        except queue.Empty:
            return bytearray(self._size)

    def put(self, buf: bytearray) -> None:
        self._free.put(buf)


def format_stack(cause: BaseException, stack_all: bool = False) -> str:
    """Traceback of *cause*, optionally followed by every other thread and task."""
    lines: List[str] = traceback.format_exception(type(cause), cause, cause.__traceback__)
    if not stack_all:
        return "".join(lines)

    current_thread = threading.get_ident()
    for thread_id, frame in sys._current_frames().items():
        if thread_id == current_thread:
            continue
        lines.append(f"\nthread {thread_id}:\n")
        lines.extend(traceback.format_stack(frame))

    try:
        current_task = asyncio.current_task()
        tasks = asyncio.all_tasks()
    except RuntimeError:  # no running loop
        current_task, tasks = None, set()
    for task in tasks:
        if task is current_task:
            continue
        out = io.StringIO()
        task.print_stack(file=out)
        lines.append("\n" + out.getvalue())
    return "".join(lines)


def recover(config: RecoverConfig = DEFAULT_RECOVER_CONFIG) -> Middleware:
    """Middleware that turns faults below it into log entries.

    Usage::

        bot.use(recover(RecoverConfig(stack_all=True)))
    """
    log_func = config.log_func or default_log_func
    stack_size = config.stack_size if config.stack_size > 0 else DEFAULT_STACK_SIZE
    pool = _BufferPool(stack_size)

    def report(ctx: Context, cause: Exception) -> None:
        if not config.print_stack:
            log_func(ctx, cause, None)
            return
        data = format_stack(cause, config.stack_all).encode("utf-8", "replace")[:stack_size]
        buf = pool.get()
        buf[: len(data)] = data
        try:
            with memoryview(buf) as whole:
                with whole[: len(data)] as stack:
                    log_func(ctx, cause, stack)
        finally:
            pool.put(buf)

    def wrap(next_handler: Handler) -> Handler:
        async def recovered(ctx: Context) -> None:
            try:
                await next_handler(ctx)
            except BotError:
                raise
            except Exception as cause:
                report(ctx, cause)
        return recovered
    return wrap
