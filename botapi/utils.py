"""Text helpers: bot token validation and splitting of oversized messages."""

from __future__ import annotations

import re
from typing import Callable, Iterator, Tuple

from botapi.constants import MAX_MESSAGE_LENGTH

_TOKEN_RE = re.compile(r"^\d{3,11}:[\w-]{35}$", re.ASCII)


def is_valid_token(token: str) -> bool:
    """Return True if *token* looks like a bot token.

    Example: ``110201543:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsawq``.
    """
    return _TOKEN_RE.match(token) is not None


def _utf8_len(char: str) -> int:
    # Lone surrogates count as the three bytes of the replacement character.
    return len(char.encode("utf-8", "surrogatepass"))


def _not_space(char: str) -> bool:
    return not char.isspace()


def _walk(text: str, position: int, used: int, max_size: int, accept: Callable[[str], bool]) -> Tuple[int, int, bool]:
    """Consume a run of accepted chars from *position*.

    Returns the new position, the bytes used so far and whether the chunk is
    full or the text has ended.
    """
    length = len(text)
    while position < length and accept(text[position]):
        size = used + _utf8_len(text[position])
        if size > max_size:
            return position, used, True
        used = size
        position += 1
    return position, used, position >= length


def split_message(text: str, max_size: int = MAX_MESSAGE_LENGTH) -> Iterator[str]:
    """Split *text* into chunks of at most *max_size* UTF-8 bytes.

    Chunks are cut at whitespace where possible: each chunk grows by
    alternating runs of whitespace and non-whitespace, and is cut after the
    last complete word that fits.  A word longer than *max_size* is cut
    mid-word at the byte limit.  Whitespace at chunk boundaries is dropped,
    so whitespace-only input yields nothing.

    The result is a generator: chunks are produced lazily and it can be
    consumed only once.
    """
    length = len(text)
    chunk_start = 0
    position = 0

    while position < length:
        while chunk_start < length and text[chunk_start].isspace():
            chunk_start += 1
        if chunk_start >= length:
            return

        position = checkpoint = chunk_start
        used = 0

        while True:
            position, used, done = _walk(text, position, used, max_size, str.isspace)
            if done:
                break
            position, used, done = _walk(text, position, used, max_size, _not_space)
            if done:
                break
            checkpoint = position

        if checkpoint == chunk_start:
            # No word boundary within the limit: hard cut.
            if position == chunk_start:
                position += 1
            yield text[chunk_start:position]
            chunk_start = position
            continue

        if position >= length:
            checkpoint = position

        # Only the final chunk can end in whitespace.
        yield text[chunk_start:checkpoint].rstrip()
        chunk_start = checkpoint
