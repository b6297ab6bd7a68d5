from __future__ import annotations

import functools
from typing import IO, AnyStr, Callable

from libhtdigest.exc import SecretInputError

#: most characters read for a single secret line, longer input is truncated
MAX_LINE_LEN = 768


def read_line(stream: IO[AnyStr], limit: int = MAX_LINE_LEN) -> str:
    """read one line of text from a text or binary stream.

    bytes are decoded as ``latin-1``, so that non-ascii input reaches
    the validator instead of failing inside a codec.

    :raises SecretInputError: on end of input, or if the stream can't be read.
    :returns: the line without its trailing newline / carriage return.
    """
    try:
        data = stream.readline(limit)
    except (OSError, ValueError) as err:
        raise SecretInputError(f"error reading line: {err}") from err
    if not data:
        raise SecretInputError("detect EOF of reader while reading line")
    if isinstance(data, bytes):
        data = data.decode("latin-1")
    return data.rstrip("\r\n")


def secret_reader(stream: IO[AnyStr], limit: int = MAX_LINE_LEN) -> Callable[[], str]:
    """return callable which reads the next secret line from *stream*"""
    return functools.partial(read_line, stream, limit)
