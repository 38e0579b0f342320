"""Constants and error types shared by the stream utilities."""
import codecs
import locale
import os
import typing as t

import zrlog

from chaos.util import ChaosError


DEFAULT_BUFFER_SIZE = 4096
SKIP_BUFFER_SIZE = 2048

# Largest count the bounded copy() reports before returning -1.
MAX_INT = 2147483647

LINE_SEPARATOR_UNIX = "\n"
LINE_SEPARATOR_WINDOWS = "\r\n"
LINE_SEPARATOR = os.linesep

Chunk = t.Union[bytes, bytearray, str]


class StreamError(ChaosError):
    """Error class for the stream utilities."""

    def __init__(self, msg: str, code: int, is_recoverable: bool = False):
        super().__init__(msg, "IO", code, is_recoverable=is_recoverable)


class InvalidArgument(StreamError, ValueError):
    """A length, offset or size was out of range; raised before any I/O."""


class OutOfBounds(StreamError, IndexError):
    """A slice did not fit inside the sequence it was taken from."""


class EndOfData(StreamError, EOFError):
    """Fewer units were available than an exact operation demanded."""


def resolve_encoding(encoding: t.Optional[str] = None) -> str:
    """Return the canonical codec name, using the locale's preferred encoding for None."""
    if encoding is None:
        encoding = locale.getpreferredencoding(False)
        zrlog.get_logger("chaos.io").debug(f"No encoding given, using locale default [{encoding}]")
    try:
        return codecs.lookup(encoding).name
    except LookupError as ex:
        raise InvalidArgument(f"Unknown encoding [{encoding}]", 1000) from ex


def check_bounds(size: int, offset: int, length: int):
    """Validate that [offset, offset + length) fits inside a sequence of the given size."""
    if offset < 0 or offset > size or length < 0 or offset + length > size:
        raise OutOfBounds(f"Range [{offset}:{offset + length}] outside of sequence of length [{size}]", 1001)
