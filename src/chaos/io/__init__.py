"""Stream utilities.

    Helpers for moving data between byte and character streams. Reads and writes
    on Python streams may be partial, so every helper here loops until the
    requested amount has been transferred or the source runs dry, and the
    "fully" variants turn a short transfer into an EndOfData error.
"""
from .base import (
    DEFAULT_BUFFER_SIZE, SKIP_BUFFER_SIZE, MAX_INT,
    LINE_SEPARATOR, LINE_SEPARATOR_UNIX, LINE_SEPARATOR_WINDOWS,
    StreamError, InvalidArgument, OutOfBounds, EndOfData, resolve_encoding
)
from .writer import FastStringWriter
from .lines import LineReader, read_lines, iter_lines
from .utils import (
    iter_chunks, copy, copy_large, copy_range, copy_decoded, copy_encoded,
    read, read_fully, read_exact, skip, skip_fully,
    content_equals, content_equals_ignore_eol, close_quietly,
    to_bytes, to_str, to_stream, write, write_chunked, write_lines,
    resource_to_bytes, resource_to_str
)
