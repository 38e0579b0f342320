"""Copy, read, skip and compare helpers for byte and character streams.

    A source is any object with a read(n) method that returns up to n units
    (bytes for byte streams, str for character streams) and an empty value at
    the end of the data. A sink is any object with a write(data) method.

    Neither sources nor sinks are closed by these functions, and errors raised by
    them propagate unchanged. Argument errors are raised before any I/O happens.
"""
import codecs
import importlib.resources
import io
import itertools
import typing as t

import zrlog

from chaos.util import Readable, Writable
from .base import (
    DEFAULT_BUFFER_SIZE, SKIP_BUFFER_SIZE, MAX_INT, LINE_SEPARATOR, Chunk,
    StreamError, InvalidArgument, EndOfData, resolve_encoding, check_bounds
)
from .lines import LineReader
from .writer import FastStringWriter


def _check_buffer_size(buffer_size: int):
    if buffer_size <= 0:
        raise InvalidArgument(f"Buffer size must be positive: {buffer_size}", 1300)


def iter_chunks(source: Readable, chunk_size: int = DEFAULT_BUFFER_SIZE) -> t.Iterable[Chunk]:
    """Read the source in chunks until it is exhausted."""
    _check_buffer_size(chunk_size)
    chunk = source.read(chunk_size)
    while chunk:
        yield chunk
        chunk = source.read(chunk_size)


def _write_all(sink: Writable, data: Chunk):
    # Raw streams may accept only part of the data and report how much they took.
    written = sink.write(data)
    while written is not None and written < len(data):
        if written == 0:
            raise StreamError(f"Sink accepted no data, [{len(data)}] units left to write", 1301, True)
        data = data[written:]
        written = sink.write(data)


def copy(source: Readable, sink: Writable) -> int:
    """Copy everything from source to sink.

        Returns the number of units copied or -1 if that number is larger than MAX_INT;
        use copy_large() when the exact count of a large transfer matters.
    """
    count = copy_large(source, sink)
    if count > MAX_INT:
        return -1
    return count


def copy_large(source: Readable, sink: Writable, buffer_size: int = DEFAULT_BUFFER_SIZE) -> int:
    """Copy everything from source to sink using reads of at most buffer_size units."""
    _check_buffer_size(buffer_size)
    count = 0
    for chunk in iter_chunks(source, buffer_size):
        _write_all(sink, chunk)
        count += len(chunk)
    return count


def copy_range(source: Readable,
               sink: Writable,
               input_offset: int = 0,
               length: int = -1,
               buffer_size: int = DEFAULT_BUFFER_SIZE) -> int:
    """Skip input_offset units, then copy up to length units (all of them if length is negative).

        Running out of data while skipping raises EndOfData; running out while copying
        just ends the copy early.
    """
    if input_offset < 0:
        raise InvalidArgument(f"Input offset must not be negative: {input_offset}", 1302)
    _check_buffer_size(buffer_size)
    if input_offset > 0:
        skip_fully(source, input_offset)
    if length == 0:
        return 0
    to_read = buffer_size if length < 0 else min(length, buffer_size)
    total = 0
    while to_read > 0:
        chunk = source.read(to_read)
        if not chunk:
            break
        _write_all(sink, chunk)
        total += len(chunk)
        if length > 0:
            to_read = min(length - total, buffer_size)
    return total


def _decode_chunks(chunks: t.Iterable[Chunk], sink: Writable, encoding: t.Optional[str]) -> int:
    decoder = codecs.getincrementaldecoder(resolve_encoding(encoding))()
    count = 0
    for chunk in chunks:
        text = decoder.decode(chunk)
        if text:
            _write_all(sink, text)
            count += len(text)
    text = decoder.decode(b"", True)
    if text:
        _write_all(sink, text)
        count += len(text)
    return count


def copy_decoded(source: Readable, sink: Writable, encoding: t.Optional[str] = None, buffer_size: int = DEFAULT_BUFFER_SIZE) -> int:
    """Copy a byte source into a text sink, returning the number of characters written."""
    _check_buffer_size(buffer_size)
    return _decode_chunks(iter_chunks(source, buffer_size), sink, encoding)


def copy_encoded(source: Readable, sink: Writable, encoding: t.Optional[str] = None, buffer_size: int = DEFAULT_BUFFER_SIZE) -> int:
    """Copy a text source into a byte sink, returning the number of characters read."""
    encoder = codecs.getincrementalencoder(resolve_encoding(encoding))()
    count = 0
    for chunk in iter_chunks(source, buffer_size):
        data = encoder.encode(chunk)
        if data:
            _write_all(sink, data)
        count += len(chunk)
    data = encoder.encode("", True)
    if data:
        _write_all(sink, data)
    return count


def read(source: Readable, buffer: t.MutableSequence, offset: int = 0, length: t.Optional[int] = None) -> int:
    """Read into buffer[offset:offset + length] until it is full or the source is exhausted.

        Use a bytearray for byte sources and a list for character sources. Returns the
        number of units read, which is less than length only at the end of the data.
    """
    if length is None:
        length = len(buffer) - offset
    if length < 0:
        raise InvalidArgument(f"Length must not be negative: {length}", 1303)
    check_bounds(len(buffer), offset, length)
    remaining = length
    while remaining > 0:
        location = offset + length - remaining
        chunk = source.read(remaining)
        if not chunk:
            break
        buffer[location:location + len(chunk)] = chunk
        remaining -= len(chunk)
    return length - remaining


def read_fully(source: Readable, buffer: t.MutableSequence, offset: int = 0, length: t.Optional[int] = None):
    """Like read(), but raise EndOfData if the buffer range could not be filled."""
    if length is None:
        length = len(buffer) - offset
    actual = read(source, buffer, offset, length)
    if actual != length:
        raise EndOfData(f"Length to read: {length} actual: {actual}", 1304)


def read_exact(source: Readable, length: int) -> t.Union[bytes, str]:
    """Read exactly length units and return them as one value of the source's type."""
    if length < 0:
        raise InvalidArgument(f"Length must not be negative: {length}", 1303)
    if length == 0:
        return source.read(0)
    chunks = []
    remaining = length
    while remaining > 0:
        chunk = source.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    if remaining > 0:
        raise EndOfData(f"Length to read: {length} actual: {length - remaining}", 1304)
    return ("" if isinstance(chunks[0], str) else b"").join(chunks)


def skip(source: Readable, to_skip: int) -> int:
    """Discard up to to_skip units, returning how many were actually discarded.

        The units are read and thrown away rather than skipped with seek(), since
        seeking past the end of a file succeeds and would over-report.
    """
    if to_skip < 0:
        raise InvalidArgument(f"Skip count must be non-negative, actual: {to_skip}", 1305)
    remain = to_skip
    while remain > 0:
        chunk = source.read(min(remain, SKIP_BUFFER_SIZE))
        if not chunk:
            break
        remain -= len(chunk)
    return to_skip - remain


def skip_fully(source: Readable, to_skip: int):
    """Like skip(), but raise EndOfData if fewer than to_skip units were available."""
    if to_skip < 0:
        raise InvalidArgument(f"Units to skip must not be negative: {to_skip}", 1305)
    skipped = skip(source, to_skip)
    if skipped != to_skip:
        raise EndOfData(f"Units to skip: {to_skip} actual: {skipped}", 1306)


def content_equals(source1: Readable, source2: Readable) -> bool:
    """Check that two sources hold the same units, regardless of how each one chunks them."""
    if source1 is source2:
        return True
    buf1 = source1.read(DEFAULT_BUFFER_SIZE)
    buf2 = source2.read(DEFAULT_BUFFER_SIZE)
    while buf1 and buf2:
        n = min(len(buf1), len(buf2))
        if buf1[:n] != buf2[:n]:
            return False
        buf1 = buf1[n:] or source1.read(DEFAULT_BUFFER_SIZE)
        buf2 = buf2[n:] or source2.read(DEFAULT_BUFFER_SIZE)
    return not buf1 and not buf2


def content_equals_ignore_eol(source1: Readable, source2: Readable, encoding: t.Optional[str] = None) -> bool:
    """Check that two sources hold the same lines, whatever line endings they use."""
    if source1 is source2:
        return True
    reader1 = LineReader(source1, encoding)
    reader2 = LineReader(source2, encoding)
    line1 = reader1.read_line()
    line2 = reader2.read_line()
    while line1 is not None and line2 is not None and line1 == line2:
        line1 = reader1.read_line()
        line2 = reader2.read_line()
    return line1 == line2


def close_quietly(closeable):
    """Flush and close a resource, ignoring any error.

        Only suitable for clean-up code; callers that need the data to reach its
        destination must flush() themselves first and handle the error.
    """
    if closeable is None:
        return
    flush = getattr(closeable, "flush", None)
    if callable(flush):
        try:
            flush()
        except Exception as ex:
            zrlog.get_logger("chaos.io").debug(f"Ignoring flush error: {ex.__class__.__name__}: {str(ex)}")
    try:
        closeable.close()
    except Exception as ex:
        zrlog.get_logger("chaos.io").debug(f"Ignoring close error: {ex.__class__.__name__}: {str(ex)}")


def to_bytes(source: Readable, size: t.Optional[int] = None) -> bytes:
    """Read a byte source fully, or exactly size bytes of it."""
    if size is None:
        output = io.BytesIO()
        copy_large(source, output)
        return output.getvalue()
    if size < 0:
        raise InvalidArgument(f"Size must be equal or greater than zero: {size}", 1307)
    if size == 0:
        return b""
    data = bytearray(size)
    read_fully(source, data)
    return bytes(data)


def to_str(source: Readable, encoding: t.Optional[str] = None) -> str:
    """Read a byte or character source fully into a string."""
    chunks = iter_chunks(source)
    first = next(chunks, None)
    if first is None:
        return ""
    writer = FastStringWriter()
    if isinstance(first, str):
        for chunk in itertools.chain([first], chunks):
            writer.write(chunk)
    else:
        _decode_chunks(itertools.chain([first], chunks), writer, encoding)
    return writer.snapshot()


def to_stream(text: str, encoding: t.Optional[str] = None) -> io.BytesIO:
    return io.BytesIO(text.encode(resolve_encoding(encoding)))


def write(data: t.Optional[Chunk], sink: Writable, encoding: t.Optional[str] = None):
    """Write data to the sink, converting between text and bytes if an encoding is given."""
    if data is None:
        return
    if encoding is not None:
        if isinstance(data, str):
            data = data.encode(resolve_encoding(encoding))
        else:
            data = bytes(data).decode(resolve_encoding(encoding))
    _write_all(sink, data)


def write_chunked(data: t.Optional[Chunk], sink: Writable, chunk_size: int = DEFAULT_BUFFER_SIZE):
    """Write data in pieces of at most chunk_size units."""
    if data is None:
        return
    _check_buffer_size(chunk_size)
    for offset in range(0, len(data), chunk_size):
        _write_all(sink, data[offset:offset + chunk_size])


def write_lines(lines: t.Optional[t.Iterable], sink: Writable, line_ending: t.Optional[str] = None, encoding: t.Optional[str] = None):
    """Write each line followed by line_ending (the platform separator by default).

        Byte lines are decoded with the encoding first; other objects are written as str(line).
    """
    if lines is None:
        return
    if line_ending is None:
        line_ending = LINE_SEPARATOR
    for line in lines:
        if isinstance(line, (bytes, bytearray)):
            write(bytes(line).decode(resolve_encoding(encoding)), sink, encoding)
        elif line is not None:
            write(str(line), sink, encoding)
        write(line_ending, sink, encoding)


def resource_to_bytes(package: str, name: str) -> bytes:
    with importlib.resources.files(package).joinpath(name).open("rb") as h:
        return to_bytes(h)


def resource_to_str(package: str, name: str, encoding: t.Optional[str] = None) -> str:
    with importlib.resources.files(package).joinpath(name).open("rb") as h:
        return to_str(h, encoding)
