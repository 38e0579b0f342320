"""Line-oriented reading of byte or character streams."""
import codecs
import typing as t

from chaos.util import Readable
from .base import DEFAULT_BUFFER_SIZE, InvalidArgument, resolve_encoding


class LineReader:
    """Splits a stream into lines terminated by \\n, \\r\\n or \\r.

        Byte chunks are decoded incrementally with the given encoding, so
        multi-byte characters may straddle chunk boundaries. Character
        chunks are used as is. The terminators are not included in the
        returned lines and a trailing terminator does not produce an extra
        empty line.
    """

    def __init__(self, source: Readable, encoding: t.Optional[str] = None, buffer_size: int = DEFAULT_BUFFER_SIZE):
        if buffer_size <= 0:
            raise InvalidArgument(f"Buffer size must be positive: {buffer_size}", 1200)
        self._source = source
        self._encoding = encoding
        self._buffer_size = buffer_size
        self._decoder = None
        self._buffer = ""
        self._complete = False

    def _decode(self, chunk: t.Union[bytes, bytearray, str], final: bool = False) -> str:
        if isinstance(chunk, str):
            return chunk
        if self._decoder is None:
            self._decoder = codecs.getincrementaldecoder(resolve_encoding(self._encoding))()
        return self._decoder.decode(chunk, final)

    def _read_next(self) -> bool:
        if self._complete:
            return False
        chunk = self._source.read(self._buffer_size)
        if not chunk:
            self._complete = True
            if self._decoder is not None:
                self._buffer += self._decoder.decode(b"", True)
            return False
        self._buffer += self._decode(chunk)
        return True

    def at_eof(self) -> bool:
        while not self._buffer:
            if not self._read_next():
                return not self._buffer
        return False

    def _find_terminator(self) -> tuple[t.Optional[int], int]:
        """Find the first line terminator, returning its position and length."""
        search_from = 0
        while True:
            n_pos = self._buffer.find("\n", search_from)
            r_pos = self._buffer.find("\r", search_from, n_pos if n_pos >= 0 else len(self._buffer))
            if r_pos >= 0:
                # A \r at the very end may be the first half of \r\n
                while r_pos == len(self._buffer) - 1 and self._read_next():
                    pass
                if self._buffer[r_pos + 1:r_pos + 2] == "\n":
                    return r_pos, 2
                return r_pos, 1
            if n_pos >= 0:
                return n_pos, 1
            search_from = len(self._buffer)
            if not self._read_next():
                return None, 0

    def read_line(self) -> t.Optional[str]:
        """Return the next line or None once the stream is exhausted."""
        if self.at_eof():
            return None
        pos, term_length = self._find_terminator()
        if pos is None:
            line = self._buffer
            self._buffer = ""
        else:
            line = self._buffer[:pos]
            self._buffer = self._buffer[pos + term_length:]
        return line

    def __iter__(self) -> t.Iterator[str]:
        line = self.read_line()
        while line is not None:
            yield line
            line = self.read_line()

    def read_lines(self) -> list[str]:
        return list(self)


def iter_lines(source: Readable, encoding: t.Optional[str] = None) -> t.Iterator[str]:
    """Lazily yield the lines of a byte or character source."""
    yield from LineReader(source, encoding)


def read_lines(source: Readable, encoding: t.Optional[str] = None) -> list[str]:
    """Read all the lines of a byte or character source."""
    return LineReader(source, encoding).read_lines()
