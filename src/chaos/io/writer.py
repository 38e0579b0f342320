"""In-memory text accumulator."""
import typing as t

from .base import InvalidArgument, check_bounds


class FastStringWriter:
    """Unsynchronized writer that collects text in a growable character buffer.

        Differences from io.StringIO:

        - writing None is silently ignored
        - the buffer grows to max(capacity * 2, required) when it overflows
        - flush() and close() do nothing, the writer stays usable afterwards

        Instances are meant to be owned by a single thread.
    """

    def __init__(self, initial_size: int = 64):
        if initial_size < 0:
            raise InvalidArgument(f"Negative initial size: {initial_size}", 1100)
        self._buf: list[str] = [""] * initial_size
        self._count = 0

    @property
    def capacity(self) -> int:
        return len(self._buf)

    def __len__(self):
        return self._count

    def write(self, data: t.Union[str, int, None], offset: t.Optional[int] = None, length: t.Optional[int] = None):
        """Append a character (as a str or code point) or a slice of text."""
        if data is None:
            return
        if isinstance(data, int):
            self._append_all(chr(data))
        elif offset is None and length is None:
            self._append_all(data)
        else:
            self.write_chars(data, offset or 0, length)

    def write_chars(self, chars: t.Sequence[str], offset: int = 0, length: t.Optional[int] = None):
        """Append length characters of chars starting at offset."""
        if length is None:
            length = len(chars) - offset
        check_bounds(len(chars), offset, length)
        if length == 0:
            return
        self._append_all(chars[offset:offset + length])

    def append(self, csq: t.Union[str, t.Sequence[str], None], start: t.Optional[int] = None, end: t.Optional[int] = None) -> "FastStringWriter":
        if csq is None:
            return self
        if start is None and end is None:
            self._append_all(csq)
        else:
            start = 0 if start is None else start
            end = len(csq) if end is None else end
            check_bounds(len(csq), start, end - start)
            self._append_all(csq[start:end])
        return self

    def _append_all(self, chars: t.Sequence[str]):
        new_count = self._count + len(chars)
        self._ensure_capacity(new_count)
        self._buf[self._count:new_count] = chars
        self._count = new_count

    def _ensure_capacity(self, minimum_capacity: int):
        if minimum_capacity > len(self._buf):
            self._expand_capacity(minimum_capacity)

    def _expand_capacity(self, minimum_capacity: int):
        new_capacity = max(len(self._buf) * 2, minimum_capacity)
        new_buf = [""] * new_capacity
        if self._count > 0:
            new_buf[0:self._count] = self._buf[0:self._count]
        self._buf = new_buf

    def snapshot(self) -> str:
        """Return the text written so far."""
        return "".join(self._buf[0:self._count])

    def getvalue(self) -> str:
        return self.snapshot()

    def __str__(self):
        return self.snapshot()

    def flush(self):
        pass

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
