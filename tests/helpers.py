import typing as t


class ChunkedSource:
    """Source that hands out at most chunk_size units per read, like a slow socket."""

    def __init__(self, data: t.Union[bytes, str], chunk_size: int = 3):
        self._data = data
        self._chunk_size = chunk_size
        self._pos = 0
        self.read_calls = 0

    def read(self, size: int = -1):
        self.read_calls += 1
        if size is None or size < 0:
            size = len(self._data)
        n = min(size, self._chunk_size)
        chunk = self._data[self._pos:self._pos + n]
        self._pos += len(chunk)
        return chunk

    def remaining(self):
        return self._data[self._pos:]


class PartialSink:
    """Byte sink that accepts at most max_write bytes per call and reports how many it took."""

    def __init__(self, max_write: int = 2):
        self._max_write = max_write
        self.data = bytearray()

    def write(self, data):
        taken = data[:self._max_write]
        self.data.extend(taken)
        return len(taken)


class FailingSource:

    def read(self, size: int = -1):
        raise OSError("device unplugged")


class TrackingCloseable:

    def __init__(self, flush_error: t.Optional[Exception] = None, close_error: t.Optional[Exception] = None):
        self.calls = []
        self._flush_error = flush_error
        self._close_error = close_error

    def flush(self):
        self.calls.append("flush")
        if self._flush_error:
            raise self._flush_error

    def close(self):
        self.calls.append("close")
        if self._close_error:
            raise self._close_error
