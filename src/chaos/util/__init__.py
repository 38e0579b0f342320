import abc
import typing as t

from .exc import ChaosError, ConfigError


@t.runtime_checkable
class Readable(t.Protocol):

    @abc.abstractmethod
    def read(self, chunk_size: int) -> t.Union[bytes, str]:
        pass


@t.runtime_checkable
class Writable(t.Protocol):

    @abc.abstractmethod
    def write(self, b: t.Union[bytes, str]):
        pass


def is_blank(value: t.Optional[str]) -> bool:
    return value is None or value.strip() == ""
