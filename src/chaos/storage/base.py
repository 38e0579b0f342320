from __future__ import annotations
import contextlib
import enum
import functools
import io
import pathlib
import time
import typing as t

import zirconium as zr
import zrlog

from chaos.util import ChaosError, ConfigError, Readable, is_blank


class StorageServer(enum.Enum):
    """Supported storage back-ends."""

    UFILE = "ufile"
    LOCAL = "local"


class StorageTier(enum.Enum):
    """Storage classes, named after the UCloud ones (standard, infrequent access, archive)."""

    STANDARD = "STANDARD"
    IA = "IA"
    ARCHIVE = "ARCHIVE"


class FileStatus(enum.Enum):

    PENDING = 0
    UPLOAD_SUCCESS = 1
    UPLOAD_FAILED = 2


class StorageError(ChaosError):
    """Error class specifically for storage errors."""

    def __init__(self, msg, code, is_recoverable: bool = False):
        super().__init__(msg, "STORAGE", code, is_recoverable=is_recoverable)


def local_file_error_wrap(cb):
    """Converts typical local file-system errors into appropriate StorageErrors with recoverable set properly."""

    @functools.wraps(cb)
    def _inner(*args, **kwargs):
        try:
            return cb(*args, **kwargs)
        except FileNotFoundError as ex:
            raise StorageError(f"Local file not found", 1002) from ex
        except PermissionError as ex:
            raise StorageError(f"Access to local file denied", 1003, True) from ex
        except IsADirectoryError as ex:
            raise StorageError(f"Local file is a directory", 1004) from ex
        except NotADirectoryError as ex:
            raise StorageError(f"Local directory is not a directory", 1005) from ex
        except OSError as ex:
            raise StorageError(f"Exception processing local file: {ex.__class__.__name__}: {str(ex)}", 1006) from ex

    return _inner


class CloudStorage:
    """Connection settings for a storage back-end."""

    def __init__(self,
                 server: StorageServer = StorageServer.UFILE,
                 access_key_id: t.Optional[str] = None,
                 access_key_secret: t.Optional[str] = None,
                 region: t.Optional[str] = None,
                 endpoint: t.Optional[str] = None,
                 bucket: t.Optional[str] = None,
                 protocol: str = "https",
                 style_name: t.Optional[str] = None,
                 local_root: t.Optional[str] = None,
                 connection_timeout: int = 10):
        self.server = server
        self.access_key_id = access_key_id
        self.access_key_secret = access_key_secret
        self.region = region
        self.endpoint = endpoint
        self.bucket = bucket
        self.protocol = protocol
        self.style_name = style_name
        self.local_root = local_root
        self.connection_timeout = connection_timeout

    def __repr__(self):
        # Never include the secret here
        return f"CloudStorage(server={self.server.value}, region={self.region}, endpoint={self.endpoint}, bucket={self.bucket})"

    @staticmethod
    def from_config(config: zr.ApplicationConfig) -> CloudStorage:
        """Build the settings from the [chaos.storage] configuration section."""
        server_name = config.as_str(("chaos", "storage", "type"), default="ufile")
        try:
            server = StorageServer(server_name.lower())
        except ValueError as ex:
            raise ConfigError(f"Unknown storage type [{server_name}]", 1000) from ex
        return CloudStorage(
            server=server,
            access_key_id=config.as_str(("chaos", "storage", "access_key_id"), default=None),
            access_key_secret=config.as_str(("chaos", "storage", "access_key_secret"), default=None),
            region=config.as_str(("chaos", "storage", "region"), default=None),
            endpoint=config.as_str(("chaos", "storage", "endpoint"), default=None),
            bucket=config.as_str(("chaos", "storage", "bucket"), default=None),
            protocol=config.as_str(("chaos", "storage", "protocol"), default="https"),
            style_name=config.as_str(("chaos", "storage", "style_name"), default=None),
            local_root=config.as_str(("chaos", "storage", "local_root"), default=None),
            connection_timeout=config.as_int(("chaos", "storage", "connection_timeout"), default=10),
        )


class FileInfo:
    """Describes a stored file; upload() fills in the etag, url, upload_time and status."""

    def __init__(self,
                 oss_key: str,
                 content_type: str = "application/octet-stream",
                 name: t.Optional[str] = None,
                 size: t.Optional[int] = None):
        self.oss_key = oss_key
        self.content_type = content_type
        self.name = name
        self.size = size
        self.etag: t.Optional[str] = None
        self.url: t.Optional[str] = None
        self.upload_time: t.Optional[int] = None
        self.status: FileStatus = FileStatus.PENDING


UploadSource = t.Union[bytes, bytearray, str, pathlib.Path, Readable]


class BaseStorageClient:

    SERVER: StorageServer = None

    def __init__(self, storage: CloudStorage):
        self._log = zrlog.get_logger(f"chaos.storage.{self.SERVER.value}")
        self._log.debug(f"Storage settings: {storage}")
        if storage.server != self.SERVER:
            raise StorageError(f"Storage settings are for [{storage.server.value}], not [{self.SERVER.value}], check the configuration", 1000)
        self._storage = storage

    def upload(self, source: UploadSource, file_info: FileInfo, storage_tier: StorageTier = StorageTier.STANDARD) -> FileInfo:
        """Upload the source (bytes, a local path or a readable stream) under file_info.oss_key."""
        if source is None:
            raise StorageError("Upload source is missing", 1010)
        if is_blank(file_info.oss_key):
            raise StorageError("Upload key is blank", 1011)
        if file_info.size is None:
            file_info.size = self._source_size(source)
        try:
            etag = self._upload(source, file_info, storage_tier)
        except Exception:
            file_info.status = FileStatus.UPLOAD_FAILED
            raise
        file_info.etag = etag
        file_info.url = self.url_for(file_info.oss_key)
        file_info.upload_time = int(time.time() * 1000)
        file_info.status = FileStatus.UPLOAD_SUCCESS
        self._log.info(f"Uploaded [{file_info.oss_key}] to [{file_info.url}]")
        return file_info

    def _upload(self, source: UploadSource, file_info: FileInfo, storage_tier: StorageTier) -> t.Optional[str]:
        """Store the data and return its etag, if any."""
        raise NotImplementedError

    def delete(self, keys: t.Union[str, t.Iterable[str]]):
        """Delete one key or each key of a collection."""
        if keys is None or isinstance(keys, str):
            if is_blank(keys):
                raise StorageError("Key to delete is blank", 1012)
            self._delete(keys)
            self._log.info(f"Deleted [{keys}]")
        else:
            keys = list(keys)
            if not keys:
                raise StorageError("Keys to delete must not be empty", 1013)
            for key in keys:
                self.delete(key)

    def _delete(self, key: str):
        raise NotImplementedError

    def url_for(self, key: str) -> str:
        """Get the URL at which the given key can be accessed."""
        raise NotImplementedError

    @staticmethod
    def _source_size(source: UploadSource) -> t.Optional[int]:
        if isinstance(source, (bytes, bytearray)):
            return len(source)
        if isinstance(source, (str, pathlib.Path)):
            return local_file_error_wrap(pathlib.Path(source).stat)().st_size
        return None

    @contextlib.contextmanager
    def _open_source(self, source: UploadSource) -> t.Iterator[Readable]:
        """Provide the source as a readable stream, closing it afterwards only if it was opened here."""
        if isinstance(source, (bytes, bytearray)):
            yield io.BytesIO(source)
        elif isinstance(source, (str, pathlib.Path)):
            with local_file_error_wrap(open)(source, "rb") as h:
                yield h
        elif hasattr(source, "read"):
            yield source
        else:
            raise StorageError(f"Unsupported upload source [{source.__class__.__name__}]", 1014)
