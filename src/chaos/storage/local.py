"""Local directory storage client"""
import hashlib
import pathlib
import typing as t

import zirconium as zr
from autoinject import injector

from chaos.io import copy_large, iter_chunks
from .base import BaseStorageClient, CloudStorage, FileInfo, StorageServer, StorageTier, StorageError, UploadSource, local_file_error_wrap


class LocalStorageClient(BaseStorageClient):
    """Stores files below a root directory on a local disk or accessible network drive.

        Keys are relative paths below the root; storage tiers are ignored.
    """

    SERVER = StorageServer.LOCAL

    config: zr.ApplicationConfig = None

    @injector.construct
    def __init__(self, storage: t.Optional[CloudStorage] = None):
        super().__init__(storage or CloudStorage.from_config(self.config))
        self._root = pathlib.Path(self._storage.local_root or ".").expanduser().absolute()

    def _path_for(self, key: str) -> pathlib.Path:
        path = (self._root / key.lstrip("/")).resolve()
        if not path.is_relative_to(self._root.resolve()):
            raise StorageError(f"Key [{key}] points outside of the storage root", 1020)
        return path

    @local_file_error_wrap
    def _upload(self, source: UploadSource, file_info: FileInfo, storage_tier: StorageTier) -> t.Optional[str]:
        target = self._path_for(file_info.oss_key)
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self._open_source(source) as stream:
                with open(target, "wb") as dest:
                    copy_large(stream, dest)
        except Exception as ex:
            target.unlink(True)
            raise ex
        return self._md5(target)

    @staticmethod
    def _md5(path: pathlib.Path) -> str:
        digest = hashlib.md5()
        with open(path, "rb") as h:
            for chunk in iter_chunks(h):
                digest.update(chunk)
        return digest.hexdigest()

    @local_file_error_wrap
    def _delete(self, key: str):
        self._path_for(key).unlink(True)

    def url_for(self, key: str) -> str:
        return self._path_for(key).as_uri()
