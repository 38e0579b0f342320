"""UCloud UFile object storage client."""
import functools
import typing as t

import requests
import zirconium as zr
from autoinject import injector
from ufile import config as ufile_config
from ufile import filemanager

from chaos.util import is_blank
from .base import BaseStorageClient, CloudStorage, FileInfo, StorageServer, StorageTier, StorageError, UploadSource

DEFAULT_ENDPOINT = "ufileos.com"
STORAGE_CLASS_HEADER = "X-Ufile-Storage-Class"


def wrap_ufile_errors(action: str):
    """Converts failures raised inside the UFile SDK into StorageErrors."""

    def _outer(cb):

        @functools.wraps(cb)
        def _inner(*args, **kwargs):
            try:
                return cb(*args, **kwargs)
            except requests.Timeout as ex:
                raise StorageError(f"{action} failed, UFile client timed out: {ex.__class__.__name__}: {str(ex)}", 2001, True) from ex
            except requests.ConnectionError as ex:
                raise StorageError(f"{action} failed, UFile client connection error: {ex.__class__.__name__}: {str(ex)}", 2002, True) from ex
            except requests.RequestException as ex:
                raise StorageError(f"{action} failed, UFile client error: {ex.__class__.__name__}: {str(ex)}", 2000) from ex

        return _inner

    return _outer


class UfileStorageClient(BaseStorageClient):
    """Uploads to and deletes from a UFile bucket.

        The SDK keeps its connection settings (upload domain suffix, timeout and
        whether to use SSL) in module-level defaults, so they are (re)applied
        every time a client is built.
    """

    SERVER = StorageServer.UFILE

    config: zr.ApplicationConfig = None

    @injector.construct
    def __init__(self, storage: t.Optional[CloudStorage] = None):
        super().__init__(storage or CloudStorage.from_config(self.config))
        if is_blank(self._storage.endpoint):
            self._storage.endpoint = DEFAULT_ENDPOINT
        self._handler = self.build(
            self._storage.access_key_id,
            self._storage.access_key_secret,
            self._storage.region,
            self._storage.endpoint
        )

    def build(self, public_key: str, private_key: str, region: str, endpoint: str) -> filemanager.FileManager:
        ufile_config.set_default(
            uploadsuffix=f".{region}.{endpoint}",
            connection_timeout=self._storage.connection_timeout,
            open_ssl=self._storage.protocol.lower() == "https"
        )
        return filemanager.FileManager(public_key, private_key)

    @wrap_ufile_errors("Upload")
    def _upload(self, source: UploadSource, file_info: FileInfo, storage_tier: StorageTier) -> t.Optional[str]:
        with self._open_source(source) as stream:
            _, resp = self._handler.putstream(
                self._storage.bucket,
                file_info.oss_key,
                stream,
                mime_type=file_info.content_type,
                header={STORAGE_CLASS_HEADER: storage_tier.value}
            )
        self._check_response(resp, "Upload")
        etag = getattr(resp, "etag", None)
        return etag.strip('"') if etag else etag

    @wrap_ufile_errors("Delete")
    def _delete(self, key: str):
        _, resp = self._handler.deletefile(self._storage.bucket, key)
        self._check_response(resp, "Delete")

    @staticmethod
    def _check_response(resp, action: str):
        # The SDK reports client-side exceptions with a status code of -1
        if resp.status_code == -1:
            raise StorageError(f"{action} failed, UFile client error: {getattr(resp, 'error', None)}", 2003, True)
        if not 200 <= resp.status_code < 300:
            raise StorageError(f"{action} failed, UFile server error: [{resp.status_code}] {getattr(resp, 'error', None)}", 2004)

    def url_for(self, key: str) -> str:
        url = f"{self._storage.protocol}://{self._storage.bucket}.{self._storage.region}.{self._storage.endpoint}/{key}"
        if not is_blank(self._storage.style_name):
            url += self._storage.style_name
        return url
