"""Object storage clients.

    Use the StorageController to obtain a client for the configured back-end
    ([chaos.storage] type = "ufile" or "local"). Every client offers the same two
    operations: upload() a source under a key, described by a FileInfo which is
    completed with the etag, access URL and upload time, and delete() one or
    several keys.
"""
from .base import BaseStorageClient, CloudStorage, FileInfo, FileStatus, StorageError, StorageServer, StorageTier
from .core import StorageController
