import typing as t

import zirconium as zr
from autoinject import injector

from .base import BaseStorageClient, CloudStorage, StorageServer
from .local import LocalStorageClient
from .ufile import UfileStorageClient


@injector.injectable_global
class StorageController:
    """Builds the storage client matching a set of storage settings.

        StorageServer.UFILE -> UfileStorageClient
        StorageServer.LOCAL -> LocalStorageClient
    """

    config: zr.ApplicationConfig = None

    @injector.construct
    def __init__(self):
        self.client_classes: dict[StorageServer, type[BaseStorageClient]] = {
            StorageServer.UFILE: UfileStorageClient,
            StorageServer.LOCAL: LocalStorageClient,
        }

    def get_client(self, storage: t.Optional[CloudStorage] = None) -> BaseStorageClient:
        """Build a client for the given settings, or for the configured ones."""
        if storage is None:
            storage = CloudStorage.from_config(self.config)
        return self.client_classes[storage.server](storage)
