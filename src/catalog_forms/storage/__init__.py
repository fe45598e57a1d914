"""Storage collaborator contract and HTTP implementation."""

from .uploader import StorageUploader, StoredFile
from .http_uploader import HttpStorageUploader

__all__ = ["HttpStorageUploader", "StorageUploader", "StoredFile"]
