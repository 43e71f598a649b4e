"""Blob backend interface: store bytes, fetch by opaque id, remove by opaque id."""

from abc import ABC, abstractmethod


class BlobBackend(ABC):
    """
    Opaque remote storage for chunk contents.

    Implementations raise ``BackendError`` for transport or authentication
    failures and ``PartNotFoundError`` when an id is unknown. Ids are treated
    as unstructured tokens; the vault records its own part order.
    """

    @abstractmethod
    def store(self, label: str, content: bytes) -> str:
        """Store ``content`` under a human-readable ``label`` and return its id."""

    @abstractmethod
    def fetch(self, blob_id: str) -> bytes:
        """Return the bytes stored under ``blob_id``."""

    @abstractmethod
    def remove(self, blob_id: str) -> None:
        """Remove the object stored under ``blob_id``."""

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass
