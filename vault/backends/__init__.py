"""Blob backend implementations."""

from vault import config
from vault.backends.base import BlobBackend
from vault.backends.http import HttpBlobBackend
from vault.backends.local import LocalBlobBackend
from vault.backends.memory import MemoryBlobBackend
from vault.exceptions import ValidationError


def create_backend(kind: str = None) -> BlobBackend:
    """
    Build the blob backend named by ``kind`` (defaults to VAULT_BLOB_BACKEND).
    """
    kind = (kind or config.BLOB_BACKEND).lower()
    if kind == "local":
        return LocalBlobBackend(config.BLOB_STORAGE_PATH)
    if kind == "http":
        return HttpBlobBackend(
            config.BLOB_BACKEND_URL,
            token=config.BLOB_BACKEND_TOKEN,
            timeout=config.BLOB_TIMEOUT_SECONDS,
        )
    if kind == "memory":
        return MemoryBlobBackend()
    raise ValidationError(f"Unknown blob backend: {kind!r}")


__all__ = [
    "BlobBackend",
    "HttpBlobBackend",
    "LocalBlobBackend",
    "MemoryBlobBackend",
    "create_backend",
]
