"""In-process blob backend, used for tests and dry runs."""

import threading
from typing import Dict, List

from vault.backends.base import BlobBackend
from vault.backends.snowflake import SnowflakeGenerator
from vault.exceptions import PartNotFoundError


class MemoryBlobBackend(BlobBackend):
    def __init__(self):
        self._ids = SnowflakeGenerator()
        self._lock = threading.Lock()
        self.blobs: Dict[str, bytes] = {}
        self.labels: Dict[str, str] = {}

    def store(self, label: str, content: bytes) -> str:
        blob_id = self._ids.next_id()
        with self._lock:
            self.blobs[blob_id] = bytes(content)
            self.labels[blob_id] = label
        return blob_id

    def fetch(self, blob_id: str) -> bytes:
        with self._lock:
            if blob_id not in self.blobs:
                raise PartNotFoundError(blob_id)
            return self.blobs[blob_id]

    def remove(self, blob_id: str) -> None:
        with self._lock:
            if blob_id not in self.blobs:
                raise PartNotFoundError(blob_id)
            del self.blobs[blob_id]
            self.labels.pop(blob_id, None)

    def list_blobs(self) -> List[str]:
        with self._lock:
            return sorted(self.blobs)
