"""Test doubles for the blob backend."""

import threading
from typing import Optional

from vault.backends.memory import MemoryBlobBackend
from vault.exceptions import BackendError

TEST_CHUNK_SIZE = 1024


class FlakyBackend(MemoryBlobBackend):
    """
    In-memory backend that fails the Nth call of a given operation.
    """

    def __init__(
        self,
        fail_store_on: Optional[int] = None,
        fail_fetch_on: Optional[int] = None,
        fail_remove_on: Optional[int] = None,
        retryable: bool = False,
    ):
        super().__init__()
        self.fail_store_on = fail_store_on
        self.fail_fetch_on = fail_fetch_on
        self.fail_remove_on = fail_remove_on
        self.retryable = retryable
        self.calls = {"store": 0, "fetch": 0, "remove": 0}
        self._calls_lock = threading.Lock()

    def _tick(self, operation: str, fail_on: Optional[int], part_id: Optional[str] = None) -> None:
        with self._calls_lock:
            self.calls[operation] += 1
            count = self.calls[operation]
        if fail_on is not None and count == fail_on:
            raise BackendError(
                f"injected {operation} failure",
                operation=operation,
                part_id=part_id,
                retryable=self.retryable,
            )

    def store(self, label: str, content: bytes) -> str:
        self._tick("store", self.fail_store_on)
        return super().store(label, content)

    def fetch(self, blob_id: str) -> bytes:
        self._tick("fetch", self.fail_fetch_on, blob_id)
        return super().fetch(blob_id)

    def remove(self, blob_id: str) -> None:
        self._tick("remove", self.fail_remove_on, blob_id)
        super().remove(blob_id)
