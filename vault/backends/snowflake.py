"""Time-ordered id generator for blob backends that mint their own ids."""

import threading
import time

# 2015-01-01T00:00:00Z, in milliseconds
EPOCH_MS = 1420070400000

SEQUENCE_BITS = 12
WORKER_BITS = 10
MAX_SEQUENCE = (1 << SEQUENCE_BITS) - 1

# 64-bit ids are at most 20 decimal digits
ID_WIDTH = 20


class SnowflakeGenerator:
    """
    Issue ids of the form ``timestamp | worker | sequence``, zero padded.

    Ids are strictly increasing within one generator, so ascending string
    order matches issue order.
    """

    def __init__(self, worker_id: int = 0):
        if not 0 <= worker_id < (1 << WORKER_BITS):
            raise ValueError(f"worker_id must fit in {WORKER_BITS} bits, got {worker_id}")
        self.worker_id = worker_id
        self._lock = threading.Lock()
        self._last_ms = -1
        self._sequence = 0

    def _now_ms(self) -> int:
        return int(time.time() * 1000)

    def next_id(self) -> str:
        with self._lock:
            now = max(self._now_ms(), self._last_ms)
            if now == self._last_ms:
                self._sequence = (self._sequence + 1) & MAX_SEQUENCE
                if self._sequence == 0:
                    # sequence exhausted for this millisecond
                    now = self._last_ms + 1
            else:
                self._sequence = 0
            self._last_ms = now

            value = (
                ((now - EPOCH_MS) << (WORKER_BITS + SEQUENCE_BITS))
                | (self.worker_id << SEQUENCE_BITS)
                | self._sequence
            )
            return str(value).zfill(ID_WIDTH)
