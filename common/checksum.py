"""Provides SHA-256 checksum calculation helpers."""

import hashlib
from typing import BinaryIO, Tuple

from common.constants import HASH_READ_SIZE_BYTES


def compute_checksum(data: bytes) -> str:
    """
    Compute SHA-256 checksum for given data.

    Args:
        data: Bytes to compute checksum for

    Returns:
        Hexadecimal string representation of SHA-256 hash
    """
    return hashlib.sha256(data).hexdigest()


def verify_checksum(data: bytes, expected: str) -> bool:
    return compute_checksum(data) == expected


def checksum_stream(source: BinaryIO, read_size: int = HASH_READ_SIZE_BYTES) -> Tuple[str, int]:
    """
    Hash a readable binary stream from its current position to EOF.

    Args:
        source: Readable binary stream
        read_size: Bytes read per call

    Returns:
        Tuple of (hex digest, number of bytes consumed)
    """
    calculator = IncrementalChecksumCalculator()
    total = 0
    while True:
        block = source.read(read_size)
        if not block:
            break
        calculator.update(block)
        total += len(block)
    return calculator.finalize(), total


class IncrementalChecksumCalculator:
    """
    Calculate SHA-256 checksum incrementally for streaming data.

    Usage:
        calculator = IncrementalChecksumCalculator()
        calculator.update(chunk1)
        calculator.update(chunk2)
        final_checksum = calculator.finalize()
    """

    def __init__(self):
        self._hasher = hashlib.sha256()
        self._finalized = False

    def update(self, data: bytes) -> None:
        if self._finalized:
            raise ValueError("Cannot update after finalization")
        self._hasher.update(data)

    def finalize(self) -> str:
        self._finalized = True
        return self._hasher.hexdigest()

    def reset(self) -> None:
        self._hasher = hashlib.sha256()
        self._finalized = False
