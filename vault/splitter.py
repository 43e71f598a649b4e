"""Splits a byte stream into fixed-size chunks and hashes the whole stream."""

from typing import BinaryIO, Iterator, Tuple

from common.checksum import checksum_stream
from common.constants import CHUNK_SIZE_BYTES


def count_parts(size: int, chunk_size: int = CHUNK_SIZE_BYTES) -> int:
    """
    Number of chunks a file of ``size`` bytes splits into (0 for an empty file).
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    return -(-size // chunk_size)


def hash_source(source: BinaryIO) -> Tuple[str, int]:
    """
    SHA-256 digest and byte size of a stream, read from its current position.

    The digest covers the whole stream and does not depend on chunk size.
    """
    return checksum_stream(source)


def _read_exactly(source: BinaryIO, size: int) -> bytes:
    buffer = bytearray()
    while len(buffer) < size:
        block = source.read(size - len(buffer))
        if not block:
            break
        buffer.extend(block)
    return bytes(buffer)


def split_into_chunks(source: BinaryIO, chunk_size: int = CHUNK_SIZE_BYTES) -> Iterator[Tuple[int, bytes]]:
    """
    Yield ``(chunk_index, data)`` pairs covering the stream in order.

    Every chunk holds exactly ``chunk_size`` bytes except the last, which holds
    the remainder. A zero-byte read is end of stream: a size that is an exact
    multiple of ``chunk_size`` does not produce a trailing empty chunk, and an
    empty stream produces no chunks at all.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    chunk_index = 0
    while True:
        data = _read_exactly(source, chunk_size)
        if not data:
            break

        yield chunk_index, data
        chunk_index += 1

        if len(data) < chunk_size:
            break
