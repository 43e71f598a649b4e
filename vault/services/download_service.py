"""Download service: fetch a file's parts in order and reassemble them."""

from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Deque, Iterator, List, Optional, Tuple

from common.checksum import IncrementalChecksumCalculator
from common.logging_config import get_logger
from vault import config
from vault.backends.base import BlobBackend
from vault.database import MetadataStore
from vault.exceptions import (
    BackendError,
    ChecksumMismatchError,
    FileNotFoundInStoreError,
    SourceReadError,
    ValidationError,
)
from vault.repositories.file_repository import File, FileRepository
from vault.repositories.part_repository import Part, PartRepository

logger = get_logger(__name__)


class DownloadService:
    def __init__(
        self,
        store: MetadataStore,
        backend: BlobBackend,
        output_dir: str = config.OUTPUT_DIR,
        transfer_workers: int = config.TRANSFER_WORKERS,
        verify: bool = config.VERIFY_DOWNLOADS,
    ):
        self.store = store
        self.backend = backend
        self.output_dir = Path(output_dir)
        self.transfer_workers = max(1, transfer_workers)
        self.verify = verify
        self.file_repo = FileRepository(store)
        self.part_repo = PartRepository(store)

    def get_file(self, file_id: int) -> File:
        file = self.file_repo.get_by_id(file_id)
        if file is None:
            raise FileNotFoundInStoreError(file_id)
        return file

    def stream_file(self, file_id: int) -> Tuple[File, int, Iterator[bytes]]:
        """
        Look up a file and return it with the byte count of its stored parts
        and an iterator over their contents.

        Chunks are yielded in upload order. A file without parts yields nothing.
        The byte count is the sum of the part sizes, which is less than
        ``file.size`` when parts are missing.
        """
        file = self.get_file(file_id)
        parts = self.part_repo.get_parts_by_file(file_id)

        if len(parts) != file.total_parts:
            logger.warning(
                f"File {file_id} has {len(parts)} parts in store, expected {file.total_parts}"
            )

        return file, sum(part.size for part in parts), self._iter_parts(file, parts)

    def _iter_parts(self, file: File, parts: List[Part]) -> Iterator[bytes]:
        total = len(parts)

        if self.transfer_workers == 1 or total <= 1:
            for number, part in enumerate(parts, start=1):
                logger.info(f"Downloading part {number}/{total}: {part.part_id}")
                yield self._fetch_part(file, part)
            return

        # sliding window of in-flight fetches, consumed in part order
        with ThreadPoolExecutor(max_workers=self.transfer_workers) as pool:
            window: Deque[Tuple[Part, Future]] = deque()
            remaining = iter(parts)
            try:
                for part in remaining:
                    window.append((part, pool.submit(self._fetch_part, file, part)))
                    if len(window) >= self.transfer_workers:
                        break

                number = 0
                while window:
                    part, future = window.popleft()
                    number += 1
                    logger.info(f"Downloading part {number}/{total}: {part.part_id}")
                    data = future.result()
                    next_part = next(remaining, None)
                    if next_part is not None:
                        window.append((next_part, pool.submit(self._fetch_part, file, next_part)))
                    yield data
            finally:
                for _, future in window:
                    future.cancel()

    def _fetch_part(self, file: File, part: Part) -> bytes:
        try:
            return self.backend.fetch(part.part_id)
        except BackendError as e:
            raise BackendError(
                f"Failed to download part {part.part_id} of file {file.file_id}: {e}",
                operation="fetch",
                part_id=part.part_id,
                retryable=e.retryable,
            ) from e

    def _output_path(self, name: str) -> Path:
        output_path = self.output_dir / name
        root = self.output_dir.resolve()
        if root not in output_path.resolve().parents:
            raise ValidationError(f"Download destination escapes {self.output_dir}: {name!r}")
        return output_path

    def download(
        self,
        file_id: int,
        destination_name: Optional[str] = None,
        verify: Optional[bool] = None,
    ) -> Path:
        """
        Reassemble a file into ``output_dir / destination_name``.

        Output already written is left in place if a fetch fails. With
        ``verify`` set, the reassembled bytes are hashed and compared against
        the stored content hash.

        Raises:
            ValidationError: the destination resolves outside ``output_dir``

        Returns:
            Path of the written file
        """
        verify = self.verify if verify is None else verify
        file, _, chunks = self.stream_file(file_id)
        output_path = self._output_path(destination_name or file.name)

        calculator = IncrementalChecksumCalculator()
        written = 0
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "wb") as out:
                for data in chunks:
                    out.write(data)
                    calculator.update(data)
                    written += len(data)
        except OSError as e:
            raise SourceReadError(f"Failed to write {output_path}: {e}") from e

        if verify:
            actual = calculator.finalize()
            if actual != file.content_hash:
                logger.error(f"Checksum mismatch for file {file_id} written to {output_path}")
                raise ChecksumMismatchError(file_id, file.content_hash, actual)

        logger.info(f"Successfully reassembled file {file_id} to {output_path} [{written} bytes]")
        return output_path
