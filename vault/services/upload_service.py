"""Upload service: hash, split, push chunks to the blob backend, record parts."""

import tempfile
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Set, Tuple, Union

from common.checksum import IncrementalChecksumCalculator
from common.constants import ROOT_GROUP_ID
from common.logging_config import get_logger
from vault import config
from vault.backends.base import BlobBackend
from vault.database import MetadataStore
from vault.exceptions import (
    BackendError,
    GroupNotFoundError,
    SourceReadError,
    ValidationError,
    VaultError,
)
from vault.repositories.file_repository import File, FileRepository
from vault.repositories.group_repository import GroupRepository
from vault.repositories.part_repository import Part, PartRepository
from vault.splitter import count_parts, hash_source, split_into_chunks
from vault.utils import part_label

logger = get_logger(__name__)

# chunk_index -> (part_id, size)
StoredChunks = Dict[int, Tuple[str, int]]


class UploadService:
    """
    Stores a local file as a sequence of blob backend objects.

    The file row and every part row are written in one transaction, and only
    after every chunk has been stored. A failed upload leaves no rows behind
    and removes the chunks it had already stored.
    """

    def __init__(
        self,
        store: MetadataStore,
        backend: BlobBackend,
        chunk_size: int = config.CHUNK_SIZE,
        staging_dir: Optional[str] = config.STAGING_DIR,
        transfer_workers: int = config.TRANSFER_WORKERS,
    ):
        if chunk_size <= 0:
            raise ValidationError(f"chunk_size must be positive, got {chunk_size}")
        self.store = store
        self.backend = backend
        self.chunk_size = chunk_size
        self.staging_dir = staging_dir
        self.transfer_workers = max(1, transfer_workers)
        self.file_repo = FileRepository(store)
        self.group_repo = GroupRepository(store)
        self.part_repo = PartRepository(store)

    def upload(
        self,
        source_path: Union[str, Path],
        group_id: int = ROOT_GROUP_ID,
        name: Optional[str] = None,
    ) -> File:
        source = Path(source_path)
        if not source.is_file():
            raise ValidationError(f"Upload source is not a file: {source}")

        if self.group_repo.get_by_id(group_id) is None:
            raise GroupNotFoundError(group_id)

        file_name = name or source.name

        try:
            with open(source, "rb") as f:
                content_hash, size = hash_source(f)
        except OSError as e:
            raise SourceReadError(f"Failed to hash {source}: {e}") from e

        total_parts = count_parts(size, self.chunk_size)
        logger.info(
            f"Uploading {file_name} [size={size}, total_parts={total_parts}, group_id={group_id}]"
        )

        stored: StoredChunks = {}
        try:
            with tempfile.TemporaryDirectory(prefix="vault-staging-", dir=self.staging_dir) as staging:
                with open(source, "rb") as f:
                    split_hash = self._transfer_chunks(f, file_name, Path(staging), stored)

            if split_hash != content_hash or len(stored) != total_parts:
                raise SourceReadError(f"{source} changed while it was being uploaded")

            with self.store.transaction() as conn:
                file = self.file_repo.create_file(
                    name=file_name,
                    total_parts=total_parts,
                    size=size,
                    content_hash=content_hash,
                    group_id=group_id,
                    conn=conn,
                )
                self.part_repo.create_parts(
                    [
                        Part(part_id=part_id, file_id=file.file_id, part_index=index, size=part_size)
                        for index, (part_id, part_size) in sorted(stored.items())
                    ],
                    conn=conn,
                )
        except OSError as e:
            logger.error(f"Upload failed for {file_name}: {e}", exc_info=True)
            self._cleanup_parts([part_id for part_id, _ in stored.values()])
            raise SourceReadError(f"Failed to read or stage {source}: {e}") from e
        except Exception as e:
            logger.error(f"Upload failed for {file_name}: {e}", exc_info=True)
            self._cleanup_parts([part_id for part_id, _ in stored.values()])
            raise

        logger.info(f"File upload completed [file_id={file.file_id}, parts={total_parts}]")
        return file

    def _transfer_chunks(
        self,
        source: BinaryIO,
        file_name: str,
        staging_dir: Path,
        stored: StoredChunks,
    ) -> str:
        """
        Store every chunk of ``source``, recording ids in ``stored`` as they land.

        Returns the SHA-256 of the bytes that were actually split.
        """
        calculator = IncrementalChecksumCalculator()

        if self.transfer_workers == 1:
            for index, data in split_into_chunks(source, self.chunk_size):
                calculator.update(data)
                stored[index] = self._store_chunk(file_name, index, data, staging_dir)
            return calculator.finalize()

        with ThreadPoolExecutor(max_workers=self.transfer_workers) as pool:
            pending: Set[Future] = set()
            try:
                for index, data in split_into_chunks(source, self.chunk_size):
                    calculator.update(data)
                    pending.add(pool.submit(self._store_chunk_into, stored, file_name, index, data, staging_dir))
                    if len(pending) >= self.transfer_workers:
                        done, pending = wait(pending, return_when=FIRST_COMPLETED)
                        for future in done:
                            future.result()
                done, pending = wait(pending)
                for future in done:
                    future.result()
            except BaseException:
                for future in pending:
                    future.cancel()
                raise

        return calculator.finalize()

    def _store_chunk_into(
        self,
        stored: StoredChunks,
        file_name: str,
        index: int,
        data: bytes,
        staging_dir: Path,
    ) -> None:
        stored[index] = self._store_chunk(file_name, index, data, staging_dir)

    def _store_chunk(self, file_name: str, index: int, data: bytes, staging_dir: Path) -> Tuple[str, int]:
        label = part_label(file_name, index)
        chunk_path = staging_dir / label
        chunk_path.write_bytes(data)
        try:
            part_id = self.backend.store(label, chunk_path.read_bytes())
        except BackendError as e:
            raise BackendError(
                f"Failed to upload chunk {index} of '{file_name}': {e}",
                operation="store",
                retryable=e.retryable,
            ) from e
        finally:
            chunk_path.unlink(missing_ok=True)

        logger.info(f"Uploaded chunk {index} of {file_name} [part_id={part_id}, size={len(data)}]")
        return part_id, len(data)

    def _cleanup_parts(self, part_ids: List[str]) -> List[str]:
        """
        Remove already-stored chunks of a failed upload from the backend.

        Best effort: each id is tried once.

        Returns:
            List of part ids that could not be removed
        """
        failed = []
        for part_id in part_ids:
            try:
                self.backend.remove(part_id)
                logger.info(f"Removed orphaned chunk {part_id}")
            except VaultError as e:
                logger.error(f"Failed to remove orphaned chunk {part_id}: {e}")
                failed.append(part_id)
        return failed
