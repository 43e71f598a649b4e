"""Delete service: remove a file's parts from the backend and the store."""

from common.logging_config import get_logger
from vault.backends.base import BlobBackend
from vault.database import MetadataStore
from vault.exceptions import BackendError, FileNotFoundInStoreError, PartNotFoundError
from vault.repositories.file_repository import FileRepository
from vault.repositories.part_repository import PartRepository

logger = get_logger(__name__)


class DeleteService:
    """
    Deletes parts one at a time, in upload order, then the file row.

    Each part is removed from the backend first and its row only afterwards.
    There is no compensation: if the backend fails on part k, parts before k
    are gone from both sides, part k onward and the file row stay in the
    store, and the error names part k. A part the backend no longer has
    stops the delete the same way, raised as ``PartNotFoundError``.
    """

    def __init__(self, store: MetadataStore, backend: BlobBackend):
        self.store = store
        self.backend = backend
        self.file_repo = FileRepository(store)
        self.part_repo = PartRepository(store)

    def delete(self, file_id: int) -> None:
        file = self.file_repo.get_by_id(file_id)
        if file is None:
            raise FileNotFoundInStoreError(file_id)

        part_ids = self.part_repo.get_part_ids(file_id)
        logger.info(f"Deleting file {file_id} ({file.name}) with {len(part_ids)} parts")

        for part_id in part_ids:
            try:
                self.backend.remove(part_id)
            except PartNotFoundError:
                logger.error(f"Part {part_id} of file {file_id} is missing from the backend")
                raise
            except BackendError as e:
                logger.error(f"Failed to delete part {part_id} of file {file_id}: {e}")
                raise BackendError(
                    f"Failed to delete part {part_id} of file {file_id}: {e}",
                    operation="remove",
                    part_id=part_id,
                    retryable=e.retryable,
                ) from e
            logger.info(f"Deleted part {part_id} from backend")

            self.part_repo.delete_part(part_id)
            logger.info(f"Deleted part {part_id} from database")

        self.file_repo.delete_file(file_id)
        logger.info(f"Deleted file ID {file_id} from database")
