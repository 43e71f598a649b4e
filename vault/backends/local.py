"""Blob backend that keeps chunk objects as files in a local directory."""

from pathlib import Path
from typing import List, Union

from common.logging_config import get_logger
from vault.backends.base import BlobBackend
from vault.backends.snowflake import SnowflakeGenerator
from vault.exceptions import BackendError, PartNotFoundError, ValidationError

logger = get_logger(__name__)


class LocalBlobBackend(BlobBackend):
    """
    Stores each chunk as ``<blob_id>.chk`` under ``root``.

    The label is kept alongside as ``<blob_id>.label`` for inspection only.
    """

    def __init__(self, root: Union[str, Path], worker_id: int = 0):
        self.root = Path(root)
        self._ids = SnowflakeGenerator(worker_id)

    def ensure_directory(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def get_blob_path(self, blob_id: str) -> Path:
        if not blob_id.isdigit():
            raise ValidationError(f"Invalid blob id: {blob_id!r}")
        return self.root / f"{blob_id}.chk"

    def store(self, label: str, content: bytes) -> str:
        blob_id = self._ids.next_id()
        path = self.get_blob_path(blob_id)
        try:
            self.ensure_directory()
            path.write_bytes(content)
            path.with_suffix(".label").write_text(label)
        except OSError as e:
            raise BackendError(
                f"Failed to store blob '{label}': {e}", operation="store"
            ) from e

        logger.debug(f"Stored blob [blob_id={blob_id}, label={label}, size={len(content)}]")
        return blob_id

    def fetch(self, blob_id: str) -> bytes:
        path = self.get_blob_path(blob_id)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise PartNotFoundError(blob_id) from e
        except OSError as e:
            raise BackendError(
                f"Failed to read blob {blob_id}: {e}", operation="fetch", part_id=blob_id
            ) from e

    def remove(self, blob_id: str) -> None:
        path = self.get_blob_path(blob_id)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise PartNotFoundError(blob_id) from e
        except OSError as e:
            raise BackendError(
                f"Failed to remove blob {blob_id}: {e}", operation="remove", part_id=blob_id
            ) from e
        path.with_suffix(".label").unlink(missing_ok=True)

    def exists(self, blob_id: str) -> bool:
        return self.get_blob_path(blob_id).exists()

    def list_blobs(self) -> List[str]:
        if not self.root.exists():
            return []
        return sorted(path.stem for path in self.root.glob("*.chk"))

    def ping(self) -> bool:
        self.ensure_directory()
        return self.root.is_dir()
