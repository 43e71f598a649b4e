"""Custom exception classes for the vault."""

from typing import Optional


class VaultError(Exception):
    """
    Base exception class for all vault errors.
    """
    pass


class ValidationError(VaultError):
    """
    Raised for bad identifiers, missing groups or malformed names.
    """
    pass


class AlreadyExistsError(ValidationError):
    """
    Raised when creating a group whose name is already taken.
    """
    pass


class RootGroupError(ValidationError):
    """
    Raised when attempting to delete or re-parent the root group.
    """
    pass


class GroupCycleError(ValidationError):
    """
    Raised when a parent assignment would make a group its own ancestor.
    """
    pass


class NotFoundError(VaultError):
    """
    Raised when a file, group or part does not exist.
    """
    pass


class FileNotFoundInStoreError(NotFoundError):
    """
    Raised when a file id has no row in the metadata store.
    """

    def __init__(self, file_id: int):
        super().__init__(f"File {file_id} not found")
        self.file_id = file_id


class GroupNotFoundError(NotFoundError):
    """
    Raised when a group name or id cannot be resolved.
    """

    def __init__(self, group: object):
        super().__init__(f"Group '{group}' not found")
        self.group = group


class PartNotFoundError(NotFoundError):
    """
    Raised when the blob backend has no object for a part id.
    """

    def __init__(self, part_id: str):
        super().__init__(f"Part {part_id} not found on blob backend")
        self.part_id = part_id


class BackendError(VaultError):
    """
    Raised when the blob backend fails to store, fetch or remove a chunk.

    ``retryable`` separates transient failures (timeouts, connection drops,
    5xx) from terminal ones (authentication, rejected requests). Callers
    decide whether to retry; the vault itself never does.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        part_id: Optional[str] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.operation = operation
        self.part_id = part_id
        self.retryable = retryable


class StoreError(VaultError):
    """
    Raised when the metadata store reports a constraint violation or I/O failure.
    """
    pass


class ChecksumMismatchError(VaultError):
    """
    Raised when a reassembled file does not match its stored content hash.
    """

    def __init__(self, file_id: int, expected: str, actual: str):
        super().__init__(
            f"Checksum mismatch for file {file_id}: expected {expected}, got {actual}"
        )
        self.file_id = file_id
        self.expected = expected
        self.actual = actual


class SourceReadError(VaultError):
    """
    Raised when an upload source or staging file cannot be read or written.
    """
    pass
