"""Project-wide constants (chunk size, root group identity, page sizes)."""

CHUNK_SIZE_BYTES: int = 25 * 1024 * 1024  # 25 MiB default chunk size

ROOT_GROUP_ID: int = 1
ROOT_GROUP_NAME: str = "uncategorized"
ROOT_PARENT_LABEL: str = "root"

LIST_PAGE_SIZE: int = 50

HASH_READ_SIZE_BYTES: int = 1024 * 1024
