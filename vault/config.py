"""Configuration settings for the vault, read from the environment."""

import os

from common.constants import CHUNK_SIZE_BYTES


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


DATABASE_PATH = os.environ.get("VAULT_DATABASE_PATH", "data/db.sqlite3")

OUTPUT_DIR = os.environ.get("VAULT_OUTPUT_DIR", "out")

# None means the system temp directory
STAGING_DIR = os.environ.get("VAULT_STAGING_DIR") or None

CHUNK_SIZE = int(os.environ.get("VAULT_CHUNK_SIZE_BYTES", str(CHUNK_SIZE_BYTES)))

BLOB_BACKEND = os.environ.get("VAULT_BLOB_BACKEND", "local")

BLOB_STORAGE_PATH = os.environ.get("VAULT_BLOB_STORAGE_PATH", "data/blobs")

BLOB_BACKEND_URL = os.environ.get("VAULT_BLOB_BACKEND_URL", "http://localhost:8080")

BLOB_BACKEND_TOKEN = os.environ.get("VAULT_BLOB_BACKEND_TOKEN")

BLOB_TIMEOUT_SECONDS = float(os.environ.get("VAULT_BLOB_TIMEOUT_SECONDS", "60"))

TRANSFER_WORKERS = int(os.environ.get("VAULT_TRANSFER_WORKERS", "1"))

VERIFY_DOWNLOADS = _env_bool("VAULT_VERIFY_DOWNLOADS", False)

VAULT_HOST = os.environ.get("VAULT_HOST", "127.0.0.1")

VAULT_PORT = int(os.environ.get("VAULT_PORT", "8000"))
