"""Shared pytest fixtures for all tests."""

import os
from pathlib import Path

import pytest

from tests.fakes import TEST_CHUNK_SIZE
from vault.backends.memory import MemoryBlobBackend
from vault.database import MetadataStore
from vault.vault import Vault


@pytest.fixture
def store(tmp_path):
    """
    Fresh metadata store backed by a temporary SQLite file.
    """
    metadata_store = MetadataStore(tmp_path / "data" / "db.sqlite3").init()
    yield metadata_store
    metadata_store.close()


@pytest.fixture
def backend():
    return MemoryBlobBackend()


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "out"


@pytest.fixture
def make_vault(store, output_dir, tmp_path):
    """
    Factory for a Vault over the shared store with a small chunk size.
    """
    staging = tmp_path / "staging"
    staging.mkdir()

    def _make(backend=None, chunk_size=TEST_CHUNK_SIZE, **kwargs):
        return Vault(
            store,
            backend if backend is not None else MemoryBlobBackend(),
            chunk_size=chunk_size,
            output_dir=str(output_dir),
            staging_dir=str(staging),
            **kwargs
        )

    return _make


@pytest.fixture
def vault(make_vault, backend):
    return make_vault(backend)


@pytest.fixture
def make_source(tmp_path):
    """
    Write a source file of ``size`` pseudo-random bytes and return its path.
    """
    source_dir = tmp_path / "sources"
    source_dir.mkdir()

    def _make(size: int, name: str = "source.bin") -> Path:
        path = source_dir / name
        path.write_bytes(os.urandom(size))
        return path

    return _make
