"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from docgen.config import DocgenConfig
from docgen.document.manager import DocumentManager
from docgen.storage.filesystem import FileSystemStorage


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host configuration out of tests."""
    monkeypatch.delenv("DOCGEN_ROOT_DIR", raising=False)
    monkeypatch.delenv("DOCGEN_MAX_DOCUMENTS", raising=False)


@pytest.fixture
def config(tmp_path: Path) -> DocgenConfig:
    """Configuration rooted in a temporary directory."""
    return DocgenConfig(root_dir=tmp_path / "documents")


@pytest.fixture
def storage(config: DocgenConfig) -> FileSystemStorage:
    return FileSystemStorage(config)


@pytest.fixture
def manager(storage: FileSystemStorage, config: DocgenConfig) -> DocumentManager:
    return DocumentManager(storage, config)


@pytest.fixture
def document_id(manager: DocumentManager) -> str:
    """An empty book ready for chapters."""
    return manager.create_document("Field Guide", "A. Writer", "book")
