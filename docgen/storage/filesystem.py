"""Filesystem storage: one directory per document and chapter, YAML metadata.

Layout under the configured root directory:

    <doc-id>/manifest.yaml
    <doc-id>/assets/images/
    <doc-id>/chapters/<NN>/metadata.yaml
    <doc-id>/chapters/<NN>/chapter.md
    <doc-id>/chapters/<NN>/sections/<dotted-number>.md

Every file is written atomically (temp file + rename).
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Any

import yaml

from docgen.config import CONFIG_DIR_NAME, DocgenConfig, atomic_write
from docgen.document.models import Chapter, Manifest, SectionNumber, format_section_number
from docgen.errors import NotFoundError, ValidationFailedError
from docgen.storage.base import DocumentStorage
from docgen.storage.serialization import (
    chapter_from_dict,
    chapter_to_dict,
    manifest_from_dict,
    manifest_to_dict,
)

logger = logging.getLogger(__name__)


def _dump_yaml(path: Path, data: dict[str, Any]) -> None:
    text = yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
    atomic_write(path, text.encode("utf-8"))


def _load_yaml(path: Path, kind: str, key: Any) -> dict[str, Any]:
    if not path.exists():
        raise NotFoundError(f"{kind} not found: {path}", kind=kind, key=key)
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _read_text(path: Path, kind: str, key: Any) -> str:
    if not path.exists():
        raise NotFoundError(f"{kind} not found: {path}", kind=kind, key=key)
    return path.read_text(encoding="utf-8")


class FileSystemStorage(DocumentStorage):
    """Document storage on the local filesystem."""

    def __init__(self, config: DocgenConfig):
        self.config = config

    @property
    def root_dir(self) -> Path:
        return self.config.root_dir

    # Documents

    def create_document(self, document_id: str) -> None:
        path = self.config.document_path(document_id)
        self.config.chapters_path(document_id).mkdir(parents=True, exist_ok=True)
        self.config.assets_path(document_id).mkdir(parents=True, exist_ok=True)
        logger.debug("Created document directory %s", path)

    def document_exists(self, document_id: str) -> bool:
        return self.config.manifest_path(document_id).exists()

    def delete_document(self, document_id: str) -> None:
        path = self.config.document_path(document_id)
        if not path.exists():
            raise NotFoundError(f"document not found: {document_id}", kind="document", key=document_id)
        shutil.rmtree(path)
        logger.debug("Removed document directory %s", path)

    def list_documents(self) -> list[str]:
        if not self.root_dir.exists():
            return []
        return sorted(
            entry.name
            for entry in self.root_dir.iterdir()
            if entry.is_dir()
            and entry.name != CONFIG_DIR_NAME
            and self.config.manifest_path(entry.name).exists()
        )

    # Chapters

    def create_chapter(self, document_id: str, chapter_number: int) -> None:
        path = self.config.chapter_path(document_id, chapter_number)
        if path.exists():
            raise ValidationFailedError(
                f"chapter {chapter_number} already exists in storage",
                kind="chapter",
                key=chapter_number,
            )
        self.config.sections_path(document_id, chapter_number).mkdir(parents=True)

    def chapter_exists(self, document_id: str, chapter_number: int) -> bool:
        return self.config.chapter_path(document_id, chapter_number).is_dir()

    def delete_chapter(self, document_id: str, chapter_number: int) -> None:
        path = self.config.chapter_path(document_id, chapter_number)
        if not path.is_dir():
            raise NotFoundError(
                f"chapter {chapter_number} not found in {document_id}",
                kind="chapter",
                key=chapter_number,
            )
        shutil.rmtree(path)

    def rename_chapter(self, document_id: str, old_number: int, new_number: int) -> None:
        old_path = self.config.chapter_path(document_id, old_number)
        new_path = self.config.chapter_path(document_id, new_number)
        if not old_path.is_dir():
            raise NotFoundError(
                f"chapter {old_number} not found in {document_id}", kind="chapter", key=old_number
            )
        if new_path.exists():
            raise ValidationFailedError(
                f"cannot move chapter {old_number}: chapter {new_number} already exists",
                kind="chapter",
                key=new_number,
            )
        os.replace(old_path, new_path)
        logger.debug("Renamed chapter directory %s -> %s", old_path.name, new_path.name)

    def list_chapters(self, document_id: str) -> list[int]:
        chapters_path = self.config.chapters_path(document_id)
        if not chapters_path.exists():
            return []
        return sorted(
            int(entry.name)
            for entry in chapters_path.iterdir()
            if entry.is_dir() and entry.name.isascii() and entry.name.isdigit()
        )

    def save_chapter_metadata(self, document_id: str, chapter: Chapter) -> None:
        _dump_yaml(
            self.config.chapter_metadata_path(document_id, chapter.number),
            chapter_to_dict(chapter),
        )

    def load_chapter_metadata(self, document_id: str, chapter_number: int) -> Chapter:
        data = _load_yaml(
            self.config.chapter_metadata_path(document_id, chapter_number),
            "chapter",
            chapter_number,
        )
        return chapter_from_dict(data)

    def save_chapter_content(self, document_id: str, chapter_number: int, content: str) -> None:
        atomic_write(
            self.config.chapter_content_path(document_id, chapter_number), content.encode("utf-8")
        )

    def load_chapter_content(self, document_id: str, chapter_number: int) -> str:
        return _read_text(
            self.config.chapter_content_path(document_id, chapter_number),
            "chapter content",
            chapter_number,
        )

    # Sections

    def _section_path(self, document_id: str, chapter_number: int, number: SectionNumber) -> Path:
        return self.config.section_path(document_id, chapter_number, format_section_number(number))

    def save_section_content(
        self, document_id: str, chapter_number: int, number: SectionNumber, content: str
    ) -> None:
        atomic_write(self._section_path(document_id, chapter_number, number), content.encode("utf-8"))

    def load_section_content(
        self, document_id: str, chapter_number: int, number: SectionNumber
    ) -> str:
        return _read_text(
            self._section_path(document_id, chapter_number, number),
            "section",
            format_section_number(number),
        )

    def delete_section_content(
        self, document_id: str, chapter_number: int, number: SectionNumber
    ) -> None:
        path = self._section_path(document_id, chapter_number, number)
        if not path.exists():
            raise NotFoundError(
                f"section file not found: {path}", kind="section", key=format_section_number(number)
            )
        path.unlink()

    def rename_section_content(
        self,
        document_id: str,
        chapter_number: int,
        old_number: SectionNumber,
        new_number: SectionNumber,
    ) -> None:
        old_path = self._section_path(document_id, chapter_number, old_number)
        new_path = self._section_path(document_id, chapter_number, new_number)
        if not old_path.exists():
            raise NotFoundError(
                f"section file not found: {old_path}",
                kind="section",
                key=format_section_number(old_number),
            )
        if new_path.exists():
            raise ValidationFailedError(
                f"section file already exists: {new_path}",
                kind="section",
                key=format_section_number(new_number),
            )
        os.replace(old_path, new_path)
        logger.debug("Renamed section file %s -> %s", old_path.name, new_path.name)

    # Manifest

    def save_manifest(self, document_id: str, manifest: Manifest) -> None:
        _dump_yaml(self.config.manifest_path(document_id), manifest_to_dict(manifest))

    def load_manifest(self, document_id: str) -> Manifest:
        data = _load_yaml(self.config.manifest_path(document_id), "document", document_id)
        return manifest_from_dict(data)

    # Assets

    def asset_exists(self, document_id: str, image_path: str) -> bool:
        path = Path(image_path).expanduser()
        if not path.is_absolute():
            path = self.config.assets_path(document_id) / path
        return path.is_file()
