"""Tests for filesystem storage."""

from datetime import UTC, datetime

import pytest
import yaml

from docgen.config import DocgenConfig
from docgen.document.models import (
    Chapter,
    Document,
    DocumentType,
    Figure,
    ImageAlignment,
    ImagePosition,
    Manifest,
    Section,
    Table,
)
from docgen.errors import NotFoundError, ValidationFailedError
from docgen.storage.filesystem import FileSystemStorage

DOC = "guide"


@pytest.fixture
def doc_storage(storage: FileSystemStorage) -> FileSystemStorage:
    """Storage with one document holding a manifest."""
    storage.create_document(DOC)
    storage.save_manifest(DOC, Manifest(document=Document(id=DOC, title="Guide", author="A")))
    return storage


class TestDocuments:
    """Tests for document-level storage."""

    def test_create_makes_layout(self, storage, config):
        """Creating a document makes the chapters and assets directories."""
        storage.create_document(DOC)
        assert config.chapters_path(DOC).is_dir()
        assert config.assets_path(DOC).is_dir()

    def test_document_needs_manifest_to_exist(self, storage):
        """A directory without a manifest is not a document."""
        storage.create_document(DOC)
        assert not storage.document_exists(DOC)
        assert storage.list_documents() == []

    def test_list_documents(self, doc_storage, config):
        """Only directories with a manifest are listed."""
        (config.root_dir / "stray-dir").mkdir()
        (config.root_dir / ".docgen").mkdir()
        assert doc_storage.list_documents() == [DOC]

    def test_list_documents_without_root(self, storage):
        """A missing root lists nothing."""
        assert storage.list_documents() == []

    def test_delete_document(self, doc_storage, config):
        """Deleting removes the document directory."""
        doc_storage.delete_document(DOC)
        assert not config.document_path(DOC).exists()

    def test_delete_missing_document(self, storage):
        """Deleting an unknown document raises NotFoundError."""
        with pytest.raises(NotFoundError):
            storage.delete_document("nope")


class TestManifest:
    """Tests for manifest persistence."""

    def test_round_trip(self, doc_storage):
        """A saved manifest loads back with the same values."""
        created = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
        manifest = Manifest(
            document=Document(
                id=DOC, title="Guide", author="A", type=DocumentType.REPORT, created_at=created
            ),
            created_at=created,
        )
        manifest.summarize([Chapter(number=1, title="One", sections=[Section((1, 1), "s")])])
        doc_storage.save_manifest(DOC, manifest)

        loaded = doc_storage.load_manifest(DOC)
        assert loaded.document.type is DocumentType.REPORT
        assert loaded.document.created_at == created
        assert loaded.chapter_numbers == [1]
        assert loaded.count_for(1).sections == 1
        assert loaded.total_sections == 1

    def test_yaml_layout(self, doc_storage, config):
        """The manifest YAML keeps its key order."""
        data = yaml.safe_load(config.manifest_path(DOC).read_text())
        assert list(data) == ["document", "chapters", "totals", "created_at", "updated_at"]
        assert data["document"]["id"] == DOC

    def test_missing_manifest(self, storage):
        """A missing manifest raises NotFoundError."""
        with pytest.raises(NotFoundError):
            storage.load_manifest("nope")


class TestChapters:
    """Tests for chapter storage."""

    def test_create_and_list(self, doc_storage, config):
        """Chapters list in numeric order with padded directories."""
        doc_storage.create_chapter(DOC, 2)
        doc_storage.create_chapter(DOC, 1)
        assert doc_storage.list_chapters(DOC) == [1, 2]
        assert (config.chapters_path(DOC) / "02" / "sections").is_dir()

    def test_create_existing_chapter_fails(self, doc_storage):
        """Creating an existing chapter is rejected."""
        doc_storage.create_chapter(DOC, 1)
        with pytest.raises(ValidationFailedError):
            doc_storage.create_chapter(DOC, 1)

    def test_metadata_round_trip(self, doc_storage, config):
        """Metadata round-trips without section content."""
        doc_storage.create_chapter(DOC, 1)
        chapter = Chapter(
            number=1,
            title="One",
            sections=[Section((1, 1), "Intro", content="not stored here"), Section((1, 1, 1), "Sub")],
            figures=[
                Figure(1, 1, "Map", "map.png", ImagePosition.TOP, "80%", ImageAlignment.LEFT)
            ],
            tables=[Table(1, 1, "Data", "| a |\n|---|\n| 1 |")],
        )
        doc_storage.save_chapter_metadata(DOC, chapter)

        loaded = doc_storage.load_chapter_metadata(DOC, 1)
        assert [s.number for s in loaded.sections] == [(1, 1), (1, 1, 1)]
        assert loaded.sections[0].content == ""
        assert loaded.figures[0].id == "fig-1.1"
        assert loaded.figures[0].position is ImagePosition.TOP
        assert loaded.figures[0].alignment is ImageAlignment.LEFT
        assert loaded.figures[0].width == "80%"
        assert loaded.tables[0].content == "| a |\n|---|\n| 1 |"

        raw = config.chapter_metadata_path(DOC, 1).read_text()
        assert "not stored here" not in raw

    def test_missing_metadata(self, doc_storage):
        """Missing metadata raises NotFoundError."""
        with pytest.raises(NotFoundError):
            doc_storage.load_chapter_metadata(DOC, 5)

    def test_content_round_trip(self, doc_storage):
        """Chapter markdown round-trips."""
        doc_storage.create_chapter(DOC, 1)
        doc_storage.save_chapter_content(DOC, 1, "# Chapter 1: One\n\n")
        assert doc_storage.load_chapter_content(DOC, 1) == "# Chapter 1: One\n\n"

    def test_missing_content(self, doc_storage):
        """Missing chapter markdown raises NotFoundError."""
        doc_storage.create_chapter(DOC, 1)
        with pytest.raises(NotFoundError):
            doc_storage.load_chapter_content(DOC, 1)

    def test_rename_moves_everything(self, doc_storage):
        """Renaming a chapter moves its content and sections."""
        doc_storage.create_chapter(DOC, 1)
        doc_storage.save_chapter_content(DOC, 1, "body")
        doc_storage.save_section_content(DOC, 1, (1, 1), "section")
        doc_storage.rename_chapter(DOC, 1, 3)

        assert doc_storage.list_chapters(DOC) == [3]
        assert doc_storage.load_chapter_content(DOC, 3) == "body"
        assert doc_storage.load_section_content(DOC, 3, (1, 1)) == "section"

    def test_rename_onto_existing_fails(self, doc_storage):
        """Renaming onto an existing chapter is rejected."""
        doc_storage.create_chapter(DOC, 1)
        doc_storage.create_chapter(DOC, 2)
        with pytest.raises(ValidationFailedError):
            doc_storage.rename_chapter(DOC, 1, 2)

    def test_rename_missing_fails(self, doc_storage):
        """Renaming a missing chapter raises NotFoundError."""
        with pytest.raises(NotFoundError):
            doc_storage.rename_chapter(DOC, 4, 5)

    def test_delete(self, doc_storage):
        """A deleted chapter is gone and cannot be deleted again."""
        doc_storage.create_chapter(DOC, 1)
        doc_storage.delete_chapter(DOC, 1)
        assert not doc_storage.chapter_exists(DOC, 1)
        with pytest.raises(NotFoundError):
            doc_storage.delete_chapter(DOC, 1)

    def test_chapter_dir_width(self, tmp_path):
        """The directory width pads chapter numbers."""
        config = DocgenConfig(root_dir=tmp_path, chapter_dir_width=3)
        assert config.chapter_path(DOC, 7).name == "007"


class TestSections:
    """Tests for section file storage."""

    def test_section_file_named_by_number(self, doc_storage, config):
        """Section files are named by their dotted number."""
        doc_storage.create_chapter(DOC, 1)
        doc_storage.save_section_content(DOC, 1, (1, 2, 1), "text")
        assert config.section_path(DOC, 1, "1.2.1").read_text() == "text"

    def test_rename(self, doc_storage):
        """Renaming moves the section content."""
        doc_storage.create_chapter(DOC, 1)
        doc_storage.save_section_content(DOC, 1, (1, 3), "three")
        doc_storage.rename_section_content(DOC, 1, (1, 3), (1, 2))
        assert doc_storage.load_section_content(DOC, 1, (1, 2)) == "three"
        with pytest.raises(NotFoundError):
            doc_storage.load_section_content(DOC, 1, (1, 3))

    def test_rename_onto_existing_fails(self, doc_storage):
        """Renaming onto an existing section is rejected."""
        doc_storage.create_chapter(DOC, 1)
        doc_storage.save_section_content(DOC, 1, (1, 1), "a")
        doc_storage.save_section_content(DOC, 1, (1, 2), "b")
        with pytest.raises(ValidationFailedError):
            doc_storage.rename_section_content(DOC, 1, (1, 2), (1, 1))

    def test_delete(self, doc_storage):
        """A deleted section cannot be deleted again."""
        doc_storage.create_chapter(DOC, 1)
        doc_storage.save_section_content(DOC, 1, (1, 1), "a")
        doc_storage.delete_section_content(DOC, 1, (1, 1))
        with pytest.raises(NotFoundError):
            doc_storage.delete_section_content(DOC, 1, (1, 1))

    def test_unicode_content(self, doc_storage):
        """Section content is stored as UTF-8."""
        doc_storage.create_chapter(DOC, 1)
        doc_storage.save_section_content(DOC, 1, (1, 1), "Ünïcode ✓ ß")
        assert doc_storage.load_section_content(DOC, 1, (1, 1)) == "Ünïcode ✓ ß"


class TestAssets:
    """Tests for asset lookup."""

    def test_relative_path_resolves_in_assets(self, doc_storage, config):
        """Relative image paths resolve in the assets directory."""
        (config.assets_path(DOC) / "map.png").write_bytes(b"png")
        assert doc_storage.asset_exists(DOC, "map.png")
        assert not doc_storage.asset_exists(DOC, "other.png")

    def test_absolute_path(self, doc_storage, tmp_path):
        """Absolute image paths are checked as given."""
        image = tmp_path / "abs.png"
        image.write_bytes(b"png")
        assert doc_storage.asset_exists(DOC, str(image))
