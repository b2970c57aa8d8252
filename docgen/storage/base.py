"""Abstract persistence port for documents.

The document manager only talks to storage through this interface, so an
in-memory or database backend can replace the filesystem one.
"""

from abc import ABC, abstractmethod

from docgen.document.models import Chapter, Manifest, SectionNumber


class DocumentStorage(ABC):
    """Storage keyed by document id, chapter number and section number.

    Load methods raise ``NotFoundError`` when the requested item is absent.
    """

    # Documents

    @abstractmethod
    def create_document(self, document_id: str) -> None:
        """Create the empty storage area for a document."""

    @abstractmethod
    def document_exists(self, document_id: str) -> bool: ...

    @abstractmethod
    def delete_document(self, document_id: str) -> None:
        """Remove a document and everything it holds."""

    @abstractmethod
    def list_documents(self) -> list[str]:
        """Ids of every stored document, sorted."""

    # Chapters

    @abstractmethod
    def create_chapter(self, document_id: str, chapter_number: int) -> None: ...

    @abstractmethod
    def chapter_exists(self, document_id: str, chapter_number: int) -> bool: ...

    @abstractmethod
    def delete_chapter(self, document_id: str, chapter_number: int) -> None: ...

    @abstractmethod
    def rename_chapter(self, document_id: str, old_number: int, new_number: int) -> None:
        """Move a chapter's whole storage area in one step.

        Raises:
            NotFoundError: If the old chapter does not exist.
            ValidationFailedError: If the new chapter number is occupied.
        """

    @abstractmethod
    def list_chapters(self, document_id: str) -> list[int]:
        """Chapter numbers present in storage, ascending."""

    @abstractmethod
    def save_chapter_metadata(self, document_id: str, chapter: Chapter) -> None:
        """Persist a chapter's title, section list, figures and tables.

        Section contents and the chapter markdown are stored separately.
        """

    @abstractmethod
    def load_chapter_metadata(self, document_id: str, chapter_number: int) -> Chapter:
        """Load a chapter without section contents or chapter markdown."""

    @abstractmethod
    def save_chapter_content(self, document_id: str, chapter_number: int, content: str) -> None: ...

    @abstractmethod
    def load_chapter_content(self, document_id: str, chapter_number: int) -> str: ...

    # Sections

    @abstractmethod
    def save_section_content(
        self, document_id: str, chapter_number: int, number: SectionNumber, content: str
    ) -> None: ...

    @abstractmethod
    def load_section_content(
        self, document_id: str, chapter_number: int, number: SectionNumber
    ) -> str: ...

    @abstractmethod
    def delete_section_content(
        self, document_id: str, chapter_number: int, number: SectionNumber
    ) -> None: ...

    @abstractmethod
    def rename_section_content(
        self,
        document_id: str,
        chapter_number: int,
        old_number: SectionNumber,
        new_number: SectionNumber,
    ) -> None: ...

    # Manifest

    @abstractmethod
    def save_manifest(self, document_id: str, manifest: Manifest) -> None: ...

    @abstractmethod
    def load_manifest(self, document_id: str) -> Manifest: ...

    # Assets

    @abstractmethod
    def asset_exists(self, document_id: str, image_path: str) -> bool:
        """Whether a figure's image file can be found.

        Relative paths are looked up in the document's image assets directory.
        """
