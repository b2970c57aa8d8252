"""Data models for documents, chapters, sections, figures and tables."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

# A section number such as (1, 2, 1) for "1.2.1"; the first part is the chapter.
SectionNumber = tuple[int, ...]

MAX_SECTION_LEVEL = 6


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


class DocumentType(Enum):
    """Kind of document being written."""

    BOOK = "book"
    REPORT = "report"
    ARTICLE = "article"
    LETTER = "letter"


class ImagePosition(Enum):
    """Placement hint for a figure."""

    HERE = "here"
    TOP = "top"
    BOTTOM = "bottom"
    PAGE = "page"
    FLOAT = "float"


class ImageAlignment(Enum):
    """Horizontal alignment of a figure."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


def format_section_number(number: SectionNumber) -> str:
    """Dot-join a section number, e.g. (1, 2, 1) -> "1.2.1"."""
    return ".".join(str(part) for part in number)


def format_figure_id(chapter: int, sequence: int) -> str:
    """Build a figure identifier like "fig-2.3"."""
    return f"fig-{chapter}.{sequence}"


def format_table_id(chapter: int, sequence: int) -> str:
    """Build a table identifier like "table-2.3"."""
    return f"table-{chapter}.{sequence}"


@dataclass
class Section:
    """A titled unit of content nested under a chapter."""

    number: SectionNumber
    title: str
    content: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def level(self) -> int:
        """Nesting level: 1 for "1.1", 2 for "1.1.1", and so on."""
        return len(self.number) - 1

    @property
    def key(self) -> str:
        """Dotted number string, also used as the section's storage key."""
        return format_section_number(self.number)

    @property
    def full_title(self) -> str:
        """Number and title, e.g. "1.2 Methods"."""
        return f"{self.key} {self.title}"


@dataclass
class Figure:
    """An image figure owned by a chapter."""

    chapter: int
    sequence: int
    caption: str
    image_path: str
    position: ImagePosition = ImagePosition.HERE
    width: str = ""
    alignment: ImageAlignment = ImageAlignment.CENTER
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def id(self) -> str:
        return format_figure_id(self.chapter, self.sequence)


@dataclass
class Table:
    """A markdown table owned by a chapter."""

    chapter: int
    sequence: int
    caption: str
    content: str
    format: str = "markdown"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def id(self) -> str:
        return format_table_id(self.chapter, self.sequence)


@dataclass
class ChapterCount:
    """Number of sections, figures and tables held by one chapter."""

    chapter: int
    sections: int = 0
    figures: int = 0
    tables: int = 0


@dataclass
class Chapter:
    """A numbered top-level unit of a document."""

    number: int
    title: str
    content: str = ""  # materialized markdown, stored apart from metadata
    sections: list[Section] = field(default_factory=list)
    figures: list[Figure] = field(default_factory=list)
    tables: list[Table] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def find_section(self, number: SectionNumber) -> Section | None:
        """Find a section by exact number equality."""
        number = tuple(number)
        for section in self.sections:
            if section.number == number:
                return section
        return None

    def find_figure(self, figure_id: str) -> Figure | None:
        for figure in self.figures:
            if figure.id == figure_id:
                return figure
        return None

    def find_table(self, table_id: str) -> Table | None:
        for table in self.tables:
            if table.id == table_id:
                return table
        return None

    @property
    def section_numbers(self) -> list[SectionNumber]:
        return [section.number for section in self.sections]

    def counts(self) -> ChapterCount:
        """Summarize this chapter for the manifest."""
        return ChapterCount(
            chapter=self.number,
            sections=len(self.sections),
            figures=len(self.figures),
            tables=len(self.tables),
        )

    def touch(self) -> None:
        self.updated_at = utc_now()


@dataclass
class Document:
    """A complete document: metadata plus its ordered chapters."""

    id: str
    title: str
    author: str
    type: DocumentType = DocumentType.BOOK
    created_at: datetime | None = None
    updated_at: datetime | None = None
    chapters: list[Chapter] = field(default_factory=list)

    def get_chapter(self, number: int) -> Chapter | None:
        for chapter in self.chapters:
            if chapter.number == number:
                return chapter
        return None


@dataclass
class Manifest:
    """Denormalized structural summary of a document.

    ``document.chapters`` holds chapter summaries (number and title only);
    ``chapter_counts`` is kept in chapter order.
    """

    document: Document
    chapter_counts: list[ChapterCount] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def chapter_numbers(self) -> list[int]:
        return [chapter.number for chapter in self.document.chapters]

    def count_for(self, chapter_number: int) -> ChapterCount | None:
        for count in self.chapter_counts:
            if count.chapter == chapter_number:
                return count
        return None

    @property
    def total_sections(self) -> int:
        return sum(count.sections for count in self.chapter_counts)

    @property
    def total_figures(self) -> int:
        return sum(count.figures for count in self.chapter_counts)

    @property
    def total_tables(self) -> int:
        return sum(count.tables for count in self.chapter_counts)

    def summarize(self, chapters: list[Chapter]) -> None:
        """Replace chapter summaries and counts from authoritative chapters.

        Args:
            chapters: Chapters in document order, with sections/figures/tables
                loaded.
        """
        ordered = sorted(chapters, key=lambda chapter: chapter.number)
        self.document.chapters = [
            Chapter(
                number=chapter.number,
                title=chapter.title,
                created_at=chapter.created_at,
                updated_at=chapter.updated_at,
            )
            for chapter in ordered
        ]
        self.chapter_counts = [chapter.counts() for chapter in ordered]
        self.updated_at = utc_now()
        self.document.updated_at = self.updated_at
