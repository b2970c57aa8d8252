"""Document model, numbering engine, rebuilder and validation."""

from docgen.document.models import (
    Chapter,
    ChapterCount,
    Document,
    DocumentType,
    Figure,
    ImageAlignment,
    ImagePosition,
    Manifest,
    Section,
    Table,
)
from docgen.document.rebuild import rebuild_chapter_markdown
from docgen.document.validation import StructureIssue, ValidationReport, validate_structure

__all__ = [
    "Chapter",
    "ChapterCount",
    "Document",
    "DocumentType",
    "Figure",
    "ImageAlignment",
    "ImagePosition",
    "Manifest",
    "Section",
    "StructureIssue",
    "Table",
    "ValidationReport",
    "rebuild_chapter_markdown",
    "validate_structure",
]
