"""Convert document models to and from plain YAML-friendly dicts."""

from datetime import datetime
from typing import Any

from docgen.document.identifiers import parse_section_number
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


def _dump_time(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _load_time(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _timestamps(data: dict[str, Any]) -> dict[str, datetime | None]:
    return {
        "created_at": _load_time(data.get("created_at")),
        "updated_at": _load_time(data.get("updated_at")),
    }


def section_to_dict(section: Section) -> dict[str, Any]:
    """Section metadata; the content lives in its own file."""
    return {
        "number": section.key,
        "title": section.title,
        "created_at": _dump_time(section.created_at),
        "updated_at": _dump_time(section.updated_at),
    }


def section_from_dict(data: dict[str, Any]) -> Section:
    return Section(
        number=parse_section_number(str(data["number"])),
        title=data.get("title", ""),
        **_timestamps(data),
    )


def figure_to_dict(figure: Figure) -> dict[str, Any]:
    return {
        "id": figure.id,
        "chapter": figure.chapter,
        "sequence": figure.sequence,
        "caption": figure.caption,
        "image_path": figure.image_path,
        "position": figure.position.value,
        "width": figure.width,
        "alignment": figure.alignment.value,
        "created_at": _dump_time(figure.created_at),
        "updated_at": _dump_time(figure.updated_at),
    }


def figure_from_dict(data: dict[str, Any]) -> Figure:
    # The id is derived from chapter and sequence; a stored id is informational.
    return Figure(
        chapter=int(data["chapter"]),
        sequence=int(data["sequence"]),
        caption=data.get("caption", ""),
        image_path=data.get("image_path", ""),
        position=ImagePosition(data.get("position", ImagePosition.HERE.value)),
        width=data.get("width", "") or "",
        alignment=ImageAlignment(data.get("alignment", ImageAlignment.CENTER.value)),
        **_timestamps(data),
    )


def table_to_dict(table: Table) -> dict[str, Any]:
    return {
        "id": table.id,
        "chapter": table.chapter,
        "sequence": table.sequence,
        "caption": table.caption,
        "content": table.content,
        "format": table.format,
        "created_at": _dump_time(table.created_at),
        "updated_at": _dump_time(table.updated_at),
    }


def table_from_dict(data: dict[str, Any]) -> Table:
    return Table(
        chapter=int(data["chapter"]),
        sequence=int(data["sequence"]),
        caption=data.get("caption", ""),
        content=data.get("content", ""),
        format=data.get("format", "markdown"),
        **_timestamps(data),
    )


def chapter_to_dict(chapter: Chapter) -> dict[str, Any]:
    """Chapter metadata without the materialized markdown or section bodies."""
    return {
        "number": chapter.number,
        "title": chapter.title,
        "created_at": _dump_time(chapter.created_at),
        "updated_at": _dump_time(chapter.updated_at),
        "sections": [section_to_dict(section) for section in chapter.sections],
        "figures": [figure_to_dict(figure) for figure in chapter.figures],
        "tables": [table_to_dict(table) for table in chapter.tables],
    }


def chapter_from_dict(data: dict[str, Any]) -> Chapter:
    return Chapter(
        number=int(data["number"]),
        title=data.get("title", ""),
        sections=[section_from_dict(item) for item in data.get("sections") or []],
        figures=[figure_from_dict(item) for item in data.get("figures") or []],
        tables=[table_from_dict(item) for item in data.get("tables") or []],
        **_timestamps(data),
    )


def manifest_to_dict(manifest: Manifest) -> dict[str, Any]:
    document = manifest.document
    return {
        "document": {
            "id": document.id,
            "title": document.title,
            "author": document.author,
            "type": document.type.value,
            "created_at": _dump_time(document.created_at),
            "updated_at": _dump_time(document.updated_at),
            "chapters": [
                {
                    "number": chapter.number,
                    "title": chapter.title,
                    "created_at": _dump_time(chapter.created_at),
                    "updated_at": _dump_time(chapter.updated_at),
                }
                for chapter in document.chapters
            ],
        },
        "chapters": [
            {
                "chapter": count.chapter,
                "sections": count.sections,
                "figures": count.figures,
                "tables": count.tables,
            }
            for count in manifest.chapter_counts
        ],
        "totals": {
            "sections": manifest.total_sections,
            "figures": manifest.total_figures,
            "tables": manifest.total_tables,
        },
        "created_at": _dump_time(manifest.created_at),
        "updated_at": _dump_time(manifest.updated_at),
    }


def manifest_from_dict(data: dict[str, Any]) -> Manifest:
    """Rebuild a Manifest; stored totals are ignored and recomputed from counts."""
    document_data = data.get("document") or {}
    document = Document(
        id=document_data["id"],
        title=document_data.get("title", ""),
        author=document_data.get("author", ""),
        type=DocumentType(document_data.get("type", DocumentType.BOOK.value)),
        chapters=[
            Chapter(number=int(item["number"]), title=item.get("title", ""), **_timestamps(item))
            for item in document_data.get("chapters") or []
        ],
        **_timestamps(document_data),
    )
    counts = [
        ChapterCount(
            chapter=int(item["chapter"]),
            sections=int(item.get("sections", 0)),
            figures=int(item.get("figures", 0)),
            tables=int(item.get("tables", 0)),
        )
        for item in data.get("chapters") or []
    ]
    return Manifest(document=document, chapter_counts=counts, **_timestamps(data))
