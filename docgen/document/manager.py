"""Structural mutations on documents: chapters, sections, figures and tables.

Every operation validates its inputs and the current state before touching
storage, then persists the affected chapter and refreshes the manifest.
Renumbering is planned up front by the numbering engine and applied as an
ordered series of renames.
"""

import logging
from collections.abc import Iterable
from enum import Enum
from typing import TypeVar

from docgen.config import DocgenConfig
from docgen.document.identifiers import (
    generate_document_id,
    parse_figure_id,
    parse_section_number,
    parse_table_id,
    validate_document_id,
    validate_section_number,
)
from docgen.document.lint import MarkdownLinter
from docgen.document.models import (
    Chapter,
    Document,
    DocumentType,
    Figure,
    ImageAlignment,
    ImagePosition,
    Manifest,
    Section,
    SectionNumber,
    Table,
    format_section_number,
    utc_now,
)
from docgen.document.numbering import (
    descendants_of,
    next_section_number,
    next_sequence,
    order_renames,
    plan_chapter_reorder,
    plan_chapter_shift,
    relabel_section_number,
    renumber_after_section_delete,
    renumber_sequence_after_delete,
    validate_level,
)
from docgen.document.rebuild import rebuild_chapter_markdown
from docgen.document.validation import (
    WARNING,
    StructureIssue,
    ValidationReport,
    validate_structure,
)
from docgen.errors import (
    DocgenError,
    LimitExceededError,
    NotFoundError,
    ValidationFailedError,
)
from docgen.storage.base import DocumentStorage

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _require_text(value: str | None, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationFailedError(f"{field_name} is required", kind="field", key=field_name)
    return value


def _parse_enum(enum_cls: type[E], value: E | str, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ValidationFailedError(
            f"invalid {field_name}: '{value}' (expected one of: {choices})",
            kind="field",
            key=field_name,
        ) from None


def _coerce_section_number(number: SectionNumber | str) -> SectionNumber:
    if isinstance(number, str):
        return parse_section_number(number)
    return validate_section_number(number)


class DocumentManager:
    """Creates, reads and restructures documents held in a DocumentStorage."""

    def __init__(self, storage: DocumentStorage, config: DocgenConfig | None = None):
        self.storage = storage
        self.config = config or DocgenConfig()
        self._linter: MarkdownLinter | None = None

    @property
    def linter(self) -> MarkdownLinter:
        if self._linter is None:
            self._linter = MarkdownLinter()
        return self._linter

    # Internal helpers

    def _require_document(self, document_id: str) -> Manifest:
        validate_document_id(document_id)
        if not self.storage.document_exists(document_id):
            raise NotFoundError(
                f"document not found: {document_id}", kind="document", key=document_id
            )
        return self.storage.load_manifest(document_id)

    def _require_chapter_number(self, manifest: Manifest, chapter_number: int) -> int:
        if chapter_number not in manifest.chapter_numbers:
            raise NotFoundError(
                f"chapter {chapter_number} not found in {manifest.document.id}",
                kind="chapter",
                key=chapter_number,
            )
        return chapter_number

    def _load_chapter(self, document_id: str, manifest: Manifest, chapter_number: int) -> Chapter:
        self._require_chapter_number(manifest, chapter_number)
        return self.storage.load_chapter_metadata(document_id, chapter_number)

    def _load_section_contents(self, document_id: str, chapter: Chapter) -> None:
        for section in chapter.sections:
            section.content = self.storage.load_section_content(
                document_id, chapter.number, section.number
            )

    def _refresh_manifest(self, document_id: str, manifest: Manifest) -> Manifest:
        chapters = [
            self.storage.load_chapter_metadata(document_id, number)
            for number in self.storage.list_chapters(document_id)
        ]
        manifest.summarize(chapters)
        self.storage.save_manifest(document_id, manifest)
        return manifest

    def _relabel_chapter(self, document_id: str, chapter_number: int) -> None:
        """Make a moved chapter's contents carry its new number.

        Section numbers get the new leading component and their files are
        renamed; figure and table ids follow from the chapter number. The
        chapter markdown is re-rendered so its heading matches.
        """
        chapter = self.storage.load_chapter_metadata(document_id, chapter_number)
        renames = order_renames(
            [
                (number, relabel_section_number(number, chapter_number))
                for number in chapter.section_numbers
            ],
            chapter.section_numbers,
        )
        for old, new in renames:
            self.storage.rename_section_content(document_id, chapter_number, old, new)
            logger.debug(
                f"Relabelled section {format_section_number(old)} -> {format_section_number(new)}"
            )

        chapter.number = chapter_number
        for section in chapter.sections:
            section.number = relabel_section_number(section.number, chapter_number)
        for asset in [*chapter.figures, *chapter.tables]:
            asset.chapter = chapter_number
        chapter.touch()
        self.storage.save_chapter_metadata(document_id, chapter)

        self._load_section_contents(document_id, chapter)
        self.storage.save_chapter_content(
            document_id, chapter_number, rebuild_chapter_markdown(chapter)
        )

    def _apply_chapter_renames(self, document_id: str, plan: list[tuple[int, int]]) -> None:
        for old, new in plan:
            try:
                self.storage.rename_chapter(document_id, old, new)
                self._relabel_chapter(document_id, new)
            except (DocgenError, OSError) as e:
                logger.error(f"Failed to move chapter {old} -> {new} in {document_id}: {e}")
                raise
            logger.debug(f"Moved chapter {old} -> {new}")

    # Documents

    def create_document(
        self,
        title: str,
        author: str,
        document_type: DocumentType | str = DocumentType.BOOK,
    ) -> str:
        """Create an empty document.

        Args:
            title: Document title, also the source of the id
            author: Document author
            document_type: book, report, article or letter

        Returns:
            The generated document id.

        Raises:
            ValidationFailedError: If a field is empty, the type is unknown or
                the generated id already exists.
            LimitExceededError: If the configured document limit is reached.
        """
        _require_text(title, "title")
        _require_text(author, "author")
        kind = _parse_enum(DocumentType, document_type, "document type")

        existing = self.storage.list_documents()
        if len(existing) >= self.config.max_documents:
            raise LimitExceededError(
                f"maximum number of documents ({self.config.max_documents}) reached",
                kind="document",
            )

        document_id = validate_document_id(generate_document_id(title))
        if self.storage.document_exists(document_id):
            raise ValidationFailedError(
                f"document already exists: {document_id}", kind="document", key=document_id
            )

        now = utc_now()
        manifest = Manifest(
            document=Document(
                id=document_id,
                title=title,
                author=author,
                type=kind,
                created_at=now,
                updated_at=now,
            ),
            created_at=now,
            updated_at=now,
        )
        self.storage.create_document(document_id)
        self.storage.save_manifest(document_id, manifest)
        logger.info(f"Created document {document_id} ({kind.value})")
        return document_id

    def get_document_structure(self, document_id: str) -> Manifest:
        """Return the manifest: document metadata, chapter summaries and counts."""
        return self._require_document(document_id)

    def list_documents(self) -> list[str]:
        return self.storage.list_documents()

    def delete_document(self, document_id: str) -> None:
        """Delete a document with all its chapters, sections and assets."""
        self._require_document(document_id)
        self.storage.delete_document(document_id)
        logger.info(f"Deleted document {document_id}")

    # Chapters

    def add_chapter(self, document_id: str, title: str, position: int | None = None) -> int:
        """Add an empty chapter.

        Args:
            document_id: Target document
            title: Chapter title
            position: 1-based position to insert at; appends when omitted.
                Chapters at or after the position move up by one.

        Returns:
            The new chapter's number.
        """
        manifest = self._require_document(document_id)
        _require_text(title, "chapter title")
        numbers = manifest.chapter_numbers
        count = len(numbers)

        plan: list[tuple[int, int]] = []
        if position is None:
            number = count + 1
        else:
            if not isinstance(position, int) or position < 1 or position > count + 1:
                raise ValidationFailedError(
                    f"invalid chapter position {position} (must be between 1 and {count + 1})",
                    kind="chapter",
                    key=position,
                )
            number = position
            plan = plan_chapter_shift(numbers, position, 1)

        self._apply_chapter_renames(document_id, plan)

        now = utc_now()
        chapter = Chapter(number=number, title=title, created_at=now, updated_at=now)
        self.storage.create_chapter(document_id, number)
        self.storage.save_chapter_metadata(document_id, chapter)
        self.storage.save_chapter_content(document_id, number, rebuild_chapter_markdown(chapter))
        self._refresh_manifest(document_id, manifest)
        logger.info(f"Added chapter {number} '{title}' to {document_id}")
        return number

    def get_chapter(self, document_id: str, chapter_number: int) -> Chapter:
        """Load a chapter with its section contents and stored markdown."""
        manifest = self._require_document(document_id)
        chapter = self._load_chapter(document_id, manifest, chapter_number)
        self._load_section_contents(document_id, chapter)
        chapter.content = self.storage.load_chapter_content(document_id, chapter_number)
        return chapter

    def update_chapter_title(self, document_id: str, chapter_number: int, title: str) -> None:
        manifest = self._require_document(document_id)
        _require_text(title, "chapter title")
        chapter = self._load_chapter(document_id, manifest, chapter_number)
        chapter.title = title
        chapter.touch()
        self.storage.save_chapter_metadata(document_id, chapter)
        self._refresh_manifest(document_id, manifest)
        logger.info(f"Renamed chapter {chapter_number} of {document_id} to '{title}'")

    def delete_chapter(self, document_id: str, chapter_number: int) -> None:
        """Delete a chapter; later chapters move down to close the gap."""
        manifest = self._require_document(document_id)
        self._require_chapter_number(manifest, chapter_number)
        remaining = [number for number in manifest.chapter_numbers if number != chapter_number]
        plan = plan_chapter_shift(remaining, chapter_number + 1, -1)

        self.storage.delete_chapter(document_id, chapter_number)
        self._apply_chapter_renames(document_id, plan)
        self._refresh_manifest(document_id, manifest)
        logger.info(f"Deleted chapter {chapter_number} from {document_id}")

    def move_chapter(self, document_id: str, from_number: int, to_number: int) -> None:
        """Move a chapter to a new position and renumber every chapter to 1..N.

        ``move_chapter(doc, 3, 1)`` on chapters [A, B, C] yields [C, A, B].
        """
        manifest = self._require_document(document_id)
        self._require_chapter_number(manifest, from_number)
        numbers = manifest.chapter_numbers
        if not isinstance(to_number, int) or to_number < 1 or to_number > len(numbers):
            raise ValidationFailedError(
                f"invalid target position {to_number} (must be between 1 and {len(numbers)})",
                kind="chapter",
                key=to_number,
            )
        if from_number == to_number:
            return

        order = list(numbers)
        order.remove(from_number)
        order.insert(to_number - 1, from_number)
        plan = plan_chapter_reorder(order)

        self._apply_chapter_renames(document_id, plan)
        self._refresh_manifest(document_id, manifest)
        logger.info(f"Moved chapter {from_number} to position {to_number} in {document_id}")

    # Sections

    def add_section(
        self,
        document_id: str,
        chapter_number: int,
        title: str,
        content: str,
        level: int = 1,
    ) -> SectionNumber:
        """Append a section to a chapter.

        Args:
            document_id: Target document
            chapter_number: Owning chapter
            title: Section title
            content: Section body (markdown)
            level: 1 for "1.x", 2 for "1.x.y", up to 6

        Returns:
            The new section's number.
        """
        manifest = self._require_document(document_id)
        _require_text(title, "section title")
        _require_text(content, "section content")
        validate_level(level)
        chapter = self._load_chapter(document_id, manifest, chapter_number)

        number = next_section_number(chapter.number, chapter.section_numbers, level)
        now = utc_now()
        chapter.sections.append(
            Section(number=number, title=title, created_at=now, updated_at=now)
        )
        chapter.sections.sort(key=lambda section: section.number)
        chapter.touch()

        self.storage.save_section_content(document_id, chapter_number, number, content)
        self.storage.save_chapter_metadata(document_id, chapter)
        self._refresh_manifest(document_id, manifest)
        logger.info(
            f"Added section {format_section_number(number)} '{title}' to chapter "
            f"{chapter_number} of {document_id}"
        )
        return number

    def _find_section(self, chapter: Chapter, number: SectionNumber) -> Section:
        section = chapter.find_section(number)
        if section is None:
            key = format_section_number(number)
            raise NotFoundError(
                f"section {key} not found in chapter {chapter.number}", kind="section", key=key
            )
        return section

    def get_section(
        self, document_id: str, chapter_number: int, number: SectionNumber | str
    ) -> Section:
        manifest = self._require_document(document_id)
        number = _coerce_section_number(number)
        chapter = self._load_chapter(document_id, manifest, chapter_number)
        section = self._find_section(chapter, number)
        section.content = self.storage.load_section_content(document_id, chapter_number, number)
        return section

    def update_section(
        self,
        document_id: str,
        chapter_number: int,
        number: SectionNumber | str,
        content: str,
        title: str | None = None,
    ) -> None:
        """Replace a section's content, and optionally its title.

        Raises:
            NotFoundError: If no section has exactly this number.
        """
        manifest = self._require_document(document_id)
        number = _coerce_section_number(number)
        _require_text(content, "section content")
        if title is not None:
            _require_text(title, "section title")
        chapter = self._load_chapter(document_id, manifest, chapter_number)
        section = self._find_section(chapter, number)

        if title is not None:
            section.title = title
        section.updated_at = utc_now()
        chapter.touch()

        self.storage.save_section_content(document_id, chapter_number, number, content)
        self.storage.save_chapter_metadata(document_id, chapter)
        self._refresh_manifest(document_id, manifest)
        logger.info(
            f"Updated section {format_section_number(number)} in chapter {chapter_number} "
            f"of {document_id}"
        )

    def delete_section(
        self, document_id: str, chapter_number: int, number: SectionNumber | str
    ) -> list[SectionNumber]:
        """Delete a section and its subsections, then close the numbering gap.

        Later siblings (and everything under them) move down by one at the
        deleted section's level.

        Returns:
            Every section number removed, the requested one first.
        """
        manifest = self._require_document(document_id)
        number = _coerce_section_number(number)
        chapter = self._load_chapter(document_id, manifest, chapter_number)
        self._find_section(chapter, number)

        removed = [number, *sorted(descendants_of(chapter.section_numbers, number))]
        remaining = [n for n in chapter.section_numbers if n not in removed]
        renames = order_renames(renumber_after_section_delete(remaining, number), remaining)

        try:
            for doomed in removed:
                self.storage.delete_section_content(document_id, chapter_number, doomed)
            for old, new in renames:
                self.storage.rename_section_content(document_id, chapter_number, old, new)
                logger.debug(
                    f"Renumbered section {format_section_number(old)} -> "
                    f"{format_section_number(new)}"
                )
        except (DocgenError, OSError) as e:
            logger.error(
                f"Failed to delete section {format_section_number(number)} from chapter "
                f"{chapter_number} of {document_id}: {e}"
            )
            raise

        mapping = dict(renames)
        chapter.sections = [s for s in chapter.sections if s.number not in removed]
        for section in chapter.sections:
            if section.number in mapping:
                section.number = mapping[section.number]
                section.updated_at = utc_now()
        chapter.sections.sort(key=lambda section: section.number)
        chapter.touch()

        self.storage.save_chapter_metadata(document_id, chapter)
        self._refresh_manifest(document_id, manifest)
        logger.info(
            f"Deleted section {format_section_number(number)} "
            f"({len(removed) - 1} subsections) from chapter {chapter_number} of {document_id}"
        )
        return removed

    # Figures

    def add_image(
        self,
        document_id: str,
        chapter_number: int,
        image_path: str,
        caption: str,
        position: ImagePosition | str = ImagePosition.HERE,
        width: str = "",
        alignment: ImageAlignment | str = ImageAlignment.CENTER,
    ) -> str:
        """Add a figure to a chapter.

        Returns:
            The figure id, e.g. "fig-2.3".
        """
        manifest = self._require_document(document_id)
        _require_text(image_path, "image path")
        _require_text(caption, "caption")
        placement = _parse_enum(ImagePosition, position, "image position")
        align = _parse_enum(ImageAlignment, alignment, "image alignment")
        chapter = self._load_chapter(document_id, manifest, chapter_number)

        now = utc_now()
        figure = Figure(
            chapter=chapter.number,
            sequence=next_sequence(existing.sequence for existing in chapter.figures),
            caption=caption,
            image_path=image_path,
            position=placement,
            width=width or "",
            alignment=align,
            created_at=now,
            updated_at=now,
        )
        chapter.figures.append(figure)
        chapter.touch()

        self.storage.save_chapter_metadata(document_id, chapter)
        self._refresh_manifest(document_id, manifest)
        logger.info(f"Added figure {figure.id} to {document_id}")
        return figure.id

    def _load_figure(self, document_id: str, manifest: Manifest, figure_id: str):
        chapter_number, _ = parse_figure_id(figure_id)
        chapter = self._load_chapter(document_id, manifest, chapter_number)
        figure = chapter.find_figure(figure_id)
        if figure is None:
            raise NotFoundError(f"figure not found: {figure_id}", kind="figure", key=figure_id)
        return chapter, figure

    def update_image_caption(self, document_id: str, figure_id: str, caption: str) -> None:
        manifest = self._require_document(document_id)
        _require_text(caption, "caption")
        chapter, figure = self._load_figure(document_id, manifest, figure_id)
        figure.caption = caption
        figure.updated_at = utc_now()
        chapter.touch()
        self.storage.save_chapter_metadata(document_id, chapter)
        self._refresh_manifest(document_id, manifest)
        logger.info(f"Updated caption of {figure_id} in {document_id}")

    def delete_image(self, document_id: str, figure_id: str) -> None:
        """Delete a figure; later figures in the chapter move down by one."""
        manifest = self._require_document(document_id)
        chapter, figure = self._load_figure(document_id, manifest, figure_id)
        chapter.figures.remove(figure)
        self._close_sequence_gap(chapter.figures, figure.sequence)
        chapter.touch()
        self.storage.save_chapter_metadata(document_id, chapter)
        self._refresh_manifest(document_id, manifest)
        logger.info(f"Deleted figure {figure_id} from {document_id}")

    # Tables

    def add_table(
        self, document_id: str, chapter_number: int, content: str, caption: str
    ) -> str:
        """Add a markdown table to a chapter.

        Returns:
            The table id, e.g. "table-1.2".
        """
        manifest = self._require_document(document_id)
        _require_text(content, "table content")
        _require_text(caption, "caption")
        chapter = self._load_chapter(document_id, manifest, chapter_number)

        now = utc_now()
        table = Table(
            chapter=chapter.number,
            sequence=next_sequence(existing.sequence for existing in chapter.tables),
            caption=caption,
            content=content,
            created_at=now,
            updated_at=now,
        )
        chapter.tables.append(table)
        chapter.touch()

        self.storage.save_chapter_metadata(document_id, chapter)
        self._refresh_manifest(document_id, manifest)
        logger.info(f"Added table {table.id} to {document_id}")
        return table.id

    def _load_table(self, document_id: str, manifest: Manifest, table_id: str):
        chapter_number, _ = parse_table_id(table_id)
        chapter = self._load_chapter(document_id, manifest, chapter_number)
        table = chapter.find_table(table_id)
        if table is None:
            raise NotFoundError(f"table not found: {table_id}", kind="table", key=table_id)
        return chapter, table

    def update_table(
        self,
        document_id: str,
        table_id: str,
        caption: str | None = None,
        content: str | None = None,
    ) -> None:
        manifest = self._require_document(document_id)
        if caption is None and content is None:
            raise ValidationFailedError("nothing to update: give a caption or content", kind="table")
        if caption is not None:
            _require_text(caption, "caption")
        if content is not None:
            _require_text(content, "table content")
        chapter, table = self._load_table(document_id, manifest, table_id)

        if caption is not None:
            table.caption = caption
        if content is not None:
            table.content = content
        table.updated_at = utc_now()
        chapter.touch()
        self.storage.save_chapter_metadata(document_id, chapter)
        self._refresh_manifest(document_id, manifest)
        logger.info(f"Updated table {table_id} in {document_id}")

    def delete_table(self, document_id: str, table_id: str) -> None:
        """Delete a table; later tables in the chapter move down by one."""
        manifest = self._require_document(document_id)
        chapter, table = self._load_table(document_id, manifest, table_id)
        chapter.tables.remove(table)
        self._close_sequence_gap(chapter.tables, table.sequence)
        chapter.touch()
        self.storage.save_chapter_metadata(document_id, chapter)
        self._refresh_manifest(document_id, manifest)
        logger.info(f"Deleted table {table_id} from {document_id}")

    @staticmethod
    def _close_sequence_gap(assets: Iterable[Figure | Table], deleted: int) -> None:
        by_sequence = {asset.sequence: asset for asset in assets}
        for old, new in renumber_sequence_after_delete(by_sequence, deleted):
            asset = by_sequence[old]
            previous_id = asset.id
            asset.sequence = new
            asset.updated_at = utc_now()
            logger.debug(f"Renumbered {previous_id} -> {asset.id}")

    # Rebuild and validation

    def rebuild_chapter(self, document_id: str, chapter_number: int) -> str:
        """Regenerate and store a chapter's markdown from its sections.

        Returns:
            The rebuilt markdown.
        """
        manifest = self._require_document(document_id)
        chapter = self._load_chapter(document_id, manifest, chapter_number)
        self._load_section_contents(document_id, chapter)
        markdown = rebuild_chapter_markdown(chapter)
        self.storage.save_chapter_content(document_id, chapter_number, markdown)
        logger.debug(f"Rebuilt chapter {chapter_number} of {document_id}")
        return markdown

    def rebuild_all(self, document_id: str) -> dict[int, str]:
        """Rebuild every chapter, e.g. before exporting the document."""
        manifest = self._require_document(document_id)
        return {
            number: self.rebuild_chapter(document_id, number)
            for number in manifest.chapter_numbers
        }

    def validate_document(self, document_id: str, lint: bool = True) -> ValidationReport:
        """Check a document's numbering, manifest and files.

        Args:
            document_id: Document to check
            lint: Also lint each chapter's rebuilt markdown

        Returns:
            ValidationReport; missing section or chapter files are errors,
            missing images and lint findings are warnings.
        """
        manifest = self._require_document(document_id)
        chapters: list[Chapter] = []
        missing: list[StructureIssue] = []

        for number in self.storage.list_chapters(document_id):
            try:
                chapters.append(self.storage.load_chapter_metadata(document_id, number))
            except NotFoundError as e:
                missing.append(
                    StructureIssue(
                        issue_type="missing_file",
                        location=f"chapter {number}",
                        actual="metadata.yaml",
                        detail=str(e),
                    )
                )

        report = validate_structure(manifest, chapters)
        for issue in missing:
            report.add(issue)

        for chapter in chapters:
            complete = self._check_chapter_files(document_id, chapter, report)
            if lint and complete:
                self._lint_chapter(chapter, report)

        logger.info(
            f"Validated {document_id}: {len(report.errors)} errors, "
            f"{len(report.warnings)} warnings"
        )
        return report

    def _check_chapter_files(
        self, document_id: str, chapter: Chapter, report: ValidationReport
    ) -> bool:
        """Load section contents and record missing files; False if a section file is gone."""
        complete = True
        location = f"chapter {chapter.number}"
        try:
            self.storage.load_chapter_content(document_id, chapter.number)
        except NotFoundError:
            report.add(
                StructureIssue(issue_type="missing_file", location=location, actual="chapter.md")
            )

        for section in chapter.sections:
            try:
                section.content = self.storage.load_section_content(
                    document_id, chapter.number, section.number
                )
            except NotFoundError:
                complete = False
                report.add(
                    StructureIssue(
                        issue_type="missing_file",
                        location=location,
                        actual=f"sections/{section.key}.md",
                    )
                )

        for figure in chapter.figures:
            if not self.storage.asset_exists(document_id, figure.image_path):
                report.add(
                    StructureIssue(
                        issue_type="missing_file",
                        location=f"{location} {figure.id}",
                        actual=figure.image_path,
                        severity=WARNING,
                    )
                )
        return complete

    def _lint_chapter(self, chapter: Chapter, report: ValidationReport) -> None:
        # Rebuilt chapters end with a blank line after the last section; lint
        # them as a file with a single trailing newline.
        markdown = rebuild_chapter_markdown(chapter).rstrip("\n") + "\n"
        result = self.linter.lint(markdown)
        for issue in result.issues:
            report.add(
                StructureIssue(
                    issue_type="lint",
                    location=f"chapter {chapter.number}",
                    detail=f"line {issue.describe()}",
                    severity=WARNING,
                )
            )

