"""Structural consistency checks for a document's chapters and manifest."""

from collections import Counter
from dataclasses import dataclass, field

from docgen.document.models import (
    MAX_SECTION_LEVEL,
    Chapter,
    Manifest,
    format_section_number,
)

ERROR = "error"
WARNING = "warning"


@dataclass
class StructureIssue:
    """A single structural problem found in a document."""

    issue_type: str  # e.g. 'chapter_gap', 'count_mismatch', 'duplicate_section'
    location: str
    expected: str | None = None
    actual: str | None = None
    severity: str = ERROR
    detail: str | None = None

    @property
    def message(self) -> str:
        """Generate a descriptive message for this issue."""
        if self.detail:
            return f"{self.location}: {self.detail}"
        if self.issue_type == "chapter_gap":
            return f"{self.location}: expected chapter {self.expected}, found {self.actual}"
        elif self.issue_type == "count_mismatch":
            return f"{self.location}: manifest says {self.actual}, chapter holds {self.expected}"
        elif self.issue_type == "duplicate_section":
            return f"{self.location}: section {self.actual} appears more than once"
        elif self.issue_type == "wrong_chapter_prefix":
            return f"{self.location}: section {self.actual} does not start with {self.expected}"
        elif self.issue_type == "invalid_level":
            return f"{self.location}: section {self.actual} is outside levels 1-{MAX_SECTION_LEVEL}"
        elif self.issue_type == "asset_chapter_mismatch":
            return f"{self.location}: {self.actual} belongs to chapter {self.expected}"
        elif self.issue_type == "sequence_gap":
            return f"{self.location}: expected sequences {self.expected}, found {self.actual}"
        elif self.issue_type == "missing_file":
            return f"{self.location}: file not found ({self.actual})"
        else:
            return f"{self.location}: {self.issue_type}"


@dataclass
class ValidationReport:
    """Result of validating a document's structure."""

    issues: list[StructureIssue] = field(default_factory=list)

    def add(self, issue: StructureIssue) -> None:
        self.issues.append(issue)

    @property
    def errors(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == ERROR]

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == WARNING]

    @property
    def valid(self) -> bool:
        """True when no error-level issue was found; warnings do not count."""
        return not self.errors


def _check_chapter_numbers(chapters: list[Chapter], report: ValidationReport) -> None:
    for expected, chapter in enumerate(chapters, start=1):
        if chapter.number != expected:
            report.add(
                StructureIssue(
                    issue_type="chapter_gap",
                    location=f"chapter position {expected}",
                    expected=str(expected),
                    actual=str(chapter.number),
                )
            )


def _check_sections(chapter: Chapter, report: ValidationReport) -> None:
    location = f"chapter {chapter.number}"
    seen = Counter(section.number for section in chapter.sections)
    for number, count in seen.items():
        if count > 1:
            report.add(
                StructureIssue(
                    issue_type="duplicate_section",
                    location=location,
                    actual=format_section_number(number),
                )
            )

    for section in chapter.sections:
        if section.number[0] != chapter.number:
            report.add(
                StructureIssue(
                    issue_type="wrong_chapter_prefix",
                    location=location,
                    expected=str(chapter.number),
                    actual=section.key,
                )
            )
        if not 1 <= section.level <= MAX_SECTION_LEVEL:
            report.add(
                StructureIssue(issue_type="invalid_level", location=location, actual=section.key)
            )


def _check_assets(chapter: Chapter, report: ValidationReport) -> None:
    location = f"chapter {chapter.number}"
    for kind, assets in (("figure", chapter.figures), ("table", chapter.tables)):
        for asset in assets:
            if asset.chapter != chapter.number:
                report.add(
                    StructureIssue(
                        issue_type="asset_chapter_mismatch",
                        location=location,
                        expected=str(asset.chapter),
                        actual=asset.id,
                    )
                )

        sequences = [asset.sequence for asset in assets]
        for sequence, count in Counter(sequences).items():
            if count > 1:
                report.add(
                    StructureIssue(
                        issue_type="duplicate_sequence",
                        location=location,
                        actual=str(sequence),
                        detail=f"{kind} sequence {sequence} appears more than once",
                    )
                )
        expected = list(range(1, len(set(sequences)) + 1))
        if sorted(set(sequences)) != expected:
            report.add(
                StructureIssue(
                    issue_type="sequence_gap",
                    location=f"{location} {kind}s",
                    expected=str(expected),
                    actual=str(sorted(set(sequences))),
                    severity=WARNING,
                )
            )


def _check_manifest(manifest: Manifest, chapters: list[Chapter], report: ValidationReport) -> None:
    actual_numbers = [chapter.number for chapter in chapters]
    if manifest.chapter_numbers != actual_numbers:
        report.add(
            StructureIssue(
                issue_type="manifest_chapters",
                location="manifest",
                expected=str(actual_numbers),
                actual=str(manifest.chapter_numbers),
                detail=f"lists chapters {manifest.chapter_numbers}, storage holds {actual_numbers}",
            )
        )

    for chapter in chapters:
        recorded = manifest.count_for(chapter.number)
        counts = chapter.counts()
        if recorded is None:
            report.add(
                StructureIssue(
                    issue_type="count_mismatch",
                    location=f"manifest chapter {chapter.number}",
                    detail="no counts recorded",
                )
            )
            continue
        for attribute in ("sections", "figures", "tables"):
            recorded_value = getattr(recorded, attribute)
            actual_value = getattr(counts, attribute)
            if recorded_value != actual_value:
                report.add(
                    StructureIssue(
                        issue_type="count_mismatch",
                        location=f"manifest chapter {chapter.number} {attribute}",
                        expected=str(actual_value),
                        actual=str(recorded_value),
                    )
                )

        summary = manifest.document.get_chapter(chapter.number)
        if summary is not None and summary.title != chapter.title:
            report.add(
                StructureIssue(
                    issue_type="title_mismatch",
                    location=f"manifest chapter {chapter.number}",
                    detail=f"title '{summary.title}' differs from '{chapter.title}'",
                    severity=WARNING,
                )
            )


def validate_structure(manifest: Manifest, chapters: list[Chapter]) -> ValidationReport:
    """Check numbering and manifest consistency of a loaded document.

    Errors: non-dense chapter numbers, duplicate section numbers, sections whose
    first component is not their chapter, levels outside 1..6, figures/tables
    filed under the wrong chapter, duplicate sequences, and manifest chapters
    or counts that disagree with the chapters. Warnings: sequence gaps and
    stale chapter titles in the manifest.

    Args:
        manifest: The document manifest
        chapters: Chapters loaded from storage, in chapter order

    Returns:
        ValidationReport listing every issue found.
    """
    report = ValidationReport()
    ordered = sorted(chapters, key=lambda chapter: chapter.number)
    _check_chapter_numbers(ordered, report)
    for chapter in ordered:
        _check_sections(chapter, report)
        _check_assets(chapter, report)
    _check_manifest(manifest, ordered, report)
    return report
