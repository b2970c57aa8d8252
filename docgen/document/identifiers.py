"""Identifier grammars: document ids, figure/table ids and section numbers.

Other tooling parses these identifiers, so the formats are exact:

- Document id: 1 to 50 characters of ``[A-Za-z0-9_-]``
- Figure id: ``fig-{chapter}.{sequence}``
- Table id: ``table-{chapter}.{sequence}``
- Section number: dot-joined positive integers, at least two parts
"""

import re
import time

from docgen.document.models import SectionNumber
from docgen.errors import InvalidIdentifierError

DOCUMENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
FIGURE_ID_PATTERN = re.compile(r"^fig-([0-9]+)\.([0-9]+)$")
TABLE_ID_PATTERN = re.compile(r"^table-([0-9]+)\.([0-9]+)$")

MAX_DOCUMENT_ID_LENGTH = 50
MAX_SLUG_LENGTH = 30


def validate_document_id(document_id: str) -> str:
    """Check a document id against its grammar.

    Returns:
        The id, unchanged.

    Raises:
        InvalidIdentifierError: If the id is empty, too long or has bad characters.
    """
    if not document_id:
        raise InvalidIdentifierError(
            "document ID cannot be empty", kind="document", key=document_id
        )
    if len(document_id) > MAX_DOCUMENT_ID_LENGTH:
        raise InvalidIdentifierError(
            f"document ID too long (max {MAX_DOCUMENT_ID_LENGTH} characters): {document_id}",
            kind="document",
            key=document_id,
        )
    if not DOCUMENT_ID_PATTERN.fullmatch(document_id):
        raise InvalidIdentifierError(
            f"document ID contains invalid characters: '{document_id}' "
            "(use only letters, numbers, hyphens, and underscores)",
            kind="document",
            key=document_id,
        )
    return document_id


def generate_document_id(title: str, timestamp: int | None = None) -> str:
    """Derive a document id from a title.

    Lowercases the title, turns spaces into hyphens, drops anything outside
    ``[a-z0-9-]``, truncates to 30 characters and appends a unix timestamp.

    Args:
        title: Document title
        timestamp: Seconds since the epoch (defaults to now)

    Returns:
        A document id such as "my-book-1760000000".
    """
    slug = title.lower().replace(" ", "-")
    slug = re.sub(r"[^a-z0-9-]", "", slug)[:MAX_SLUG_LENGTH]
    stamp = int(time.time()) if timestamp is None else timestamp
    return f"{slug}-{stamp}"


def _parse_asset_id(asset_id: str, pattern: re.Pattern[str], kind: str) -> tuple[int, int]:
    match = pattern.fullmatch(asset_id or "")
    if not match:
        prefix = "fig" if kind == "figure" else "table"
        raise InvalidIdentifierError(
            f"invalid {kind} ID format: '{asset_id}' (expected: {prefix}-{{chapter}}.{{sequence}})",
            kind=kind,
            key=asset_id,
        )
    chapter, sequence = int(match.group(1)), int(match.group(2))
    if chapter < 1 or sequence < 1:
        raise InvalidIdentifierError(
            f"{kind} ID must use positive numbers: '{asset_id}'", kind=kind, key=asset_id
        )
    return chapter, sequence


def parse_figure_id(figure_id: str) -> tuple[int, int]:
    """Split "fig-2.3" into (2, 3)."""
    return _parse_asset_id(figure_id, FIGURE_ID_PATTERN, "figure")


def parse_table_id(table_id: str) -> tuple[int, int]:
    """Split "table-2.3" into (2, 3)."""
    return _parse_asset_id(table_id, TABLE_ID_PATTERN, "table")


def parse_section_number(text: str) -> SectionNumber:
    """Parse a dotted section number string.

    Args:
        text: Section number like "1.2.1"

    Returns:
        The number as a tuple, e.g. (1, 2, 1).

    Raises:
        InvalidIdentifierError: If there are fewer than two parts, or a part is
            not a positive integer.
    """
    parts = (text or "").strip().split(".")
    if len(parts) < 2:
        raise InvalidIdentifierError(
            f"section number must have at least 2 parts (e.g., '1.1'): '{text}'",
            kind="section",
            key=text,
        )
    numbers = []
    for part in parts:
        if not (part.isascii() and part.isdigit()):
            raise InvalidIdentifierError(
                f"invalid number in section '{text}': '{part}'", kind="section", key=text
            )
        value = int(part)
        if value <= 0:
            raise InvalidIdentifierError(
                f"section numbers must be positive: '{text}'", kind="section", key=text
            )
        numbers.append(value)
    return tuple(numbers)


def validate_section_number(number: SectionNumber) -> SectionNumber:
    """Check an already-split section number and return it as a tuple."""
    number = tuple(number)
    if len(number) < 2 or any(not isinstance(part, int) or part <= 0 for part in number):
        raise InvalidIdentifierError(
            f"invalid section number: {number!r}", kind="section", key=number
        )
    return number
