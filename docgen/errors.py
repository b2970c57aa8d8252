"""Error types raised by the document structure engine.

All errors carry the kind of entity involved and the key that identified it,
so callers can report or act on them without parsing messages.
"""


class DocgenError(Exception):
    """Base class for all docgen errors."""

    def __init__(self, message: str, *, kind: str | None = None, key: object = None):
        super().__init__(message)
        self.kind = kind
        self.key = key


class InvalidIdentifierError(DocgenError, ValueError):
    """A document id, figure id, table id or section number is malformed."""


class NotFoundError(DocgenError, LookupError):
    """A document, chapter, section, figure, table or file does not exist."""


class ValidationFailedError(DocgenError, ValueError):
    """An argument failed validation (empty field, bad level, bad position)."""


class LimitExceededError(DocgenError):
    """A configured limit (such as the document count cap) was reached."""
