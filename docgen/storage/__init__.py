"""Persistence port and its filesystem implementation."""

from docgen.storage.base import DocumentStorage
from docgen.storage.filesystem import FileSystemStorage

__all__ = ["DocumentStorage", "FileSystemStorage"]
