"""docgen: hierarchical document structure engine.

Manages documents made of numbered chapters, nested sections, figures and
tables, and keeps every number consistent as the structure changes.
"""

from docgen._version import __version__

__all__ = ["__version__"]
