"""docgen configuration management.

Configuration hierarchy (highest priority first):
1. Command-line flags
2. Environment variables (DOCGEN_ROOT_DIR, DOCGEN_MAX_DOCUMENTS)
3. Root-level config file (<root>/.docgen/config.toml)
4. Defaults

The config also owns the on-disk layout, so storage and validation agree on
where each document, chapter and section file lives.
"""

import io
import os
import tempfile
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import tomli_w

DEFAULT_ROOT_DIR = Path.home() / ".docgen" / "documents"
DEFAULT_MAX_DOCUMENTS = 100
DEFAULT_CHAPTER_DIR_WIDTH = 2

CONFIG_DIR_NAME = ".docgen"
CONFIG_FILE_NAME = "config.toml"


def atomic_write(path: Path, content: bytes) -> None:
    """Write content to a file atomically using temp file + rename.

    Args:
        path: Target file path
        content: Bytes to write
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file must live in the same directory for the rename to be atomic
    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=".tmp_",
        suffix=path.suffix,
    )
    try:
        os.write(fd, content)
        os.close(fd)
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.close(fd)
        except OSError:
            pass
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


@dataclass
class DocgenConfig:
    """docgen configuration.

    ``chapter_dir_width`` is part of the on-disk layout of existing documents,
    so it is never read from or written to the config file.
    """

    root_dir: Path = field(default_factory=lambda: DEFAULT_ROOT_DIR)
    max_documents: int = DEFAULT_MAX_DOCUMENTS
    chapter_dir_width: int = DEFAULT_CHAPTER_DIR_WIDTH

    def __post_init__(self) -> None:
        self.root_dir = Path(self.root_dir)
        if self.max_documents <= 0:
            raise ValueError("max_documents must be positive")
        if self.chapter_dir_width <= 0:
            raise ValueError("chapter_dir_width must be positive")

    @property
    def config_path(self) -> Path:
        """Path of the TOML config file for this root."""
        return self.root_dir / CONFIG_DIR_NAME / CONFIG_FILE_NAME

    def document_path(self, document_id: str) -> Path:
        """Directory holding a document."""
        return self.root_dir / document_id

    def manifest_path(self, document_id: str) -> Path:
        """Manifest file of a document."""
        return self.document_path(document_id) / "manifest.yaml"

    def assets_path(self, document_id: str) -> Path:
        """Image assets directory of a document."""
        return self.document_path(document_id) / "assets" / "images"

    def chapters_path(self, document_id: str) -> Path:
        """Directory holding all chapter directories of a document."""
        return self.document_path(document_id) / "chapters"

    def chapter_path(self, document_id: str, chapter_number: int) -> Path:
        """Directory of a single chapter, e.g. chapters/03."""
        return self.chapters_path(document_id) / f"{chapter_number:0{self.chapter_dir_width}d}"

    def chapter_metadata_path(self, document_id: str, chapter_number: int) -> Path:
        """Chapter metadata file (title, section/figure/table lists)."""
        return self.chapter_path(document_id, chapter_number) / "metadata.yaml"

    def chapter_content_path(self, document_id: str, chapter_number: int) -> Path:
        """Materialized chapter markdown."""
        return self.chapter_path(document_id, chapter_number) / "chapter.md"

    def sections_path(self, document_id: str, chapter_number: int) -> Path:
        """Directory holding one file per section."""
        return self.chapter_path(document_id, chapter_number) / "sections"

    def section_path(self, document_id: str, chapter_number: int, section_key: str) -> Path:
        """Content file of one section, keyed by its dotted number."""
        return self.sections_path(document_id, chapter_number) / f"{section_key}.md"


def _int_from_env(env: Mapping[str, str], name: str) -> int | None:
    """Read a positive integer from the environment, or None if unset."""
    raw = env.get(name)
    if raw is None or raw == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"invalid {name} value: {raw}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


def _int_from_file(data: Mapping[str, object], name: str, path: Path) -> int | None:
    """Read a positive integer from the [docgen] table, or None if absent."""
    if name not in data:
        return None
    value = data[name]
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"invalid {name} in {path}: {value!r}")
    return value


def load_config(
    root_dir: Path | str | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> DocgenConfig:
    """Load configuration from flags, environment and the root config file.

    Args:
        root_dir: Explicit root directory (command-line flag), overrides env.
        env: Environment mapping (defaults to os.environ).

    Returns:
        DocgenConfig with values resolved by priority.

    Raises:
        ValueError: If an environment or file value is invalid.
    """
    env = os.environ if env is None else env

    if root_dir is not None:
        root = Path(root_dir)
    elif env.get("DOCGEN_ROOT_DIR"):
        root = Path(env["DOCGEN_ROOT_DIR"])
    else:
        root = DEFAULT_ROOT_DIR
    root = root.expanduser()

    file_data: dict = {}
    config_path = root / CONFIG_DIR_NAME / CONFIG_FILE_NAME
    if config_path.exists():
        with open(config_path, "rb") as f:
            file_data = tomllib.load(f).get("docgen", {})
        if not isinstance(file_data, dict):
            raise ValueError(f"invalid [docgen] table in {config_path}")

    max_documents = _int_from_env(env, "DOCGEN_MAX_DOCUMENTS")
    if max_documents is None:
        max_documents = _int_from_file(file_data, "max_documents", config_path)
    if max_documents is None:
        max_documents = DEFAULT_MAX_DOCUMENTS

    return DocgenConfig(root_dir=root, max_documents=max_documents)


def save_config(config: DocgenConfig) -> Path:
    """Save configuration to <root>/.docgen/config.toml.

    Preserves other sections in the file. Only non-default values are written.

    Returns:
        Path of the written config file.
    """
    path = config.config_path

    existing_data: dict = {}
    if path.exists():
        with open(path, "rb") as f:
            existing_data = tomllib.load(f)

    section: dict = {}
    if config.max_documents != DEFAULT_MAX_DOCUMENTS:
        section["max_documents"] = config.max_documents
    existing_data["docgen"] = section

    buffer = io.BytesIO()
    tomli_w.dump(existing_data, buffer)
    atomic_write(path, buffer.getvalue())
    return path
