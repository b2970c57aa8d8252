"""Tests for the docgen command line."""

from pathlib import Path

import pytest

from docgen.__main__ import build_parser, main
from docgen._version import __version__, get_git_info
from docgen.commands import get_manager, read_content
from docgen.config import load_config


@pytest.fixture
def root(tmp_path: Path) -> Path:
    return tmp_path / "docs"


def run(root: Path, *args: str) -> int:
    return main(["--root", str(root), *args])


@pytest.fixture
def doc(root: Path) -> str:
    """A document created through the CLI, with one chapter."""
    assert run(root, "create", "--title", "Field Guide", "--author", "A. Writer") == 0
    document_id = get_manager(load_config(root)).list_documents()[0]
    assert run(root, "add-chapter", document_id, "Intro") == 0
    return document_id


class TestParser:
    """Tests for argument parsing."""

    def test_help_exits_zero(self, capsys):
        """--help prints usage and exits 0."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0
        assert "add-section" in capsys.readouterr().out

    def test_command_required(self):
        """A subcommand is required."""
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    def test_content_and_file_are_exclusive(self, tmp_path):
        """--content and --file cannot be combined."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(
                ["add-section", "doc", "1", "T", "-c", "x", "-f", str(tmp_path / "a.md")]
            )

    def test_add_section_needs_content(self):
        """add-section requires content or a file."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["add-section", "doc", "1", "T"])

    def test_no_lint_flag(self):
        """--no-lint turns lint off."""
        args = build_parser().parse_args(["validate", "doc", "--no-lint"])
        assert args.lint is False
        assert build_parser().parse_args(["validate", "doc"]).lint is True


class TestVersionCommand:
    """Tests for the version command."""

    def test_version(self, capsys, monkeypatch):
        """The version command prints the version string."""
        get_git_info.cache_clear()
        monkeypatch.setattr(
            "docgen._version.get_git_info", lambda: {"sha": None, "dirty": None}
        )
        assert main(["version"]) == 0
        assert f"docgen {__version__}" in capsys.readouterr().out


class TestDocumentCommands:
    """Tests for document-level commands."""

    def test_init_writes_config(self, root):
        """init creates the root config file."""
        assert run(root, "init") == 0
        assert (root / ".docgen" / "config.toml").exists()

    def test_list_empty(self, root, capsys):
        """An empty root lists no documents."""
        assert run(root, "list") == 0
        assert "No documents found" in capsys.readouterr().out

    def test_create_and_list(self, root, doc, capsys):
        """A created document is listed."""
        capsys.readouterr()
        assert run(root, "list") == 0
        assert "Field Guide" in capsys.readouterr().out

    def test_show(self, root, doc, capsys):
        """show prints the document and its chapters."""
        capsys.readouterr()
        assert run(root, "show", doc) == 0
        out = capsys.readouterr().out
        assert "Field Guide" in out
        assert "Intro" in out

    def test_show_chapter(self, root, doc, capsys):
        """show --chapter prints the section outline."""
        run(root, "add-section", doc, "1", "Background", "-c", "Text.")
        capsys.readouterr()
        assert run(root, "show", doc, "--chapter", "1") == 0
        assert "1.1 Background" in capsys.readouterr().out

    def test_delete(self, root, doc):
        """delete removes the document."""
        assert run(root, "delete", doc) == 0
        assert get_manager(load_config(root)).list_documents() == []

    def test_missing_document_is_error(self, root, capsys):
        """An unknown document exits 1 with an error."""
        assert run(root, "show", "no-such-doc") == 1
        assert "Error:" in capsys.readouterr().out

    def test_invalid_document_id_is_error(self, root, capsys):
        """A malformed id exits 1 with the reason."""
        assert run(root, "show", "bad id") == 1
        assert "invalid characters" in capsys.readouterr().out

    def test_bad_environment_value(self, root, monkeypatch, capsys):
        """A bad environment value exits 1."""
        monkeypatch.setenv("DOCGEN_MAX_DOCUMENTS", "many")
        assert run(root, "list") == 1
        assert "DOCGEN_MAX_DOCUMENTS" in capsys.readouterr().out

    def test_bad_config_file_value(self, root, capsys):
        """A non-integer max_documents in config.toml exits 1."""
        config_file = root / ".docgen" / "config.toml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text('[docgen]\nmax_documents = "ten"\n')
        assert run(root, "list") == 1
        assert "max_documents" in capsys.readouterr().out


class TestStructureCommands:
    """Tests for chapter, section, figure and table commands."""

    def test_chapter_lifecycle(self, root, doc):
        """Chapters can be added, renamed, moved and deleted."""
        assert run(root, "add-chapter", doc, "Setup", "--position", "1") == 0
        assert run(root, "rename-chapter", doc, "2", "Introduction") == 0
        assert run(root, "move-chapter", doc, "2", "1") == 0
        assert run(root, "delete-chapter", doc, "2") == 0

        manifest = get_manager(load_config(root)).get_document_structure(doc)
        assert [c.title for c in manifest.document.chapters] == ["Introduction"]

    def test_invalid_position_is_error(self, root, doc, capsys):
        """An out-of-range position exits 1."""
        assert run(root, "add-chapter", doc, "Late", "--position", "5") == 1
        assert "invalid chapter position" in capsys.readouterr().out

    def test_section_lifecycle(self, root, doc, tmp_path):
        """Sections can be added, updated and deleted."""
        body = tmp_path / "body.md"
        body.write_text("From a file.", encoding="utf-8")

        assert run(root, "add-section", doc, "1", "One", "-c", "First.") == 0
        assert run(root, "add-section", doc, "1", "Sub", "-f", str(body), "--level", "2") == 0
        assert run(root, "add-section", doc, "1", "Two", "-c", "Second.") == 0
        assert run(root, "update-section", doc, "1", "1.2", "-c", "Changed.", "-t", "Deux") == 0
        assert run(root, "delete-section", doc, "1", "1.1") == 0

        manager = get_manager(load_config(root))
        chapter = manager.get_chapter(doc, 1)
        assert chapter.section_numbers == [(1, 1)]
        assert chapter.sections[0].title == "Deux"
        assert chapter.sections[0].content == "Changed."

    def test_bad_section_level_is_error(self, root, doc, capsys):
        """A level above 6 exits 1."""
        assert run(root, "add-section", doc, "1", "Deep", "-c", "x", "--level", "7") == 1
        assert "section level" in capsys.readouterr().out

    def test_figures(self, root, doc):
        """Figures can be added, recaptioned and deleted."""
        assert run(root, "add-image", doc, "1", "map.png", "A map", "--position", "top") == 0
        assert run(root, "add-image", doc, "1", "key.png", "A key") == 0
        assert run(root, "update-image", doc, "fig-1.2", "The key") == 0
        assert run(root, "delete-image", doc, "fig-1.1") == 0

        figures = get_manager(load_config(root)).get_chapter(doc, 1).figures
        assert [(f.id, f.caption) for f in figures] == [("fig-1.1", "The key")]

    def test_bad_figure_id_is_error(self, root, doc, capsys):
        """A malformed figure id exits 1."""
        assert run(root, "delete-image", doc, "figure-1") == 1
        assert "invalid figure ID" in capsys.readouterr().out

    def test_tables(self, root, doc):
        """Tables can be added, updated and deleted."""
        table = "| a |\n|---|\n| 1 |"
        assert run(root, "add-table", doc, "1", "Data", "-c", table) == 0
        assert run(root, "update-table", doc, "table-1.1", "--caption", "Numbers") == 0
        tables = get_manager(load_config(root)).get_chapter(doc, 1).tables
        assert tables[0].caption == "Numbers"
        assert tables[0].content == table

        assert run(root, "delete-table", doc, "table-1.1") == 0
        assert get_manager(load_config(root)).get_chapter(doc, 1).tables == []

    def test_update_table_without_changes(self, root, doc, capsys):
        """update-table without options exits 1."""
        run(root, "add-table", doc, "1", "Data", "-c", "| a |")
        capsys.readouterr()
        assert run(root, "update-table", doc, "table-1.1") == 1
        assert "nothing to update" in capsys.readouterr().out


class TestRebuildAndValidate:
    """Tests for rebuild and validate commands."""

    def test_rebuild_show(self, root, doc, capsys):
        """rebuild --show prints the markdown."""
        run(root, "add-section", doc, "1", "Background", "-c", "Some text.")
        capsys.readouterr()
        assert run(root, "rebuild", doc, "--show") == 0
        out = capsys.readouterr().out
        assert "# Chapter 1: Intro" in out
        assert "## 1.1 Background" in out

    def test_rebuild_one_chapter(self, root, doc, capsys):
        """rebuild --chapter rebuilds one chapter."""
        capsys.readouterr()
        assert run(root, "rebuild", doc, "--chapter", "1") == 0
        assert "Rebuilt chapter 1" in capsys.readouterr().out

    def test_validate_valid(self, root, doc, capsys):
        """A valid document exits 0."""
        run(root, "add-section", doc, "1", "Background", "-c", "Some text.")
        capsys.readouterr()
        assert run(root, "validate", doc, "--no-lint") == 0
        assert "is valid" in capsys.readouterr().out

    def test_validate_invalid(self, root, doc, capsys):
        """A document with errors exits 1 and lists them."""
        run(root, "add-section", doc, "1", "Background", "-c", "Some text.")
        config = load_config(root)
        config.section_path(doc, 1, "1.1").unlink()
        capsys.readouterr()

        assert run(root, "validate", doc) == 1
        out = capsys.readouterr().out
        assert "sections/1.1.md" in out
        assert "1 errors" in out


class TestReadContent:
    """Tests for read_content."""

    def test_inline(self):
        """Inline content is returned as given."""
        assert read_content("text", None) == "text"

    def test_file(self, tmp_path):
        """File content is read as UTF-8."""
        path = tmp_path / "c.md"
        path.write_text("from file", encoding="utf-8")
        assert read_content(None, path) == "from file"

    def test_missing_file_raises(self, tmp_path):
        """A missing file raises OSError."""
        with pytest.raises(OSError):
            read_content(None, tmp_path / "missing.md")
