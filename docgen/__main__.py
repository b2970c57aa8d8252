"""CLI entry point for docgen.

Usage:
    docgen init                                   # Create the document root
    docgen create --title "My Book" --author Ann  # Create a document
    docgen add-chapter my-book-1760000000 "Intro" # Append a chapter
    docgen add-section my-book-1760000000 1 "Background" --content "..."
    docgen validate my-book-1760000000            # Check numbering and files

Or via the module:
    python -m docgen list
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.markup import escape

from docgen import commands
from docgen.commands import console, read_content
from docgen.config import load_config
from docgen.errors import DocgenError

# Load environment variables
load_dotenv()


def configure_logging() -> None:
    """Set the log level from LOG_LEVEL (default WARNING)."""
    level_name = os.environ.get("LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _add_document_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("document_id", help="Document ID")


def _add_content_args(parser: argparse.ArgumentParser, *, required: bool = True) -> None:
    group = parser.add_mutually_exclusive_group(required=required)
    group.add_argument("--content", "-c", default=None, help="Content as a string")
    group.add_argument("--file", "-f", type=Path, default=None, help="Read content from a file")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docgen",
        description="docgen - hierarchical document structure engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  docgen create --title "Field Guide" --author "A. Writer" --type book
  docgen add-chapter field-guide-1760000000 "Getting Started" --position 1
  docgen add-section field-guide-1760000000 1 "Setup" -c "Install it." --level 2
  docgen delete-section field-guide-1760000000 1 1.2
  docgen rebuild field-guide-1760000000 --show

Configuration:
  DOCGEN_ROOT_DIR       Document root (default ~/.docgen/documents)
  DOCGEN_MAX_DOCUMENTS  Maximum number of documents (default 100)
  LOG_LEVEL             Logging level (default WARNING)

  Or create <root>/.docgen/config.toml:
    [docgen]
    max_documents = 50
""",
    )
    parser.add_argument(
        "--root",
        "-r",
        type=Path,
        default=None,
        help="Document root directory (overrides DOCGEN_ROOT_DIR)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init", help="Create the document root and its config file")
    subparsers.add_parser("version", help="Show version information")
    subparsers.add_parser("list", help="List documents")

    create_parser = subparsers.add_parser("create", help="Create a document")
    create_parser.add_argument("--title", "-t", required=True, help="Document title")
    create_parser.add_argument("--author", "-a", required=True, help="Document author")
    create_parser.add_argument(
        "--type",
        dest="document_type",
        default="book",
        choices=["book", "report", "article", "letter"],
        help="Document type (default: book)",
    )

    show_parser = subparsers.add_parser("show", help="Show document structure")
    _add_document_arg(show_parser)
    show_parser.add_argument("--chapter", type=int, default=None, help="Show one chapter")

    delete_parser = subparsers.add_parser("delete", help="Delete a document")
    _add_document_arg(delete_parser)

    # Chapters
    add_chapter_parser = subparsers.add_parser("add-chapter", help="Add a chapter")
    _add_document_arg(add_chapter_parser)
    add_chapter_parser.add_argument("title", help="Chapter title")
    add_chapter_parser.add_argument(
        "--position", "-p", type=int, default=None, help="Insert at this position (default: end)"
    )

    rename_chapter_parser = subparsers.add_parser("rename-chapter", help="Change a chapter title")
    _add_document_arg(rename_chapter_parser)
    rename_chapter_parser.add_argument("chapter", type=int, help="Chapter number")
    rename_chapter_parser.add_argument("title", help="New title")

    delete_chapter_parser = subparsers.add_parser("delete-chapter", help="Delete a chapter")
    _add_document_arg(delete_chapter_parser)
    delete_chapter_parser.add_argument("chapter", type=int, help="Chapter number")

    move_chapter_parser = subparsers.add_parser("move-chapter", help="Move a chapter")
    _add_document_arg(move_chapter_parser)
    move_chapter_parser.add_argument("from_number", type=int, help="Current chapter number")
    move_chapter_parser.add_argument("to_number", type=int, help="Target position")

    # Sections
    add_section_parser = subparsers.add_parser("add-section", help="Add a section")
    _add_document_arg(add_section_parser)
    add_section_parser.add_argument("chapter", type=int, help="Chapter number")
    add_section_parser.add_argument("title", help="Section title")
    add_section_parser.add_argument(
        "--level", "-l", type=int, default=1, help="Section level 1-6 (default: 1)"
    )
    _add_content_args(add_section_parser)

    update_section_parser = subparsers.add_parser("update-section", help="Replace section content")
    _add_document_arg(update_section_parser)
    update_section_parser.add_argument("chapter", type=int, help="Chapter number")
    update_section_parser.add_argument("number", help="Section number, e.g. 1.2.1")
    update_section_parser.add_argument("--title", "-t", default=None, help="New section title")
    _add_content_args(update_section_parser)

    delete_section_parser = subparsers.add_parser(
        "delete-section", help="Delete a section and its subsections"
    )
    _add_document_arg(delete_section_parser)
    delete_section_parser.add_argument("chapter", type=int, help="Chapter number")
    delete_section_parser.add_argument("number", help="Section number, e.g. 1.2")

    # Figures
    add_image_parser = subparsers.add_parser("add-image", help="Add a figure")
    _add_document_arg(add_image_parser)
    add_image_parser.add_argument("chapter", type=int, help="Chapter number")
    add_image_parser.add_argument("image_path", help="Image path (relative to assets/images)")
    add_image_parser.add_argument("caption", help="Figure caption")
    add_image_parser.add_argument(
        "--position",
        default="here",
        choices=["here", "top", "bottom", "page", "float"],
        help="Placement hint (default: here)",
    )
    add_image_parser.add_argument("--width", default="", help="Display width, e.g. 80%%")
    add_image_parser.add_argument(
        "--alignment",
        default="center",
        choices=["left", "center", "right"],
        help="Alignment (default: center)",
    )

    update_image_parser = subparsers.add_parser("update-image", help="Change a figure caption")
    _add_document_arg(update_image_parser)
    update_image_parser.add_argument("figure_id", help="Figure ID, e.g. fig-1.2")
    update_image_parser.add_argument("caption", help="New caption")

    delete_image_parser = subparsers.add_parser("delete-image", help="Delete a figure")
    _add_document_arg(delete_image_parser)
    delete_image_parser.add_argument("figure_id", help="Figure ID, e.g. fig-1.2")

    # Tables
    add_table_parser = subparsers.add_parser("add-table", help="Add a table")
    _add_document_arg(add_table_parser)
    add_table_parser.add_argument("chapter", type=int, help="Chapter number")
    add_table_parser.add_argument("caption", help="Table caption")
    _add_content_args(add_table_parser)

    update_table_parser = subparsers.add_parser("update-table", help="Update a table")
    _add_document_arg(update_table_parser)
    update_table_parser.add_argument("table_id", help="Table ID, e.g. table-1.2")
    update_table_parser.add_argument("--caption", default=None, help="New caption")
    _add_content_args(update_table_parser, required=False)

    delete_table_parser = subparsers.add_parser("delete-table", help="Delete a table")
    _add_document_arg(delete_table_parser)
    delete_table_parser.add_argument("table_id", help="Table ID, e.g. table-1.2")

    # Rebuild and validate
    rebuild_parser = subparsers.add_parser("rebuild", help="Regenerate chapter markdown")
    _add_document_arg(rebuild_parser)
    rebuild_parser.add_argument("--chapter", type=int, default=None, help="Rebuild one chapter")
    rebuild_parser.add_argument("--show", action="store_true", help="Print the rebuilt markdown")

    validate_parser = subparsers.add_parser("validate", help="Check document consistency")
    _add_document_arg(validate_parser)
    validate_parser.add_argument(
        "--no-lint", dest="lint", action="store_false", help="Skip markdown lint checks"
    )

    return parser


def run_command(args: argparse.Namespace) -> int:
    """Dispatch parsed arguments to a command implementation."""
    if args.command == "version":
        return commands.cmd_version()

    config = load_config(args.root)

    if args.command == "init":
        return commands.cmd_init(config)
    if args.command == "list":
        return commands.cmd_list(config)
    if args.command == "create":
        return commands.cmd_create(
            config, title=args.title, author=args.author, document_type=args.document_type
        )
    if args.command == "show":
        return commands.cmd_show(config, document_id=args.document_id, chapter_number=args.chapter)
    if args.command == "delete":
        return commands.cmd_delete(config, document_id=args.document_id)

    if args.command == "add-chapter":
        return commands.cmd_add_chapter(
            config, document_id=args.document_id, title=args.title, position=args.position
        )
    if args.command == "rename-chapter":
        return commands.cmd_rename_chapter(
            config, document_id=args.document_id, chapter_number=args.chapter, title=args.title
        )
    if args.command == "delete-chapter":
        return commands.cmd_delete_chapter(
            config, document_id=args.document_id, chapter_number=args.chapter
        )
    if args.command == "move-chapter":
        return commands.cmd_move_chapter(
            config,
            document_id=args.document_id,
            from_number=args.from_number,
            to_number=args.to_number,
        )

    if args.command == "add-section":
        return commands.cmd_add_section(
            config,
            document_id=args.document_id,
            chapter_number=args.chapter,
            title=args.title,
            content=read_content(args.content, args.file),
            level=args.level,
        )
    if args.command == "update-section":
        return commands.cmd_update_section(
            config,
            document_id=args.document_id,
            chapter_number=args.chapter,
            number=args.number,
            content=read_content(args.content, args.file),
            title=args.title,
        )
    if args.command == "delete-section":
        return commands.cmd_delete_section(
            config, document_id=args.document_id, chapter_number=args.chapter, number=args.number
        )

    if args.command == "add-image":
        return commands.cmd_add_image(
            config,
            document_id=args.document_id,
            chapter_number=args.chapter,
            image_path=args.image_path,
            caption=args.caption,
            position=args.position,
            width=args.width,
            alignment=args.alignment,
        )
    if args.command == "update-image":
        return commands.cmd_update_image(
            config, document_id=args.document_id, figure_id=args.figure_id, caption=args.caption
        )
    if args.command == "delete-image":
        return commands.cmd_delete_image(
            config, document_id=args.document_id, figure_id=args.figure_id
        )

    if args.command == "add-table":
        return commands.cmd_add_table(
            config,
            document_id=args.document_id,
            chapter_number=args.chapter,
            caption=args.caption,
            content=read_content(args.content, args.file),
        )
    if args.command == "update-table":
        return commands.cmd_update_table(
            config,
            document_id=args.document_id,
            table_id=args.table_id,
            caption=args.caption,
            content=read_content(args.content, args.file),
        )
    if args.command == "delete-table":
        return commands.cmd_delete_table(
            config, document_id=args.document_id, table_id=args.table_id
        )

    if args.command == "rebuild":
        return commands.cmd_rebuild(
            config, document_id=args.document_id, chapter_number=args.chapter, show=args.show
        )
    if args.command == "validate":
        return commands.cmd_validate(config, document_id=args.document_id, lint=args.lint)

    console.print(f"[red]Error:[/] Unknown command: {args.command}")
    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    configure_logging()
    args = build_parser().parse_args(argv)

    try:
        return run_command(args)
    except DocgenError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        return 1
    except (ValueError, OSError) as e:
        # Invalid configuration values and unreadable content files
        console.print(f"[red]Error:[/] {escape(str(e))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
