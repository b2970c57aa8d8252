"""docgen CLI command implementations.

Each function implements one subcommand and returns an exit code. Library
errors (``DocgenError``) propagate to ``main``, which prints them and exits 1.
"""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from docgen._version import get_full_version_string
from docgen.config import DocgenConfig, save_config
from docgen.document.manager import DocumentManager
from docgen.document.models import Chapter, format_section_number
from docgen.storage.filesystem import FileSystemStorage

console = Console()


def get_manager(config: DocgenConfig) -> DocumentManager:
    """Build a manager backed by filesystem storage under the configured root."""
    return DocumentManager(FileSystemStorage(config), config)


def read_content(content: str | None, file: Path | None) -> str | None:
    """Pick content given inline or from a file; the file wins when both are set."""
    if file is not None:
        return file.read_text(encoding="utf-8")
    return content


def cmd_init(config: DocgenConfig) -> int:
    """Create the root directory and write its config file."""
    config.root_dir.mkdir(parents=True, exist_ok=True)
    path = save_config(config)
    console.print(f"[green]✓[/] Initialized document root: {config.root_dir}")
    console.print(f"[dim]Config: {path}[/]")
    return 0


def cmd_create(config: DocgenConfig, *, title: str, author: str, document_type: str) -> int:
    document_id = get_manager(config).create_document(title, author, document_type)
    console.print(f"[green]✓[/] Created document [cyan]{document_id}[/]")
    return 0


def cmd_list(config: DocgenConfig) -> int:
    """List every document with its type and chapter count."""
    manager = get_manager(config)
    document_ids = manager.list_documents()
    if not document_ids:
        console.print("[dim]No documents found.[/]")
        return 0

    table = Table(title=f"Documents in {config.root_dir}")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("Type")
    table.add_column("Chapters", justify="right")
    for document_id in document_ids:
        manifest = manager.get_document_structure(document_id)
        document = manifest.document
        table.add_row(
            document.id,
            escape(document.title),
            escape(document.author),
            document.type.value,
            str(len(document.chapters)),
        )
    console.print(table)
    return 0


def _print_chapter(chapter: Chapter) -> None:
    console.print(Panel(f"[bold]Chapter {chapter.number}: {escape(chapter.title)}[/]", expand=False))
    if chapter.sections:
        for section in chapter.sections:
            indent = "  " * (section.level - 1)
            console.print(f"{indent}{escape(section.full_title)}")
    else:
        console.print("[dim]No sections.[/]")

    for figure in chapter.figures:
        console.print(f"[magenta]{figure.id}[/] {escape(figure.caption)} [dim]({escape(figure.image_path)})[/]")
    for table in chapter.tables:
        console.print(f"[magenta]{table.id}[/] {escape(table.caption)}")


def cmd_show(config: DocgenConfig, *, document_id: str, chapter_number: int | None = None) -> int:
    """Show a document's structure, or one chapter's outline."""
    manager = get_manager(config)
    if chapter_number is not None:
        _print_chapter(manager.get_chapter(document_id, chapter_number))
        return 0

    manifest = manager.get_document_structure(document_id)
    document = manifest.document
    console.print(Panel(f"[bold blue]{escape(document.title)}[/]", expand=False))
    console.print(f"[dim]ID: {document.id}  Author: {escape(document.author)}  Type: {document.type.value}[/]")

    table = Table()
    table.add_column("#", justify="right")
    table.add_column("Chapter")
    table.add_column("Sections", justify="right")
    table.add_column("Figures", justify="right")
    table.add_column("Tables", justify="right")
    for chapter in document.chapters:
        counts = manifest.count_for(chapter.number)
        table.add_row(
            str(chapter.number),
            escape(chapter.title),
            str(counts.sections if counts else 0),
            str(counts.figures if counts else 0),
            str(counts.tables if counts else 0),
        )
    console.print(table)
    console.print(
        f"[bold]Totals:[/] {manifest.total_sections} sections, "
        f"{manifest.total_figures} figures, {manifest.total_tables} tables"
    )
    return 0


def cmd_delete(config: DocgenConfig, *, document_id: str) -> int:
    get_manager(config).delete_document(document_id)
    console.print(f"[green]✓[/] Deleted document {document_id}")
    return 0


def cmd_add_chapter(
    config: DocgenConfig, *, document_id: str, title: str, position: int | None = None
) -> int:
    number = get_manager(config).add_chapter(document_id, title, position)
    console.print(f"[green]✓[/] Added chapter {number}: {escape(title)}")
    return 0


def cmd_rename_chapter(config: DocgenConfig, *, document_id: str, chapter_number: int, title: str) -> int:
    get_manager(config).update_chapter_title(document_id, chapter_number, title)
    console.print(f"[green]✓[/] Chapter {chapter_number} is now: {escape(title)}")
    return 0


def cmd_delete_chapter(config: DocgenConfig, *, document_id: str, chapter_number: int) -> int:
    get_manager(config).delete_chapter(document_id, chapter_number)
    console.print(f"[green]✓[/] Deleted chapter {chapter_number}")
    return 0


def cmd_move_chapter(config: DocgenConfig, *, document_id: str, from_number: int, to_number: int) -> int:
    get_manager(config).move_chapter(document_id, from_number, to_number)
    console.print(f"[green]✓[/] Moved chapter {from_number} to position {to_number}")
    return 0


def cmd_add_section(
    config: DocgenConfig,
    *,
    document_id: str,
    chapter_number: int,
    title: str,
    content: str | None,
    level: int = 1,
) -> int:
    number = get_manager(config).add_section(document_id, chapter_number, title, content, level)
    console.print(f"[green]✓[/] Added section {format_section_number(number)}: {escape(title)}")
    return 0


def cmd_update_section(
    config: DocgenConfig,
    *,
    document_id: str,
    chapter_number: int,
    number: str,
    content: str | None,
    title: str | None = None,
) -> int:
    get_manager(config).update_section(document_id, chapter_number, number, content, title)
    console.print(f"[green]✓[/] Updated section {number}")
    return 0


def cmd_delete_section(config: DocgenConfig, *, document_id: str, chapter_number: int, number: str) -> int:
    removed = get_manager(config).delete_section(document_id, chapter_number, number)
    console.print(f"[green]✓[/] Deleted section {number}")
    if len(removed) > 1:
        subsections = ", ".join(format_section_number(n) for n in removed[1:])
        console.print(f"[dim]Also removed subsections: {subsections}[/]")
    return 0


def cmd_add_image(
    config: DocgenConfig,
    *,
    document_id: str,
    chapter_number: int,
    image_path: str,
    caption: str,
    position: str = "here",
    width: str = "",
    alignment: str = "center",
) -> int:
    figure_id = get_manager(config).add_image(
        document_id, chapter_number, image_path, caption, position, width, alignment
    )
    console.print(f"[green]✓[/] Added figure [magenta]{figure_id}[/]")
    return 0


def cmd_update_image(config: DocgenConfig, *, document_id: str, figure_id: str, caption: str) -> int:
    get_manager(config).update_image_caption(document_id, figure_id, caption)
    console.print(f"[green]✓[/] Updated {figure_id}")
    return 0


def cmd_delete_image(config: DocgenConfig, *, document_id: str, figure_id: str) -> int:
    get_manager(config).delete_image(document_id, figure_id)
    console.print(f"[green]✓[/] Deleted {figure_id}")
    return 0


def cmd_add_table(
    config: DocgenConfig, *, document_id: str, chapter_number: int, caption: str, content: str | None
) -> int:
    table_id = get_manager(config).add_table(document_id, chapter_number, content, caption)
    console.print(f"[green]✓[/] Added table [magenta]{table_id}[/]")
    return 0


def cmd_update_table(
    config: DocgenConfig,
    *,
    document_id: str,
    table_id: str,
    caption: str | None = None,
    content: str | None = None,
) -> int:
    get_manager(config).update_table(document_id, table_id, caption=caption, content=content)
    console.print(f"[green]✓[/] Updated {table_id}")
    return 0


def cmd_delete_table(config: DocgenConfig, *, document_id: str, table_id: str) -> int:
    get_manager(config).delete_table(document_id, table_id)
    console.print(f"[green]✓[/] Deleted {table_id}")
    return 0


def cmd_rebuild(
    config: DocgenConfig,
    *,
    document_id: str,
    chapter_number: int | None = None,
    show: bool = False,
) -> int:
    """Rebuild one chapter or the whole document."""
    manager = get_manager(config)
    if chapter_number is not None:
        rebuilt = {chapter_number: manager.rebuild_chapter(document_id, chapter_number)}
    else:
        rebuilt = manager.rebuild_all(document_id)

    for number, markdown in rebuilt.items():
        console.print(f"[green]✓[/] Rebuilt chapter {number}")
        if show:
            console.print(markdown, markup=False, highlight=False)
    if not rebuilt:
        console.print("[dim]No chapters to rebuild.[/]")
    return 0


def cmd_validate(config: DocgenConfig, *, document_id: str, lint: bool = True) -> int:
    """Validate a document; exit code 1 when errors are found."""
    report = get_manager(config).validate_document(document_id, lint=lint)

    for message in report.errors:
        console.print(f"[red]✗[/] {escape(message)}", highlight=False)
    for message in report.warnings:
        console.print(f"[yellow]![/] {escape(message)}", highlight=False)

    if report.valid:
        console.print(f"[green]✓[/] {document_id} is valid ({len(report.warnings)} warnings)")
        return 0
    console.print(f"[red]{len(report.errors)} errors[/], {len(report.warnings)} warnings")
    return 1


def cmd_version() -> int:
    console.print(get_full_version_string())
    return 0
