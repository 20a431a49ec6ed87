import json
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from config import settings

# settings.output_mode comes from LIBRARY_OUTPUT
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODES = {"plain", "json", "rich"}

_console = Console()


def get_output_mode() -> str:
    mode = (settings.output_mode or "").lower().strip()
    return mode if mode in OUTPUT_MODES else "plain"


def print_catalog(library) -> None:
    """Print the catalog in the current output mode.
    - plain: one 'ID: .., Title: .., Author: .., Borrowed: Yes/No' line per book
    - json: JSON array of book objects
    - rich: Rich table
    """
    mode = get_output_mode()

    if not library.count_books():
        print("No books in library.")
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in library.list_books()], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True, justify="right")
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Borrowed", justify="center")
        for b in library.list_books():
            table.add_row(str(b.id), escape(b.title), escape(b.author), "[red]Yes[/]" if b.borrowed else "[green]No[/]")
        _console.print(table)
    else:
        for line in library.display_lines():
            print(line)


def print_count(count: int) -> None:
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps({"total_books": count}))
    elif mode == "rich":
        _console.print(Panel.fit(f"[bold]Total books:[/] {count}", title="📊 Count", border_style="blue"))
    else:
        print(f"Total books: {count}")
