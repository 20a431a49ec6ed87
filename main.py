import logging

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from config import settings
from library import Library, open_library
from utils.ui_helpers import print_catalog, print_count

logger = logging.getLogger(__name__)

console = Console()

MENU_ITEMS = [
    (1, "Add Book from API"),
    (2, "Remove Book"),
    (3, "Borrow Book"),
    (4, "Return Book"),
    (5, "Display Books"),
    (6, "Count Books"),
    (7, "Exit"),
]
EXIT_CHOICE = 7

app = typer.Typer(help="Library catalog manager", add_completion=False)


def render_menu() -> None:
    table = Table.grid(padding=(0, 1))
    table.add_column(justify="right", style="bold cyan")
    table.add_column(justify="left", style="white")
    for key, label in MENU_ITEMS:
        table.add_row(f"{key}.", label)

    console.print(Panel(table, title=escape(settings.app_name), border_style="cyan", box=box.HEAVY, padding=(0, 2)))


def read_book_id(action: str) -> int:
    # IntPrompt reports non-numeric input and asks again
    return IntPrompt.ask(f"Enter book ID to {action}", console=console)


def add_books(library: Library) -> None:
    """Search Google Books and add every result to the catalog."""
    query = Prompt.ask("Enter book title or author to search", console=console)
    with console.status("[bold green]Searching Google Books..."):
        added = library.add_books_from_search(query)
    if not added:
        console.print("[yellow]No books found.[/]")
        return
    console.print(f"[green]Added {len(added)} book(s) to the catalog.[/]")
    for book in added:
        console.print(f"  {escape(str(book))}")


def remove_book(library: Library) -> None:
    book_id = read_book_id("remove")
    if library.remove_book(book_id):
        console.print(f"[green]Removed book {book_id}.[/]")
    else:
        console.print(f"[yellow]No book with ID {book_id}.[/]")


def borrow_book(library: Library) -> None:
    book_id = read_book_id("borrow")
    if library.borrow_book(book_id):
        console.print(f"[green]Book {book_id} borrowed.[/]")
    else:
        console.print("[yellow]Book not available for borrowing.[/]")


def return_book(library: Library) -> None:
    book_id = read_book_id("return")
    if library.return_book(book_id):
        console.print(f"[green]Book {book_id} returned.[/]")
    else:
        console.print("[yellow]Book not found or not borrowed.[/]")


def run_menu(library: Library) -> None:
    """Read-dispatch-print loop; returns when the user exits."""
    actions = {
        1: add_books,
        2: remove_book,
        3: borrow_book,
        4: return_book,
        5: print_catalog,
        6: lambda lib: print_count(lib.count_books()),
    }

    while True:
        render_menu()
        choice = IntPrompt.ask("Enter your choice", console=console)

        if choice == EXIT_CHOICE:
            console.print("Exiting...")
            break

        action = actions.get(choice)
        if action is None:
            console.print("[yellow]Invalid choice. Try again.[/]")
            continue

        try:
            action(library)
        except OSError as e:
            logger.exception("Could not save catalog")
            console.print(f"[bold red]Could not save catalog:[/] {escape(str(e))}")
        console.print()


@app.command()
def shell() -> None:
    """Start the interactive library menu."""
    try:
        with open_library() as library:
            try:
                run_menu(library)
            except (EOFError, KeyboardInterrupt):
                console.print("\nExiting...")
    except (OSError, UnicodeDecodeError) as e:
        logger.exception("Catalog file error")
        console.print(f"[bold red]Catalog file error:[/] {escape(str(e))}")


def main() -> None:
    logging.basicConfig(level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    app()


if __name__ == "__main__":
    main()
