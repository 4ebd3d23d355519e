"""Terminal rendering for specsview."""

from collections.abc import Sequence

import pyfiglet
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.padding import Padding
from rich.table import Table
from rich.text import Text

from specsview.errors import RenderError
from specsview.models import DisplayRow
from specsview.settings import ViewerSettings

SUMMARY_HEADERS = ("CATEGORY", "SPECIFICATION")
DETAIL_HEADERS = ("PROPERTY", "VALUE")

_HEADER_STYLES = ("bold cyan", "bold green")


def build_table(
    rows: Sequence[DisplayRow],
    headers: tuple[str, str] = SUMMARY_HEADERS,
    header_rule: bool = True,
) -> Table:
    """
    Build a two-column table of display rows.

    With ``header_rule`` a rule separates the header from the body; otherwise
    the header is drawn as a plain first row and rules appear only at the
    top and bottom edges.
    """
    table = Table(box=box.SQUARE, show_header=header_rule, show_lines=False)
    for header, style in zip(headers, _HEADER_STYLES):
        table.add_column(header, header_style=style)

    if not header_rule:
        table.add_row(*(Text(h, style=s) for h, s in zip(headers, _HEADER_STYLES)))

    try:
        for row in rows:
            table.add_row(Text(row.category), Text(row.value, style=row.style or ""))
    except (AttributeError, TypeError) as exc:
        raise RenderError(f"malformed display row: {exc}") from exc
    return table


class SpecsDisplay:
    """Writes banners, tables and messages to the terminal."""

    def __init__(
        self,
        settings: ViewerSettings | None = None,
        console: Console | None = None,
        error_console: Console | None = None,
    ) -> None:
        """
        Initialize the SpecsDisplay.

        Args:
            settings: Presentation constants, defaults when omitted.
            console: Console for banners and tables.
            error_console: Console for error messages, stderr by default.
        """
        self.settings = settings or ViewerSettings()
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)

    def clear(self) -> None:
        """Clear the terminal."""
        self.console.clear()

    def banner(self) -> None:
        """Print the figlet banner followed by two blank lines."""
        art = pyfiglet.figlet_format(
            self.settings.banner_text,
            font=self.settings.banner_font,
            width=self.console.width,
        )
        text = Text(art.rstrip("\n"), style=f"bold {self.settings.banner_color}")
        self.console.print(Padding(text, (0, 0, 2, 0)))

    def show_menu_header(self) -> None:
        """Clear the screen and print the banner ahead of a menu prompt."""
        self.clear()
        self.banner()

    def summary(self, rows: Sequence[DisplayRow]) -> None:
        """Print the "view all" table."""
        self.console.print(build_table(rows, SUMMARY_HEADERS, header_rule=True))

    def detail(self, title: str, rows: Sequence[DisplayRow]) -> None:
        """Print a category title and its property table."""
        table = build_table(rows, DETAIL_HEADERS, header_rule=False)
        self.console.print(Text(f"\n{title}", style="bold yellow"))
        self.console.print(table)

    def error(self, context: str, exc: BaseException) -> None:
        """Print an error with its context label to the error stream."""
        self.error_console.print(f"[red]{escape(context)}[/red]", escape(str(exc)))

    def farewell(self) -> None:
        """Print the goodbye message."""
        self.console.print(Text(f"\n{self.settings.farewell}", style="yellow"))
