"""Interactive prompts for specsview."""

from collections.abc import Sequence
from enum import Enum

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from specsview.models import MenuChoice

# A None entry in a choice list is drawn as a separator
SEPARATOR = None

# Exit result of a Ctrl+C inside the menu
INTERRUPTED = "__interrupted__"


class ChoiceApp(App[str | None]):
    """
    Inline single-select list.

    Exits with the id of the selected option, None when cancelled, or
    INTERRUPTED on Ctrl+C.
    """

    CSS = """
    Screen {
        height: auto;
    }

    #prompt {
        height: auto;
    }

    #choices {
        height: auto;
        border: none;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", priority=True),
        Binding("ctrl+c", "interrupt", "Quit", priority=True),
    ]

    def __init__(
        self,
        message: str,
        choices: Sequence[MenuChoice | None],
        page_size: int = 10,
    ) -> None:
        """Initialize ChoiceApp."""
        super().__init__()
        self._message = message
        self._choices = list(choices)
        self._page_size = max(1, page_size)
        self._keys: dict[str, Enum] = {
            str(choice.key.value): choice.key for choice in self._choices if choice is not None
        }

    def compose(self) -> ComposeResult:
        """Compose the prompt and its option list."""
        yield Static(f"[bold green]?[/bold green] [bold]{escape(self._message)}[/bold]", id="prompt")
        options = [
            SEPARATOR if choice is None else Option(choice.label, id=str(choice.key.value))
            for choice in self._choices
        ]
        yield OptionList(*options, id="choices")

    def on_mount(self) -> None:
        """Limit the visible rows to the page size and focus the list."""
        option_list = self.query_one("#choices", OptionList)
        option_list.styles.max_height = self._page_size
        option_list.highlighted = 0
        option_list.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        """Finish with the chosen option."""
        self.exit(event.option.id)

    def action_cancel(self) -> None:
        """Close the menu without a choice."""
        self.exit(None)

    def action_interrupt(self) -> None:
        """Close the menu and report the interrupt to the caller."""
        self.exit(INTERRUPTED)

    def key_for(self, option_id: str | None) -> Enum | None:
        """Map a returned option id back to its menu key."""
        if option_id is None:
            return None
        return self._keys[option_id]


def select(
    message: str,
    choices: Sequence[MenuChoice | None],
    page_size: int = 10,
) -> Enum | None:
    """
    Show a single-select list below the cursor and return the chosen key.

    Raises:
        KeyboardInterrupt: If Ctrl+C is pressed in the list.
    """
    app = ChoiceApp(message, choices, page_size=page_size)
    result = app.run(inline=True)
    if result == INTERRUPTED:
        raise KeyboardInterrupt
    return app.key_for(result)


def confirm(message: str, default: bool = True, console: Console | None = None) -> bool:
    """Ask a yes/no question."""
    return Confirm.ask(message, default=default, console=console)
