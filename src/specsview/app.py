"""specsview - Interactive system specifications viewer."""

import logging
import sys
from collections.abc import Callable, Sequence
from enum import Enum
from functools import partial

from rich.console import Console
from rich.logging import RichHandler

from specsview import formatting, menu
from specsview.aggregator import SystemAggregator
from specsview.display import SpecsDisplay
from specsview.errors import QueryError, RenderError
from specsview.models import Category, MenuChoice, MenuKey
from specsview.provider import PsutilProvider
from specsview.settings import ViewerSettings

logger = logging.getLogger(__name__)

Selector = Callable[[str, Sequence[MenuChoice | None]], Enum | None]
Confirmer = Callable[[str, bool], bool]


class MenuState(Enum):
    """States of the menu navigator."""

    MAIN_MENU = "main_menu"
    DETAIL_MENU = "detail_menu"
    SHOWING_ALL = "showing_all"
    SHOWING_DETAIL = "showing_detail"
    EXIT = "exit"


MAIN_CHOICES: list[MenuChoice | None] = [
    MenuChoice("View All Specifications", MenuKey.ALL),
    MenuChoice("Detailed View (By Category)", MenuKey.DETAILED),
    menu.SEPARATOR,
    MenuChoice("Exit", MenuKey.EXIT),
]

DETAIL_CHOICES: list[MenuChoice | None] = [
    *(MenuChoice(category.label, category) for category in Category),
    menu.SEPARATOR,
    MenuChoice("Return to Main Menu", MenuKey.BACK),
]


class Navigator:
    """
    Menu state machine.

    Runs as an explicit loop over MenuState; each handler performs its side
    effects and returns the next state.
    """

    def __init__(
        self,
        aggregator: SystemAggregator,
        display: SpecsDisplay,
        select: Selector,
        confirm: Confirmer,
    ) -> None:
        """
        Initialize the Navigator.

        Args:
            aggregator: Source of snapshots and detail views.
            display: Terminal output.
            select: Single-select prompt, returns the chosen key or None.
            confirm: Yes/no prompt taking a message and a default.
        """
        self._aggregator = aggregator
        self._display = display
        self._select = select
        self._confirm = confirm
        self._category: Category | None = None
        self._exit_code = 0
        self._handlers: dict[MenuState, Callable[[], MenuState]] = {
            MenuState.MAIN_MENU: self._main_menu,
            MenuState.DETAIL_MENU: self._detail_menu,
            MenuState.SHOWING_ALL: self._show_all,
            MenuState.SHOWING_DETAIL: self._show_detail,
        }

    def run(self, state: MenuState = MenuState.MAIN_MENU) -> int:
        """Run until the EXIT state and return the process exit code."""
        while state is not MenuState.EXIT:
            logger.debug("Entering %s", state.name)
            state = self._handlers[state]()
        return self._exit_code

    def _exit(self) -> MenuState:
        """Say goodbye and stop."""
        self._display.farewell()
        return MenuState.EXIT

    def _main_menu(self) -> MenuState:
        """Show the main menu and pick the next state."""
        self._display.show_menu_header()
        choice = self._select("Select an option:", MAIN_CHOICES)
        if choice is MenuKey.ALL:
            return MenuState.SHOWING_ALL
        if choice is MenuKey.DETAILED:
            return MenuState.DETAIL_MENU
        return self._exit()

    def _detail_menu(self) -> MenuState:
        """Show the category menu and remember the chosen category."""
        self._display.show_menu_header()
        choice = self._select("Select detailed view:", DETAIL_CHOICES)
        if isinstance(choice, Category):
            self._category = choice
            return MenuState.SHOWING_DETAIL
        return MenuState.MAIN_MENU

    def _show_all(self) -> MenuState:
        """Fetch and print the summary table."""
        try:
            snapshot = self._aggregator.fetch_summary()
        except QueryError as exc:
            self._display.error("Error fetching system info:", exc)
            self._exit_code = 1
            return MenuState.EXIT

        try:
            self._display.summary(formatting.summary_rows(snapshot))
        except RenderError as exc:
            logger.debug("Summary rendering failed", exc_info=True)
            self._display.error("Error displaying specs:", exc)

        if self._confirm("Return to main menu?", True):
            return MenuState.MAIN_MENU
        return self._exit()

    def _show_detail(self) -> MenuState:
        """Fetch and print the chosen category's detail table."""
        if self._category is None:
            return MenuState.DETAIL_MENU
        view = self._aggregator.fetch_detail(self._category)
        self._display.detail(view.title, view.rows)

        if self._confirm("View another detailed section?", True):
            return MenuState.DETAIL_MENU
        return MenuState.MAIN_MENU


def setup_logging(console: Console) -> None:
    """Route log records through rich on the error console."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def build_navigator(settings: ViewerSettings, display: SpecsDisplay) -> Navigator:
    """Wire the navigator to the real hardware provider and terminal prompts."""
    return Navigator(
        aggregator=SystemAggregator(PsutilProvider()),
        display=display,
        select=partial(menu.select, page_size=settings.page_size),
        confirm=lambda message, default: menu.confirm(
            message, default=default, console=display.console
        ),
    )


def main() -> None:
    """Entry point for specsview."""
    settings = ViewerSettings()
    display = SpecsDisplay(settings)
    setup_logging(display.error_console)

    try:
        exit_code = build_navigator(settings, display).run()
    except KeyboardInterrupt:
        display.farewell()
        exit_code = 0
    except Exception as exc:
        logger.debug("Unhandled error", exc_info=True)
        display.error("An error occurred:", exc)
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
