"""Textual pickers used by the select and multiselect prompts."""

from typing import List, Optional, Sequence, Tuple

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, OptionList, SelectionList, Static
from textual.widgets.option_list import Option as OptionItem
from textual.widgets.selection_list import Selection

from sprout.__version__ import __version__

# (label, hint, initially selected)
PickerEntry = Tuple[str, str, bool]


def _render_entry(label: str, hint: str) -> Text:
    text = Text(label)
    if hint:
        text.append(f"  {hint}", style="dim")
    return text


class _PickerApp(App):
    """Shared layout: a message line above a list, Escape cancels."""

    TITLE = "sprout"
    SUB_TITLE = f"v{__version__}"

    DEFAULT_CSS = """
    #message {
        padding: 1 2;
        text-style: bold;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", priority=True),
        Binding("ctrl+c", "cancel", "Cancel", show=False, priority=True),
    ]

    def __init__(self, message: str, entries: Sequence[PickerEntry]):
        super().__init__()
        self.message = message
        self.entries = list(entries)

    def action_cancel(self) -> None:
        """Leave without a choice."""
        self.exit(None)


class SelectApp(_PickerApp):
    """Pick one entry. Returns its index, or None when cancelled."""

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(self.message, id="message")
        yield OptionList(
            *[OptionItem(_render_entry(label, hint)) for label, hint, _ in self.entries],
            id="options",
        )
        yield Footer()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(event.option_index)


class _SubmittingSelectionList(SelectionList[int]):
    """SelectionList where Enter submits and Space toggles."""

    BINDINGS = [Binding("enter", "submit", "Confirm")]

    def action_submit(self) -> None:
        self.app.exit(sorted(self.selected))


class MultiSelectApp(_PickerApp):
    """Pick any number of entries. Returns their indices, or None when cancelled."""

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(f"{self.message}\n[dim]space to toggle, enter to confirm[/dim]", id="message")
        yield _SubmittingSelectionList(
            *[
                Selection(_render_entry(label, hint), index, selected)
                for index, (label, hint, selected) in enumerate(self.entries)
            ],
            id="selections",
        )
        yield Footer()


def run_select(message: str, entries: Sequence[PickerEntry]) -> Optional[int]:
    return SelectApp(message, entries).run()


def run_multiselect(message: str, entries: Sequence[PickerEntry]) -> Optional[List[int]]:
    return MultiSelectApp(message, entries).run()
