"""Prompt helpers that report cancellation as a value instead of an exception."""

from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar, Union

from rich.console import Console
from rich.prompt import Confirm, Prompt

from sprout.ui import picker
from sprout.logging_config import get_logger

console = Console()
logger = get_logger(__name__)

T = TypeVar("T")


class _Cancelled:
    """Result of a prompt the user backed out of."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "CANCELLED"


CANCELLED = _Cancelled()


def is_cancelled(value: Any) -> bool:
    """True if a prompt returned the cancellation marker."""
    return value is CANCELLED


@dataclass
class Option(Generic[T]):
    """One choice in a select or multiselect prompt."""
    value: T
    label: str
    hint: str = ""
    selected: bool = False


class Prompter:
    """Interactive prompts. Every method returns CANCELLED when the user backs out."""

    def select(self, message: str, options: Sequence[Option[T]]) -> Union[T, _Cancelled]:
        entries = [(o.label, o.hint, False) for o in options]
        index = picker.run_select(message, entries)
        if index is None:
            logger.debug(f"Select cancelled: {message}")
            return CANCELLED
        return options[index].value

    def multiselect(self, message: str, options: Sequence[Option[T]]) -> Union[List[T], _Cancelled]:
        entries = [(o.label, o.hint, o.selected) for o in options]
        indices = picker.run_multiselect(message, entries)
        if indices is None:
            logger.debug(f"Multiselect cancelled: {message}")
            return CANCELLED
        return [options[i].value for i in indices]

    def confirm(self, message: str, default: bool = False) -> Union[bool, _Cancelled]:
        try:
            return Confirm.ask(message, default=default, console=console)
        except (KeyboardInterrupt, EOFError):
            console.print()
            return CANCELLED

    def text(
        self,
        message: str,
        password: bool = False,
        validate: Optional[Callable[[str], Optional[str]]] = None,
    ) -> Union[str, _Cancelled]:
        """Ask for a line of text.

        ``validate`` returns an error message for rejected input, or None.
        """
        while True:
            try:
                value = Prompt.ask(message, password=password, console=console).strip()
            except (KeyboardInterrupt, EOFError):
                console.print()
                return CANCELLED

            error = validate(value) if validate else None
            if error is None:
                return value
            console.print(f"[red]{error}[/red]")
