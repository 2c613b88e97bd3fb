"""Interaction port: how the driver asks the player for decisions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Callable, Protocol

from rich.console import Console
from rich.text import Text

__all__ = [
    "InputProvider",
    "InteractionPort",
    "ConsolePort",
    "parse_choice",
]

InputProvider = Callable[[str], str]

CHOICE_PROMPT = "\nYour choice (enter number): "
CONTINUE_MESSAGE = "Press Enter to continue..."


class InteractionPort(Protocol):
    """Blocking prompts the driver needs; transports implement these."""

    def select_option(self, prompt: str, options: Sequence[str]) -> int:
        """Return the zero-based index of the option the player picked."""
        ...

    def confirm(self, prompt: str) -> bool: ...

    def wait_for_acknowledgement(self, message: str = CONTINUE_MESSAGE) -> None: ...


def parse_choice(raw: str | None, option_count: int) -> int | None:
    """Map 1-based user input to a zero-based index, or ``None`` if invalid."""

    if raw is None:
        return None
    try:
        number = int(raw.strip())
    except ValueError:
        return None
    if 1 <= number <= option_count:
        return number - 1
    return None


class ConsolePort:
    """:class:`InteractionPort` backed by a Rich console.

    ``input_provider`` receives the prompt text and returns one line; it
    defaults to ``console.input``. ``EOFError`` and ``KeyboardInterrupt``
    raised by the provider propagate to the caller.
    """

    def __init__(
        self,
        console: Console,
        input_provider: InputProvider | None = None,
    ) -> None:
        self.console = console
        self._read = input_provider or console.input

    def select_option(self, prompt: str, options: Sequence[str]) -> int:
        if not options:
            raise ValueError("select_option requires at least one option")
        self.console.print()
        self.console.print(Text(prompt, style="bold"))
        self.console.print()
        for number, option in enumerate(options, start=1):
            self.console.print(Text(f"  {number}. {option}"), highlight=False)

        while True:
            index = parse_choice(self._read(CHOICE_PROMPT), len(options))
            if index is not None:
                return index
            self.console.print(
                f"Please enter a number between 1 and {len(options)}",
                style="yellow",
                highlight=False,
            )

    def confirm(self, prompt: str) -> bool:
        answer = self._read(f"{prompt} (y/n): ")
        return answer.strip().lower().startswith("y")

    def wait_for_acknowledgement(self, message: str = CONTINUE_MESSAGE) -> None:
        self._read(f"\n{message}")
