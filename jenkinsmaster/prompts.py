"""
Interactive prompts

Thin wrapper over rich.prompt (free text) and inquirer (arrow-key menus).
Every prompt either returns a value or raises InputCancelled when the
operator presses Ctrl-C or closes stdin. Retry-until-valid loops live here
and nowhere else; validators stay pure.
"""

from typing import Any, Optional, Sequence, Tuple, Union

import inquirer
from rich.console import Console
from rich.prompt import Prompt

from jenkinsmaster.constants import YES_ANSWERS
from jenkinsmaster.exceptions import InputCancelled
from jenkinsmaster.validators import Validator, validate_yes_no

Choice = Union[str, Tuple[str, Any]]


class Prompter:
    """Operator input for the deployment workflow."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def show(self, message: str = "") -> None:
        self.console.print(message)

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗ {message}[/red]")

    def ask(
        self,
        label: str,
        default: Optional[str] = None,
        password: bool = False,
        strip: bool = True,
    ) -> str:
        """
        Ask for a single line of text.

        Surrounding whitespace is removed unless strip is False.

        Raises:
            InputCancelled: On Ctrl-C or end of input
        """
        kwargs = {"password": password, "console": self.console}
        if default is not None:
            kwargs["default"] = default

        try:
            answer = Prompt.ask(f"[?] {label}", **kwargs)
        except (KeyboardInterrupt, EOFError):
            self.console.print("\n[yellow]Input cancelled by user.[/yellow]")
            raise InputCancelled()

        answer = answer or ""
        return answer.strip() if strip else answer

    def ask_validated(
        self,
        label: str,
        validator: Validator,
        default: Optional[str] = None,
        password: bool = False,
        strip: bool = True,
    ) -> str:
        """
        Ask until the validator accepts the answer.

        Raises:
            InputCancelled: On Ctrl-C or end of input
        """
        while True:
            answer = self.ask(label, default=default, password=password, strip=strip)
            error = validator(answer)
            if error is None:
                return answer
            self.error(error)

    def confirm(self, question: str) -> bool:
        """
        Ask a yes/no question until answered.

        Raises:
            InputCancelled: On Ctrl-C or end of input
        """
        answer = self.ask_validated(f"{question} (yes/no)", validate_yes_no)
        return answer.lower() in YES_ANSWERS

    def select(
        self, message: str, choices: Sequence[Choice], default: Optional[Any] = None
    ) -> Any:
        """
        Pick one entry from a menu.

        Choices are plain strings or (label, value) pairs; the value is
        returned.

        Raises:
            InputCancelled: On Ctrl-C or end of input
        """
        question = inquirer.List(
            "choice",
            message=message,
            choices=list(choices),
            default=default,
            carousel=True,
        )

        try:
            answers = inquirer.prompt([question], raise_keyboard_interrupt=True)
        except (KeyboardInterrupt, EOFError):
            self.console.print("\n[yellow]Input cancelled by user.[/yellow]")
            raise InputCancelled()

        if not answers:
            raise InputCancelled()
        return answers["choice"]

    def acknowledge(self, message: str) -> str:
        """
        Wait for the operator to press Enter (or type a word).

        Raises:
            InputCancelled: On Ctrl-C or end of input
        """
        self.console.print(message)
        try:
            return self.console.input()
        except (KeyboardInterrupt, EOFError):
            self.console.print("\n[yellow]Input cancelled by user.[/yellow]")
            raise InputCancelled()
