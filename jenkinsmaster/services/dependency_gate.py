"""Checks that the external tools a phase needs are installed."""

import shutil
from typing import Callable, Iterable, Optional

from jenkinsmaster.constants import EXIT_SENTINEL, INSTALL_LINKS
from jenkinsmaster.exceptions import MissingDependencyError
from jenkinsmaster.models.results import Phase


class DependencyGate:
    """
    Gate workflow phases on executables being available on PATH.

    Responsibilities:
    - Non-blocking check for up-front warnings
    - Blocking check that lets the operator install a tool and retry
    """

    def __init__(
        self,
        prompter,
        which: Callable[[str], Optional[str]] = shutil.which,
        logger=None,
    ):
        """
        Args:
            prompter: Prompter used for the retry acknowledgment
            which: Executable lookup (shutil.which)
            logger: Optional DeployLogger
        """
        self.prompter = prompter
        self.which = which
        self.logger = logger

    def find_missing(self, names: Iterable[str]) -> list[str]:
        """Executables from names that are not on PATH, in the given order."""
        return [name for name in dict.fromkeys(names) if self.which(name) is None]

    def ensure(self, names: Iterable[str]) -> None:
        """
        Check executables without blocking.

        Raises:
            MissingDependencyError: Naming every missing executable
        """
        missing = self.find_missing(names)
        if missing:
            raise MissingDependencyError(missing)

    def ensure_or_retry(self, name: str, phase: Optional[Phase] = None) -> None:
        """
        Block until an executable is installed or the operator gives up.

        Each failed check explains how to install the tool and waits for
        Enter. Typing 'exit' stops the workflow. There is no retry limit.

        Raises:
            MissingDependencyError: If the operator typed 'exit'
            InputCancelled: On Ctrl-C or end of input
        """
        while self.which(name) is None:
            if self.logger:
                self.logger.log(f"Required executable not found: {name}", "WARNING")

            self.prompter.show(
                f"[yellow]Warning:[/yellow] '{name}' is not installed and is "
                "required to continue."
            )
            self.prompter.show(install_hint(name))
            answer = self.prompter.acknowledge(
                f"Please install '{name}' and then press Enter to retry, "
                f"or type '{EXIT_SENTINEL}' to cancel."
            )
            if answer.strip().lower() == EXIT_SENTINEL:
                raise MissingDependencyError([name], phase=phase)

        if self.logger:
            self.logger.log(f"Found required executable: {name}", "DEBUG")


def install_hint(name: str) -> str:
    """Human-readable install instructions for a tool."""
    link = INSTALL_LINKS.get(name)
    if link:
        return f"To install {name}, please follow the instructions at:\n{link}"
    return f"Please refer to the official documentation for {name}."
