"""
Base Command Class

Abstract base for all JenkinsMaster CLI commands.
Provides common functionality and structure.
"""

from abc import ABC, abstractmethod
from typing import Optional

from rich.console import Console

from jenkinsmaster.config import Settings, load_settings
from jenkinsmaster.logger import DeployLogger
from jenkinsmaster.ui_components import show_header


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Settings loading
    - Logger initialization
    - Header display
    - Error handling with exit codes
    """

    def __init__(
        self,
        verbose: bool = False,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
    ):
        self.verbose = verbose
        self.console = console or Console()
        self.settings = settings or load_settings()
        self.logger: Optional[DeployLogger] = None

    def init_logger(self, name: str, command_name: str) -> DeployLogger:
        """
        Initialize command logger.

        Args:
            name: Log namespace (directory under the log root)
            command_name: Command name

        Returns:
            DeployLogger instance
        """
        self.logger = DeployLogger(
            name,
            command_name,
            verbose=self.verbose,
            log_dir=self.settings.log_dir_expanded,
            console=self.console,
        )
        return self.logger

    def show_header(
        self,
        title: str,
        subtitle: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skip in verbose mode)."""
        if not self.verbose:
            show_header(
                title=title, subtitle=subtitle, details=details, console=self.console
            )

    def _print_log_location(self) -> None:
        if self.logger:
            self.console.print(f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n")

    @abstractmethod
    def execute(self, **kwargs) -> int:
        """
        Execute command logic.

        Must be implemented by subclasses.

        Returns:
            Process exit code
        """
        pass

    def run(self, **kwargs) -> None:
        """
        Run command with error handling and exit with its status.

        Args:
            **kwargs: Command arguments
        """
        try:
            exit_code = self.execute(**kwargs)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            if self.logger:
                self.logger.log("Interrupted by user", "WARNING")
                self._print_log_location()
            raise SystemExit(130)
        except SystemExit:
            raise
        except PermissionError as e:
            self.console.print(f"\n[bold red]✗ Permission denied:[/bold red] {e}\n")
            if self.logger:
                self.logger.log_error(f"Permission error: {e}")
                self._print_log_location()
            raise SystemExit(1)
        finally:
            if self.logger:
                self.logger.close()

        if exit_code:
            self._print_log_location()
            raise SystemExit(exit_code)
