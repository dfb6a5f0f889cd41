#!/usr/bin/env python3
"""JenkinsMaster CLI - Main entry point"""

import functools
import os
import sys

import rich_click as click
from click.exceptions import ClickException
from rich.console import Console

from jenkinsmaster import __version__
from jenkinsmaster.commands import deploy
from jenkinsmaster.exceptions import JenkinsMasterError

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = False
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.MAX_WIDTH = 100

click.rich_click.STYLE_COMMAND = "bold cyan"
click.rich_click.STYLE_OPTION = "bold magenta"
click.rich_click.STYLE_SWITCH = "bold green"
click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_USAGE = "bold yellow"
click.rich_click.STYLE_USAGE_COMMAND = "bold cyan"
click.rich_click.STYLE_HELPTEXT_FIRST_LINE = "bold white"
click.rich_click.STYLE_OPTIONS_PANEL_BORDER = "cyan"
click.rich_click.STYLE_COMMANDS_PANEL_BORDER = "cyan"

console = Console()

BANNER = """
[bold cyan]╔═══════════════════════════════════════════════════════════╗[/bold cyan]
[bold cyan]║[/bold cyan]  [bold white]JenkinsMaster[/bold white] - Jenkins on Hetzner Cloud or any VM      [bold cyan]║[/bold cyan]
[bold cyan]╚═══════════════════════════════════════════════════════════╝[/bold cyan]
"""


def handle_cli_errors(func):
    """Decorator to handle CLI errors gracefully."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ClickException as e:
            # Click's built-in exceptions (already formatted)
            e.show()
            sys.exit(e.exit_code)
        except KeyboardInterrupt:
            console.print("\n\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            sys.exit(130)
        except JenkinsMasterError as e:
            console.print(f"\n[bold red]✗ Error:[/bold red] {e.message}")
            if e.context:
                console.print(f"  [color(208)]{e.context}[/color(208)]")
            console.print()
            sys.exit(1)
        except Exception as e:
            # Unexpected errors
            console.print(f"\n[bold red]✗ Unexpected error:[/bold red] {e}\n")
            console.print("[dim]If this persists, please report this issue.[/dim]\n")

            # Show traceback in verbose mode or if DEBUG env var is set
            if os.environ.get("DEBUG") or os.environ.get("VERBOSE"):
                import traceback

                console.print("[dim]Traceback:[/dim]")
                traceback.print_exc()
            sys.exit(1)

    return wrapper


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """
    JenkinsMaster - Deploy a Jenkins controller in minutes.

    \b
    Quick Start:
      jenkinsmaster deploy            # Guided deployment
      jenkinsmaster deploy --verbose  # Show raw Terraform/Ansible output
    """
    if ctx.invoked_subcommand is None:
        console.print(BANNER)
        console.print("[yellow]Run 'jenkinsmaster --help' for usage[/yellow]\n")


cli.add_command(deploy.deploy)


@handle_cli_errors
def main():
    """Main entry point with error handling"""
    cli()


if __name__ == "__main__":
    main()
