"""
JenkinsMaster CLI - UI Components & Branding
Standardized headers and UI elements
"""

from typing import Optional

from rich.console import Console

LOGO = "jenkinsmaster"

# Color scheme
BRAND_COLOR = "cyan"


def show_header(
    title: str,
    subtitle: Optional[str] = None,
    details: Optional[dict] = None,
    console: Optional[Console] = None,
):
    """
    Display a standardized JenkinsMaster command header.

    Args:
        title: Main title (e.g., "Deploy Jenkins")
        subtitle: Optional subtitle line
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)

    Example:
        show_header(
            title="Deploy Jenkins",
            details={"Logs": "~/.jenkinsmaster/logs"}
        )
    """
    if console is None:
        console = Console()

    prefix = f" [bold color(214)]{LOGO}[/bold color(214)] [dim]›[/dim]"

    console.print(f"{prefix} [bold white]{title}[/bold white]")

    if subtitle:
        console.print(f"{prefix} [dim]{subtitle}[/dim]")

    if details:
        for key, value in details.items():
            console.print(f"{prefix} {key}: [{BRAND_COLOR}]{value}[/{BRAND_COLOR}]")

    # Single blank line after header
    console.print()
