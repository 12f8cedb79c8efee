"""Console output for gke-deploy.

All user-facing output goes through CLIConsole. Diagnostics that only
matter when debugging go to the loguru logger instead (see log_config).
"""

import json
from collections.abc import Callable, Mapping
from functools import wraps
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax


class CLIConsole:
    """Rich console wrapper for deployment progress output."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def print(self, msg: str = "") -> None:
        self.console.print(msg)

    def info(self, msg: str) -> None:
        self.console.print(f"[cyan]ℹ[/cyan]  {msg}")

    def ok(self, msg: str) -> None:
        self.console.print(f"[green]✅[/green] {msg}")

    def error(self, msg: str) -> None:
        self.console.print(f"[red]❌[/red] {msg}")

    def print_banner(self, title: str) -> None:
        self.console.print(Panel.fit(f"[bold blue]{title}[/bold blue]", border_style="blue"))

    def print_section(self, title: str) -> None:
        self.console.print(f"\n[bold underline]{title}[/bold underline]\n")

    def dump_json(self, title: str, data: Mapping[str, Any]) -> None:
        """Print a titled, highlighted JSON document.

        Args:
            title: Section title
            data: JSON-serializable mapping
        """
        self.print_section(title)
        self.console.print(Syntax(json.dumps(data, indent=2), "json", word_wrap=True))

    def dump_yaml(self, title: str, text: str) -> None:
        """Print a titled, highlighted YAML document."""
        self.print_section(title)
        self.console.print(Syntax(text, "yaml", word_wrap=True))

    def fail(self, message: str, details: str | None = None, exit_code: int = 1) -> None:
        """Report a fatal error and exit.

        Args:
            message: One-line error message
            details: Optional hint shown in a panel below the message
            exit_code: Process exit status

        Raises:
            typer.Exit: Always
        """
        self.error(f"[bold red]{message}[/bold red]")
        if details:
            self.console.print(Panel(details, title="Details", border_style="red"))
        raise typer.Exit(exit_code)


def with_error_handling(func: Callable[..., None]) -> Callable[..., None]:
    """Turn deployment errors raised by a command into a message and exit 1.

    A keyboard interrupt exits with status 130. Any other exception
    propagates unchanged.
    """
    from src.cli.deployment.gke_deployer.errors import DeploymentError

    @wraps(func)
    def wrapper(*args: object, **kwargs: object) -> None:
        try:
            func(*args, **kwargs)
        except DeploymentError as e:
            console.fail(e.message, e.details)
        except KeyboardInterrupt:
            console.print("\n[dim]Deployment cancelled.[/dim]")
            raise typer.Exit(130) from None

    return wrapper


console = CLIConsole()
