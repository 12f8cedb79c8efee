"""Main CLI application module.

This module provides the main entry point for the GKE deploy CLI. The
application has a single command, so it runs without a subcommand name:

    gke-deploy --zone europe-west1-b --cluster prod --namespace echo
"""

import typer

from .commands import deploy

# Create the main CLI application
app = typer.Typer(
    help="🛠️  GKE Deploy - render and apply Kubernetes manifests",
    no_args_is_help=False,
    rich_markup_mode="rich",
)

app.command()(deploy)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
