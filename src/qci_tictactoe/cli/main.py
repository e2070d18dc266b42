"""Main CLI entry point for QCI."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from qci_tictactoe import __version__
from qci_tictactoe.cli.commands.config import config_group
from qci_tictactoe.cli.commands.evaluate import evaluate_command
from qci_tictactoe.cli.commands.play import play_command
from qci_tictactoe.cli.commands.suggest import suggest_command
from qci_tictactoe.config import load_config
from qci_tictactoe.exceptions import ConfigurationError, QCIError

console = Console()


def setup_logging(level: str) -> None:
    """Route package logging through rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="qci")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Optional[Path]) -> None:
    """QCI: Tic-Tac-Toe against the Quantum Computer Intelligence.

    Eight strategies each propose a move with an amplitude; proposals on the
    same cell interfere and QCI plays the strongest cell.

    \b
    Examples:
        qci play                    # Play a game in the terminal
        qci play --human O          # Let QCI open
        qci suggest "XX./.O./..."   # Show QCI's reading of a board
        qci evaluate --games 50     # QCI against a baseline agent
        qci config init             # Write .qci/config.yaml
    """
    ctx.ensure_object(dict)

    try:
        settings = load_config(project_config_path=config_path)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    setup_logging("DEBUG" if verbose else settings.logging.level)

    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path
    ctx.obj["config"] = settings


cli.add_command(play_command, name="play")
cli.add_command(suggest_command, name="suggest")
cli.add_command(evaluate_command, name="evaluate")
cli.add_command(config_group, name="config")


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except QCIError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Game abandoned[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
