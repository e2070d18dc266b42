"""QCI config commands."""

from pathlib import Path

import click
import yaml
from rich.console import Console

from qci_tictactoe.config import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    QCIConfig,
    create_default_config,
    get_config_paths,
    save_config,
    validate_config_file,
)
from qci_tictactoe.exceptions import ConfigurationError

console = Console()


@click.group()
def config_group() -> None:
    """Inspect and create QCI configuration files."""


@config_group.command("show")
@click.pass_context
def show_command(ctx: click.Context) -> None:
    """Print the effective configuration and where it is read from."""
    settings: QCIConfig = ctx.obj["config"]

    paths = get_config_paths()
    if ctx.obj.get("config_path"):
        paths["project"] = ctx.obj["config_path"]
    for name, path in paths.items():
        if path is None:
            state = "[dim]not found[/dim]"
        elif path.exists():
            state = "[green]loaded[/green]"
        else:
            state = "[dim]absent[/dim]"
        console.print(f"[bold]{name}:[/bold] {path or '-'} ({state})")

    click.echo(
        yaml.safe_dump(settings.model_dump(mode="json"), default_flow_style=False, sort_keys=False)
    )


@config_group.command("init")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Overwrite an existing project configuration",
)
def init_command(force: bool) -> None:
    """Write a default .qci/config.yaml in the current directory.

    Examples:
        qci config init             # Create the file
        qci config init --force     # Reset it to the defaults
    """
    config_path = Path.cwd() / CONFIG_DIR_NAME / CONFIG_FILE_NAME

    if config_path.exists() and not force:
        console.print(
            f"[yellow]Configuration already exists at {config_path}[/yellow]\n"
            "Use --force to overwrite"
        )
        return

    try:
        save_config(create_default_config(), config_path)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    console.print(f"[green]✓[/green] Wrote {config_path}")


@config_group.command("validate")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate_command(path: Path) -> None:
    """Check a configuration file without loading it."""
    try:
        result = validate_config_file(path)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    if result["valid"]:
        console.print(f"[green]✓[/green] {path} is valid")
        return

    for error in result["errors"]:
        console.print(f"[red]✗[/red] {error}")
    raise click.ClickException(f"{path} is not a valid configuration")
