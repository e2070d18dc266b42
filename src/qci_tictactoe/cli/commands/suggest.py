"""QCI suggest command."""

import json
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console

from qci_tictactoe.board import (
    Board,
    GameRules,
    Player,
    Status,
    evaluate_status,
    winner,
)
from qci_tictactoe.cli.display import board_table, interference_table, proposals_table
from qci_tictactoe.config import QCIConfig

console = Console()


def infer_player(board: Board) -> Player:
    """X moves whenever both sides have placed the same number of marks."""
    return Player.X if board.count(Player.X) <= board.count(Player.O) else Player.O


def rules_for_board(rules: GameRules, board: Board) -> GameRules:
    """Widen or narrow ``rules`` to the board's column count."""
    if board.cols == rules.cols:
        return rules
    data = rules.model_dump()
    data["additional_column"] = board.cols == 4
    return GameRules(**data)


@click.command()
@click.argument("board")
@click.option(
    "--player",
    "-p",
    type=click.Choice(["X", "O"], case_sensitive=False),
    help="Side QCI moves for (inferred from the mark counts if omitted)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the reading as JSON")
@click.pass_context
def suggest_command(
    ctx: click.Context, board: str, player: Optional[str], as_json: bool
) -> None:
    """Show how QCI reads BOARD and where it would play.

    BOARD lists the rows separated by "/", with "." for empty cells.

    Examples:
        qci suggest "XX./.O./..."
        qci suggest "X.../.O../...." --player X --json
    """
    settings: QCIConfig = ctx.obj["config"]

    try:
        parsed = Board.from_string(board)
        rules = rules_for_board(settings.rules, parsed)
    except (ValueError, ValidationError) as e:
        raise click.ClickException(f"Invalid board {board!r}: {e}") from e
    if parsed.shape != rules.shape:
        raise click.ClickException(
            f"Board must have {rules.rows} rows of 3 or 4 cells, got {parsed.rows}x{parsed.cols}"
        )

    status = evaluate_status(parsed, rules)
    if status is not Status.PLAYING:
        result = "draw" if status is Status.DRAW else f"{winner(parsed, rules).value} wins"
        raise click.ClickException(f"Game is already over ({result})")

    mover = Player(player.upper()) if player else infer_player(parsed)
    reading = settings.player.build_mind().read(parsed, rules, mover)

    if as_json:
        click.echo(json.dumps(reading.to_dict(), indent=2))
        return

    console.print(board_table(parsed, rules, highlight=reading.position))
    console.print(proposals_table(reading))
    console.print(interference_table(reading))
    for diagnostic in reading.diagnostics:
        console.print(f"[red]{diagnostic}[/red]")
    console.print(f"QCI ({mover.value}) plays [magenta]{reading.position}[/magenta]")
