"""QCI play command."""

import re
import time
from typing import Optional

import click
from rich.console import Console

from qci_tictactoe.board import Player, Position
from qci_tictactoe.cli.display import (
    board_table,
    interference_table,
    proposals_table,
    stats_text,
)
from qci_tictactoe.config import QCIConfig
from qci_tictactoe.game import GameController, GameState

console = Console()

_QUIT_WORDS = {"q", "quit", "exit"}


def parse_move(text: str) -> Optional[Position]:
    """Parse ``"row col"`` or ``"row,col"``; None if it is not two integers."""
    parts = [p for p in re.split(r"[\s,]+", text.strip()) if p]
    if len(parts) != 2:
        return None
    try:
        return Position(int(parts[0]), int(parts[1]))
    except ValueError:
        return None


@click.command()
@click.option(
    "--human",
    type=click.Choice(["X", "O"], case_sensitive=False),
    help="Mark you play (X moves first); overrides player.human_symbol",
)
@click.option("--no-delay", is_flag=True, help="Skip QCI's thinking pause")
@click.pass_context
def play_command(ctx: click.Context, human: Optional[str], no_delay: bool) -> None:
    """Play Tic-Tac-Toe against QCI in the terminal.

    Enter moves as "row col" (zero-based). Enter q to quit.

    Examples:
        qci play                 # You play X and move first
        qci play --human O       # QCI opens
    """
    settings: QCIConfig = ctx.obj["config"]
    human_player = Player(human.upper()) if human else settings.player.human
    delay = 0.0 if no_delay else settings.pacing.think_delay_ms / 1000.0

    controller = GameController(
        rules=settings.rules,
        human=human_player,
        mind=settings.player.build_mind(),
    )
    console.print(
        f"[bold]QCI Tic-Tac-Toe[/bold]: you are [cyan]{controller.human.value}[/cyan], "
        f"QCI is [magenta]{controller.qci.value}[/magenta]"
    )

    state = controller.state
    last: Optional[Position] = None
    while True:
        console.print(board_table(state.board, state.rules, highlight=last))

        if state.is_over:
            _announce_result(controller, state)
            if not click.confirm("Play again?", default=False):
                return
            state = controller.reset()
            last = None
            continue

        if controller.is_human_turn(state):
            text = click.prompt("Your move (row col)", default="", show_default=False)
            if text.strip().lower() in _QUIT_WORDS:
                console.print("[yellow]Game abandoned[/yellow]")
                return
            pos = parse_move(text)
            if pos is None:
                console.print("[red]Enter a row and a column, e.g. 1 2[/red]")
                continue
            new_state = controller.player_move(state, pos)
            if new_state is state:
                console.print(f"[red]Cannot play {pos}[/red]")
                continue
            state, last = new_state, pos
            continue

        console.print("[dim]QCI is thinking...[/dim]")
        if delay:
            time.sleep(delay)
        state, reading = controller.opponent_turn(state)
        if reading is None or reading.position is None:
            console.print("[yellow]QCI has no legal move[/yellow]")
            return

        console.print(proposals_table(reading))
        console.print(interference_table(reading))
        for diagnostic in reading.diagnostics:
            console.print(f"[red]{diagnostic}[/red]")
        console.print(f"QCI plays [magenta]{reading.position}[/magenta]")
        last = reading.position


def _announce_result(controller: GameController, state: GameState) -> None:
    if state.winner is None:
        console.print("[bold]Draw.[/bold]")
    elif state.winner is controller.human:
        console.print("[bold green]You win![/bold green]")
    else:
        console.print("[bold magenta]QCI wins.[/bold magenta]")
    console.print(stats_text(controller.stats))
