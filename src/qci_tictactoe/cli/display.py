"""Rich renderables for boards, readings and session stats."""

import math
from typing import Optional

from rich.table import Table
from rich.text import Text

from qci_tictactoe.board import Board, GameRules, Position
from qci_tictactoe.mind import MindReading
from qci_tictactoe.stats import GameStats

_MARK_STYLES = {"X": "bold cyan", "O": "bold magenta"}


def board_table(
    board: Board, rules: GameRules, highlight: Optional[Position] = None
) -> Table:
    """
    Draw the board as a grid with row and column indices.

    A disabled center tile is shown as ``#`` and ``highlight`` (usually the
    cell just played) is underlined.
    """
    table = Table(show_header=True, show_lines=True, box=None, padding=(0, 1))
    table.add_column("", style="dim", justify="right")
    for c in range(board.cols):
        table.add_column(str(c), justify="center")

    for r in range(board.rows):
        cells = [Text(str(r))]
        for c in range(board.cols):
            pos = Position(r, c)
            symbol = board.symbol_at(pos)
            if symbol:
                text = Text(symbol, style=_MARK_STYLES[symbol])
            elif not rules.is_playable(pos):
                text = Text("#", style="dim red")
            else:
                text = Text(".", style="dim")
            if pos == highlight:
                text.stylize("underline")
            cells.append(text)
        table.add_row(*cells)
    return table


def proposals_table(reading: MindReading) -> Table:
    """One row per strategy: where it wanted to play and how strongly."""
    table = Table(title=f"Proposals for {reading.player.value}")
    table.add_column("Strategy")
    table.add_column("Cell", justify="center")
    table.add_column("Magnitude", justify="right")
    table.add_column("Phase", justify="right")

    for move in reading.proposals:
        cell = "-" if move.placeholder else str(move.position)
        table.add_row(
            move.basis_state,
            cell,
            f"{move.magnitude:.2f}",
            f"{math.degrees(move.phase):.0f}°",
        )
    return table


def interference_table(reading: MindReading) -> Table:
    """Per-cell interference, the collapsed cell marked with an arrow."""
    table = Table(title=f"Interference ({reading.rule.value})")
    table.add_column("", width=1)
    table.add_column("Cell", justify="center")
    table.add_column("Strategies")
    table.add_column("Amplitude", justify="right")
    table.add_column("Score", justify="right")

    for pos in sorted(reading.groups):
        chosen = pos == reading.position
        table.add_row(
            "→" if chosen else "",
            str(pos),
            ", ".join(reading.supporters(pos)),
            str(reading.amplitudes[pos]),
            f"{reading.scores[pos]:.3f}",
            style="bold green" if chosen else None,
        )
    return table


def stats_text(stats: GameStats) -> Text:
    """One-line session summary."""
    return Text.assemble(
        ("Games ", "dim"),
        str(stats.total_games),
        ("  You ", "dim"),
        (str(stats.human_wins), "cyan"),
        ("  QCI ", "dim"),
        (str(stats.qci_wins), "magenta"),
        ("  Draws ", "dim"),
        str(stats.draws),
    )
