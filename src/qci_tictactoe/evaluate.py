"""Evaluation utilities for comparing agents."""

from typing import Any, Dict, Optional, Tuple

from rich.console import Console
from rich.table import Table

from qci_tictactoe.agents.base import Agent
from qci_tictactoe.board import GameRules, Player, empty_board
from qci_tictactoe.game import GameState


def play_game(
    agent_x: Agent,
    agent_o: Agent,
    rules: Optional[GameRules] = None,
    console: Optional[Console] = None,
) -> Tuple[Optional[Player], int]:
    """
    Play a single game between two agents.

    Args:
        agent_x: Agent playing X (moves first)
        agent_o: Agent playing O
        rules: Rules for the game (standard 3x3 if None)
        console: If given, print each move and board to it

    Returns:
        Tuple of (winner, num_moves); winner is None for a draw
    """
    rules = rules or GameRules()
    agent_x.reset()
    agent_o.reset()
    agents = {Player.X: agent_x, Player.O: agent_o}

    state = GameState(board=empty_board(rules), rules=rules)
    while not state.is_over:
        player = state.current_player
        pos = agents[player].select_move(state.board, rules, player)
        state = state.with_move(pos)

        if console is not None:
            console.print(f"Move {state.move_count}: {player.value} plays {pos}")
            console.print(state.board.render())
            console.print()

    return state.winner, state.move_count


def evaluate_agents(
    agent_x: Agent,
    agent_o: Agent,
    x_name: str,
    o_name: str,
    num_games: int = 100,
    rules: Optional[GameRules] = None,
) -> Dict[str, Any]:
    """
    Evaluate two agents against each other.

    Args:
        agent_x: First agent (plays X)
        agent_o: Second agent (plays O)
        x_name: Display name of the X agent
        o_name: Display name of the O agent
        num_games: Number of games to play
        rules: Rules for every game

    Returns:
        Dictionary with evaluation results
    """
    if num_games < 1:
        raise ValueError("num_games must be at least 1")

    x_wins = 0
    o_wins = 0
    draws = 0
    total_moves = 0

    for _ in range(num_games):
        winner, moves = play_game(agent_x, agent_o, rules)
        total_moves += moves

        if winner is Player.X:
            x_wins += 1
        elif winner is Player.O:
            o_wins += 1
        else:
            draws += 1

    return {
        "x_name": x_name,
        "o_name": o_name,
        "num_games": num_games,
        "x_wins": x_wins,
        "o_wins": o_wins,
        "draws": draws,
        "x_win_rate": x_wins / num_games,
        "o_win_rate": o_wins / num_games,
        "draw_rate": draws / num_games,
        "avg_moves_per_game": total_moves / num_games,
    }


def print_evaluation_results(results: Dict[str, Any], console: Optional[Console] = None) -> None:
    """Pretty print evaluation results as a table."""
    console = console or Console()

    table = Table(title=f"{results['x_name']} (X) vs {results['o_name']} (O)")
    table.add_column("Games", justify="right")
    table.add_column("X wins", justify="right")
    table.add_column("O wins", justify="right")
    table.add_column("Draws", justify="right")
    table.add_column("Avg moves", justify="right")
    table.add_row(
        str(results["num_games"]),
        f"{results['x_wins']} ({results['x_win_rate']:.0%})",
        f"{results['o_wins']} ({results['o_win_rate']:.0%})",
        f"{results['draws']} ({results['draw_rate']:.0%})",
        f"{results['avg_moves_per_game']:.1f}",
    )
    console.print(table)
