"""QCI evaluate command."""

from typing import Optional

import click
from rich.console import Console

from qci_tictactoe.agents import HeuristicAgent, QuantumAgent, RandomAgent
from qci_tictactoe.agents.base import Agent
from qci_tictactoe.config import QCIConfig
from qci_tictactoe.evaluate import evaluate_agents, print_evaluation_results

console = Console()


def make_opponent(name: str, seed: Optional[int]) -> Agent:
    if name == "random":
        return RandomAgent(seed=seed)
    return HeuristicAgent()


@click.command()
@click.option("--games", "-n", default=100, show_default=True, type=click.IntRange(min=1))
@click.option(
    "--opponent",
    type=click.Choice(["random", "heuristic"]),
    default="random",
    show_default=True,
    help="Baseline agent QCI plays against",
)
@click.option("--seed", type=int, help="Seed for the random baseline")
@click.pass_context
def evaluate_command(
    ctx: click.Context, games: int, opponent: str, seed: Optional[int]
) -> None:
    """Play QCI against a baseline agent, once from each side.

    Examples:
        qci evaluate                           # 100 games per side vs random
        qci evaluate --opponent heuristic -n 10
    """
    settings: QCIConfig = ctx.obj["config"]
    qci = QuantumAgent(settings.player.build_mind())
    label = opponent.capitalize()

    console.print(f"Running {games} games per side against {label}...")
    first = evaluate_agents(
        qci, make_opponent(opponent, seed), "QCI", label, num_games=games, rules=settings.rules
    )
    second = evaluate_agents(
        make_opponent(opponent, seed), qci, label, "QCI", num_games=games, rules=settings.rules
    )
    print_evaluation_results(first, console)
    print_evaluation_results(second, console)
