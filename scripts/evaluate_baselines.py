#!/usr/bin/env python3
"""Evaluate QCI against the baseline agents, on the standard and variant boards."""

import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rich.console import Console
from rich.table import Table

from qci_tictactoe.agents import Agent, HeuristicAgent, QuantumAgent, RandomAgent
from qci_tictactoe.board import GameRules
from qci_tictactoe.evaluate import evaluate_agents
from qci_tictactoe.mind import QuantumMind, SelectionRule

console = Console()


def print_table(results_list: List[Dict[str, Any]]) -> None:
    """Print all results in one table."""
    table = Table(title="QCI BASELINE EVALUATION")
    for column in ("Rules", "X", "O", "Games", "X Wins", "O Wins", "Draws", "Avg Moves"):
        table.add_column(column, justify="right" if column not in ("Rules", "X", "O") else "left")

    for r in results_list:
        table.add_row(
            r["rules"],
            r["x_name"],
            r["o_name"],
            str(r["num_games"]),
            f"{r['x_wins']} ({r['x_win_rate']:.0%})",
            f"{r['o_wins']} ({r['o_win_rate']:.0%})",
            f"{r['draws']} ({r['draw_rate']:.0%})",
            f"{r['avg_moves_per_game']:.1f}",
        )

    console.print(table)


def build_matchups() -> List[Tuple[str, str, Callable[[], Agent], Callable[[], Agent]]]:
    """(x_name, o_name, make_x, make_o) for every pairing to evaluate."""
    return [
        ("QCI", "Random", lambda: QuantumAgent(QuantumMind(seed=7)), lambda: RandomAgent(seed=42)),
        ("Random", "QCI", lambda: RandomAgent(seed=42), lambda: QuantumAgent(QuantumMind(seed=7))),
        ("QCI", "Heuristic", lambda: QuantumAgent(QuantumMind(seed=7)), HeuristicAgent),
        ("Heuristic", "QCI", HeuristicAgent, lambda: QuantumAgent(QuantumMind(seed=7))),
        (
            "QCI interference",
            "QCI support",
            lambda: QuantumAgent(QuantumMind(selection_rule=SelectionRule.INTERFERENCE, seed=7)),
            lambda: QuantumAgent(QuantumMind(selection_rule=SelectionRule.SUPPORT, seed=7)),
        ),
    ]


def main() -> None:
    """Run all baseline evaluations."""
    variants = {
        "standard": GameRules(),
        "no center": GameRules(center_available=False),
        "3x4": GameRules(additional_column=True),
    }
    matchups = build_matchups()

    all_results = []
    total = len(variants) * len(matchups)
    step = 0
    console.print("\nRunning evaluations...")
    for rules_name, rules in variants.items():
        for x_name, o_name, make_x, make_o in matchups:
            step += 1
            console.print(f"  [{step}/{total}] {x_name} vs {o_name} ({rules_name})...")
            results = evaluate_agents(
                make_x(), make_o(), x_name, o_name, num_games=100, rules=rules
            )
            results["rules"] = rules_name
            all_results.append(results)

    print_table(all_results)


if __name__ == "__main__":
    main()
