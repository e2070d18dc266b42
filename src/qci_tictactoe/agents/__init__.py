"""Agents that can take a side in a QCI Tic-Tac-Toe game."""

from qci_tictactoe.agents.base import Agent
from qci_tictactoe.agents.random import RandomAgent
from qci_tictactoe.agents.heuristic import HeuristicAgent
from qci_tictactoe.agents.quantum import QuantumAgent

__all__ = ["Agent", "RandomAgent", "HeuristicAgent", "QuantumAgent"]
