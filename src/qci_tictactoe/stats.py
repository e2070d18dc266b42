"""Session win/loss/draw tracking."""

from dataclasses import dataclass, replace
from typing import Dict, Optional

from qci_tictactoe.board import Player


@dataclass(frozen=True)
class GameStats:
    """Tally of finished games between the human and QCI."""

    total_games: int = 0
    human_wins: int = 0
    qci_wins: int = 0

    def record(self, winner: Optional[Player], human: Player) -> "GameStats":
        """
        Record one finished game.

        Args:
            winner: The winning player, or None for a draw
            human: Which mark the human played

        Returns:
            A new GameStats including the result
        """
        return replace(
            self,
            total_games=self.total_games + 1,
            human_wins=self.human_wins + (1 if winner is human else 0),
            qci_wins=self.qci_wins + (1 if winner is not None and winner is not human else 0),
        )

    @property
    def draws(self) -> int:
        return self.total_games - self.human_wins - self.qci_wins

    @property
    def human_win_rate(self) -> float:
        return self.human_wins / self.total_games if self.total_games > 0 else 0.0

    @property
    def qci_win_rate(self) -> float:
        return self.qci_wins / self.total_games if self.total_games > 0 else 0.0

    @property
    def draw_rate(self) -> float:
        return self.draws / self.total_games if self.total_games > 0 else 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "total_games": self.total_games,
            "human_wins": self.human_wins,
            "qci_wins": self.qci_wins,
            "draws": self.draws,
            "human_win_rate": self.human_win_rate,
            "qci_win_rate": self.qci_win_rate,
            "draw_rate": self.draw_rate,
        }
