"""Configuration models for QCI."""

import os
import re
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from qci_tictactoe.board import GameRules, Player
from qci_tictactoe.mind import QuantumMind, SelectionRule


class PlayerConfig(BaseModel):
    """Who plays which side and how QCI decides."""

    model_config = ConfigDict(extra="forbid")

    human_symbol: str = Field(default="X", description="Mark played by the human")
    seed: Optional[int] = Field(default=None, description="Seed for phase jitter")
    selection_rule: str = Field(
        default=SelectionRule.SUPPORT.value, description="Cell scoring rule"
    )

    @field_validator("human_symbol")
    @classmethod
    def validate_human_symbol(cls, v: str) -> str:
        """Validate the human's mark."""
        symbol = v.strip().upper()
        if symbol not in ("X", "O"):
            raise ValueError("human_symbol must be 'X' or 'O'")
        return symbol

    @field_validator("selection_rule")
    @classmethod
    def validate_selection_rule(cls, v: str) -> str:
        """Validate selection rule name."""
        valid_rules = [rule.value for rule in SelectionRule]
        if v not in valid_rules:
            raise ValueError(f"selection_rule must be one of: {', '.join(valid_rules)}")
        return v

    @property
    def human(self) -> Player:
        return Player(self.human_symbol)

    def build_mind(self) -> QuantumMind:
        """Create the engine described by this section."""
        return QuantumMind(selection_rule=SelectionRule(self.selection_rule), seed=self.seed)


class PacingConfig(BaseModel):
    """Cosmetic delays around QCI's turn."""

    model_config = ConfigDict(extra="forbid")

    think_delay_ms: int = Field(
        default=600, description="Pause before QCI's move is shown, in milliseconds"
    )

    @field_validator("think_delay_ms")
    @classmethod
    def validate_delay(cls, v: int) -> int:
        """Validate delay range."""
        if v < 0:
            raise ValueError("think_delay_ms cannot be negative")
        if v > 10000:
            raise ValueError("think_delay_ms cannot exceed 10000")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid")

    level: str = Field(default="WARNING", description="Log level")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if v.upper() not in valid_levels:
            raise ValueError(f"level must be one of: {', '.join(valid_levels)}")
        return v.upper()


class QCIConfig(BaseModel):
    """Main QCI configuration."""

    model_config = ConfigDict(extra="forbid")

    rules: GameRules = Field(default_factory=GameRules, description="Game rules")
    player: PlayerConfig = Field(
        default_factory=PlayerConfig, description="Player configuration"
    )
    pacing: PacingConfig = Field(
        default_factory=PacingConfig, description="Pacing configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @classmethod
    def from_raw(cls, data: Dict[str, Any]) -> "QCIConfig":
        """Validate raw file data after resolving ``${VAR:default}`` references."""
        return cls(**_resolve_env_vars_recursive(data))


def _resolve_env_vars_recursive(obj: Any) -> Any:
    """Recursively resolve environment variables in configuration."""
    if isinstance(obj, dict):
        return {key: _resolve_env_vars_recursive(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_resolve_env_vars_recursive(item) for item in obj]
    elif isinstance(obj, str):
        return _resolve_env_var_string(obj)
    else:
        return obj


def _resolve_env_var_string(value: str) -> str:
    """Resolve environment variables in a string."""
    # Pattern for ${VAR_NAME} or ${VAR_NAME:default_value}
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replace_var(match):
        var_name = match.group(1)
        default_value = match.group(2) if match.group(2) is not None else ""
        return os.getenv(var_name, default_value)

    return re.sub(pattern, replace_var, value)
