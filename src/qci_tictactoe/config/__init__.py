"""QCI configuration."""

from qci_tictactoe.config.loader import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    create_default_config,
    get_config_paths,
    load_config,
    save_config,
    validate_config_file,
)
from qci_tictactoe.config.models import LoggingConfig, PacingConfig, PlayerConfig, QCIConfig

__all__ = [
    "QCIConfig",
    "PlayerConfig",
    "PacingConfig",
    "LoggingConfig",
    "CONFIG_DIR_NAME",
    "CONFIG_FILE_NAME",
    "load_config",
    "save_config",
    "create_default_config",
    "validate_config_file",
    "get_config_paths",
]
