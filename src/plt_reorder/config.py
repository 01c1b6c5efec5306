"""
PLT Reorder - Configuration
===========================

Conversion defaults shared by the library and the `pltreorder` CLI.
Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line options (applied by the CLI on top of the above)

Environment variables (all optional):
    PLT_REORDER_ORDER: Default full ordering, e.g. "3456712"
    PLT_REORDER_MAX_CHUNKS: Upper bound on chunks per file (integer)
    PLT_REORDER_MAX_FILE_SIZE: Largest input file in bytes (integer)
    PLT_REORDER_LOG_LEVEL: Logging level name (DEBUG, INFO, WARNING, ...)
"""

from dataclasses import dataclass
from typing import Optional
import logging
import os

from plt_reorder.errors import OrderError
from plt_reorder.plot.emitter import MAX_FILE_SIZE
from plt_reorder.plot.ordering import DEFAULT_ORDER, full_order, parse_pens

logger = logging.getLogger(__name__)


@dataclass
class ReorderConfig:
    """
    Settings for a conversion.

    Attributes:
        default_order: Ordering used when the caller gives none
            (default: 3,4,5,6,7,1,2,0)
        max_chunks: Upper bound on chunks per file, None for unbounded
        max_file_size: Largest input file accepted, in bytes
        log_level: Logging level name used by the CLI when not verbose
    """

    default_order: tuple[int, ...] = DEFAULT_ORDER
    max_chunks: Optional[int] = None
    max_file_size: int = MAX_FILE_SIZE
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "ReorderConfig":
        """
        Create a ReorderConfig from environment variables.

        Invalid values are ignored and the built-in default is kept.
        """
        config = cls()

        if order := os.environ.get("PLT_REORDER_ORDER"):
            try:
                config.default_order = full_order(parse_pens(order)).pens
            except OrderError as e:
                logger.warning(f"Ignoring PLT_REORDER_ORDER: {e}")

        if max_chunks := os.environ.get("PLT_REORDER_MAX_CHUNKS"):
            try:
                value = int(max_chunks)
                if value > 0:
                    config.max_chunks = value
            except ValueError:
                pass  # Ignore invalid values

        if max_size := os.environ.get("PLT_REORDER_MAX_FILE_SIZE"):
            try:
                value = int(max_size)
                if value > 0:
                    config.max_file_size = value
            except ValueError:
                pass

        if level := os.environ.get("PLT_REORDER_LOG_LEVEL"):
            if isinstance(logging.getLevelName(level.upper()), int):
                config.log_level = level.upper()

        return config

    def get_log_level(self) -> int:
        """Numeric logging level for log_level."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING


# Global default configuration (can be overridden in tests)
_default_config: Optional[ReorderConfig] = None


def get_default_config() -> ReorderConfig:
    """
    Get the default configuration.

    Created from environment variables on first access.
    Can be overridden by calling set_default_config().
    """
    global _default_config
    if _default_config is None:
        _default_config = ReorderConfig.from_env()
    return _default_config


def set_default_config(config: Optional[ReorderConfig]) -> None:
    """
    Set the default configuration.

    Pass None to re-read the environment on next access.
    """
    global _default_config
    _default_config = config
