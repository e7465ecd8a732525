"""Utility modules for profqc."""

from profqc.utils.config import load_config
from profqc.utils.exceptions import (
    ProfQCError,
    QCError,
    VariableNotFoundError,
    UnknownCheckError,
    ProfileIOError,
    ConfigError,
    ValidationError,
)
from profqc.utils.logging import setup_logging, get_logger

__all__ = [
    "load_config",
    "ProfQCError",
    "QCError",
    "VariableNotFoundError",
    "UnknownCheckError",
    "ProfileIOError",
    "ConfigError",
    "ValidationError",
    "setup_logging",
    "get_logger",
]
