"""Shared utilities for roll bot Lambda functions."""

from .config import Config, get_config
from .exceptions import ConfigurationError, GrammarError, RollbotError
from .utils import extract_user_id

__all__ = [
    # Config
    "Config",
    "get_config",
    # Exceptions
    "ConfigurationError",
    "GrammarError",
    "RollbotError",
    # Utils
    "extract_user_id",
]
