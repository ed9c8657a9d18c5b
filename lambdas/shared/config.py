"""Environment configuration for Lambda functions."""
import os
from dataclasses import dataclass

from .exceptions import ConfigurationError

DEFAULT_COMMAND_PREFIX = "!"
DEFAULT_HELP_TRIGGER = "help"


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    command_prefix: str
    help_trigger: str
    environment: str
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Returns:
            Config instance with values from environment

        Raises:
            ConfigurationError: If a variable holds an unusable value
        """
        command_prefix = os.environ.get("COMMAND_PREFIX", DEFAULT_COMMAND_PREFIX)
        if len(command_prefix) != 1 or command_prefix.isspace():
            raise ConfigurationError(
                "COMMAND_PREFIX must be a single non-whitespace character",
                config_key="COMMAND_PREFIX",
            )

        help_trigger = os.environ.get("HELP_TRIGGER", DEFAULT_HELP_TRIGGER)
        if not help_trigger or "".join(help_trigger.split()) != help_trigger:
            raise ConfigurationError(
                "HELP_TRIGGER must be a non-empty word without whitespace",
                config_key="HELP_TRIGGER",
            )

        return cls(
            command_prefix=command_prefix,
            help_trigger=help_trigger,
            environment=os.environ.get("ENVIRONMENT", "dev"),
            log_level=os.environ.get("POWERTOOLS_LOG_LEVEL", "INFO"),
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "prod"


def get_config() -> Config:
    """Get cached configuration instance.

    Returns:
        Config instance (cached after first call)
    """
    if not hasattr(get_config, "_config"):
        get_config._config = Config.from_env()
    return get_config._config
