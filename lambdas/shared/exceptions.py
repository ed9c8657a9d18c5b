"""Custom exceptions for the roll bot."""


class RollbotError(Exception):
    """Base exception for all roll bot errors."""

    def __init__(self, message: str = "An error occurred") -> None:
        """Initialize exception with message.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(self.message)


class GrammarError(RollbotError):
    """Dice formula does not match the roll grammar."""

    def __init__(self, message: str, fragments: list[str] | None = None) -> None:
        """Initialize grammar error.

        Args:
            message: Error message
            fragments: Pieces of the formula that failed validation
                (the repeat count and/or individual subcommands)
        """
        self.fragments = list(fragments or [])
        super().__init__(message)


class ConfigurationError(RollbotError):
    """Configuration or environment error."""

    def __init__(self, message: str, config_key: str | None = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            config_key: Optional configuration key that caused the error
        """
        self.config_key = config_key
        super().__init__(message)
