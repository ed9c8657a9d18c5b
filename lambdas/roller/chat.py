"""Chat front-end glue: prefix detection and replies."""

from collections.abc import Callable
from typing import Protocol

from aws_lambda_powertools import Logger

from shared.config import DEFAULT_COMMAND_PREFIX

from .service import RollService

logger = Logger(child=True)

MessageCallback = Callable[[str, str, str], object]


class ChatTransport(Protocol):
    """Protocol for the chat connection (IRC, Discord, webhook, ...)."""

    def send(self, channel: str, text: str) -> None:
        """Send text to a channel."""
        ...

    def on_message(self, callback: MessageCallback) -> None:
        """Register callback(sender, channel, text) for inbound messages."""
        ...


class RollBot:
    """Answers prefixed chat messages with dice roll reports."""

    def __init__(
        self,
        service: RollService,
        prefix: str = DEFAULT_COMMAND_PREFIX,
    ) -> None:
        """Initialize the bot.

        Args:
            service: Roll service that evaluates formulas
            prefix: Character that marks a message as a roll command
        """
        self.service = service
        self.prefix = prefix
        self._transport: ChatTransport | None = None

    def attach(self, transport: ChatTransport) -> None:
        """Listen to a transport and reply through it."""
        self._transport = transport
        transport.on_message(self.handle_message)

    def extract_formula(self, text: str) -> str | None:
        """Return the formula after the prefix, or None for ordinary chat."""
        if not text.startswith(self.prefix):
            return None
        return text[len(self.prefix) :]

    def handle_message(self, sender: str, channel: str, text: str) -> str | None:
        """Handle one inbound message.

        Args:
            sender: Identifier of the user who wrote the message
            channel: Channel the message arrived on
            text: Raw message text

        Returns:
            The reply "<sender>, <result>", or None if the message
            was not a roll command
        """
        formula = self.extract_formula(text)
        if formula is None:
            return None

        reply = f"{sender}, {self.service.evaluate(formula)}"
        logger.debug("Replying to roll command", extra={"sender": sender, "channel": channel})
        if self._transport is not None:
            self._transport.send(channel, reply)
        return reply
