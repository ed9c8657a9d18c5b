"""Roll service: the ``evaluate(formula) -> report`` entry point."""

import random

from aws_lambda_powertools import Logger

from shared.config import DEFAULT_HELP_TRIGGER
from shared.exceptions import GrammarError

from .evaluator import evaluate_formula
from .grammar import normalize, parse_formula
from .models import RollReport

logger = Logger(child=True)

HELP_MESSAGE = (
    "here is some help:\n"
    "!3d6 -> roll three six-sided die\n"
    "!3d6h2 -> roll three six-sided die and keep the two highest\n"
    "!3d6l2 -> roll three six-sided die and keep the two lowest\n"
    "!2#3d6 -> roll three six-sided die two times"
)

INVALID_COMMAND_MESSAGE = "this command is invalid"


class RollService:
    """Validates and evaluates dice formulas.

    Each service owns its random generator; pass a seeded or scripted
    ``random.Random`` to make rolls reproducible.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        help_trigger: str = DEFAULT_HELP_TRIGGER,
    ) -> None:
        """Initialize the service.

        Args:
            rng: Random source for dice; a fresh generator if omitted
            help_trigger: Text that requests the help message
        """
        self.rng = rng if rng is not None else random.Random()
        self.help_trigger = help_trigger

    def is_help(self, formula: str) -> bool:
        """Check whether the formula (ignoring whitespace) asks for help."""
        return normalize(formula) == self.help_trigger

    def roll(self, formula: str) -> RollReport:
        """Validate and evaluate a formula.

        Args:
            formula: Dice formula, e.g. "2#3d6h2+1"

        Returns:
            Structured report of every pass

        Raises:
            GrammarError: If the formula is invalid; no dice are rolled
        """
        parsed = parse_formula(formula)
        return evaluate_formula(parsed, self.rng)

    def answer(self, formula: str) -> tuple[str, RollReport | None]:
        """Evaluate a formula into the reply text and, if rolled, its report.

        Never raises for bad input: help requests get the help text and
        invalid formulas get the fixed invalid-command message.

        Args:
            formula: Prefix-stripped formula text from the chat front end

        Returns:
            Tuple of (reply text, report); the report is None when no
            dice were rolled
        """
        if self.is_help(formula):
            return HELP_MESSAGE, None

        try:
            report = self.roll(formula)
        except GrammarError as e:
            logger.info(
                "Rejected dice formula",
                extra={"formula": formula, "rejected": e.fragments},
            )
            return INVALID_COMMAND_MESSAGE, None

        result = report.render()
        logger.info(
            "Dice roll evaluated",
            extra={"formula": report.formula, "totals": report.totals, "result": result},
        )
        return result, report

    def evaluate(self, formula: str) -> str:
        """Evaluate a formula into the text shown to the user."""
        return self.answer(formula)[0]


def evaluate(formula: str, help_trigger: str = DEFAULT_HELP_TRIGGER) -> str:
    """Evaluate a formula with a fresh service and random generator."""
    return RollService(help_trigger=help_trigger).evaluate(formula)
