"""Normalizer, tokenizer and validator for dice formulas.

A formula looks like ``repeat#subcommand+subcommand-flat``:

    formula    := [repeat "#"] command
    repeat     := number(2)
    command    := [sign] term {sign term}
    term       := flat | dice
    flat       := number(4)
    dice       := number(2) "d" number(4) [("h" | "l") number(2)]
    number(n)  := 1 to n decimal digits, no leading zero

Validation happens completely before any dice are rolled: ``parse_formula``
either returns a ``ParsedFormula`` of typed terms or raises ``GrammarError``.
"""

from aws_lambda_powertools import Logger

from shared.exceptions import GrammarError

from .models import DiceTerm, FlatTerm, KeepKind, KeepModifier, ParsedFormula, Term

logger = Logger(child=True)

DIGITS = "0123456789"
SIGNS = "+-"
REPEAT_SEPARATOR = "#"


def normalize(formula: str) -> str:
    """Remove every whitespace character from a formula."""
    return "".join(formula.split())


def split_repeat(text: str) -> tuple[str, str]:
    """Split normalized text into (repeat text, command text) at the first '#'.

    Without a '#' the repeat defaults to "1" and the whole text is the command.
    """
    repeat, sep, command = text.partition(REPEAT_SEPARATOR)
    if not sep:
        return "1", text
    return repeat, command


def sign_command(command: str) -> str:
    """Make the leading term's sign explicit."""
    if command[:1] in ("+", "-"):
        return command
    return "+" + command


def split_subcommands(command: str) -> list[str]:
    """Split a signed command before every '+' or '-' past the first character.

    Dangling signs are kept as their own pieces so validation can reject them:

        >>> split_subcommands("+3d6+1d20-2")
        ['+3d6', '+1d20', '-2']
        >>> split_subcommands("+3d6+")
        ['+3d6', '+']
    """
    pieces: list[str] = []
    start = 0
    for i, char in enumerate(command):
        if i > 0 and char in SIGNS:
            pieces.append(command[start:i])
            start = i
    pieces.append(command[start:])
    return pieces


class _Scanner:
    """Cursor over a single subcommand or repeat string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def peek(self) -> str:
        return self.text[self.pos : self.pos + 1]

    def accept(self, chars: str) -> str | None:
        char = self.peek()
        if char and char in chars:
            self.pos += 1
            return char
        return None

    def expect(self, chars: str) -> str:
        char = self.accept(chars)
        if char is None:
            raise self.error(f"expected one of {chars!r}")
        return char

    def number(self, max_digits: int) -> int:
        """Read 1..max_digits ASCII digits without a leading zero."""
        start = self.pos
        while self.peek() and self.peek() in DIGITS:
            self.pos += 1
        digits = self.text[start : self.pos]
        if not digits:
            raise self.error("expected a number")
        if digits[0] == "0":
            raise self.error("numbers cannot start with 0")
        if len(digits) > max_digits:
            raise self.error(f"number longer than {max_digits} digits")
        return int(digits)

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def expect_end(self) -> None:
        if not self.at_end():
            raise self.error("unexpected trailing characters")

    def error(self, reason: str) -> GrammarError:
        return GrammarError(
            f"Invalid {self.text!r} at position {self.pos}: {reason}",
            fragments=[self.text],
        )


def parse_repeat(text: str) -> int:
    """Parse a repeat count (1-99).

    Raises:
        GrammarError: If the text is not a valid repeat count
    """
    scanner = _Scanner(text)
    value = scanner.number(2)
    scanner.expect_end()
    return value


def parse_subcommand(text: str) -> Term:
    """Parse one signed subcommand into a flat or dice term.

    Args:
        text: Subcommand such as "+3d6h2" or "-4"

    Returns:
        FlatTerm or DiceTerm with integer fields

    Raises:
        GrammarError: If the subcommand does not match the grammar
    """
    scanner = _Scanner(text)
    sign = 1 if scanner.expect(SIGNS) == "+" else -1

    # Flat values allow four digits, dice counts only two; read the wider
    # form and narrow once we know which one it is.
    count_start = scanner.pos
    leading = scanner.number(4)

    if scanner.at_end():
        return FlatTerm(sign=sign, value=leading)

    if scanner.pos - count_start > 2:
        raise scanner.error("dice count longer than 2 digits")
    scanner.expect("d")
    sides = scanner.number(4)

    keep = None
    kind = scanner.accept("hl")
    if kind is not None:
        keep = KeepModifier(kind=KeepKind(kind), count=scanner.number(2))

    scanner.expect_end()
    return DiceTerm(sign=sign, count=leading, sides=sides, keep=keep)


def is_valid_repeat(text: str) -> bool:
    """Return True if text is a valid repeat count."""
    try:
        parse_repeat(text)
    except GrammarError:
        return False
    return True


def is_valid_subcommand(text: str) -> bool:
    """Return True if text is a valid flat or dice subcommand."""
    try:
        parse_subcommand(text)
    except GrammarError:
        return False
    return True


def parse_formula(formula: str) -> ParsedFormula:
    """Normalize, tokenize and validate a whole formula.

    The repeat count and every subcommand are checked independently; if any
    of them fails, nothing is returned and the error lists every bad piece.

    Args:
        formula: Raw formula text, whitespace allowed

    Returns:
        ParsedFormula ready for evaluation

    Raises:
        GrammarError: If the repeat count or any subcommand is invalid
    """
    text = normalize(formula)
    repeat_text, command = split_repeat(text)
    pieces = split_subcommands(sign_command(command))

    rejected: list[str] = []
    repeat = 1
    try:
        repeat = parse_repeat(repeat_text)
    except GrammarError:
        rejected.append(repeat_text)

    terms: list[Term] = []
    for piece in pieces:
        try:
            terms.append(parse_subcommand(piece))
        except GrammarError:
            rejected.append(piece)

    if rejected:
        logger.debug("Formula failed validation", extra={"formula": text, "rejected": rejected})
        raise GrammarError(f"Invalid dice formula: {text!r}", fragments=rejected)

    return ParsedFormula(text=text, repeat=repeat, terms=terms)
