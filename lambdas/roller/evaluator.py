"""Dice resolution and per-pass aggregation.

Only ever called with a validated ``ParsedFormula``; every value here is
already an integer within the grammar's bounds.
"""

import random

from .models import (
    DiceTerm,
    KeepKind,
    KeepModifier,
    ParsedFormula,
    PassResult,
    RollReport,
    Term,
    TermResult,
)


def roll_dice(count: int, sides: int, rng: random.Random) -> list[int]:
    """Roll dice and return individual results.

    Args:
        count: Number of dice to roll
        sides: Number of sides on each die
        rng: Random source to draw from

    Returns:
        List of individual roll results, in roll order
    """
    return [rng.randint(1, sides) for _ in range(count)]


def keep_dice(rolls: list[int], keep: KeepModifier | None) -> list[int]:
    """Trim ascending rolls down to the dice a keep modifier retains.

    The keep count is clamped to the number of rolls, so asking for more
    dice than were rolled keeps all of them.

    Args:
        rolls: Roll results sorted ascending
        keep: Keep modifier, or None to keep everything

    Returns:
        The retained rolls, still ascending
    """
    if keep is None:
        return list(rolls)
    n = min(keep.count, len(rolls))
    if keep.kind == KeepKind.HIGHEST:
        return rolls[len(rolls) - n :]
    return rolls[:n]


def evaluate_term(term: Term, rng: random.Random) -> TermResult:
    """Resolve one term to its signed contribution and trace fragment."""
    if not isinstance(term, DiceTerm):
        return TermResult(contribution=term.sign * term.value)

    rolls = sorted(roll_dice(term.count, term.sides, rng))
    fragment = f"{term.expression}=" + ",".join(str(r) for r in rolls)
    kept = keep_dice(rolls, term.keep)
    return TermResult(contribution=term.sign * sum(kept), fragment=fragment)


def evaluate_pass(terms: list[Term], rng: random.Random) -> PassResult:
    """Evaluate every term once, in order, and total the contributions."""
    total = 0
    fragments: list[str] = []
    for term in terms:
        result = evaluate_term(term, rng)
        total += result.contribution
        if result.fragment is not None:
            fragments.append(result.fragment)
    return PassResult(total=total, fragments=fragments)


def evaluate_formula(parsed: ParsedFormula, rng: random.Random) -> RollReport:
    """Run ``parsed.repeat`` independent passes over the formula's terms."""
    passes = [evaluate_pass(parsed.terms, rng) for _ in range(parsed.repeat)]
    return RollReport(formula=parsed.text, passes=passes)
