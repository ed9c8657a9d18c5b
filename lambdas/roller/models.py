"""Pydantic models for dice formulas, roll results and API bodies."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator

MAX_REPEAT = 99
MAX_DICE = 99
MAX_SIDES = 9999
MAX_FLAT = 9999
MAX_KEEP = 99


class KeepKind(str, Enum):
    """Which end of the sorted roll set a keep modifier retains."""

    HIGHEST = "h"
    LOWEST = "l"


class KeepModifier(BaseModel):
    """Keep only the N highest or lowest dice of a roll."""

    kind: KeepKind
    count: int = Field(..., ge=1, le=MAX_KEEP)


class _SignedTerm(BaseModel):
    sign: int = 1
    """+1 or -1, applied to the term's aggregated value."""

    @field_validator("sign")
    @classmethod
    def validate_sign(cls, v: int) -> int:
        """Only unit signs are meaningful."""
        if v not in (1, -1):
            raise ValueError("sign must be 1 or -1")
        return v


class FlatTerm(_SignedTerm):
    """A constant added to or subtracted from the total, e.g. ``-2``."""

    value: int = Field(..., ge=1, le=MAX_FLAT)

    @property
    def expression(self) -> str:
        """Unsigned text of the term."""
        return str(self.value)


class DiceTerm(_SignedTerm):
    """A dice roll such as ``3d6`` or ``4d6h3``."""

    count: int = Field(..., ge=1, le=MAX_DICE)
    """Number of dice rolled."""

    sides: int = Field(..., ge=1, le=MAX_SIDES)
    """Faces per die."""

    keep: KeepModifier | None = None
    """Optional highest/lowest trim applied before summing."""

    @property
    def expression(self) -> str:
        """Unsigned dice text, as shown in roll traces."""
        text = f"{self.count}d{self.sides}"
        if self.keep is not None:
            text += f"{self.keep.kind.value}{self.keep.count}"
        return text


Term = FlatTerm | DiceTerm


class ParsedFormula(BaseModel):
    """A formula that passed validation and is ready to evaluate."""

    text: str
    """Whitespace-stripped formula, echoed at the front of the report."""

    repeat: int = Field(default=1, ge=1, le=MAX_REPEAT)
    """Number of independent evaluation passes."""

    terms: list[Term] = Field(..., min_length=1)
    """Subcommands in input order."""


class TermResult(BaseModel):
    """Signed contribution of one term in one pass."""

    contribution: int
    fragment: str | None = None
    """Dice trace like ``3d6=1,4,6``; flat terms have none."""


class PassResult(BaseModel):
    """Outcome of one evaluation pass over every term."""

    total: int
    fragments: list[str] = Field(default_factory=list)

    def render(self) -> str:
        """Render as ``[total frag; frag]`` (or ``[total]`` without dice)."""
        if not self.fragments:
            return f"[{self.total}]"
        return f"[{self.total} {'; '.join(self.fragments)}]"


class RollReport(BaseModel):
    """Every pass of an evaluated formula."""

    formula: str
    passes: list[PassResult] = Field(..., min_length=1)

    @property
    def totals(self) -> list[int]:
        """Pass totals in order."""
        return [p.total for p in self.passes]

    def render(self) -> str:
        """Render the full report string sent back to chat."""
        return f"{self.formula}: " + " ".join(p.render() for p in self.passes)


class RollRequest(BaseModel):
    """Request body for direct formula evaluation."""

    formula: str = Field(..., max_length=500)


class ChatMessageRequest(BaseModel):
    """Inbound chat message forwarded by the chat front end."""

    channel: str = Field(..., min_length=1, max_length=200)
    text: str = Field(..., max_length=2000)

    @field_validator("channel")
    @classmethod
    def validate_channel(cls, v: str) -> str:
        """Strip whitespace and reject blank channel names."""
        v = v.strip()
        if not v:
            raise ValueError("channel cannot be blank")
        return v
