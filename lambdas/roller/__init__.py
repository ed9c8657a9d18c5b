"""Roller module: dice formula parsing, evaluation and chat replies."""

from .chat import ChatTransport, RollBot
from .grammar import parse_formula
from .models import (
    DiceTerm,
    FlatTerm,
    KeepKind,
    KeepModifier,
    ParsedFormula,
    PassResult,
    RollReport,
)
from .service import HELP_MESSAGE, INVALID_COMMAND_MESSAGE, RollService, evaluate

__all__ = [
    "ChatTransport",
    "DiceTerm",
    "FlatTerm",
    "HELP_MESSAGE",
    "INVALID_COMMAND_MESSAGE",
    "KeepKind",
    "KeepModifier",
    "ParsedFormula",
    "PassResult",
    "RollBot",
    "RollReport",
    "RollService",
    "evaluate",
    "parse_formula",
]
