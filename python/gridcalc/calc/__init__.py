"""gridcalc.calc - Formula parsing, dependency tracking and evaluation."""

from gridcalc.calc._evaluator import evaluate
from gridcalc.calc._graph import DependencyGraph
from gridcalc.calc._parser import (
    FormulaParser,
    LiteralTerm,
    RefTerm,
    Term,
    expand_range,
    parse_formula,
    references,
    tokenize,
)
from gridcalc.calc._protocol import CellDelta, RecalcResult, ValueLookup

__all__ = [
    "CellDelta",
    "DependencyGraph",
    "FormulaParser",
    "LiteralTerm",
    "RecalcResult",
    "RefTerm",
    "Term",
    "ValueLookup",
    "evaluate",
    "expand_range",
    "parse_formula",
    "references",
    "tokenize",
]
