"""Evaluates parsed formula terms against stored cell values."""

from __future__ import annotations

from gridcalc.calc._parser import LiteralTerm, RefTerm, Term
from gridcalc.calc._protocol import ValueLookup


def evaluate(terms: tuple[Term, ...], lookup: ValueLookup) -> int:
    """Fold *terms* left to right into an integer.

    Referenced cells are read through *lookup* as currently stored; no
    recursive recomputation happens here, so callers must evaluate cells
    in dependency order. An empty term sequence evaluates to 0.
    """
    total = 0
    for term in terms:
        if isinstance(term, LiteralTerm):
            total += term.sign * term.value
        elif isinstance(term, RefTerm):
            total += term.sign * lookup(term.coord)
        else:
            raise TypeError(f"Unknown term type: {type(term).__name__}")
    return total
