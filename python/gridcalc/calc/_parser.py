"""Formula parser: splits ``=A1+B2-3+A1:C2`` into signed terms."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from gridcalc._errors import InvalidCellId, ParseError
from gridcalc._utils import cell_id_to_coords, check_bounds, coords_to_cell_id

Coord = tuple[int, int]

_LITERAL_RE = re.compile(r"[0-9]+")
_OPERATORS = ("+", "-")


# ---------------------------------------------------------------------------
# Terms
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LiteralTerm:
    """An integer constant, e.g. the ``10`` in ``=A1+10``."""

    value: int
    sign: int = 1


@dataclass(frozen=True)
class RefTerm:
    """A single cell reference. Ranges expand to one RefTerm per cell."""

    coord: Coord
    sign: int = 1

    @property
    def cell_ref(self) -> str:
        return coords_to_cell_id(*self.coord)


Term = Union[LiteralTerm, RefTerm]


# ---------------------------------------------------------------------------
# Tokenizing
# ---------------------------------------------------------------------------


def tokenize(body: str) -> list[tuple[int, str]]:
    """Split a formula body (no leading ``=``) on ``+`` / ``-``.

    Returns ``(sign, token)`` pairs with surrounding whitespace removed.
    A sign in front of the first token is allowed (``-A1+5``); any other
    empty operand raises ParseError. A blank body yields no tokens.
    """
    if not body.strip():
        return []

    tokens: list[tuple[int, str]] = []
    sign = 1
    start = 0
    for i, ch in enumerate(body):
        if ch not in _OPERATORS:
            continue
        token = body[start:i].strip()
        if token:
            tokens.append((sign, token))
        elif tokens or start > 0:
            raise ParseError(f"Missing operand before {ch!r} at position {i}")
        sign = 1 if ch == "+" else -1
        start = i + 1

    token = body[start:].strip()
    if not token:
        raise ParseError("Formula ends with an operator")
    tokens.append((sign, token))
    return tokens


# ---------------------------------------------------------------------------
# Reference resolution
# ---------------------------------------------------------------------------


def _resolve(cell_id: str, bounds: tuple[int, int] | None = None) -> Coord:
    """Resolve *cell_id*, checking it against ``(rows, columns)`` when given."""
    try:
        row, col = cell_id_to_coords(cell_id)
    except InvalidCellId as e:
        raise ParseError(f"Cannot resolve reference {cell_id!r}: {e}") from e
    if bounds is not None:
        check_bounds(row, col, bounds[0], bounds[1], cell_id)
    return row, col


def expand_range(
    range_ref: str,
    normalize: bool = False,
    bounds: tuple[int, int] | None = None,
) -> list[Coord]:
    """Expand ``"A1:B2"`` into ``[(0, 0), (0, 1), (1, 0), (1, 1)]`` (row-major).

    The first endpoint must be the top-left corner. With ``normalize=True``
    reversed endpoints are swapped instead of rejected. With *bounds* the
    bottom-right corner is checked against ``(rows, columns)`` before any cell is
    produced, raising OutOfBounds.
    """
    parts = range_ref.split(":")
    if len(parts) != 2:
        raise ParseError(f"Invalid range: {range_ref!r}")

    start_id, end_id = parts[0].strip(), parts[1].strip()
    start_row, start_col = _resolve(start_id)
    end_row, end_col = _resolve(end_id)

    if start_row > end_row or start_col > end_col:
        if not normalize:
            raise ParseError(
                f"Range {range_ref!r} must run from top-left to bottom-right"
            )
        start_row, end_row = min(start_row, end_row), max(start_row, end_row)
        start_col, end_col = min(start_col, end_col), max(start_col, end_col)

    if bounds is not None:
        # The bottom-right corner is the largest cell in the range.
        check_bounds(end_row, end_col, bounds[0], bounds[1], range_ref)

    return [
        (r, c)
        for r in range(start_row, end_row + 1)
        for c in range(start_col, end_col + 1)
    ]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_formula(
    formula: str,
    normalize_ranges: bool = False,
    bounds: tuple[int, int] | None = None,
) -> tuple[Term, ...]:
    """Parse ``=...`` formula text into an ordered tuple of terms.

    Each token is classified in order: integer literal, range (contains
    ``:``), single cell reference. Range cells inherit the range's sign.
    *bounds* is the ``(rows, columns)`` of the target sheet; references
    outside it raise OutOfBounds.
    """
    text = formula.strip()
    if not text.startswith("="):
        raise ParseError(f"Formula must start with '=': {formula!r}")

    terms: list[Term] = []
    for sign, token in tokenize(text[1:]):
        if _LITERAL_RE.fullmatch(token):
            terms.append(LiteralTerm(int(token), sign))
        elif ":" in token:
            cells = expand_range(token, normalize_ranges, bounds)
            terms.extend(RefTerm(coord, sign) for coord in cells)
        else:
            terms.append(RefTerm(_resolve(token, bounds), sign))
    return tuple(terms)


def references(terms: tuple[Term, ...]) -> set[Coord]:
    """Distinct cell coordinates referenced by *terms*."""
    return {t.coord for t in terms if isinstance(t, RefTerm)}


class FormulaParser:
    """Parses formulas with a fixed range policy and sheet size.

    A sheet owns one parser so every formula it installs uses the same
    treatment of reversed ranges and the same bounds.
    """

    __slots__ = ("normalize_ranges", "bounds")

    def __init__(
        self,
        normalize_ranges: bool = False,
        bounds: tuple[int, int] | None = None,
    ) -> None:
        self.normalize_ranges = normalize_ranges
        self.bounds = bounds

    def parse(self, formula: str) -> tuple[Term, ...]:
        return parse_formula(formula, self.normalize_ranges, self.bounds)

    def parse_refs(self, formula: str) -> set[Coord]:
        """Cells read by *formula* (ranges expanded)."""
        return references(self.parse(formula))
