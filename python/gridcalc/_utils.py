"""Cell identifier helpers: ``"B3"`` <-> zero-based ``(row, col)``."""

from __future__ import annotations

import re

from gridcalc._errors import InvalidCellId, OutOfBounds

MAX_COLUMNS = 26

# One uppercase column letter followed by a 1-based row number.
_CELL_ID_RE = re.compile(r"([A-Z])([1-9][0-9]*)")
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def cell_id_to_coords(cell_id: str) -> tuple[int, int]:
    """Convert ``"C2"`` to ``(1, 2)``.

    Raises InvalidCellId when the column is not ``A``-``Z`` or the row is
    not a positive integer.
    """
    if not isinstance(cell_id, str):
        raise InvalidCellId(f"Cell id must be a string, got {type(cell_id).__name__}")
    m = _CELL_ID_RE.fullmatch(cell_id)
    if m is None:
        if not cell_id or not ("A" <= cell_id[0] <= "Z"):
            raise InvalidCellId(f"Invalid column in cell id {cell_id!r}")
        raise InvalidCellId(f"Invalid row number in cell id {cell_id!r}")
    col = ord(m.group(1)) - ord("A")
    row = int(m.group(2)) - 1
    return row, col


def coords_to_cell_id(row: int, col: int) -> str:
    """Convert zero-based ``(1, 2)`` back to ``"C2"``."""
    if not 0 <= col < MAX_COLUMNS:
        raise InvalidCellId(f"Column index out of range: {col}")
    if row < 0:
        raise InvalidCellId(f"Row index out of range: {row}")
    return f"{chr(ord('A') + col)}{row + 1}"


def is_integer_literal(text: str) -> bool:
    """True for an optionally signed run of ASCII digits."""
    return _INTEGER_RE.fullmatch(text) is not None


def check_bounds(row: int, col: int, rows: int, columns: int, cell_id: str) -> None:
    """Raise OutOfBounds unless zero-based ``(row, col)`` fits a rows x columns grid."""
    if row >= rows:
        raise OutOfBounds(f"Row number out of bounds in cell id {cell_id!r}")
    if col >= columns:
        raise OutOfBounds(f"Column out of bounds in cell id {cell_id!r}")
