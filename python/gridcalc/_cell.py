"""Cell slot and its literal-or-formula content."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from gridcalc._utils import coords_to_cell_id
from gridcalc.calc._parser import Term


@dataclass(frozen=True)
class Literal:
    """An explicitly set integer."""

    value: int = 0


@dataclass(frozen=True)
class Formula:
    """Formula text (with leading ``=``) and its parsed terms."""

    text: str
    terms: tuple[Term, ...] = ()


Content = Union[Literal, Formula]


class Cell:
    """One ``(row, col)`` slot of a Sheet.

    ``value`` is the stored integer; for formula cells it is kept in step
    with ``content`` by the sheet's propagation.
    """

    __slots__ = ("row", "col", "content", "value")

    def __init__(self, row: int, col: int) -> None:
        self.row = row
        self.col = col
        self.content: Content = Literal(0)
        self.value: int = 0

    @property
    def coordinate(self) -> str:
        return coords_to_cell_id(self.row, self.col)

    @property
    def formula(self) -> str | None:
        if isinstance(self.content, Formula):
            return self.content.text
        return None

    @property
    def terms(self) -> tuple[Term, ...]:
        if isinstance(self.content, Formula):
            return self.content.terms
        return ()

    def __repr__(self) -> str:
        if self.formula is not None:
            return f"<Cell {self.coordinate} {self.formula!r} = {self.value}>"
        return f"<Cell {self.coordinate} = {self.value}>"
