"""Exception types raised by gridcalc sheets and the calc engine."""

from __future__ import annotations


class SheetError(Exception):
    """Base class for every failure reported by a sheet."""


class InvalidCellId(SheetError, ValueError):
    """Cell identifier text is malformed (bad column letter or row number)."""


class OutOfBounds(SheetError, IndexError):
    """Cell identifier is well-formed but lies outside the sheet."""


class ParseError(SheetError, ValueError):
    """Formula text contains a token that is not an integer or a reference."""


class CycleDetected(SheetError, ValueError):
    """Installing a formula would make a cell depend on itself."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__(f"Circular reference detected involving: {', '.join(cycle)}")
