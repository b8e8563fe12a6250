"""Value lookup protocol and recalculation result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class ValueLookup(Protocol):
    """Reads the current stored value of the cell at zero-based ``(row, col)``."""

    def __call__(self, coord: tuple[int, int]) -> int:
        ...


@dataclass(frozen=True)
class CellDelta:
    """A single cell's value change from a set_cell_value call."""

    cell_ref: str  # "A1" style
    old_value: int
    new_value: int
    formula: str | None = None  # the formula that produced new_value


@dataclass(frozen=True)
class RecalcResult:
    """Outcome of one set_cell_value call."""

    cell_ref: str  # the cell that was set
    deltas: tuple[CellDelta, ...]  # cells whose value changed, target first
    recomputed_cells: tuple[str, ...] = ()  # dependents re-evaluated, in order
    max_chain_depth: int = 0  # longest dependency chain below cell_ref

    @property
    def changed_cells(self) -> tuple[str, ...]:
        return tuple(d.cell_ref for d in self.deltas)
