"""Sheet: a fixed grid of integer cells with live formula propagation.

Each ``set_cell_value`` call parses the new content, swaps the cell's
dependency edges, checks the affected subgraph for cycles and only then
commits the value and recomputes every transitive dependent once, in
topological order. A failing call leaves the sheet untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from gridcalc._cell import Cell, Content, Formula, Literal
from gridcalc._errors import CycleDetected, ParseError
from gridcalc._utils import (
    MAX_COLUMNS,
    cell_id_to_coords,
    check_bounds,
    coords_to_cell_id,
    is_integer_literal,
)
from gridcalc.calc._evaluator import evaluate
from gridcalc.calc._graph import DependencyGraph
from gridcalc.calc._parser import Coord, FormulaParser
from gridcalc.calc._protocol import CellDelta, RecalcResult

logger = logging.getLogger(__name__)


class Sheet:
    """A rows x columns grid; every cell starts as the literal 0.

    Usage::

        sheet = Sheet(3, 3)
        sheet.set_cell_value("A1", "10")
        sheet.set_cell_value("C3", "=A1:C2")
        sheet.get_cell_value("C3")  # 10
    """

    __slots__ = ("_rows", "_columns", "_cells", "_graph", "_parser")

    def __init__(self, rows: int, columns: int, normalize_ranges: bool = False) -> None:
        if rows <= 0 or columns <= 0:
            raise ValueError("Sheet dimensions must be positive integers")
        if columns > MAX_COLUMNS:
            logger.debug("Clamping %d columns to %d", columns, MAX_COLUMNS)
            columns = MAX_COLUMNS

        self._rows = rows
        self._columns = columns
        self._cells: dict[Coord, Cell] = {
            (r, c): Cell(r, c) for r in range(rows) for c in range(columns)
        }
        self._graph = DependencyGraph()
        self._parser = FormulaParser(normalize_ranges, bounds=(rows, columns))

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def dimensions(self) -> tuple[int, int]:
        return self._rows, self._columns

    # ------------------------------------------------------------------
    # Address resolution
    # ------------------------------------------------------------------

    def _resolve(self, cell_id: str) -> Coord:
        row, col = cell_id_to_coords(cell_id)
        check_bounds(row, col, self._rows, self._columns, cell_id)
        return row, col

    def _lookup(self, coord: Coord) -> int:
        return self._cells[coord].value

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def cell(self, cell_id: str) -> Cell:
        return self._cells[self._resolve(cell_id)]

    def get_cell_value(self, cell_id: str) -> int:
        """Stored value of *cell_id*.

        Raises InvalidCellId for malformed ids and OutOfBounds for ids
        outside the sheet.
        """
        return self._cells[self._resolve(cell_id)].value

    def get_formula(self, cell_id: str) -> str | None:
        """Formula text of *cell_id*, or None for a literal cell."""
        return self.cell(cell_id).formula

    def dependents(self, cell_id: str) -> list[str]:
        """Cells whose formula directly references *cell_id*."""
        coord = self._resolve(cell_id)
        return [coords_to_cell_id(*c) for c in sorted(self._graph.dependents_of(coord))]

    def iter_formula_cells(self) -> Iterator[Cell]:
        """Formula-driven cells in row-major order."""
        for coord in sorted(self._cells):
            cell = self._cells[coord]
            if isinstance(cell.content, Formula):
                yield cell

    def __getitem__(self, key: str) -> int:
        """``sheet['A1']`` -> stored value."""
        return self.get_cell_value(key)

    def __setitem__(self, key: str, value: str | int) -> None:
        """``sheet['A1'] = '=B1+2'`` - shorthand for set_cell_value."""
        self.set_cell_value(key, value)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _parse_content(self, raw: str) -> Content:
        if is_integer_literal(raw):
            return Literal(int(raw))
        if not raw.startswith("="):
            raise ParseError(f"Value is neither an integer nor a formula: {raw!r}")
        return Formula(raw, self._parser.parse(raw))

    def set_cell_value(self, cell_id: str, value: str | int) -> RecalcResult:
        """Set *cell_id* to an integer or ``=`` formula and propagate.

        Blank values count as ``"0"``. Every cell transitively reading
        *cell_id* is recomputed exactly once, after the cells it reads.
        Raises InvalidCellId, OutOfBounds, ParseError or CycleDetected; on
        any of them the sheet is left as it was.
        """
        coord = self._resolve(cell_id)
        raw = str(value).strip() if value is not None else ""
        if not raw:
            raw = "0"

        cell = self._cells[coord]
        old_terms = cell.terms
        content = self._parse_content(raw)
        new_terms = content.terms if isinstance(content, Formula) else ()

        # Swap edges, then validate the affected subgraph before committing.
        self._graph.remove_dependencies(coord, old_terms)
        self._graph.add_dependencies(coord, new_terms)
        try:
            order = self._graph.transitive_dependents(coord)
        except CycleDetected:
            self._graph.remove_dependencies(coord, new_terms)
            self._graph.add_dependencies(coord, old_terms)
            logger.debug("Rejected %s=%r: circular reference", cell_id, raw)
            raise

        deltas: list[CellDelta] = []

        old_value = cell.value
        cell.content = content
        if isinstance(content, Literal):
            cell.value = content.value
        else:
            cell.value = evaluate(content.terms, self._lookup)
        if cell.value != old_value:
            deltas.append(CellDelta(cell_id, old_value, cell.value, cell.formula))

        for dep in order:
            dep_cell = self._cells[dep]
            old_value = dep_cell.value
            dep_cell.value = evaluate(dep_cell.terms, self._lookup)
            if dep_cell.value != old_value:
                deltas.append(CellDelta(
                    cell_ref=dep_cell.coordinate,
                    old_value=old_value,
                    new_value=dep_cell.value,
                    formula=dep_cell.formula,
                ))

        logger.debug(
            "Set %s=%r: recomputed %d dependents, %d cells changed",
            cell_id, raw, len(order), len(deltas),
        )
        return RecalcResult(
            cell_ref=cell_id,
            deltas=tuple(deltas),
            recomputed_cells=tuple(coords_to_cell_id(*c) for c in order),
            max_chain_depth=self._graph.chain_depth(coord, order),
        )

    def calculate(self) -> dict[str, int]:
        """Re-evaluate every formula cell from scratch in topological order.

        Returns a dict of cell id -> value for formula cells. After any
        successful set_cell_value this leaves every value unchanged.
        """
        formula_cells = [(c.row, c.col) for c in self.iter_formula_cells()]
        results: dict[str, int] = {}
        for coord in self._graph.topological_order(formula_cells):
            cell = self._cells[coord]
            cell.value = evaluate(cell.terms, self._lookup)
            results[cell.coordinate] = cell.value
        return results

    def __repr__(self) -> str:
        return f"<Sheet {self._rows}x{self._columns}>"


def create_sheet(rows: int, columns: int, *, normalize_ranges: bool = False) -> Sheet:
    """Create a sheet of *rows* x *columns* cells, columns clamped to 26.

    With ``normalize_ranges=True`` reversed ranges such as ``C2:A1`` are
    swapped into ``A1:C2`` instead of being rejected.
    """
    return Sheet(rows, columns, normalize_ranges=normalize_ranges)
