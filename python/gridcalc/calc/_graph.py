"""Dependency graph for formula cells with topological ordering."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Iterator

from gridcalc._errors import CycleDetected
from gridcalc._utils import coords_to_cell_id
from gridcalc.calc._parser import Coord, Term, references

logger = logging.getLogger(__name__)

# DFS colouring for transitive_dependents; unvisited cells are absent.
_IN_PROGRESS = 1
_DONE = 2


class DependencyGraph:
    """Tracks which cells read which, keyed by zero-based ``(row, col)``.

    Edges are derived from formula terms only: callers must remove the
    edges of a cell's previous formula before adding those of a new one.
    """

    __slots__ = ("dependencies", "dependents")

    def __init__(self) -> None:
        # cell -> set of cells its formula reads from
        self.dependencies: dict[Coord, set[Coord]] = {}
        # cell -> set of cells whose formula reads from it (reverse edges)
        self.dependents: dict[Coord, set[Coord]] = {}

    def add_dependencies(self, owner: Coord, terms: tuple[Term, ...]) -> None:
        """Register *owner* as a dependent of every cell its terms reference."""
        refs = references(terms)
        if not refs:
            return
        self.dependencies.setdefault(owner, set()).update(refs)
        for ref in refs:
            self.dependents.setdefault(ref, set()).add(owner)

    def remove_dependencies(self, owner: Coord, terms: tuple[Term, ...]) -> None:
        """Drop the edges that *terms* (owner's old formula) implied."""
        refs = references(terms)
        for ref in refs:
            readers = self.dependents.get(ref)
            if readers is None:
                continue
            readers.discard(owner)
            if not readers:
                del self.dependents[ref]

        deps = self.dependencies.get(owner)
        if deps is not None:
            deps.difference_update(refs)
            if not deps:
                del self.dependencies[owner]

    def dependents_of(self, cell: Coord) -> frozenset[Coord]:
        return frozenset(self.dependents.get(cell, ()))

    def dependencies_of(self, cell: Coord) -> frozenset[Coord]:
        return frozenset(self.dependencies.get(cell, ()))

    def _children(self, cell: Coord) -> Iterator[Coord]:
        # Sorted so traversal (and therefore recompute order) is deterministic.
        return iter(sorted(self.dependents.get(cell, ())))

    def transitive_dependents(self, start: Coord) -> list[Coord]:
        """Every cell reachable from *start* via dependents, in evaluation order.

        Iterative depth-first search; the reverse post-order puts each cell
        after all cells it reads from within the result. *start* itself is
        not included. Raises CycleDetected on a back-edge, including one
        leading back to *start*.
        """
        state: dict[Coord, int] = {start: _IN_PROGRESS}
        post_order: list[Coord] = []
        stack: list[tuple[Coord, Iterator[Coord]]] = [(start, self._children(start))]

        while stack:
            cell, children = stack[-1]
            for child in children:
                seen = state.get(child)
                if seen is None:
                    state[child] = _IN_PROGRESS
                    stack.append((child, self._children(child)))
                    break
                if seen == _IN_PROGRESS:
                    path = [c for c, _ in stack]
                    loop = path[path.index(child):] + [child]
                    cycle = [coords_to_cell_id(*c) for c in loop]
                    logger.debug("Cycle found while walking from %s: %s", cycle[0], cycle)
                    raise CycleDetected(cycle)
            else:
                stack.pop()
                state[cell] = _DONE
                if cell != start:
                    post_order.append(cell)

        post_order.reverse()
        return post_order

    def topological_order(self, cells: Iterable[Coord] | None = None) -> list[Coord]:
        """Return formula cells in evaluation order (Kahn's algorithm).

        *cells* defaults to every cell that has at least one reference;
        pass the full set of formula cells to include constant formulas.
        Raises CycleDetected if a circular reference is present.
        """
        formula_cells = set(self.dependencies) if cells is None else set(cells)
        if not formula_cells:
            return []

        # Compute in-degrees within formula cells only
        in_degree: dict[Coord, int] = {}
        for cell in formula_cells:
            deps = self.dependencies.get(cell, set())
            in_degree[cell] = len(deps & formula_cells)

        queue: deque[Coord] = deque(sorted(c for c in formula_cells if in_degree[c] == 0))

        order: list[Coord] = []
        while queue:
            cell = queue.popleft()
            order.append(cell)
            for dep in sorted(self.dependents.get(cell, ())):
                if dep in formula_cells:
                    in_degree[dep] -= 1
                    if in_degree[dep] == 0:
                        queue.append(dep)

        if len(order) != len(formula_cells):
            missing = sorted(formula_cells - set(order))
            raise CycleDetected([coords_to_cell_id(*c) for c in missing])

        return order

    def chain_depth(self, start: Coord, order: list[Coord]) -> int:
        """Longest dependency chain from *start* through *order*.

        *order* is the result of ``transitive_dependents(start)``; each
        cell's depth is one more than the deepest cell it reads from
        within the walk, so no further traversal is needed.
        """
        depth: dict[Coord, int] = {start: 0}
        max_d = 0
        for cell in order:
            d = 1 + max(
                depth[ref] for ref in self.dependencies.get(cell, ()) if ref in depth
            )
            depth[cell] = d
            max_d = max(max_d, d)
        return max_d
