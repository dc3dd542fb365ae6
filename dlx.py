# dlx.py
# Algorithm X (Dancing Links) over the arena node graph

from __future__ import annotations

import logging
import sys
from typing import Callable, Iterable, Iterator, Sequence

from config import CFG
from matrix import ROOT, NodeGraph, build

logger = logging.getLogger(__name__)

Emit = Callable[[list[int]], None]


def _stack_depth() -> int:
    depth = 0
    frame = sys._getframe()
    while frame is not None:
        depth += 1
        frame = frame.f_back
    return depth


class DLXSolver:
    def __init__(self, graph: NodeGraph):
        self.graph = graph

    @classmethod
    def from_rows(cls, num_columns: int, rows: Iterable[tuple[int, Iterable[int]]]) -> "DLXSolver":
        return cls(build(num_columns, rows))

    def cover(self, column: int) -> None:
        g = self.graph
        left, right, up, down, col, size = g.left, g.right, g.up, g.down, g.column, g.size

        right[left[column]] = right[column]
        left[right[column]] = left[column]
        row = down[column]
        while row != column:
            node = right[row]
            while node != row:
                up[down[node]] = up[node]
                down[up[node]] = down[node]
                size[col[node]] -= 1
                node = right[node]
            row = down[row]

    def uncover(self, column: int) -> None:
        g = self.graph
        left, right, up, down, col, size = g.left, g.right, g.up, g.down, g.column, g.size

        row = up[column]
        while row != column:
            node = left[row]
            while node != row:
                size[col[node]] += 1
                up[down[node]] = node
                down[up[node]] = node
                node = left[node]
            row = up[row]
        left[right[column]] = column
        right[left[column]] = column

    def _cover_row(self, row: int) -> None:
        g = self.graph
        node = g.right[row]
        while node != row:
            self.cover(g.column[node])
            node = g.right[node]

    def _uncover_row(self, row: int) -> None:
        g = self.graph
        node = g.left[row]
        while node != row:
            self.uncover(g.column[node])
            node = g.left[node]

    def choose_column(self) -> int:
        # Heuristic: choose column with smallest size, leftmost on ties.
        g = self.graph
        c = g.right[ROOT]
        best = c
        while c != ROOT:
            if g.size[c] < g.size[best]:
                best = c
            c = g.right[c]
        return best

    def _ensure_recursion_limit(self) -> None:
        # Every chosen row removes at least one column from the header ring,
        # on top of whatever the caller already has on the stack.
        needed = _stack_depth() + self.graph.num_columns + CFG.RECURSION_HEADROOM
        if sys.getrecursionlimit() < needed:
            logger.debug("raising recursion limit to %d", needed)
            sys.setrecursionlimit(needed)

    def solve(self) -> Iterator[list[int]]:
        """
        Yield every exact cover as a list of row ids in the order chosen.

        The graph is restored when the generator finishes or is closed early.
        """
        g = self.graph
        solution: list[int] = []

        def search():
            if g.right[ROOT] == ROOT:
                yield list(solution)
                return

            column = self.choose_column()
            self.cover(column)
            try:
                row = g.down[column]
                while row != column:
                    solution.append(g.row_id[row])
                    self._cover_row(row)
                    try:
                        yield from search()
                    finally:
                        solution.pop()
                        self._uncover_row(row)
                    row = g.down[row]
            finally:
                self.uncover(column)

        self._ensure_recursion_limit()
        yield from search()

    def solve_one(self) -> list[int] | None:
        for sol in self.solve():
            return sol
        return None

    def enumerate(self, emit: Emit | None = None) -> int:
        """Call ``emit`` once per solution in discovery order; return the total."""
        if emit is None:
            return self.count()

        every = CFG.PROGRESS_EVERY
        logger.info("searching %d columns, %d rows", self.graph.num_columns, self.graph.num_rows)
        found = 0
        for sol in self.solve():
            found += 1
            if every > 0 and found % every == 0:
                logger.info("%d solutions so far", found)
            emit(sol)
        logger.info("search finished: %d solutions", found)
        return found

    def count(self) -> int:
        """Count solutions without keeping a solution stack."""
        g = self.graph
        left, right, down, column_of = g.left, g.right, g.down, g.column
        every = CFG.PROGRESS_EVERY
        found = 0

        def search() -> None:
            nonlocal found
            if right[ROOT] == ROOT:
                found += 1
                if every > 0 and found % every == 0:
                    logger.info("%d solutions so far", found)
                return

            column = self.choose_column()
            self.cover(column)
            row = down[column]
            while row != column:
                node = right[row]
                while node != row:
                    self.cover(column_of[node])
                    node = right[node]

                search()

                node = left[row]
                while node != row:
                    self.uncover(column_of[node])
                    node = left[node]
                row = down[row]
            self.uncover(column)

        logger.info("counting %d columns, %d rows", g.num_columns, g.num_rows)
        self._ensure_recursion_limit()
        search()
        logger.info("search finished: %d solutions", found)
        return found

    def solve_steps(self):
        """
        Generator that yields events describing the solving process.
        Events are dicts with 'type', 'data' and 'state' (chosen row ids).
        """
        g = self.graph
        solution: list[int] = []
        found = 0

        def search(depth=0):
            nonlocal found
            if g.right[ROOT] == ROOT:
                found += 1
                yield {
                    "type": "SOLUTION",
                    "data": {"solution": list(solution)},
                    "state": list(solution),
                }
                return

            # Same scan as choose_column, keeping the candidates for display
            candidates = []
            best = g.right[ROOT]
            for c in g.live_columns():
                candidates.append({"col": g.col_id[c], "size": g.size[c]})
                if g.size[c] < g.size[best]:
                    best = c
            column = best

            yield {
                "type": "CHOOSE_COL",
                "data": {
                    "chosen": g.col_id[column],
                    "size": g.size[column],
                    "candidates": candidates,
                },
                "state": list(solution),
            }

            if g.size[column] == 0:
                yield {
                    "type": "BACKTRACK",
                    "data": {"col": g.col_id[column], "reason": "no rows left"},
                    "state": list(solution),
                }
                return

            self.cover(column)
            try:
                yield {"type": "COVER_COL", "data": {"col": g.col_id[column]}, "state": list(solution)}

                row = g.down[column]
                while row != column:
                    solution.append(g.row_id[row])
                    self._cover_row(row)
                    try:
                        yield {
                            "type": "SELECT_ROW",
                            "data": {
                                "row": g.row_id[row],
                                "cols": [g.col_id[row]] + [g.col_id[n] for n in g.row_nodes(row)],
                            },
                            "state": list(solution),
                        }
                        yield from search(depth + 1)
                    finally:
                        solution.pop()
                        self._uncover_row(row)
                    yield {"type": "UNSELECT_ROW", "data": {"row": g.row_id[row]}, "state": list(solution)}
                    row = g.down[row]
            finally:
                self.uncover(column)

            yield {"type": "UNCOVER_COL", "data": {"col": g.col_id[column]}, "state": list(solution)}
            if depth > 0:
                yield {
                    "type": "BACKTRACK",
                    "data": {"col": g.col_id[column], "reason": "all rows tried"},
                    "state": list(solution),
                }

        yield {"type": "INIT", "data": {"columns": g.num_columns, "rows": g.num_rows}, "state": []}
        self._ensure_recursion_limit()
        yield from search()
        yield {"type": "DONE", "data": {"solutions": found}, "state": []}


def enumerate_solutions(graph: NodeGraph, emit: Emit | None = None) -> int:
    return DLXSolver(graph).enumerate(emit)


def count_solutions(graph: NodeGraph) -> int:
    return DLXSolver(graph).count()


def is_exact_cover(num_columns: int, rows: dict[int, Sequence[int]], chosen: Iterable[int]) -> bool:
    """True when the chosen rows cover every column exactly once."""
    hits = [0] * num_columns
    for row_id in chosen:
        for c in set(rows[row_id]):
            hits[c] += 1
    return all(h == 1 for h in hits)
