# render.py
# Text formatting for solutions and for the live matrix

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from matrix import NodeGraph

if TYPE_CHECKING:
    from placements import Placement


def format_solution(row_ids: Sequence[int]) -> str:
    return " ".join(str(r) for r in row_ids)


def format_total(count: int) -> str:
    return f"Total number of solutions found: {count}"


def format_matrix(graph: NodeGraph) -> str:
    """The live part of the matrix, one line of 0/1 per live row, by row id."""
    if graph.is_empty():
        return "Matrix is empty."

    active = list(graph.live_columns())
    position = {header: i for i, header in enumerate(active)}

    # One representative node per live row, reached through the live columns.
    rows: dict[int, int] = {}
    for header in active:
        for node in graph.column_nodes(header):
            rows.setdefault(graph.row_id[node], node)

    lines = []
    for row_id in sorted(rows):
        node = rows[row_id]
        bits = ["0"] * len(active)
        for n in (node, *graph.row_nodes(node)):
            i = position.get(graph.column[n])
            if i is not None:
                bits[i] = "1"
        lines.append(" ".join(bits))
    return "\n".join(lines)


def format_column_counts(graph: NodeGraph) -> str:
    return "\n".join(
        f"Col {graph.col_id[c]} count={graph.size[c]}" for c in graph.live_columns()
    )


def format_tiling(placements: Sequence[Placement], cells: set[tuple[int, int]]) -> str:
    """Board as a grid of piece letters; '.' for uncovered cells, blank outside."""
    if not cells:
        return ""
    rows = max(r for r, _ in cells) + 1
    cols = max(c for _, c in cells) + 1
    grid = [[" " if (r, c) not in cells else "." for c in range(cols)] for r in range(rows)]
    for p in placements:
        for r, c in p.cells:
            grid[r][c] = p.piece
    return "\n".join("".join(line).rstrip() for line in grid)
