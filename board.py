# board.py
# Board geometry for tiling instances

from __future__ import annotations

from typing import Iterable

Cell = tuple[int, int]


def rectangle(rows: int, cols: int, holes: Iterable[Cell] = ()) -> set[Cell]:
    """All cells of a rows x cols board minus the given holes."""
    cells = {(r, c) for r in range(rows) for c in range(cols)}
    cells.difference_update(holes)
    return cells


# The classic 60-cell pentomino boards
BOARDS: dict[str, set[Cell]] = {
    "6x10": rectangle(6, 10),
    "5x12": rectangle(5, 12),
    "4x15": rectangle(4, 15),
    "3x20": rectangle(3, 20),
    "8x8": rectangle(8, 8, holes={(3, 3), (3, 4), (4, 3), (4, 4)}),
}


def board_cells(name: str) -> set[Cell]:
    try:
        return set(BOARDS[name])
    except KeyError:
        raise KeyError(f"unknown board {name!r}; choose from {', '.join(sorted(BOARDS))}") from None
