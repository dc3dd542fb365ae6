# solver.py
# Combines pieces, board and placements into an exact cover problem

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from board import Cell
from dlx import DLXSolver
from pieces import all_piece_orientations
from placements import Placement, generate_placements

logger = logging.getLogger(__name__)


def _column_layout(
    cells: set[Cell],
    piece_orients: dict[str, list[set[Cell]]],
) -> tuple[Dict[str, int], Dict[Cell, int], List[str]]:
    # First piece columns, then cell columns.
    piece_names = sorted(piece_orients.keys())
    num_pieces = len(piece_names)

    piece_index = {name: idx for idx, name in enumerate(piece_names)}
    cells_sorted = sorted(cells)
    cell_index = {coord: num_pieces + i for i, coord in enumerate(cells_sorted)}

    labels = piece_names + [f"({r},{c})" for r, c in cells_sorted]
    return piece_index, cell_index, labels


def placement_rows(
    cells: set[Cell],
    piece_orients: dict[str, list[set[Cell]]],
) -> tuple[int, List[Tuple[int, List[int]]], List[Placement], List[str]]:
    """Column count, (row_id, columns) rows, placements and column labels."""
    placements = generate_placements(cells, piece_orients)
    piece_index, cell_index, labels = _column_layout(cells, piece_orients)

    rows: List[Tuple[int, List[int]]] = []
    for row_id, placement in enumerate(placements):
        cols = [piece_index[placement.piece]]
        cols.extend(cell_index[c] for c in placement.cells)
        rows.append((row_id, cols))

    logger.info("%d placements over %d columns", len(placements), len(labels))
    return len(labels), rows, placements, labels


def build_exact_cover(
    cells: set[Cell],
    piece_orients: dict[str, list[set[Cell]]] | None = None,
) -> tuple[DLXSolver, List[Placement], List[str]]:
    if piece_orients is None:
        piece_orients = all_piece_orientations()
    num_columns, rows, placements, labels = placement_rows(cells, piece_orients)
    return DLXSolver.from_rows(num_columns, rows), placements, labels


def tiling_rows(
    cells: set[Cell],
    piece_orients: dict[str, list[set[Cell]]] | None = None,
) -> tuple[int, List[List[bool]]]:
    """The same instance as boolean rows, ready for instance.write_instance."""
    if piece_orients is None:
        piece_orients = all_piece_orientations()
    num_columns, rows, _, _ = placement_rows(cells, piece_orients)
    bit_rows = []
    for _, cols in rows:
        bits = [False] * num_columns
        for c in cols:
            bits[c] = True
        bit_rows.append(bits)
    return num_columns, bit_rows

