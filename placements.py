# placements.py
# Generate all valid piece placements on a board

from __future__ import annotations

from dataclasses import dataclass

from board import Cell


@dataclass(frozen=True)
class Placement:
    piece: str
    cells: tuple[Cell, ...]  # board coordinates covered by this placement


def generate_placements(
    playable_cells: set[Cell],
    piece_orientations: dict[str, list[set[Cell]]],
) -> list[Placement]:
    """Generate all placements of all pieces lying fully inside the playable cells."""
    placements: list[Placement] = []
    if not playable_cells:
        return placements

    board_rows = max(r for r, _ in playable_cells) + 1
    board_cols = max(c for _, c in playable_cells) + 1

    for piece_name, orientations in piece_orientations.items():
        for shape in orientations:
            max_r = max(r for r, _ in shape)
            max_c = max(c for _, c in shape)

            # Slide shape over the bounding box of the board
            for dr in range(board_rows - max_r):
                for dc in range(board_cols - max_c):
                    placed = {(r + dr, c + dc) for r, c in shape}
                    if placed.issubset(playable_cells):
                        placements.append(
                            Placement(
                                piece=piece_name,
                                cells=tuple(sorted(placed)),
                            )
                        )

    return placements
