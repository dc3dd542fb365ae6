# pieces.py
# Pentomino definitions + rotations/flips

from __future__ import annotations

from typing import Iterable, Mapping

Shape = set[tuple[int, int]]

# Canonical pentomino shapes as sets of (row, col)
PENTOMINOES: dict[str, Shape] = {
    "F": {(0, 1), (0, 2), (1, 0), (1, 1), (2, 1)},
    "I": {(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)},
    "L": {(0, 0), (1, 0), (2, 0), (3, 0), (3, 1)},
    "N": {(0, 1), (1, 1), (2, 0), (2, 1), (3, 0)},
    "P": {(0, 0), (0, 1), (1, 0), (1, 1), (2, 0)},
    "T": {(0, 0), (0, 1), (0, 2), (1, 1), (2, 1)},
    "U": {(0, 0), (0, 2), (1, 0), (1, 1), (1, 2)},
    "V": {(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)},
    "W": {(0, 0), (1, 0), (1, 1), (2, 1), (2, 2)},
    "X": {(0, 1), (1, 0), (1, 1), (1, 2), (2, 1)},
    "Y": {(0, 1), (1, 0), (1, 1), (2, 1), (3, 1)},
    "Z": {(0, 0), (0, 1), (1, 1), (2, 1), (2, 2)},
}


def _normalize(shape: Iterable[tuple[int, int]]) -> frozenset[tuple[int, int]]:
    cells = list(shape)
    min_r = min(r for r, _ in cells)
    min_c = min(c for _, c in cells)
    return frozenset((r - min_r, c - min_c) for r, c in cells)


def _rotate90(shape: Iterable[tuple[int, int]]) -> Shape:
    # (r, c) -> (c, -r)
    return {(c, -r) for r, c in shape}


def _flip_horizontal(shape: Iterable[tuple[int, int]]) -> Shape:
    # (r, c) -> (r, -c)
    return {(r, -c) for r, c in shape}


def generate_orientations(shape: Shape) -> list[Shape]:
    """All unique rotations + horizontal flip orientations, normalized to (0,0)."""
    seen: set[frozenset[tuple[int, int]]] = set()
    result: list[Shape] = []

    variants = [shape]
    for _ in range(3):
        variants.append(_rotate90(variants[-1]))

    flipped = _flip_horizontal(shape)
    variants.append(flipped)
    for _ in range(3):
        variants.append(_rotate90(variants[-1]))

    for v in variants:
        norm = _normalize(v)
        if norm not in seen:
            seen.add(norm)
            result.append(set(norm))

    return result


def all_piece_orientations(shapes: Mapping[str, Shape] = PENTOMINOES) -> dict[str, list[Shape]]:
    return {name: generate_orientations(shape) for name, shape in shapes.items()}
