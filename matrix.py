# matrix.py
# Toroidal node graph for the exact cover matrix, stored as an index arena

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Sequence

logger = logging.getLogger(__name__)

ROOT = 0


class MalformedInput(ValueError):
    """Raised when row data does not fit the declared column count."""


class NodeGraph:
    """
    Sparse boolean matrix as circular doubly-linked rings.

    Every node is an integer index into parallel lists. Node 0 is the root,
    column ``c`` is headed by node ``c + 1``, data nodes follow in the order
    they were created. Header nodes have ``row_id == -1``.
    """

    def __init__(self, num_columns: int):
        self.num_columns = num_columns
        self.num_rows = 0

        self.left: list[int] = []
        self.right: list[int] = []
        self.up: list[int] = []
        self.down: list[int] = []
        self.row_id: list[int] = []
        self.col_id: list[int] = []
        self.column: list[int] = []
        self.size: list[int] = []

        root = self._new_node(-1, -1)
        # Column headers in a circular list anchored by the root.
        for c in range(num_columns):
            header = self._new_node(-1, c)
            last = self.left[root]
            self.right[last] = header
            self.left[header] = last
            self.right[header] = root
            self.left[root] = header

    def _new_node(self, row_id: int, col_id: int) -> int:
        idx = len(self.row_id)
        self.left.append(idx)
        self.right.append(idx)
        self.up.append(idx)
        self.down.append(idx)
        self.row_id.append(row_id)
        self.col_id.append(col_id)
        self.column.append(idx)
        self.size.append(0)
        return idx

    def __len__(self) -> int:
        return len(self.row_id)

    def header(self, col_id: int) -> int:
        return col_id + 1

    def add_row(self, row_id: int, column_ids: Iterable[int]) -> None:
        first: int | None = None
        self.num_rows += 1

        for c_idx in sorted(set(column_ids)):
            column = self.header(c_idx)
            node = self._new_node(row_id, c_idx)
            self.column[node] = column

            # Insert into column (at bottom)
            last = self.up[column]
            self.down[last] = node
            self.up[node] = last
            self.down[node] = column
            self.up[column] = node
            self.size[column] += 1

            # Append to the row ring, just left of its first node
            if first is None:
                first = node
            else:
                prev = self.left[first]
                self.right[prev] = node
                self.left[node] = prev
                self.right[node] = first
                self.left[first] = node

    def live_columns(self) -> Iterator[int]:
        c = self.right[ROOT]
        while c != ROOT:
            yield c
            c = self.right[c]

    def column_nodes(self, header: int) -> Iterator[int]:
        node = self.down[header]
        while node != header:
            yield node
            node = self.down[node]

    def row_nodes(self, node: int) -> Iterator[int]:
        """The other nodes of ``node``'s row, left to right."""
        n = self.right[node]
        while n != node:
            yield n
            n = self.right[n]

    def is_empty(self) -> bool:
        return self.right[ROOT] == ROOT

    def snapshot(self) -> tuple[tuple[int, ...], ...]:
        return (
            tuple(self.left),
            tuple(self.right),
            tuple(self.up),
            tuple(self.down),
            tuple(self.size),
        )

    def check_links(self) -> None:
        """Raise ValueError if a ring is inconsistent or a count drifted.

        Only meaningful at rest, when no column is covered.
        """
        for n in range(len(self)):
            if self.left[self.right[n]] != n:
                raise ValueError(f"node {n}: right/left links disagree")
            if self.up[self.down[n]] != n:
                raise ValueError(f"node {n}: down/up links disagree")
        for header in self.live_columns():
            seen = sum(1 for _ in self.column_nodes(header))
            if seen != self.size[header]:
                raise ValueError(
                    f"column {self.col_id[header]}: count {self.size[header]} but {seen} live nodes"
                )


def build(num_columns: int, rows: Iterable[tuple[int, Iterable[int]]]) -> NodeGraph:
    """
    Build the graph from ``(row_id, column ids)`` pairs.

    Nothing is returned for malformed input; the first bad row raises.
    """
    if isinstance(num_columns, bool) or not isinstance(num_columns, int) or num_columns < 0:
        raise MalformedInput(f"column count must be a non-negative integer, got {num_columns!r}")

    graph = NodeGraph(num_columns)
    for row_id, column_ids in rows:
        cols = list(column_ids)
        for c in cols:
            if isinstance(c, bool) or not isinstance(c, int) or not 0 <= c < num_columns:
                raise MalformedInput(
                    f"row {row_id}: column {c!r} outside [0, {num_columns})"
                )
        graph.add_row(row_id, cols)

    logger.debug(
        "built graph: %d columns, %d rows, %d nodes",
        num_columns, graph.num_rows, len(graph),
    )
    return graph


def from_bits(num_columns: int, bit_rows: Iterable[Sequence[bool]]) -> NodeGraph:
    """Build from boolean rows; row ids are 0-based positions."""

    def _rows():
        for row_id, bits in enumerate(bit_rows):
            if len(bits) != num_columns:
                raise MalformedInput(
                    f"row {row_id}: width {len(bits)} does not match {num_columns} columns"
                )
            yield row_id, [c for c, bit in enumerate(bits) if bit]

    return build(num_columns, _rows())
