# main.py
# Command line entry point: read or generate an instance, then search it

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from board import BOARDS, board_cells
from config import CFG
from dlx import DLXSolver
from instance import read_instance, write_instance
from matrix import MalformedInput, from_bits
from render import format_column_counts, format_matrix, format_solution, format_tiling, format_total
from solver import build_exact_cover, tiling_rows

logger = logging.getLogger(__name__)


_HANDLER: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    global _HANDLER

    level = level or CFG.LOG_LEVEL
    log_file = CFG.LOG_FILE if log_file is None else log_file

    root = logging.getLogger()
    if _HANDLER is not None:
        root.removeHandler(_HANDLER)
        _HANDLER.close()

    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    _HANDLER = handler
    root.setLevel(getattr(logging, str(level).upper(), logging.WARNING))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve exact cover problems with Dancing Links.",
    )
    parser.add_argument("input", nargs="?", help="instance file: column count, then one 0/1 row per line")
    parser.add_argument("-p", "--print", dest="print_solutions", action="store_true",
                        help="print every solution")
    parser.add_argument("-c", "--count", dest="count_only", action="store_true",
                        help="only count solutions")
    parser.add_argument("--board", choices=sorted(BOARDS),
                        help="generate a pentomino tiling instance instead of reading a file")
    parser.add_argument("--write-instance", metavar="PATH",
                        help="write the --board instance to PATH and exit")
    parser.add_argument("--matrix", action="store_true", help="print the matrix before searching")
    parser.add_argument("--column-counts", action="store_true", help="print live column counts")
    parser.add_argument("--view", action="store_true", help="open the step viewer (needs a display)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log at INFO level")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging("INFO" if args.verbose else None)

    if not args.input and not args.board:
        parser.print_usage(sys.stderr)
        return 1
    if args.input and args.board:
        parser.error("give either an instance file or --board, not both")
    if args.write_instance and not args.board:
        parser.error("--write-instance needs --board")

    cells = None
    placements = None
    column_labels = None
    if args.board:
        cells = board_cells(args.board)
        if args.write_instance:
            num_columns, rows = tiling_rows(cells)
            try:
                path = write_instance(args.write_instance, num_columns, rows)
            except OSError as exc:
                logger.error("cannot write %s: %s", args.write_instance, exc)
                print(f"Error writing file: {args.write_instance}", file=sys.stderr)
                return 1
            print(f"Wrote {len(rows)} rows over {num_columns} columns to {path}")
            return 0
        solver, placements, column_labels = build_exact_cover(cells)
    else:
        try:
            instance = read_instance(args.input)
            solver = DLXSolver(from_bits(instance.num_columns, instance.rows))
        except OSError as exc:
            logger.error("cannot read %s: %s", args.input, exc)
            print(f"Error opening file: {args.input}", file=sys.stderr)
            return 1
        except MalformedInput as exc:
            logger.error("malformed input: %s", exc)
            print(f"Malformed input: {exc}", file=sys.stderr)
            return 1

    if args.matrix:
        print(format_matrix(solver.graph))
    if args.column_counts:
        print(format_column_counts(solver.graph))

    if args.view:
        from gui import run_viewer

        row_labels = None
        if placements is not None:
            row_labels = [f"{p.piece} at {p.cells[0]}" for p in placements]
        run_viewer(solver, column_labels, row_labels)
        return 0

    if args.count_only:
        print(format_total(solver.count()))
        return 0

    print("Finding all solutions...")

    def emit(row_ids: List[int]) -> None:
        if placements is not None:
            print(format_tiling([placements[r] for r in row_ids], cells))
            print()
        else:
            print(format_solution(row_ids))

    total = solver.enumerate(emit if args.print_solutions else None)
    print(format_total(total))
    return 0


if __name__ == "__main__":
    sys.exit(main())
