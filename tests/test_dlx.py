import itertools
import random
import sys

import pytest

from config import CFG
from dlx import DLXSolver, count_solutions, enumerate_solutions, is_exact_cover
from matrix import ROOT, build, from_bits
from tests.helpers import KNUTH_COLUMNS, KNUTH_ROWS, SCENARIO_A, SCENARIO_B, as_rows


def _solver(num_columns, rows):
    return DLXSolver(build(num_columns, as_rows(rows)))


def _collect(solver):
    found = []
    total = solver.enumerate(found.append)
    return total, found


def _random_instance(rng, num_columns, num_rows, density=0.35):
    rows = {}
    for r in range(num_rows):
        rows[r] = [c for c in range(num_columns) if rng.random() < density]
    return rows


def _brute_force(num_columns, rows):
    result = set()
    ids = sorted(r for r in rows if rows[r])
    for k in range(len(ids) + 1):
        for combo in itertools.combinations(ids, k):
            if is_exact_cover(num_columns, rows, combo):
                result.add(combo)
    return result


# ----------------------------------------------------------------- cover/uncover

def test_cover_detaches_column_and_intersecting_rows():
    solver = _solver(KNUTH_COLUMNS, KNUTH_ROWS)
    g = solver.graph
    solver.cover(g.header(0))

    assert [g.col_id[h] for h in g.live_columns()] == [1, 2, 3, 4, 5, 6]
    # Rows 1 and 3 leave columns 3 and 6.
    assert g.size[g.header(3)] == 1
    assert g.size[g.header(6)] == 2
    assert [g.row_id[n] for n in g.column_nodes(g.header(3))] == [5]
    # The covered column still reaches its own rows.
    assert [g.row_id[n] for n in g.column_nodes(g.header(0))] == [1, 3]


@pytest.mark.parametrize("col", range(KNUTH_COLUMNS))
def test_uncover_restores_every_link_and_count(col):
    solver = _solver(KNUTH_COLUMNS, KNUTH_ROWS)
    before = solver.graph.snapshot()
    header = solver.graph.header(col)

    solver.cover(header)
    assert solver.graph.snapshot() != before
    solver.uncover(header)

    assert solver.graph.snapshot() == before
    solver.graph.check_links()


def test_nested_cover_uncover_is_identity():
    solver = _solver(KNUTH_COLUMNS, KNUTH_ROWS)
    g = solver.graph
    before = g.snapshot()
    order = [g.header(c) for c in (3, 0, 5)]

    for h in order:
        solver.cover(h)
    for h in reversed(order):
        solver.uncover(h)

    assert g.snapshot() == before


def test_choose_column_takes_leftmost_minimum():
    solver = _solver(KNUTH_COLUMNS, KNUTH_ROWS)
    assert solver.graph.col_id[solver.choose_column()] == 0

    solver = _solver(3, {0: [0, 1, 2], 1: [0, 1], 2: [0, 2]})
    assert solver.graph.col_id[solver.choose_column()] == 1


# ------------------------------------------------------------------------ search

def test_knuth_example_reports_rows_in_choice_order():
    total, found = _collect(_solver(KNUTH_COLUMNS, KNUTH_ROWS))
    assert total == 1
    assert found == [[3, 0, 4]]


def test_scenario_a_only_the_full_row():
    total, found = _collect(_solver(3, SCENARIO_A))
    assert (total, found) == (1, [[3]])
    assert _solver(3, SCENARIO_A).count() == 1


def test_scenario_b_all_singletons():
    total, found = _collect(_solver(4, SCENARIO_B))
    assert (total, found) == (1, [[0, 1, 2, 3]])


def test_uncoverable_column_gives_no_solutions():
    rows = {0: [0], 1: [1], 2: [0, 1]}
    solver = _solver(3, rows)
    assert solver.count() == 0
    assert _collect(solver) == (0, [])


def test_zero_columns_has_one_empty_solution():
    graph = build(0, [(0, []), (1, [])])
    found = []
    assert enumerate_solutions(graph, found.append) == 1
    assert found == [[]]
    assert count_solutions(graph) == 1


def test_zero_rows_with_columns_has_no_solution():
    assert count_solutions(from_bits(2, [])) == 0


def test_zero_bit_rows_never_appear():
    graph = from_bits(2, [[0, 0], [1, 1], [0, 0], [1, 0], [0, 1]])
    found = []
    total = enumerate_solutions(graph, found.append)
    assert total == 2
    assert sorted(sorted(s) for s in found) == [[1], [3, 4]]
    assert all(0 not in s and 2 not in s for s in found)


def test_emit_none_counts():
    assert enumerate_solutions(build(KNUTH_COLUMNS, as_rows(KNUTH_ROWS))) == 1


def test_many_solutions_are_all_distinct():
    # Each column can be taken by either of two rows: 2**4 covers.
    rows = {}
    for c in range(4):
        rows[2 * c] = [c]
        rows[2 * c + 1] = [c]
    total, found = _collect(_solver(4, rows))
    assert total == 16
    assert len({tuple(sorted(s)) for s in found}) == 16


@pytest.mark.parametrize("seed", range(12))
def test_matches_brute_force_on_random_instances(seed):
    rng = random.Random(seed)
    num_columns = rng.randint(1, 6)
    rows = _random_instance(rng, num_columns, rng.randint(1, 9), density=0.4)

    solver = _solver(num_columns, rows)
    before = solver.graph.snapshot()
    total, found = _collect(solver)

    assert total == len(found) == solver.count()
    assert {tuple(sorted(s)) for s in found} == _brute_force(num_columns, rows)
    for s in found:
        assert is_exact_cover(num_columns, rows, s)
    assert solver.graph.snapshot() == before


@pytest.mark.parametrize("seed", range(5))
def test_count_equals_emit_calls(seed):
    rng = random.Random(100 + seed)
    rows = _random_instance(rng, 8, 40, density=0.2)
    solver = _solver(8, rows)

    calls = []
    assert solver.enumerate(calls.append) == len(calls) == solver.count()


def test_search_leaves_graph_at_rest():
    solver = _solver(KNUTH_COLUMNS, KNUTH_ROWS)
    before = solver.graph.snapshot()
    solver.count()
    list(solver.solve())
    assert solver.graph.snapshot() == before
    solver.graph.check_links()


def test_closing_solve_early_restores_graph():
    rows = {r: [r % 3] for r in range(9)}
    solver = _solver(3, rows)
    before = solver.graph.snapshot()

    gen = solver.solve()
    first = next(gen)
    assert len(first) == 3
    assert solver.graph.right[ROOT] == ROOT  # mid-search: all columns covered
    gen.close()

    assert solver.graph.snapshot() == before
    assert solver.solve_one() == first
    assert solver.graph.snapshot() == before


def test_solve_one_none_without_solution():
    assert _solver(2, {0: [0]}).solve_one() is None


def test_emitted_lists_are_independent():
    rows = {0: [0], 1: [0], 2: [1]}
    _, found = _collect(_solver(2, rows))
    # Column 1 has fewer rows, so it is chosen first.
    assert found == [[2, 0], [2, 1]]


def test_deep_search_raises_recursion_limit(monkeypatch):
    monkeypatch.setattr(CFG, "RECURSION_HEADROOM", 500)
    n = 1200
    limit = sys.getrecursionlimit()
    try:
        solver = _solver(n, {c: [c] for c in range(n)})
        assert solver.count() == 1
        assert sys.getrecursionlimit() >= n + 500
    finally:
        sys.setrecursionlimit(limit)


def test_progress_is_logged(monkeypatch, caplog):
    monkeypatch.setattr(CFG, "PROGRESS_EVERY", 4)
    rows = {}
    for c in range(3):
        rows[2 * c] = [c]
        rows[2 * c + 1] = [c]

    with caplog.at_level("INFO", logger="dlx"):
        assert _solver(3, rows).count() == 8

    messages = [r.getMessage() for r in caplog.records]
    assert "4 solutions so far" in messages
    assert "8 solutions so far" in messages
    assert "search finished: 8 solutions" in messages


# ------------------------------------------------------------------- step trace

def test_solve_steps_trace_shape():
    solver = _solver(KNUTH_COLUMNS, KNUTH_ROWS)
    before = solver.graph.snapshot()
    events = list(solver.solve_steps())

    assert events[0]["type"] == "INIT"
    assert events[-1] == {"type": "DONE", "data": {"solutions": 1}, "state": []}
    assert events[1]["type"] == "CHOOSE_COL"
    assert events[1]["data"]["chosen"] == 0
    assert events[1]["data"]["size"] == 2

    solutions = [e for e in events if e["type"] == "SOLUTION"]
    assert [e["state"] for e in solutions] == [[3, 0, 4]]

    selects = sum(1 for e in events if e["type"] == "SELECT_ROW")
    unselects = sum(1 for e in events if e["type"] == "UNSELECT_ROW")
    assert selects == unselects
    covers = sum(1 for e in events if e["type"] == "COVER_COL")
    uncovers = sum(1 for e in events if e["type"] == "UNCOVER_COL")
    assert covers == uncovers
    assert solver.graph.snapshot() == before


def test_solve_steps_reports_dead_column():
    events = list(_solver(2, {0: [0]}).solve_steps())
    types = [e["type"] for e in events]
    assert "BACKTRACK" in types
    assert "SOLUTION" not in types


def _call_nested(depth, fn):
    if depth == 0:
        return fn()
    return _call_nested(depth - 1, fn)


def test_search_from_deep_caller_stack():
    n = 880
    limit = sys.getrecursionlimit()
    sys.setrecursionlimit(1000)
    try:
        solver = _solver(n, {c: [c] for c in range(n)})
        assert _call_nested(150, solver.count) == 1
        assert _call_nested(150, solver.solve_one) == list(range(n))
    finally:
        sys.setrecursionlimit(limit)


def test_from_rows_builds_the_graph():
    solver = DLXSolver.from_rows(KNUTH_COLUMNS, as_rows(KNUTH_ROWS))
    assert solver.graph.num_rows == len(KNUTH_ROWS)
    assert solver.solve_one() == [3, 0, 4]
