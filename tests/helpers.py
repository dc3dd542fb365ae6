# Shared instances for the test suite

KNUTH_COLUMNS = 7
KNUTH_ROWS = {
    0: [2, 4, 5],
    1: [0, 3, 6],
    2: [1, 2, 5],
    3: [0, 3],
    4: [1, 6],
    5: [3, 4, 6],
}

SCENARIO_A = {0: [0, 1], 1: [1, 2], 2: [0, 2], 3: [0, 1, 2]}
SCENARIO_B = {0: [0], 1: [1], 2: [2], 3: [3]}


def as_rows(rows):
    return sorted(rows.items())
