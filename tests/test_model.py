import pytest
import random
import sys
import os

# Add project root to sys.path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from nonogram_model import NonogramModel, LineDescriptors, describe, generate_board, parse_grid_text
from test_utils import board, runs_of, expand_runs, run_starts


@pytest.mark.parametrize("size", [1, 2, 5, 10, 15])
def test_generate_board_is_square(size):
    grid = generate_board(size, random.Random(size))
    assert len(grid) == size
    assert all(len(row) == size for row in grid)
    assert all(isinstance(v, bool) for row in grid for v in row)


def test_generate_board_is_reproducible_with_seed():
    assert generate_board(8, random.Random(42)) == generate_board(8, random.Random(42))


def test_generate_board_mixes_filled_and_empty():
    grid = generate_board(20, random.Random(7))
    filled = sum(v for row in grid for v in row)
    assert 0 < filled < 400


DESCRIBE_CASES = [
    ("#", [[1]], [[1]]),
    (".", [[]], [[]]),
    ("##\n##", [[2], [2]], [[2], [2]]),
    ("#.#\n##.\n...", [[1, 1], [2], []], [[2], [1], [1]]),
    (
        "#.#.#\n.....\n#####\n#...#\n.#.#.",
        [[1, 1, 1], [], [5], [1, 1], [1, 1]],
        [[1, 2], [1, 1], [1, 1], [1, 1], [1, 2]],
    ),
]


@pytest.mark.parametrize("text, rows, columns", DESCRIBE_CASES)
def test_describe(text, rows, columns):
    res = describe(board(text))
    assert res.rows == rows
    assert res.columns == columns


@pytest.mark.parametrize("seed", range(25))
def test_describe_rebuilds_every_line(seed):
    rng = random.Random(seed)
    size = rng.randint(1, 12)
    grid = generate_board(size, rng)
    res = describe(grid)

    for r, row in enumerate(grid):
        assert res.rows[r] == runs_of(row)
        assert expand_runs(res.rows[r], run_starts(row), size) == list(row)

    for c in range(size):
        column = [grid[r][c] for r in range(size)]
        assert res.columns[c] == runs_of(column)
        assert expand_runs(res.columns[c], run_starts(column), size) == column


def test_describe_empty_grid():
    assert describe(()) == LineDescriptors()


@pytest.mark.parametrize("text, error", [
    ("", "Empty input."),
    ("##\n#", "Grid must be square"),
    ("###\n###", "Grid must be square"),
    ("#?\n..", "Bad character: ?"),
])
def test_parse_grid_text_rejects(text, error):
    grid, msg = parse_grid_text(text)
    assert grid is None
    assert msg.startswith(error)


def test_parse_grid_text_accepts_spaced_tokens():
    grid, msg = parse_grid_text("1 0\n0 1\n")
    assert msg == "Loaded."
    assert grid == ((True, False), (False, True))


def test_load_grid_rejects_non_square():
    model = NonogramModel()
    with pytest.raises(ValueError):
        model.load_grid([[True, False]])
    with pytest.raises(ValueError):
        model.load_grid([])


def test_load_grid_hides_every_cell():
    model = NonogramModel()
    model.load_grid(board("#.\n.#"))
    assert model.size == 2
    assert model.revealed_count() == 0
    assert model.mistake_count() == 0


def test_reveal_records_correctness():
    model = NonogramModel()
    model.load_grid(board("#.\n.#"))

    res = model.reveal(0, 0, True)
    assert res is not None and res.changed_cells == [(0, 0)]
    assert model.is_revealed(0, 0) and not model.is_wrong(0, 0)

    res = model.reveal(1, 0, True)
    assert res is not None
    assert model.is_revealed(1, 0) and model.is_wrong(1, 0)

    model.reveal(0, 1, False)
    assert not model.is_wrong(0, 1)
    assert model.revealed_count() == 3
    assert model.mistake_count() == 1


def test_reveal_twice_keeps_first_guess():
    model = NonogramModel()
    model.load_grid(board("#.\n.#"))
    assert model.reveal(0, 0, True) is not None
    assert model.reveal(0, 0, False) is None
    assert not model.is_wrong(0, 0)


@pytest.mark.parametrize("r, c", [(-1, 0), (0, -1), (2, 0), (0, 2)])
def test_reveal_out_of_range(r, c):
    model = NonogramModel()
    model.load_grid(board("#.\n.#"))
    assert model.reveal(r, c, True) is None
    assert model.revealed_count() == 0


def test_force_reveal_is_never_wrong():
    model = NonogramModel()
    model.load_grid(board("#.\n.#"))
    assert model.force_reveal(0, 0)
    assert model.force_reveal(0, 1)
    assert not model.force_reveal(0, 1)
    assert model.mistake_count() == 0


def test_snapshot_is_a_detached_copy():
    model = NonogramModel()
    model.load_grid(board("#..\n.#.\n..#"))
    model.reveal(0, 0, True)
    model.reveal(0, 1, True)
    model.force_reveal(2, 1)

    snap = model.snapshot()
    assert set(snap) == {"solution", "revealed", "wrong"}
    assert snap["solution"] == [[True, False, False], [False, True, False], [False, False, True]]
    assert snap["revealed"] == [[True, True, False], [False, False, False], [False, True, False]]
    assert snap["wrong"] == [[False, True, False], [False, False, False], [False, False, False]]

    snap["revealed"][1][1] = True
    assert not model.is_revealed(1, 1)
