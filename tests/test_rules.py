import pytest
import random
import sys
import os

# Add project root to sys.path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from nonogram_model import NonogramModel, generate_board
from nonogram_rules import NonogramSolver, ROW, COLUMN
from test_utils import board


def make_solver(text):
    model = NonogramModel()
    model.load_grid(board(text))
    return model, NonogramSolver(model)


def test_row_and_column_complete_together():
    model, solver = make_solver("#.#\n...\n...")
    model.reveal(0, 0, True)
    model.reveal(0, 2, True)

    res = solver.try_complete(0, 2)
    assert res is not None
    assert sorted(res.changed_cells) == [(0, 1), (1, 2), (2, 2)]
    assert "L1" in res.rule and "L2" in res.rule
    assert all(not model.is_wrong(r, c) for r, c in res.changed_cells)
    # The solver only reports steps; the session keeps the last one.
    assert not hasattr(model, "last_step")


def test_hidden_filled_cell_blocks_completion():
    model, solver = make_solver("#.#\n...\n...")
    model.reveal(0, 0, True)

    assert not solver.is_line_determined((ROW, 0))
    assert solver.try_L1(0) is None
    # Column 0 holds a single filled cell, now revealed.
    res = solver.try_complete(0, 0)
    assert res is not None
    assert sorted(res.changed_cells) == [(1, 0), (2, 0)]
    assert not model.is_revealed(0, 1)


def test_line_without_filled_cells_never_completes():
    model, solver = make_solver("...\n...\n...")
    model.reveal(1, 1, False)
    assert solver.line_counts((ROW, 1)) == (0, 0)
    assert solver.try_complete(1, 1) is None
    assert model.revealed_count() == 1


def test_wrong_guess_on_filled_cell_still_counts_as_found():
    model, solver = make_solver("#.\n..")
    model.reveal(0, 0, False)
    assert model.is_wrong(0, 0)

    res = solver.try_complete(0, 0)
    assert res is not None
    assert sorted(res.changed_cells) == [(0, 1), (1, 0)]
    assert model.mistake_count() == 1


def test_fully_revealed_line_reports_no_change():
    model, solver = make_solver("##\n..")
    model.reveal(0, 0, True)
    model.reveal(0, 1, True)
    assert solver.is_line_determined((ROW, 0))
    assert solver.try_L1(0) is None


def test_cascade_stops_when_nothing_changes():
    model, solver = make_solver("#..\n...\n...")
    model.reveal(0, 0, True)

    steps = list(solver.cascade(0, 0))
    assert len(steps) == 1
    assert model.revealed_count() == 5
    assert list(solver.cascade(0, 0)) == []


@pytest.mark.parametrize("seed", range(20))
def test_row_with_all_filled_revealed_completes_in_one_pass(seed):
    rng = random.Random(seed)
    size = rng.randint(2, 10)
    model = NonogramModel()
    model.load_grid(generate_board(size, rng))
    solver = NonogramSolver(model)

    row = rng.randrange(size)
    filled = [c for c in range(size) if model.is_filled(row, c)]
    for c in filled:
        model.force_reveal(row, c)

    solver.try_L1(row)
    if filled:
        assert all(model.is_revealed(row, c) for c in range(size))
    else:
        assert model.revealed_count() == 0


def play_random(seed, transitive):
    rng = random.Random(seed)
    size = rng.randint(2, 9)
    model = NonogramModel()
    model.load_grid(generate_board(size, rng))
    solver = NonogramSolver(model)

    order = [(r, c) for r in range(size) for c in range(size)]
    rng.shuffle(order)
    for r, c in order:
        if model.reveal(r, c, rng.random() < 0.5) is None:
            continue
        steps = solver.cascade_transitive(r, c) if transitive else solver.cascade(r, c)
        for step in steps:
            assert step.changed_cells
    return model.snapshot()["revealed"], model.snapshot()["wrong"]


@pytest.mark.parametrize("seed", range(15))
def test_transitive_worklist_matches_single_origin_cascade(seed):
    assert play_random(seed, transitive=False) == play_random(seed, transitive=True)


def test_transitive_worklist_visits_touched_lines():
    model, solver = make_solver("#..\n...\n...")
    model.reveal(0, 0, True)

    steps = list(solver.cascade_transitive(0, 0))
    assert [s.rule for s in steps] == [NonogramSolver.RULE_NAMES[0], NonogramSolver.RULE_NAMES[1]]
    assert model.revealed_count() == 5
    assert model.mistake_count() == 0


def test_line_cells():
    model, solver = make_solver("#..\n...\n...")
    assert solver.line_cells((ROW, 1)) == [(1, 0), (1, 1), (1, 2)]
    assert solver.line_cells((COLUMN, 2)) == [(0, 2), (1, 2), (2, 2)]
