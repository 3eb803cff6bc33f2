import logging
import random
from dataclasses import dataclass, field
from typing import List, Tuple, Dict, Optional, Sequence

logger = logging.getLogger(__name__)

# ----------------------------
# Domain model
# ----------------------------

Grid = Tuple[Tuple[bool, ...], ...]
Runs = List[int]
RuleName = str

FILLED_CHARS = "#X1"
EMPTY_CHARS = ".-0"


@dataclass
class Cell:
    filled: bool
    revealed: bool = False
    # Only a direct guess can set this; cascade reveals leave it False.
    wrong: bool = False


@dataclass
class StepResult:
    changed_cells: List[Tuple[int, int]]
    message: str
    rule: RuleName = ""


@dataclass
class LineDescriptors:
    rows: List[Runs] = field(default_factory=list)
    columns: List[Runs] = field(default_factory=list)


# ----------------------------
# Board generation & clues
# ----------------------------

def generate_board(size: int, rng: Optional[random.Random] = None) -> Grid:
    """Random size x size solution, each cell filled with probability 0.5.

    No symmetry or solvability constraint is applied.
    """
    rand = rng.random if rng is not None else random.random
    return tuple(tuple(rand() < 0.5 for _ in range(size)) for _ in range(size))


def describe(grid: Sequence[Sequence[bool]]) -> LineDescriptors:
    """Run-length clues for every row (left to right) and column (top to bottom)."""
    rows: List[Runs] = [[] for _ in range(len(grid))]
    columns: List[Runs] = [[] for _ in range(len(grid[0]) if grid else 0)]

    for r, row in enumerate(grid):
        for c, filled in enumerate(row):
            if not filled:
                continue

            if c == 0 or not row[c - 1]:
                rows[r].append(1)
            else:
                rows[r][-1] += 1

            if r == 0 or not grid[r - 1][c]:
                columns[c].append(1)
            else:
                columns[c][-1] += 1

    return LineDescriptors(rows=rows, columns=columns)


def parse_grid_text(text: str) -> Tuple[Optional[Grid], str]:
    """Parse a square solution grid, one row per line.

    '#', 'X' or '1' is a filled cell; '.', '-' or '0' is empty. Spaces between
    cells are ignored.
    """
    lines = [ln.strip() for ln in text.splitlines() if ln.strip() != ""]
    if not lines:
        return None, "Empty input."

    grid: List[Tuple[bool, ...]] = []
    for ln in lines:
        row: List[bool] = []
        for ch in ln.replace(" ", ""):
            if ch in FILLED_CHARS:
                row.append(True)
            elif ch in EMPTY_CHARS:
                row.append(False)
            else:
                return None, f"Bad character: {ch}"
        grid.append(tuple(row))

    size = len(grid)
    if any(len(r) != size for r in grid):
        return None, "Grid must be square: every row needs as many cells as there are rows."
    return tuple(grid), "Loaded."


# ----------------------------
# Board state
# ----------------------------

class NonogramModel:
    def __init__(self) -> None:
        self.size = 0
        self.solution: Grid = ()
        self.cells: List[List[Cell]] = []

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.size and 0 <= c < self.size

    def is_filled(self, r: int, c: int) -> bool:
        return self.solution[r][c]

    def is_revealed(self, r: int, c: int) -> bool:
        return self.cells[r][c].revealed

    def is_wrong(self, r: int, c: int) -> bool:
        return self.cells[r][c].wrong

    def row_cells(self, r: int) -> List[Tuple[int, int]]:
        return [(r, c) for c in range(self.size)]

    def column_cells(self, c: int) -> List[Tuple[int, int]]:
        return [(r, c) for r in range(self.size)]

    def revealed_count(self) -> int:
        return sum(1 for row in self.cells for cell in row if cell.revealed)

    def mistake_count(self) -> int:
        return sum(1 for row in self.cells for cell in row if cell.wrong)

    def load_grid(self, grid: Sequence[Sequence[bool]]) -> None:
        """Install a new solution and hide every cell."""
        size = len(grid)
        if size == 0 or any(len(row) != size for row in grid):
            raise ValueError("Solution grid must be a non-empty square.")

        self.size = size
        self.solution = tuple(tuple(bool(v) for v in row) for row in grid)
        self.cells = [[Cell(filled=self.solution[r][c]) for c in range(size)] for r in range(size)]
        logger.debug("Loaded %dx%d solution grid", size, size)

    def reveal(self, r: int, c: int, guessed_filled: bool) -> Optional[StepResult]:
        """Uncover a cell as a direct player guess.

        Returns None when the cell is out of range or already revealed.
        """
        if not self.in_bounds(r, c):
            return None
        cell = self.cells[r][c]
        if cell.revealed:
            return None

        cell.revealed = True
        cell.wrong = guessed_filled != cell.filled
        verdict = "wrong" if cell.wrong else "correct"
        guess = "filled" if guessed_filled else "empty"
        return StepResult([(r, c)], f"Guessed ({r},{c}) {guess}: {verdict}", "Guess")

    def force_reveal(self, r: int, c: int) -> bool:
        """Uncover a cell by deduction. Never touches `wrong`."""
        cell = self.cells[r][c]
        if cell.revealed:
            return False
        cell.revealed = True
        return True

    def snapshot(self) -> Dict[str, object]:
        """Return a self-contained, pickle-friendly copy of the board state."""
        return {
            "solution": [list(row) for row in self.solution],
            "revealed": [[cell.revealed for cell in row] for row in self.cells],
            "wrong": [[cell.wrong for cell in row] for row in self.cells],
        }
