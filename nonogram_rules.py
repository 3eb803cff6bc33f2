import logging
from collections import deque
from typing import Iterator, List, Optional, Set, Tuple

from nonogram_model import NonogramModel, StepResult

logger = logging.getLogger(__name__)

ROW = "row"
COLUMN = "column"

Line = Tuple[str, int]


class NonogramSolver:
    """Line completion: once every filled cell of a line is revealed, the rest are empty."""

    RULE_NAMES: List[str] = [
        "L1 Row Completion",
        "L2 Column Completion",
    ]

    def __init__(self, model: NonogramModel) -> None:
        self.model = model

    def line_cells(self, line: Line) -> List[Tuple[int, int]]:
        kind, index = line
        if kind == ROW:
            return self.model.row_cells(index)
        return self.model.column_cells(index)

    def line_counts(self, line: Line) -> Tuple[int, int]:
        """(filled cells, revealed filled cells) for a line."""
        filled = 0
        revealed_filled = 0
        for r, c in self.line_cells(line):
            if self.model.is_filled(r, c):
                filled += 1
                if self.model.is_revealed(r, c):
                    revealed_filled += 1
        return filled, revealed_filled

    def is_line_determined(self, line: Line) -> bool:
        filled, revealed_filled = self.line_counts(line)
        return filled > 0 and filled == revealed_filled

    def _complete_line(self, line: Line) -> List[Tuple[int, int]]:
        if not self.is_line_determined(line):
            return []
        changed = []
        for r, c in self.line_cells(line):
            if self.model.force_reveal(r, c):
                changed.append((r, c))
        return changed

    def try_L1(self, row: int) -> Optional[StepResult]:
        """L1 - Every filled cell of the row is revealed: reveal the rest as empty."""
        changed = self._complete_line((ROW, row))
        if changed:
            return StepResult(changed, f"Row {row} complete, revealed {len(changed)} empty cell(s)", self.RULE_NAMES[0])
        return None

    def try_L2(self, column: int) -> Optional[StepResult]:
        """L2 - Every filled cell of the column is revealed: reveal the rest as empty."""
        changed = self._complete_line((COLUMN, column))
        if changed:
            return StepResult(changed, f"Column {column} complete, revealed {len(changed)} empty cell(s)", self.RULE_NAMES[1])
        return None

    def try_complete(self, row: int, column: int) -> Optional[StepResult]:
        """One completion pass over the row and the column through (row, column).

        Returns None when no cell changed.
        """
        results = [res for res in (self.try_L1(row), self.try_L2(column)) if res is not None]
        if not results:
            return None
        if len(results) == 1:
            return results[0]
        return StepResult(
            results[0].changed_cells + results[1].changed_cells,
            f"{results[0].message}; {results[1].message}",
            f"{results[0].rule} + {results[1].rule}",
        )

    def cascade(self, row: int, column: int) -> Iterator[StepResult]:
        """Repeat completion passes for the same coordinates until nothing changes."""
        while True:
            res = self.try_complete(row, column)
            if res is None:
                return
            logger.debug("[%s] %s", res.rule, res.message)
            yield res

    def cascade_transitive(self, row: int, column: int) -> Iterator[StepResult]:
        """Worklist variant: every line touched by a cascade is re-checked too.

        Each productive pass reveals at least one hidden cell, so the worklist
        drains after at most size * size productive passes.
        """
        work: deque = deque([(ROW, row), (COLUMN, column)])
        pending: Set[Line] = set(work)
        while work:
            line = work.popleft()
            pending.discard(line)
            kind, index = line
            res = self.try_L1(index) if kind == ROW else self.try_L2(index)
            if res is None:
                continue
            logger.debug("[%s] %s", res.rule, res.message)
            yield res
            for r, c in res.changed_cells:
                for touched in ((ROW, r), (COLUMN, c)):
                    if touched != line and touched not in pending:
                        pending.add(touched)
                        work.append(touched)
