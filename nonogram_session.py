"""
Nonogram game session.

Owns the status state machine (start -> playing -> complete / game-over -> start),
the shown-cell and mistake counters, the timer, and the reveal protocol with its
line auto-completion cascade. Derived reactions (descriptor recomputation, the
completion and game-over checks) are subscriptions set up in the constructor and
removed by close().
"""

import enum
import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from nonogram_events import Observable
from nonogram_model import Grid, LineDescriptors, NonogramModel, StepResult, describe, generate_board
from nonogram_rules import NonogramSolver
from nonogram_timer import GameTimer

logger = logging.getLogger(__name__)


class Status(enum.Enum):
    START = "start"
    PLAYING = "playing"
    COMPLETE = "complete"
    GAME_OVER = "game-over"


_TRANSITIONS = {
    Status.START: {Status.PLAYING},
    Status.PLAYING: {Status.COMPLETE, Status.GAME_OVER},
    Status.COMPLETE: {Status.START},
    Status.GAME_OVER: {Status.START},
}


@dataclass
class GameConfig:
    board_size: int = 5
    max_mistakes: int = 3
    tick_interval: float = 1.0
    threaded_timer: bool = True
    transitive_completion: bool = False
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self.board_size = int(self.board_size)
        self.max_mistakes = int(self.max_mistakes)
        self.tick_interval = float(self.tick_interval)


@dataclass
class CellView:
    revealed: bool
    wrong: bool
    filled: bool


BoardGenerator = Callable[[int], Grid]


class GameSession:
    def __init__(self, config: Optional[GameConfig] = None, generator: Optional[BoardGenerator] = None) -> None:
        self.config = config or GameConfig()
        self._rng = random.Random(self.config.seed)
        self._generator: BoardGenerator = generator or (lambda size: generate_board(size, self._rng))

        self.model = NonogramModel()
        self.solver = NonogramSolver(self.model)
        self.timer = GameTimer(self.config.tick_interval, threaded=self.config.threaded_timer)

        self.status: Observable[Status] = Observable(Status.START, "status")
        self.board_size: Observable[int] = Observable(self.config.board_size, "board_size")
        self.shown_count: Observable[int] = Observable(0, "shown_count")
        self.mistake_count: Observable[int] = Observable(0, "mistake_count")
        self.grid: Observable[Optional[Grid]] = Observable(None, "grid", identity=True)

        # Size frozen for the current episode.
        self._episode_size = self.config.board_size
        self._descriptors = LineDescriptors()
        self.last_step: Optional[StepResult] = None

        self._unsubscribers = [
            self.status.subscribe(self._on_status_change),
            self.shown_count.subscribe(self._on_shown_change),
            self.mistake_count.subscribe(self._on_mistake_change),
            self.grid.subscribe(self._on_grid_change),
        ]

    # ----------------------------
    # Read-only queries
    # ----------------------------

    @property
    def max_mistakes(self) -> int:
        return self.config.max_mistakes

    @property
    def episode_size(self) -> int:
        return self._episode_size

    @property
    def elapsed_seconds(self) -> int:
        return self.timer.seconds

    @property
    def descriptors(self) -> LineDescriptors:
        return self._descriptors

    @property
    def is_playing(self) -> bool:
        return self.status.get() is Status.PLAYING

    def cell(self, row: int, column: int) -> Optional[CellView]:
        if not self.model.in_bounds(row, column):
            return None
        c = self.model.cells[row][column]
        return CellView(revealed=c.revealed, wrong=c.wrong, filled=c.filled)

    def snapshot(self) -> Dict[str, object]:
        return {
            "status": self.status.get().value,
            "board_size": self.board_size.get(),
            "max_mistakes": self.max_mistakes,
            "shown_count": self.shown_count.get(),
            "mistake_count": self.mistake_count.get(),
            "elapsed_seconds": self.elapsed_seconds,
            "descriptors": {
                "rows": [list(runs) for runs in self._descriptors.rows],
                "columns": [list(runs) for runs in self._descriptors.columns],
            },
            "board": self.model.snapshot(),
        }

    # ----------------------------
    # Player intents
    # ----------------------------

    def set_board_size(self, size: int) -> bool:
        """Change the size of the next board. Only allowed in `start`."""
        if self.status.get() is not Status.START:
            logger.debug("Board size change to %d rejected in status %s", size, self.status.get().value)
            return False
        self.board_size.set(int(size))
        return True

    def request_play(self, size: Optional[int] = None) -> bool:
        if self.status.get() is not Status.START:
            logger.debug("Play rejected in status %s", self.status.get().value)
            return False
        if size is not None:
            self.set_board_size(size)
        # Build the board first: a failing generator leaves the session in `start`.
        self.model.load_grid(self._generator(self.board_size.get()))
        return self._transition(Status.PLAYING)

    def request_restart(self) -> bool:
        return self._transition(Status.START)

    def reveal_cell(self, row: int, column: int, guessed_filled: bool) -> bool:
        """Guess a cell. Returns True if the board changed."""
        if not self.is_playing:
            logger.debug("Reveal (%d,%d) rejected in status %s", row, column, self.status.get().value)
            return False
        if not self.model.in_bounds(row, column):
            logger.debug("Reveal (%d,%d) rejected: out of range", row, column)
            return False

        res = self.model.reveal(row, column, guessed_filled)
        if res is None:
            return False
        logger.debug("[%s] %s", res.rule, res.message)

        changed: List[Tuple[int, int]] = list(res.changed_cells)
        messages = [res.message]
        wrong = self.model.is_wrong(row, column)

        self.shown_count.update(lambda n: n + 1)
        if wrong:
            self.mistake_count.update(lambda n: n + 1)

        for step in self._cascade(row, column):
            changed.extend(step.changed_cells)
            messages.append(f"[{step.rule}] {step.message}")
            self.shown_count.update(lambda n, k=len(step.changed_cells): n + k)

        self.last_step = StepResult(changed, "; ".join(messages), res.rule)
        return True

    def update(self) -> int:
        """Apply pending timer ticks. Call once per frame from the owner's loop."""
        return self.timer.pump()

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self.timer.close()
        for obs in (self.status, self.board_size, self.shown_count, self.mistake_count, self.grid):
            obs.clear_subscribers()

    # ----------------------------
    # State machine
    # ----------------------------

    def _cascade(self, row: int, column: int) -> Iterator[StepResult]:
        if self.config.transitive_completion:
            return self.solver.cascade_transitive(row, column)
        return self.solver.cascade(row, column)

    def _transition(self, target: Status) -> bool:
        current = self.status.get()
        if target not in _TRANSITIONS[current]:
            logger.debug("Transition %s -> %s rejected", current.value, target.value)
            return False
        logger.info("Status %s -> %s", current.value, target.value)
        self.status.set(target)
        return True

    def _on_status_change(self, status: Status) -> None:
        if status is Status.START:
            self.timer.stop()
            self.timer.reset()
            self.mistake_count.reset()
            self.shown_count.reset()
        elif status is Status.PLAYING:
            self._start_episode()
        elif status in (Status.COMPLETE, Status.GAME_OVER):
            self.timer.stop()
            logger.info(
                "Episode ended %s after %ds with %d mistake(s)",
                status.value, self.elapsed_seconds, self.mistake_count.get(),
            )

    def _start_episode(self) -> None:
        self._episode_size = self.model.size
        self.last_step = None
        self.grid.set(self.model.solution)
        self.mistake_count.reset()
        self.shown_count.reset()
        self.timer.reset()
        self.timer.start()

    def _on_shown_change(self, count: int) -> None:
        if count == self._episode_size * self._episode_size:
            self._transition(Status.COMPLETE)

    def _on_mistake_change(self, count: int) -> None:
        if count > self.max_mistakes:
            self._transition(Status.GAME_OVER)

    def _on_grid_change(self, grid: Optional[Grid]) -> None:
        self._descriptors = describe(grid) if grid is not None else LineDescriptors()
        logger.debug("Descriptors rows=%s columns=%s", self._descriptors.rows, self._descriptors.columns)
