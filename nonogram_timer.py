import logging
import queue
import threading
from typing import Optional

from nonogram_events import Observable

logger = logging.getLogger(__name__)


class GameTimer:
    """Elapsed-seconds counter driven by a background tick thread.

    The thread never touches ``elapsed``: it only queues ticks. ``pump()``
    applies them on the caller's thread, so ticks share one timeline with
    every other state change. Ticks queued by an earlier run are discarded.
    """

    def __init__(self, interval: float = 1.0, threaded: bool = True, name: str = "GameTimer") -> None:
        self.interval = interval
        self.threaded = threaded
        self.name = name
        self.elapsed: Observable[int] = Observable(0, "elapsed_seconds")

        self._running = False
        self._generation = 0
        self._tick_q: "queue.Queue[int]" = queue.Queue()
        self._stop_evt = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def seconds(self) -> int:
        return self.elapsed.get()

    def start(self) -> bool:
        if self._running:
            return False
        self._running = True
        self._generation += 1
        if self.threaded:
            self._stop_evt = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._generation, self._stop_evt),
                name=self.name,
                daemon=True,
            )
            self._thread.start()
        logger.debug("%s started", self.name)
        return True

    def stop(self) -> bool:
        if not self._running:
            return False
        self._running = False
        self._stop_evt.set()
        if self._thread is not None:
            self._thread.join(timeout=max(1.0, self.interval * 2))
            self._thread = None
        self._drain()
        logger.debug("%s stopped at %ds", self.name, self.seconds)
        return True

    def reset(self) -> None:
        self._drain()
        self.elapsed.reset()

    def tick(self) -> bool:
        """Advance by one second. No-op while stopped."""
        if not self._running:
            return False
        self.elapsed.update(lambda s: s + 1)
        return True

    def pump(self) -> int:
        """Apply queued ticks from the current run; returns how many were applied."""
        applied = 0
        while True:
            try:
                generation = self._tick_q.get_nowait()
            except queue.Empty:
                break
            if generation == self._generation and self.tick():
                applied += 1
        return applied

    def close(self) -> None:
        self.stop()
        self.elapsed.clear_subscribers()

    def _drain(self) -> None:
        while True:
            try:
                self._tick_q.get_nowait()
            except queue.Empty:
                return

    def _run(self, generation: int, stop_evt: threading.Event) -> None:
        while not stop_evt.wait(self.interval):
            self._tick_q.put(generation)
