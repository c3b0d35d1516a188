"""Rich Live display of how many hashes a search has tried."""

import threading
from typing import Optional

from rich.console import Console
from rich.live import Live
from rich.text import Text


class HashProgressDisplay:
    """Shows ``hashes <n>k`` while a search runs.

    Implements the search progress observer protocol. ``update`` and
    ``finish`` are called from worker threads while the search holds its
    state lock, so they only swap the renderable; drawing happens on the
    Live refresh thread.
    """

    def __init__(self, console: Console, padding: str = ""):
        """
        Initialize progress display.

        Args:
            console: Rich console to draw on (normally stderr)
            padding: Prefix aligning the counter with other output
        """
        self.console = console
        self.padding = padding
        self.attempts = 0
        self.finished = False
        self.live_component: Optional[Live] = None
        self._lock = threading.Lock()

    def render(self) -> Text:
        return Text(f"{self.padding}hashes {self.attempts // 1000}k")

    def start(self) -> None:
        with self._lock:
            if self.live_component is not None:
                return
            self.live_component = Live(
                self.render(),
                console=self.console,
                refresh_per_second=10,
                transient=False,
                redirect_stdout=False,
                redirect_stderr=False,
            )
            self.live_component.start()

    def stop(self) -> None:
        with self._lock:
            if self.live_component is None:
                return
            self.live_component.update(self.render())
            self.live_component.stop()
            self.live_component = None

    def update(self, attempts: int) -> None:
        with self._lock:
            if self.finished:
                return
            self.attempts = attempts
            if self.live_component is not None:
                self.live_component.update(self.render())

    def finish(self) -> None:
        with self._lock:
            self.finished = True

    def __enter__(self) -> "HashProgressDisplay":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
