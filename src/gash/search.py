"""
Brute force search for a commit hash carrying a signature.

Candidates come from a ``Spiral`` of timestamp shifts, are rendered by a
``CommitTemplate``, hashed, and tested by a ``SignatureMatcher``. The
search runs either sequentially (deterministic, smallest ring wins) or on
a thread pool where the first worker to find a match wins.
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol

from .commit import CommitTemplate, digest
from .signature import SignatureMatcher
from .spiral import Spiral, SpiralChunk

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 1000
DEFAULT_CHUNK_SIZE = 4096


class ProgressObserver(Protocol):
    """Receives attempt counts while a search is running."""

    def update(self, attempts: int) -> None:
        ...

    def finish(self) -> None:
        ...


@dataclass(frozen=True)
class BruteForceResult:
    """The winning candidate of a search."""

    sha1: str
    commit_contents: bytes
    author_delta: int
    committer_delta: int


class SearchState:
    """Attempt counter and found flag shared by the workers of one search.

    ``found`` is an Event so workers can poll it per candidate without
    taking ``lock``. The counter, chunk hand-out and observer calls go
    through ``lock``; the observer is never called after ``found`` is set.
    """

    def __init__(self, observer: Optional[ProgressObserver] = None):
        self.attempts = 0
        self.found = threading.Event()
        self.lock = threading.Lock()
        self.observer = observer

    def next_chunk(self, chunks: Iterator[SpiralChunk]) -> Optional[SpiralChunk]:
        """Hand out the next unclaimed chunk, or None when done."""
        with self.lock:
            if self.found.is_set():
                return None
            return next(chunks, None)

    def record_attempt(self) -> bool:
        """Count one attempt and notify the observer.

        Returns False once any worker found a match.
        """
        with self.lock:
            if self.found.is_set():
                return False
            self.attempts += 1
            if self.observer is not None and self.attempts % PROGRESS_INTERVAL == 0:
                self.observer.update(self.attempts)
            return True

    def add_attempts(self, count: int) -> None:
        """Add a batch of attempts without notifying the observer."""
        with self.lock:
            self.attempts += count

    def claim(self) -> bool:
        """Mark the search as won. Only the first caller gets True."""
        with self.lock:
            if self.found.is_set():
                return False
            self.found.set()
            if self.observer is not None:
                self.observer.finish()
            return True

    def abort(self) -> None:
        """Stop all workers without reporting a match."""
        with self.lock:
            self.found.set()


class BruteForceEngine:
    """Searches a spiral of timestamp shifts for a matching commit hash."""

    def __init__(
        self,
        matcher: SignatureMatcher,
        template: CommitTemplate,
        spiral: Spiral,
        parallel: bool = False,
        progress: Optional[ProgressObserver] = None,
        workers: Optional[int] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        """
        Initialize the engine.

        Args:
            matcher: Predicate the digest must satisfy
            template: Commit whose timestamps are shifted
            spiral: Candidate shifts
            parallel: Whether to search on a thread pool
            progress: Optional observer notified every PROGRESS_INTERVAL attempts
            workers: Thread count for parallel mode (defaults to CPU count)
            chunk_size: Spiral indices handed to a worker at a time
        """
        self.matcher = matcher
        self.template = template
        self.spiral = spiral
        self.parallel = parallel
        self.progress = progress
        self.workers = workers or os.cpu_count() or 1
        self.chunk_size = chunk_size

    def search(self) -> Optional[BruteForceResult]:
        """Return the first matching candidate, or None if none exists."""
        state = SearchState(self.progress)
        logger.info(
            "Searching %d candidates for %s %r (parallel=%s)",
            len(self.spiral),
            self.matcher.orientation.value,
            self.matcher.signature,
            self.parallel,
        )

        if self.parallel:
            result = self._search_parallel(state)
        else:
            result = self._work(iter([self.spiral.whole()]), state)

        logger.info(
            "Search finished after %d attempts: %s",
            state.attempts,
            result.sha1 if result else "no match",
        )
        return result

    def _search_parallel(self, state: SearchState) -> Optional[BruteForceResult]:
        chunks = self.spiral.split(self.chunk_size)
        result: Optional[BruteForceResult] = None

        with ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="GashSearch"
        ) as executor:
            futures = [
                executor.submit(self._work, chunks, state) for _ in range(self.workers)
            ]
            for future in as_completed(futures):
                try:
                    worker_result = future.result()
                except Exception:
                    state.abort()
                    raise
                if worker_result is not None:
                    result = worker_result

        return result

    def _work(
        self, chunks: Iterator[SpiralChunk], state: SearchState
    ) -> Optional[BruteForceResult]:
        matches = self.matcher.matches
        with_diff = self.template.with_diff
        found = state.found.is_set
        # Without an observer attempts are counted once per chunk.
        per_attempt = state.observer is not None

        while True:
            chunk = state.next_chunk(chunks)
            if chunk is None:
                return None

            tried = 0
            try:
                for author_delta, committer_delta in chunk:
                    if per_attempt:
                        if not state.record_attempt():
                            return None
                    elif found():
                        return None
                    tried += 1

                    contents = with_diff(author_delta, committer_delta)
                    sha1 = digest(contents)
                    if matches(sha1) and state.claim():
                        return BruteForceResult(
                            sha1=sha1.hex(),
                            commit_contents=contents,
                            author_delta=author_delta,
                            committer_delta=committer_delta,
                        )
            finally:
                if not per_attempt:
                    state.add_attempts(tried)


def brute_force_sha1(
    matcher: SignatureMatcher,
    template: CommitTemplate,
    spiral: Spiral,
    parallel: bool = False,
    progress: Optional[ProgressObserver] = None,
) -> Optional[BruteForceResult]:
    """Run a single search with default worker settings."""
    return BruteForceEngine(
        matcher, template, spiral, parallel=parallel, progress=progress
    ).search()
