"""
Square spiral enumeration of timestamp shifts.

Candidates are ``(author_delta, committer_delta)`` pairs ordered by
Chebyshev ring around the origin, so the smallest timestamp changes are
tried first. Index ``n`` maps to its pair in closed form, which lets the
sequence be cut into independent chunks for parallel workers.
"""

import math
from dataclasses import dataclass
from typing import Iterator, Tuple

DeltaPair = Tuple[int, int]


def ring(pair: DeltaPair) -> int:
    """Return the Chebyshev ring a pair belongs to."""
    return max(abs(pair[0]), abs(pair[1]))


def spiral_pair(n: int) -> DeltaPair:
    """Return the coordinates of the 1-based index ``n`` on the spiral.

    Ring ``s`` starts right after the ``(2s-1)^2`` cells of the rings inside
    it and has four sides (right, top, left, bottom) of length ``2s``.
    """
    s = (math.isqrt(n) + 1) // 2
    offset = n - (2 * s - 1) ** 2
    side = offset // (2 * s)
    e = offset - 2 * s * side - s + 1

    if side == 0:
        return s, e
    if side == 1:
        return -e, s
    if side == 2:
        return -s, -e
    return e, -s


@dataclass(frozen=True)
class SpiralChunk:
    """A contiguous window ``[start, stop)`` of spiral indices."""

    start: int
    stop: int

    def __iter__(self) -> Iterator[DeltaPair]:
        return map(spiral_pair, range(self.start, self.stop))

    def __len__(self) -> int:
        return self.stop - self.start


class Spiral:
    """Every pair with ``max(|da|, |dc|) <= max_variance`` except the origin."""

    def __init__(self, max_variance: int):
        if max_variance < 0:
            raise ValueError(
                f"max_variance must not be negative, got {max_variance}"
            )
        self.max_variance = max_variance
        # Index of the last cell of the outermost ring.
        self.last = (2 * max_variance + 1) ** 2 - 1

    def __len__(self) -> int:
        return self.last

    def whole(self) -> SpiralChunk:
        """The entire spiral as a single chunk."""
        return SpiralChunk(1, self.last + 1)

    def __iter__(self) -> Iterator[DeltaPair]:
        return iter(self.whole())

    def split(self, chunk_size: int) -> Iterator[SpiralChunk]:
        """Cut the spiral into consecutive chunks of at most ``chunk_size``."""
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        for start in range(1, self.last + 1, chunk_size):
            yield SpiralChunk(start, min(start + chunk_size, self.last + 1))
