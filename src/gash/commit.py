"""
Commit object template with patchable author and committer timestamps.

The raw commit is scanned once; afterwards every candidate is built by
joining three untouched byte segments with the two shifted timestamps.
"""

import hashlib
import logging
import re
from dataclasses import dataclass
from typing import List, Tuple

from .exceptions import MalformedCommitError

logger = logging.getLogger(__name__)

# "author Name <email> 1600000000 +0100", same for committer.
TIMESTAMP_LINE_RE = re.compile(
    rb"^(?P<role>author|committer) .*> (?P<timestamp>\d+) [+-]\d{4}$", re.MULTILINE
)


def object_bytes(contents: bytes, kind: str = "commit") -> bytes:
    """Frame contents the way git does before hashing an object."""
    return b"%s %d\x00%s" % (kind.encode("ascii"), len(contents), contents)


def digest(contents: bytes) -> bytes:
    """SHA-1 of a commit object, identical to its git object id."""
    return hashlib.sha1(object_bytes(contents)).digest()


@dataclass(frozen=True)
class TimestampOccurrence:
    """An integer timestamp and its half-open byte range in the commit."""

    role: str
    value: int
    start: int
    end: int


class CommitTemplate:
    """A commit whose author and committer timestamps can be shifted."""

    def __init__(self, commit_contents: bytes):
        """
        Parse the timestamp occurrences of a raw commit object.

        Args:
            commit_contents: Commit object body as printed by ``git cat-file commit``

        Raises:
            MalformedCommitError: If fewer than two timestamps are present
        """
        self.commit_contents = commit_contents

        occurrences: List[TimestampOccurrence] = []
        for match in TIMESTAMP_LINE_RE.finditer(commit_contents):
            occurrences.append(
                TimestampOccurrence(
                    role=match.group("role").decode("ascii"),
                    value=int(match.group("timestamp")),
                    start=match.start("timestamp"),
                    end=match.end("timestamp"),
                )
            )
            if len(occurrences) == 2:
                break

        if len(occurrences) < 2:
            raise MalformedCommitError(
                "Failed to find author and committer timestamps in commit",
                f"found {len(occurrences)} of 2",
            )

        self.author, self.committer = occurrences
        self._segments: Tuple[bytes, bytes, bytes] = (
            commit_contents[: self.author.start],
            commit_contents[self.author.end : self.committer.start],
            commit_contents[self.committer.end :],
        )
        logger.debug(
            "Parsed commit template: %s=%d %s=%d",
            self.author.role,
            self.author.value,
            self.committer.role,
            self.committer.value,
        )

    def with_diff(self, author_diff: int, committer_diff: int) -> bytes:
        """Return the commit with both timestamps shifted."""
        head, middle, tail = self._segments
        return b"".join(
            (
                head,
                b"%d" % (self.author.value + author_diff),
                middle,
                b"%d" % (self.committer.value + committer_diff),
                tail,
            )
        )
