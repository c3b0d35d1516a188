"""
Rewrites HEAD to a brute forced commit object.

Before touching the repository the digest computed by the search is
checked against ``git hash-object``. A disagreement means commit objects
are being framed or patched incorrectly, so it is fatal.
"""

import logging
from pathlib import Path

from ..exceptions import DigestMismatchError
from ..search import BruteForceResult
from ..utils.git_runner import hash_commit_object, reset_soft

logger = logging.getLogger(__name__)


class CommitRewriter:
    """Verifies and applies search results to a repository."""

    def __init__(self, cwd: Path):
        self.cwd = Path(cwd)

    def verify(self, result: BruteForceResult) -> str:
        """Have git hash the patched commit and compare with our digest.

        Raises:
            DigestMismatchError: If git computes a different object id
        """
        sha1_from_git = hash_commit_object(result.commit_contents, cwd=self.cwd)
        if sha1_from_git != result.sha1:
            raise DigestMismatchError(
                "Git's hash differs from patched hash!",
                f"ours {result.sha1}, git's {sha1_from_git}",
            )
        return sha1_from_git

    def apply(self, result: BruteForceResult) -> str:
        """Store the patched commit and move the current branch onto it.

        Callers are expected to ``verify`` the result first.
        """
        written = hash_commit_object(result.commit_contents, cwd=self.cwd, write=True)
        reset_soft(written, cwd=self.cwd)
        logger.info("Rewrote HEAD to %s", written)
        return written
