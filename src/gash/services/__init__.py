"""Services that act on the git repository."""

from .commit_rewriter import CommitRewriter
from .git_hook_manager import GitHookManager

__all__ = ["CommitRewriter", "GitHookManager"]
