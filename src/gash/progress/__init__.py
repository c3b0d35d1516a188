"""Progress display module for gash."""

from .hash_progress import HashProgressDisplay

__all__ = ["HashProgressDisplay"]
