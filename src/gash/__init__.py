"""
Gash - vanity commit hashes for git.

Rewrites the latest commit so its SHA-1 starts (or ends) with a chosen
hexadecimal signature by nudging the author and committer timestamps
within a bounded window.
"""

__version__ = "1.0.0"
__author__ = "Gash contributors"
