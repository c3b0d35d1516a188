"""Exception classes for gash."""

from typing import Optional


class GashError(Exception):
    """Base exception for all gash errors reported to the user."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class InvalidSignatureError(GashError):
    """Exception raised when a signature is not a valid hex string."""

    pass


class MalformedCommitError(GashError):
    """Exception raised when a commit lacks author and committer timestamps."""

    pass


class ConfigurationError(GashError):
    """Exception raised when configuration cannot be resolved."""

    pass


class DigestMismatchError(GashError):
    """Exception raised when git disagrees with our computed digest.

    This always indicates a bug in how commit objects are framed or
    patched, so it must never be retried.
    """

    pass


class GitHookError(GashError):
    """Exception raised when the post-commit hook cannot be installed."""

    pass


class NoMatchError(GashError):
    """Exception raised when no shift within the variance yields a match."""

    pass
