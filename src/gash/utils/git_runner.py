"""
Git command runner with dubious ownership handling.

All interaction with the git executable goes through ``run_git_command`` so
that every call gets the same environment (``safe.directory`` set for the
working directory) and failures surface as ``GitCommandError`` with the
command line and git's stderr.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from ..exceptions import GashError

logger = logging.getLogger(__name__)


class GitCommandError(GashError):
    """Exception raised when a git command exits with a non-zero status."""

    def __init__(self, args: List[str], stderr: str):
        super().__init__(
            f"the command: 'git {' '.join(args)}' failed with:\n\n{stderr.strip()}"
        )
        self.args_list = args
        self.stderr = stderr


def get_git_environment(project_dir: Path) -> Dict[str, str]:
    """
    Get environment variables for git commands to handle dubious ownership.

    Args:
        project_dir: Path to the working directory

    Returns:
        Dictionary of environment variables for git commands
    """
    env = os.environ.copy()

    # Shift any GIT_CONFIG_* entries from the caller up by one so that
    # safe.directory can live at index 0.
    config_count = 1
    for key in os.environ:
        if key.startswith("GIT_CONFIG_KEY_"):
            idx = key.replace("GIT_CONFIG_KEY_", "")
            if idx.isdigit():
                new_idx = int(idx) + 1
                env[f"GIT_CONFIG_KEY_{new_idx}"] = os.environ[key]
                if f"GIT_CONFIG_VALUE_{idx}" in os.environ:
                    env[f"GIT_CONFIG_VALUE_{new_idx}"] = os.environ[
                        f"GIT_CONFIG_VALUE_{idx}"
                    ]
                config_count = max(config_count, new_idx + 1)

    env["GIT_CONFIG_KEY_0"] = "safe.directory"
    env["GIT_CONFIG_VALUE_0"] = str(project_dir.resolve())
    env["GIT_CONFIG_COUNT"] = str(config_count)

    return env


def run_git_command(
    cmd: List[str],
    cwd: Path,
    check: bool = True,
    input: Optional[bytes] = None,
) -> subprocess.CompletedProcess:
    """
    Run a git command with proper environment handling for dubious ownership.

    Output is captured as bytes; commit objects are not guaranteed to be
    valid UTF-8.

    Args:
        cmd: Git command as a list (e.g., ["git", "status"])
        cwd: Working directory for the command
        check: Whether to raise GitCommandError on non-zero exit
        input: Optional bytes fed to the command's stdin

    Returns:
        CompletedProcess instance with the command result

    Raises:
        GitCommandError: If check=True and the command fails
        ValueError: If the command does not start with "git"
    """
    if not cmd or cmd[0] != "git":
        raise ValueError("Command must start with 'git'")

    result = subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        input=input,
        env=get_git_environment(cwd),
    )

    if check and result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace")
        logger.debug(
            "git command failed (exit %d): %s\n%s",
            result.returncode,
            " ".join(cmd),
            stderr,
        )
        raise GitCommandError(cmd[1:], stderr)

    return result


def git(args: List[str], cwd: Path, input: Optional[bytes] = None) -> str:
    """Run ``git <args>`` and return its stripped stdout as text."""
    result = run_git_command(["git", *args], cwd=cwd, input=input)
    return result.stdout.decode("utf-8", errors="replace").strip()


def config_value(name: str, cwd: Path) -> Optional[str]:
    """Read a git config value, or None if it is not set."""
    try:
        return git(["config", name], cwd=cwd)
    except GitCommandError:
        return None


def repository_root(cwd: Path) -> Optional[Path]:
    """Return the top level of the repository containing ``cwd``."""
    try:
        return Path(git(["rev-parse", "--show-toplevel"], cwd=cwd))
    except GitCommandError:
        return None


def head_commit_id(cwd: Path) -> str:
    """Return the full object id of HEAD."""
    return git(["rev-parse", "HEAD"], cwd=cwd)


def read_head_commit(cwd: Path) -> bytes:
    """Return the raw commit object of HEAD, byte for byte."""
    return run_git_command(["git", "cat-file", "commit", "HEAD"], cwd=cwd).stdout


def hash_commit_object(contents: bytes, cwd: Path, write: bool = False) -> str:
    """Let git compute (and optionally store) the id of a commit object."""
    args = ["hash-object", "-t", "commit"]
    if write:
        args.append("-w")
    args.append("--stdin")
    return git(args, cwd=cwd, input=contents)


def reset_soft(commit_id: str, cwd: Path) -> None:
    """Point the current branch at ``commit_id`` keeping index and tree."""
    git(["reset", "--soft", commit_id], cwd=cwd)
