"""
Shared pytest fixtures for gash tests.

Provides throw-away git repositories isolated from the user's global and
system git configuration, and a sample commit object for unit tests.
"""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

SAMPLE_COMMIT = (
    b"tree 4b825dc642cb6eb9a060e54bf8d69288fbee4904\n"
    b"author elliot alderson <elliotalderson@protonmail.ch> 1600000000 +0200\n"
    b"committer elliot alderson <elliotalderson@protonmail.ch> 1600000100 -0530\n"
    b"\n"
    b"initial commit\n"
)

# Fixed dates keep the initial commit hash identical across runs.
GIT_DATES = {
    "GIT_AUTHOR_DATE": "1600000000 +0200",
    "GIT_COMMITTER_DATE": "1600000100 -0530",
}


def git(repo_dir: Path, *args: str) -> str:
    """Run git in a test repository and return stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo_dir,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


@pytest.fixture
def sample_commit() -> bytes:
    return SAMPLE_COMMIT


@pytest.fixture
def isolated_git_env(tmp_path, monkeypatch):
    """Hide ~/.gitconfig and /etc/gitconfig from git."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("GIT_CONFIG_GLOBAL", raising=False)
    for key in list(os.environ):
        if key.startswith("GIT_CONFIG_KEY_") or key.startswith("GIT_CONFIG_VALUE_"):
            monkeypatch.delenv(key)
    monkeypatch.delenv("GIT_CONFIG_COUNT", raising=False)
    return home


@pytest.fixture
def git_repo(tmp_path, monkeypatch, isolated_git_env) -> Path:
    """A repository with a single commit; the test runs from inside it."""
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()

    git(repo_dir, "init")
    git(repo_dir, "config", "user.name", "elliot alderson")
    git(repo_dir, "config", "user.email", "elliotalderson@protonmail.ch")

    (repo_dir / "foo").write_text("hello")
    git(repo_dir, "add", "foo")
    for key, value in GIT_DATES.items():
        monkeypatch.setenv(key, value)
    git(repo_dir, "commit", "-m", "initial commit")
    for key in GIT_DATES:
        monkeypatch.delenv(key)

    monkeypatch.chdir(repo_dir)
    return repo_dir
