"""Unit tests for the git command runner."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from gash.exceptions import GashError
from gash.utils.git_runner import (
    GitCommandError,
    config_value,
    get_git_environment,
    hash_commit_object,
    head_commit_id,
    read_head_commit,
    repository_root,
    run_git_command,
)


def completed(returncode=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess(
        args=["git"], returncode=returncode, stdout=stdout, stderr=stderr
    )


class TestGitEnvironment:
    def test_sets_safe_directory(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GIT_CONFIG_COUNT", raising=False)
        monkeypatch.delenv("GIT_CONFIG_KEY_0", raising=False)

        env = get_git_environment(tmp_path)

        assert env["GIT_CONFIG_KEY_0"] == "safe.directory"
        assert env["GIT_CONFIG_VALUE_0"] == str(tmp_path.resolve())
        assert env["GIT_CONFIG_COUNT"] == "1"

    def test_shifts_existing_config_entries(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GIT_CONFIG_COUNT", "1")
        monkeypatch.setenv("GIT_CONFIG_KEY_0", "core.pager")
        monkeypatch.setenv("GIT_CONFIG_VALUE_0", "cat")

        env = get_git_environment(tmp_path)

        assert env["GIT_CONFIG_KEY_0"] == "safe.directory"
        assert env["GIT_CONFIG_KEY_1"] == "core.pager"
        assert env["GIT_CONFIG_VALUE_1"] == "cat"
        assert env["GIT_CONFIG_COUNT"] == "2"


class TestRunGitCommand:
    def test_rejects_non_git_commands(self, tmp_path):
        with pytest.raises(ValueError):
            run_git_command(["ls"], cwd=tmp_path)

    def test_passes_bytes_through(self, tmp_path):
        raw = b"tree 0\n\n\xff\xfe message\n"
        with patch("gash.utils.git_runner.subprocess.run") as mock_run:
            mock_run.return_value = completed(stdout=raw)

            assert read_head_commit(tmp_path) == raw

        args, kwargs = mock_run.call_args
        assert args[0] == ["git", "cat-file", "commit", "HEAD"]
        assert kwargs["cwd"] == tmp_path
        assert kwargs["capture_output"] is True

    def test_failure_raises_with_command_and_stderr(self, tmp_path):
        with patch("gash.utils.git_runner.subprocess.run") as mock_run:
            mock_run.return_value = completed(
                returncode=128,
                stderr=b"fatal: not a git repository (or any of the parent directories): .git\n",
            )

            with pytest.raises(GitCommandError) as exc_info:
                head_commit_id(tmp_path)

        error = exc_info.value
        assert isinstance(error, GashError)
        assert str(error) == (
            "the command: 'git rev-parse HEAD' failed with:\n\n"
            "fatal: not a git repository (or any of the parent directories): .git"
        )
        assert error.args_list == ["rev-parse", "HEAD"]

    def test_check_false_returns_failed_result(self, tmp_path):
        with patch("gash.utils.git_runner.subprocess.run") as mock_run:
            mock_run.return_value = completed(returncode=1)

            result = run_git_command(["git", "status"], cwd=tmp_path, check=False)

        assert result.returncode == 1


class TestGitHelpers:
    def test_config_value_strips_output(self, tmp_path):
        with patch("gash.utils.git_runner.subprocess.run") as mock_run:
            mock_run.return_value = completed(stdout=b"1337\n")

            assert config_value("gash.default", tmp_path) == "1337"

        assert mock_run.call_args[0][0] == ["git", "config", "gash.default"]

    def test_config_value_unset_is_none(self, tmp_path):
        with patch("gash.utils.git_runner.subprocess.run") as mock_run:
            mock_run.return_value = completed(returncode=1)

            assert config_value("gash.default", tmp_path) is None

    def test_repository_root(self, tmp_path):
        with patch("gash.utils.git_runner.subprocess.run") as mock_run:
            mock_run.return_value = completed(stdout=b"/work/repo\n")
            assert repository_root(tmp_path) == Path("/work/repo")

            mock_run.return_value = completed(returncode=128)
            assert repository_root(tmp_path) is None

    def test_hash_commit_object_feeds_stdin(self, tmp_path):
        with patch("gash.utils.git_runner.subprocess.run") as mock_run:
            mock_run.return_value = completed(stdout=b"abc123\n")

            assert hash_commit_object(b"contents", tmp_path) == "abc123"
            assert mock_run.call_args[0][0] == [
                "git",
                "hash-object",
                "-t",
                "commit",
                "--stdin",
            ]
            assert mock_run.call_args[1]["input"] == b"contents"

            hash_commit_object(b"contents", tmp_path, write=True)
            assert "-w" in mock_run.call_args[0][0]
