"""Unit tests for the post-commit hook installer."""

import stat
from unittest.mock import patch

import pytest

from gash.exceptions import GitHookError
from gash.services.git_hook_manager import GitHookManager


@pytest.fixture
def fake_repo(tmp_path):
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    with patch(
        "gash.services.git_hook_manager.repository_root", return_value=repo
    ):
        yield repo


class TestGitHookManager:
    def test_outside_repository_raises(self, tmp_path):
        with patch(
            "gash.services.git_hook_manager.repository_root", return_value=None
        ):
            manager = GitHookManager(tmp_path)
            with pytest.raises(GitHookError) as exc_info:
                manager.install()

        assert str(exc_info.value) == (
            "Failed to find git root! Are you in a git repository?"
        )

    def test_hook_location(self, fake_repo):
        manager = GitHookManager(fake_repo / "sub" / "dir")

        assert manager.hook_file == fake_repo / ".git" / "hooks" / "post-commit"
        assert str(manager.relative_hook_path()) == ".git/hooks/post-commit"

    def test_creates_executable_hook(self, fake_repo):
        manager = GitHookManager(fake_repo)
        assert not manager.is_installed()

        hook_file = manager.install()

        assert hook_file.read_text() == "#!/bin/bash\ngash\n"
        assert hook_file.stat().st_mode & stat.S_IXUSR
        assert manager.is_installed()

    def test_appends_to_existing_hook(self, fake_repo):
        hooks_dir = fake_repo / ".git" / "hooks"
        hooks_dir.mkdir()
        existing = hooks_dir / "post-commit"
        existing.write_text("#!/bin/sh\necho 'existing hook'\n")

        GitHookManager(fake_repo).install()

        assert existing.read_text() == "#!/bin/sh\necho 'existing hook'\ngash\n"

    def test_install_is_idempotent(self, fake_repo):
        manager = GitHookManager(fake_repo)
        manager.install()
        manager.install()

        assert manager.hook_file.read_text() == "#!/bin/bash\ngash\n"

    def test_write_failure_raises(self, fake_repo):
        manager = GitHookManager(fake_repo)
        with patch("pathlib.Path.write_text", side_effect=PermissionError("denied")):
            with pytest.raises(GitHookError, match="denied"):
                manager.install()

    def test_installed_hook_is_not_rewritten(self, fake_repo):
        manager = GitHookManager(fake_repo)
        manager.install()

        with patch("pathlib.Path.write_text") as mock_write:
            assert manager.install() == manager.hook_file

        mock_write.assert_not_called()
