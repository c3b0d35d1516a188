"""
Git hook manager for automatic signing of new commits.

Installs a post-commit hook that runs ``gash`` after every commit, so each
new commit is rewritten to carry the configured default signature.
"""

import logging
from pathlib import Path
from typing import Optional

from ..exceptions import GitHookError
from ..utils.git_runner import repository_root

logger = logging.getLogger(__name__)

HOOK_NAME = "post-commit"
HOOK_COMMAND = "gash"
HOOK_SHEBANG = "#!/bin/bash"


class GitHookManager:
    """Manages the gash post-commit hook of a repository."""

    def __init__(self, cwd: Path):
        """
        Initialize git hook manager.

        Args:
            cwd: Any directory inside the git repository
        """
        self.cwd = Path(cwd)
        self._repo_root: Optional[Path] = None

    @property
    def repo_root(self) -> Path:
        if self._repo_root is None:
            root = repository_root(self.cwd)
            if root is None:
                raise GitHookError(
                    "Failed to find git root! Are you in a git repository?"
                )
            self._repo_root = root
        return self._repo_root

    @property
    def hook_file(self) -> Path:
        return self.repo_root / ".git" / "hooks" / HOOK_NAME

    def relative_hook_path(self) -> Path:
        return self.hook_file.relative_to(self.repo_root)

    def is_installed(self) -> bool:
        hook_file = self.hook_file
        if not hook_file.exists():
            return False
        return HOOK_COMMAND in hook_file.read_text().splitlines()

    def install(self) -> Path:
        """Install the post-commit hook, keeping any existing hook commands.

        Returns:
            Path of the hook file

        Raises:
            GitHookError: If not inside a git repository or the hook can't be written
        """
        hook_file = self.hook_file

        try:
            if self.is_installed():
                logger.info("%s hook at %s already runs gash", HOOK_NAME, hook_file)
                return hook_file

            hook_file.parent.mkdir(parents=True, exist_ok=True)

            if hook_file.exists():
                existing_content = hook_file.read_text()
                hook_file.write_text(
                    existing_content.rstrip() + f"\n{HOOK_COMMAND}\n"
                )
            else:
                hook_file.write_text(f"{HOOK_SHEBANG}\n{HOOK_COMMAND}\n")

            hook_file.chmod(0o755)
        except OSError as e:
            raise GitHookError(f"Failed to write {hook_file}", str(e))

        logger.info("Installed %s hook at %s", HOOK_NAME, hook_file)
        return hook_file
