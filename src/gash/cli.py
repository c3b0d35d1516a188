"""Command line interface for gash."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.text import Text

from . import __version__
from .commit import CommitTemplate
from .config import ConfigResolver, GashConfig
from .exceptions import GashError, NoMatchError
from .progress import HashProgressDisplay
from .search import BruteForceEngine, BruteForceResult
from .services import CommitRewriter, GitHookManager
from .signature import Orientation, SignatureMatcher
from .spiral import Spiral
from .time_delta import format_time_delta
from .utils.git_runner import config_value, head_commit_id, read_head_commit

logger = logging.getLogger(__name__)

HIGHLIGHT_STYLE = "bold green"
VERBOSE_PADDING = " " * 8


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 3:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level, format="%(levelname)s:%(name)s:%(message)s", force=True
    )
    logging.getLogger("gash").setLevel(level)


def _highlight(sha1: str, matcher: SignatureMatcher) -> Text:
    """Render a hash with the signature part styled."""
    text = Text(sha1)
    size = len(matcher.signature)
    if size:
        if matcher.orientation is Orientation.PREFIX:
            text.stylize(HIGHLIGHT_STYLE, 0, size)
        else:
            text.stylize(HIGHLIGHT_STYLE, len(sha1) - size, len(sha1))
    return text


def _print_config(config: GashConfig, err_console: Console) -> None:
    for name, value in config.model_dump().items():
        if isinstance(value, bool):
            value = str(value).lower()
        err_console.print(f"{name} {value}", markup=False)


def _install_hook(cwd: Path, console: Console) -> None:
    manager = GitHookManager(cwd)
    console.print(
        f"Creating git hook at {manager.relative_hook_path()}", markup=False
    )
    manager.install()


def _search(
    config: GashConfig,
    matcher: SignatureMatcher,
    cwd: Path,
    err_console: Console,
) -> Optional[BruteForceResult]:
    template = CommitTemplate(read_head_commit(cwd))
    spiral = Spiral(config.max_variance)

    if not config.progress:
        return BruteForceEngine(
            matcher, template, spiral, parallel=config.parallel
        ).search()

    padding = VERBOSE_PADDING if config.verbosity > 0 else ""
    with HashProgressDisplay(err_console, padding=padding) as display:
        return BruteForceEngine(
            matcher, template, spiral, parallel=config.parallel, progress=display
        ).search()


def run(config: GashConfig, cwd: Path, console: Console, err_console: Console) -> None:
    """Give HEAD the configured signature.

    Raises:
        GashError: On invalid input, git failures or an exhausted search
    """
    if config.is_hook_request:
        _install_hook(cwd, console)
        return

    matcher = SignatureMatcher.compile(config.signature, config.orientation)
    if config.verbosity >= 2:
        _print_config(config, err_console)

    current = head_commit_id(cwd)
    if not config.force and matcher.matches_hex(current):
        console.print(
            Text("Nothing to do, current hash: ") + _highlight(current, matcher)
        )
        return

    console.print(
        f"Searching for hash with {config.orientation.value} {config.signature}",
        markup=False,
    )

    result = _search(config, matcher, cwd, err_console)
    if result is None:
        raise NoMatchError(
            "Failed to find a matching hash! Try increasing the variance "
            "with the --max-variance flag."
        )

    console.print(Text("Found hash ") + _highlight(result.sha1, matcher))
    if config.verbosity >= 1:
        err_console.print(f"author_diff    {format_time_delta(result.author_delta)}")
        err_console.print(
            f"committer_diff {format_time_delta(result.committer_delta)}"
        )

    rewriter = CommitRewriter(cwd)
    rewriter.verify(result)

    if config.dry_run:
        err_console.print("Not amending commit due to --dry-run")
        return

    console.print("Patching last commit to include new hash... ", end="")
    rewriter.apply(result)
    console.print("Success!")


@click.command()
@click.argument("signature", required=False)
@click.option(
    "--parallel",
    "-p",
    is_flag=True,
    help="Brute force the hash on all CPU cores (git config gash.parallel).",
)
@click.option(
    "--max-variance",
    "-m",
    type=int,
    default=None,
    help="Max seconds either commit time may move (git config gash.max-variance, default 3600).",
)
@click.option(
    "--progress",
    "-P",
    is_flag=True,
    help="Print how many hashes were tried; slows the search (git config gash.progress).",
)
@click.option(
    "--color", "-c", is_flag=True, help="Color terminal output (git config gash.color)."
)
@click.option(
    "--stealth",
    "-s",
    is_flag=True,
    help="Put the signature at the end of the hash (git config gash.stealth).",
)
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Search even if the current hash already has the signature.",
)
@click.option(
    "--dry-run",
    "-d",
    is_flag=True,
    help="Only print the hash, do not patch the latest commit.",
)
@click.option("--verbose", "-v", "verbosity", count=True, help="Output more information.")
@click.version_option(version=__version__, prog_name="gash")
def cli(
    signature: Optional[str],
    parallel: bool,
    max_variance: Optional[int],
    progress: bool,
    color: bool,
    stealth: bool,
    force: bool,
    dry_run: bool,
    verbosity: int,
):
    """Give the latest commit a hash starting with SIGNATURE.

    \b
    SIGNATURE is a hex string of at most 40 characters. Without it the
    value of "git config gash.default" is used. Keep it short: every extra
    character makes the search 16 times longer.

    \b
    Pass "hook" as SIGNATURE to install a post-commit hook that runs gash
    after every commit.

    \b
    EXAMPLES:
      gash 1337              # hash starts with 1337
      gash 1337 --stealth    # hash ends with 1337
      gash cafe -p -P        # parallel search with progress
      gash hook              # sign every future commit
    """
    _configure_logging(verbosity)
    cwd = Path.cwd()
    err_console = Console(stderr=True, highlight=False, soft_wrap=True)

    try:
        config = ConfigResolver(lambda name: config_value(name, cwd)).resolve(
            signature=signature,
            max_variance=max_variance,
            parallel=parallel,
            progress=progress,
            color=color,
            stealth=stealth,
            force=force,
            dry_run=dry_run,
            verbosity=verbosity,
        )
        console = Console(
            highlight=False,
            soft_wrap=True,
            color_system="auto" if config.color else None,
        )
        run(config, cwd, console, err_console)
    except GashError as e:
        logger.debug("gash failed", exc_info=True)
        err_console.print(f"Error: {e}", markup=False)
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
