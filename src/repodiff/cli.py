"""Command line interface for Repodiff."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from . import __version__
from .cli_error_display import CLIErrorDisplay
from .config import DEFAULT_MAX_PARALLEL, ConfigManager, RunOptions
from .diff_engine import DIFF_STRATEGIES
from .exceptions import ConfigurationError
from .traversal.orchestrator import synchronize

logger = logging.getLogger(__name__)

console = Console()


@click.command()
@click.option(
    "--compare", is_flag=True, help="Compare the local tree instead of syncing"
)
@click.option("--verbose", is_flag=True, help="Print full diffs, not only counts")
@click.option(
    "--path",
    "path",
    type=str,
    default=None,
    help="Walk only this remote path instead of the configured files",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=ConfigManager.DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Configuration file",
)
@click.option(
    "--local-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Local directory mirroring the repository root",
)
@click.option(
    "--max-parallel",
    type=click.IntRange(min=1),
    default=DEFAULT_MAX_PARALLEL,
    show_default=True,
    help="Maximum concurrent file downloads and comparisons",
)
@click.option(
    "--diff-algorithm",
    type=click.Choice(sorted(DIFF_STRATEGIES)),
    default="positional",
    show_default=True,
    help="Line diff strategy",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__, prog_name="repodiff")
def cli(
    compare: bool,
    verbose: bool,
    path: Optional[str],
    config_path: Path,
    local_root: Path,
    max_parallel: int,
    diff_algorithm: str,
    debug: bool,
):
    """Sync or compare a local tree with a hosted repository.

    \b
    Without --compare, every file under the configured roots is downloaded
    into the local tree. With --compare, local files are checked against
    the remote by git blob hash and differing files are reported.

    \b
    CONFIGURATION (diffs.json):
      {"name": "owner/repo", "branch": "main",
       "files": ["src", "README.md"], "ignore": ["node_modules"]}

    \b
    ENVIRONMENT:
      GITHUB_TOKEN    Bearer token (required)
      GITHUB_API_URL  API base URL (default https://api.github.com)
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )
    if not debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)

    error_display = CLIErrorDisplay()

    try:
        token = ConfigManager.get_token()
        descriptor = ConfigManager(config_path).load()
    except ConfigurationError as e:
        error_display.display_error(e)
        sys.exit(1)

    options = RunOptions(
        token=token,
        compare=compare,
        verbose=verbose,
        path=path,
        local_root=local_root,
        max_parallel=max_parallel,
        api_url=ConfigManager.get_api_url(),
        diff_algorithm=diff_algorithm,  # type: ignore[arg-type]
    )

    try:
        summary = asyncio.run(synchronize(descriptor, options))
    except Exception as e:
        error_display.display_error(e, show_technical_details=debug)
        sys.exit(1)

    logger.debug(
        f"Done: {len(summary.fetched)} fetched, "
        f"{len(summary.comparisons)} compared, {len(summary.mismatched)} differing, "
        f"{len(summary.skipped)} without local copy"
    )


def main():
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n❌ Interrupted by user", style="red")
        sys.exit(1)


if __name__ == "__main__":
    main()
