"""Console reporting of fetched files and comparison results."""

import logging
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown

from .diff_engine import render_markdown
from .models import ComparisonResult

logger = logging.getLogger(__name__)


class ReportSink:
    """Prints one line per fetched or differing file.

    In verbose mode a differing file is followed by its diff, rendered as a
    markdown ``diff`` code block.
    """

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose

    def _line(self, text: str) -> None:
        # Paths and file content must never be parsed as rich markup
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def report_fetched(self, path: str) -> None:
        self._line(f"Fetched file: {path}")

    def report_comparison(self, result: ComparisonResult) -> None:
        if result.matched:
            logger.debug(f"No differences for: {result.local_path}")
            return

        self._line(f"{result.total_diffs} Differences for: {result.local_path}")
        if self.verbose and result.diff is not None:
            self.console.print(
                Markdown(render_markdown(result.diff), code_theme="monokai")
            )
