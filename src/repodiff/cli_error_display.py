"""
CLI Error Display for repodiff runs.

Turns configuration, remote and local failures into a rich panel with the
offending path and cause, followed by guidance and next steps.
"""

import logging
import traceback
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .api_clients.base_client import (
    AuthenticationError,
    RemoteNotFoundError,
    ResponseDecodeError,
)
from .exceptions import (
    ConfigurationError,
    LocalIOError,
    LocalObjectError,
    TraversalError,
)

logger = logging.getLogger(__name__)


class CLIErrorDisplay:
    """CLI error display with user-friendly messaging."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    def display_error(
        self, error: BaseException, show_technical_details: bool = False
    ) -> None:
        """Display an error that ended the run.

        Args:
            error: The exception that occurred
            show_technical_details: Whether to print the traceback
        """
        root = error.root_cause if isinstance(error, TraversalError) else error

        error_text = Text()
        error_text.append("❌ ", style="red")
        error_text.append(str(error), style="red bold")

        title = (
            "🚨 Configuration Error"
            if isinstance(error, ConfigurationError)
            else "🚨 Run Failed"
        )
        self.console.print(
            Panel(error_text, title=title, title_align="left", border_style="red")
        )

        guidance = getattr(root, "user_guidance", "")
        if guidance:
            self.console.print()
            self.console.print(guidance)

        steps = self._generate_next_steps(root)
        if steps:
            self.console.print()
            self.console.print("📋 Next Steps:", style="blue bold")
            for i, step in enumerate(steps, 1):
                step_text = Text()
                step_text.append(f"   {i}. ", style="blue")
                step_text.append(step, style="white")
                self.console.print(step_text)

        if show_technical_details:
            self.console.print()
            self.console.print("Technical Details:", style="dim")
            self.console.print(
                "".join(
                    traceback.format_exception(type(error), error, error.__traceback__)
                ),
                style="dim red",
                markup=False,
            )

    def _generate_next_steps(self, error: BaseException) -> List[str]:
        """Generate context-specific next steps."""
        if isinstance(error, ConfigurationError):
            return [
                "Export GITHUB_TOKEN with a token that can read the repository",
                "Check that the configuration file exists and is valid JSON",
                "The file needs at least a 'name' in owner/repo form",
            ]
        if isinstance(error, AuthenticationError):
            return [
                "Check that GITHUB_TOKEN is valid and not expired",
                "Make sure the token has read access to the repository",
            ]
        if isinstance(error, RemoteNotFoundError):
            return [
                "Check the 'name' field of the configuration",
                "Check that the path exists on the default branch",
            ]
        if isinstance(error, ResponseDecodeError):
            return ["Check GITHUB_API_URL points to a compatible contents API"]
        if isinstance(error, LocalObjectError):
            return [
                "Run compare mode inside a git checkout of the repository",
                "Commit or stage local edits so their blobs exist locally",
            ]
        if isinstance(error, LocalIOError):
            return ["Check permissions and free space of the local tree"]
        return []
