"""Resolution of blob hashes against the local git object store."""

import asyncio
import logging
import subprocess
from pathlib import Path

from .exceptions import LocalObjectError
from .utils.git_runner import inside_work_tree, run_git

logger = logging.getLogger(__name__)


class LocalObjectStore:
    """Reads blobs from the git repository that contains the local tree.

    The working tree is expected to be a checkout, so any committed or
    staged content can be resolved by hash without a network call.
    """

    def __init__(self, root: Path):
        self.root = root

    def is_available(self) -> bool:
        """Return True when the local root sits inside a git repository."""
        return inside_work_tree(self.root)

    def read_blob(self, sha: str) -> bytes:
        """Return the raw content of the object ``sha``.

        Raises:
            LocalObjectError: If git is missing or the object is unknown
        """
        try:
            result = run_git(["cat-file", "-p", sha], cwd=self.root, text=False)
        except FileNotFoundError as e:
            raise LocalObjectError("git executable not found", details=str(e)) from e
        except subprocess.CalledProcessError as e:
            output = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            raise LocalObjectError(
                f"failed to retrieve file content for {sha}",
                details=f"{e}, output: {output}",
            ) from e
        except subprocess.TimeoutExpired as e:
            raise LocalObjectError(
                f"timed out retrieving file content for {sha}", details=str(e)
            ) from e
        return bytes(result.stdout)

    async def resolve_text(self, sha: str) -> str:
        """Resolve ``sha`` to decoded text without blocking the event loop."""
        content = await asyncio.to_thread(self.read_blob, sha)
        logger.debug(f"Resolved local object {sha} ({len(content)} bytes)")
        return content.decode("utf-8", errors="replace")
