"""Recursive expansion of a remote directory tree."""

import logging
from typing import List

from ..api_clients.contents_client import ContentsAPIClient
from ..config import RepositoryDescriptor
from ..exceptions import TraversalError
from ..models import EntryKind, TreeEntry
from .concurrency import run_to_completion
from .leaf_pipeline import LeafPipeline

logger = logging.getLogger(__name__)


class TreeWalker:
    """Walks a remote tree and hands every file to the leaf pipeline.

    Each retained child of a directory runs as its own task. A directory
    finishes only after all of its children have finished, and then raises
    the first error any of them produced. Nothing is cancelled on failure.
    """

    def __init__(
        self,
        client: ContentsAPIClient,
        descriptor: RepositoryDescriptor,
        pipeline: LeafPipeline,
    ):
        self.client = client
        self.descriptor = descriptor
        self.pipeline = pipeline

    async def expand(self, path: str) -> List[TreeEntry]:
        """List ``path`` with one remote call."""
        return await self.client.list_or_get(path)

    def retained(self, entries: List[TreeEntry]) -> List[TreeEntry]:
        """Drop entries whose path matches the ignore filter."""
        kept = []
        for entry in entries:
            if self.descriptor.is_ignored(entry.path):
                logger.debug(f"Ignoring {entry.path}")
                continue
            kept.append(entry)
        return kept

    async def walk(self, path: str) -> None:
        """Expand ``path`` and process its whole subtree."""
        children = self.retained(await self.expand(path))
        errors = await run_to_completion(self._dispatch(child) for child in children)
        if errors:
            if len(errors) > 1:
                logger.debug(f"{len(errors)} failures under {path}, reporting first")
            raise errors[0]

    async def _dispatch(self, entry: TreeEntry) -> None:
        kind = entry.kind
        if kind is EntryKind.DIRECTORY:
            await self.walk(entry.path)
        elif kind is EntryKind.FILE:
            try:
                await self.pipeline.process(entry)
            except Exception as e:
                logger.error(f"failed to download {entry.path}: {e}")
                raise TraversalError(
                    f"failed to download {entry.path}", path=entry.path, cause=e
                ) from e
        else:
            logger.debug(f"Skipping {entry.path} of type {entry.type}")
