"""Per-file work: download in sync mode, hash and diff in compare mode."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from ..api_clients.base_client import APIClientError
from ..api_clients.contents_client import ContentsAPIClient
from ..config import RunOptions
from ..diff_engine import DiffStrategy, count_changes, diff_texts, positional_diff
from ..exceptions import LocalIOError
from ..hashing import hash_local_file
from ..local_objects import LocalObjectStore
from ..models import ComparisonResult, TraversalSummary, TreeEntry
from ..reporting import ReportSink
from .concurrency import LeafLimiter

logger = logging.getLogger(__name__)


class LeafPipeline:
    """Handles one remote file entry under the shared leaf limiter."""

    def __init__(
        self,
        client: ContentsAPIClient,
        options: RunOptions,
        limiter: LeafLimiter,
        local_store: LocalObjectStore,
        reporter: ReportSink,
        summary: TraversalSummary,
        strategy: DiffStrategy = positional_diff,
    ):
        self.client = client
        self.options = options
        self.limiter = limiter
        self.local_store = local_store
        self.reporter = reporter
        self.summary = summary
        self.strategy = strategy

    def local_path_for(self, entry: TreeEntry) -> Path:
        return self.options.local_root / entry.path

    async def process(self, entry: TreeEntry) -> None:
        """Compare or fetch ``entry`` depending on the run mode."""
        local_path = self.local_path_for(entry)

        if self.options.compare:
            async with self.limiter.slot():
                result = await self.compare(entry, local_path)
            if result is None:
                self.summary.skipped.append(entry.path)
                return
            self.summary.comparisons.append(result)
            self.reporter.report_comparison(result)
            return

        async with self.limiter.slot():
            await self.fetch(entry, local_path)
        self.summary.fetched.append(local_path)
        self.reporter.report_fetched(entry.path)

    async def compare(
        self, entry: TreeEntry, local_path: Path
    ) -> Optional[ComparisonResult]:
        """Compare a remote file with its local copy.

        Returns:
            None when there is no local copy, otherwise the comparison result
        """
        if not await asyncio.to_thread(local_path.exists):
            logger.debug(f"No local copy of {entry.path}, nothing to compare")
            return None

        try:
            local_hash = await asyncio.to_thread(hash_local_file, local_path)
        except OSError as e:
            raise LocalIOError(f"failed to read {local_path}", details=str(e)) from e

        if local_hash == entry.sha:
            logger.debug(f"Hash match for {entry.path} ({local_hash})")
            return ComparisonResult(
                local_path=local_path,
                remote_hash=entry.sha,
                local_hash=local_hash,
                matched=True,
            )

        local_text = await self.local_store.resolve_text(local_hash)
        remote_text = await self.client.fetch_by_hash(entry.sha)
        records = diff_texts(local_text, remote_text, self.strategy)
        return ComparisonResult(
            local_path=local_path,
            remote_hash=entry.sha,
            local_hash=local_hash,
            matched=False,
            diff=records,
            total_diffs=count_changes(records),
        )

    async def fetch(self, entry: TreeEntry, local_path: Path) -> None:
        """Download a remote file into the local tree."""
        if not entry.download_url:
            raise APIClientError(f"no download locator for {entry.path}")

        try:
            await asyncio.to_thread(
                local_path.parent.mkdir, parents=True, exist_ok=True
            )
        except OSError as e:
            raise LocalIOError("failed to create directory", details=str(e)) from e

        content = await self.client.fetch_raw(entry.download_url)

        try:
            await asyncio.to_thread(local_path.write_bytes, content)
        except OSError as e:
            raise LocalIOError("failed to create file", details=str(e)) from e
        logger.debug(f"Wrote {len(content)} bytes to {local_path}")
