"""Entry point of a traversal run.

Walks either the explicit path override or every configured root, all roots
in parallel, and fails with the first error once every root has finished.
"""

import asyncio
import logging
from typing import List, Optional

import httpx

from ..api_clients.contents_client import ContentsAPIClient
from ..config import RepositoryDescriptor, RunOptions
from ..diff_engine import get_strategy
from ..exceptions import TraversalError
from ..local_objects import LocalObjectStore
from ..models import TraversalSummary
from ..reporting import ReportSink
from .concurrency import LeafLimiter, run_to_completion
from .leaf_pipeline import LeafPipeline
from .tree_walker import TreeWalker

logger = logging.getLogger(__name__)


class Orchestrator:
    """Runs one traversal per requested root."""

    def __init__(
        self,
        descriptor: RepositoryDescriptor,
        options: RunOptions,
        client: ContentsAPIClient,
        reporter: Optional[ReportSink] = None,
        local_store: Optional[LocalObjectStore] = None,
        limiter: Optional[LeafLimiter] = None,
    ):
        self.descriptor = descriptor
        self.options = options
        self.client = client
        self.reporter = reporter or ReportSink(verbose=options.verbose)
        self.local_store = local_store or LocalObjectStore(options.local_root)
        self.limiter = limiter or LeafLimiter(options.max_parallel)
        self.summary = TraversalSummary()

        pipeline = LeafPipeline(
            client=client,
            options=options,
            limiter=self.limiter,
            local_store=self.local_store,
            reporter=self.reporter,
            summary=self.summary,
            strategy=get_strategy(options.diff_algorithm),
        )
        self.walker = TreeWalker(client, descriptor, pipeline)

    def roots(self) -> List[str]:
        """Roots to walk: the path override alone, or the configured files."""
        override = self.options.path_override
        if override is not None:
            return [override]
        return list(self.descriptor.files)

    async def run(self) -> TraversalSummary:
        """Walk every root to completion.

        Raises:
            TraversalError: The first root failure, after all roots finished
        """
        roots = self.roots()
        if not roots:
            logger.warning("No paths configured and no --path given, nothing to do")
            return self.summary

        if self.options.compare and not await asyncio.to_thread(
            self.local_store.is_available
        ):
            logger.warning(
                f"{self.options.local_root} is not inside a git repository; "
                "differing files cannot be resolved locally"
            )

        errors = await run_to_completion(self._run_root(root) for root in roots)
        if errors:
            raise errors[0]
        return self.summary

    async def _run_root(self, root: str) -> None:
        try:
            await self.walker.walk(root)
        except Exception as e:
            logger.error(f"failed to fetch {root}: {e}")
            raise TraversalError(f"failed to fetch {root}", path=root, cause=e) from e


async def synchronize(
    descriptor: RepositoryDescriptor,
    options: RunOptions,
    reporter: Optional[ReportSink] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> TraversalSummary:
    """Open a contents client for ``descriptor`` and run one traversal."""
    async with ContentsAPIClient(
        api_url=options.api_url,
        token=options.token,
        repository=descriptor.name,
        transport=transport,
    ) as client:
        orchestrator = Orchestrator(descriptor, options, client, reporter=reporter)
        return await orchestrator.run()
