"""Bounded-concurrency traversal of a remote repository tree."""

from .concurrency import LeafLimiter, run_to_completion
from .leaf_pipeline import LeafPipeline
from .orchestrator import Orchestrator, synchronize
from .tree_walker import TreeWalker

__all__ = [
    "LeafLimiter",
    "run_to_completion",
    "LeafPipeline",
    "Orchestrator",
    "synchronize",
    "TreeWalker",
]
