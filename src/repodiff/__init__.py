"""
Repodiff - compare or sync a local working tree against a hosted repository.

Walks the remote tree through the hosted contents API without cloning it,
checks every file by its git blob hash and reports line-level differences
for the files that diverge.
"""

__version__ = "0.4.1"
