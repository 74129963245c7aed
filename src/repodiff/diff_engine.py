"""Line-level diff between a local and a remote text.

The default strategy compares lines by index, not by alignment: an inserted
or deleted line shifts every following index and shows up as a cascade of
changes. Reports produced by earlier versions of the tool depend on this
output, so it stays the default. An aligned strategy built on difflib is
available behind the same call signature.
"""

import difflib
import logging
from typing import Callable, Dict, List, Sequence

from .models import DiffRecord, DiffTag

logger = logging.getLogger(__name__)

DiffStrategy = Callable[[Sequence[str], Sequence[str]], List[DiffRecord]]


def split_lines(text: str) -> List[str]:
    """Split text into whitespace-trimmed lines.

    Surrounding whitespace of the whole text is dropped first, so an empty
    text yields a single empty line.
    """
    return [line.strip() for line in text.strip().split("\n")]


def positional_diff(lines_a: Sequence[str], lines_b: Sequence[str]) -> List[DiffRecord]:
    """Compare two line sequences index by index.

    At each index up to the longer length, differing lines produce a removed
    record for ``lines_a`` and an added record for ``lines_b``; empty lines
    produce no record.
    """
    records: List[DiffRecord] = []
    for i in range(max(len(lines_a), len(lines_b))):
        line_a = lines_a[i].strip() if i < len(lines_a) else ""
        line_b = lines_b[i].strip() if i < len(lines_b) else ""
        if line_a == line_b:
            continue
        if line_a:
            records.append(DiffRecord(DiffTag.REMOVED, line_a))
        if line_b:
            records.append(DiffRecord(DiffTag.ADDED, line_b))
    return records


def aligned_diff(lines_a: Sequence[str], lines_b: Sequence[str]) -> List[DiffRecord]:
    """Compare two line sequences after aligning them with difflib.

    Each run of equal lines collapses into one context-omitted record.
    """
    a = [line.strip() for line in lines_a]
    b = [line.strip() for line in lines_b]
    matcher = difflib.SequenceMatcher(None, a, b, autojunk=False)

    records: List[DiffRecord] = []
    for opcode, i1, i2, j1, j2 in matcher.get_opcodes():
        if opcode == "equal":
            records.append(DiffRecord(DiffTag.OMITTED, f"{i2 - i1} unchanged lines"))
            continue
        records.extend(DiffRecord(DiffTag.REMOVED, line) for line in a[i1:i2] if line)
        records.extend(DiffRecord(DiffTag.ADDED, line) for line in b[j1:j2] if line)
    return records


DIFF_STRATEGIES: Dict[str, DiffStrategy] = {
    "positional": positional_diff,
    "aligned": aligned_diff,
}


def get_strategy(name: str) -> DiffStrategy:
    """Look up a diff strategy by name.

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return DIFF_STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown diff algorithm '{name}', "
            f"expected one of {sorted(DIFF_STRATEGIES)}"
        )


def diff_texts(
    local_text: str, remote_text: str, strategy: DiffStrategy = positional_diff
) -> List[DiffRecord]:
    """Diff two texts, local side first."""
    return strategy(split_lines(local_text), split_lines(remote_text))


def count_changes(records: Sequence[DiffRecord]) -> int:
    """Count the removed and added records."""
    return sum(1 for record in records if record.is_change)


def render_markdown(records: Sequence[DiffRecord]) -> str:
    """Render records as a fenced ``diff`` code block."""
    body = "".join(f"{record}\n" for record in records)
    return f"```diff\n{body}```\n"
