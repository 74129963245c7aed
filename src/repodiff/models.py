"""Data models shared by the traversal, comparison and reporting layers."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


class EntryKind(str, Enum):
    """Kind of a node observed during traversal."""

    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"


class TreeEntry(BaseModel):
    """One entry of a remote contents listing."""

    name: str = Field(default="", description="Base name of the entry")
    path: str = Field(..., description="Path relative to the repository root")
    type: str = Field(..., description="Remote entry type (dir, file, symlink, ...)")
    sha: str = Field(..., description="Git object hash of the entry")
    download_url: Optional[str] = Field(
        None, description="Raw content locator, null for directories"
    )

    @property
    def kind(self) -> EntryKind:
        if self.type == "dir":
            return EntryKind.DIRECTORY
        if self.type == "file":
            return EntryKind.FILE
        return EntryKind.OTHER


class BlobResponse(BaseModel):
    """Payload of the git blob endpoint."""

    content: str = Field(..., description="Encoded blob content")
    encoding: str = Field(default="base64", description="Content encoding")


class DiffTag(str, Enum):
    REMOVED = "-"
    ADDED = "+"
    OMITTED = " "


@dataclass(frozen=True)
class DiffRecord:
    """A single signed line of a diff."""

    tag: DiffTag
    text: str

    @property
    def is_change(self) -> bool:
        return self.tag in (DiffTag.REMOVED, DiffTag.ADDED)

    def __str__(self) -> str:
        if self.tag is DiffTag.OMITTED:
            return f" ... {self.text}"
        return f"{self.tag.value}{self.text}"


@dataclass
class ComparisonResult:
    """Outcome of comparing one local file with its remote counterpart."""

    local_path: Path
    remote_hash: str
    local_hash: str
    matched: bool
    diff: Optional[List[DiffRecord]] = None
    total_diffs: int = 0


@dataclass
class TraversalSummary:
    """Everything a traversal produced, in completion order."""

    comparisons: List[ComparisonResult] = field(default_factory=list)
    fetched: List[Path] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def mismatched(self) -> List[ComparisonResult]:
        return [result for result in self.comparisons if not result.matched]
