from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class TagKind(str, Enum):
    """Where a requirement tag was found"""

    DOC = "doc"
    CODES = "Codes_"
    TESTS = "Tests_"


class CommentStyle(str, Enum):
    MARKDOWN = "markdown"
    BLOCK = "block"
    LINE = "line"


class ResultKind(str, Enum):
    MATCH = "MATCH"
    TEXT_MISMATCH = "TEXT_MISMATCH"
    MISSING_IN_SOURCE = "MISSING_IN_SOURCE"
    MISSING_IN_DOC = "MISSING_IN_DOC"
    MALFORMED_TAG = "MALFORMED_TAG"
    MISPLACED_TAG = "MISPLACED_TAG"


@dataclass(frozen=True)
class Location:
    file_path: Path
    line: int

    def __str__(self) -> str:
        return f"{self.file_path}:{self.line}"


@dataclass(frozen=True)
class RequirementEntry:
    """A requirement tag and the raw text found next to it"""

    tag: str
    raw_text: str
    location: Location
    kind: TagKind
    style: CommentStyle
    # Byte offsets in the file: the whole "[...]" span and the start of
    # the "Codes_"/"Tests_" prefix. Only set for source entries.
    span: tuple[int, int] | None = None
    prefix_offset: int | None = None


@dataclass(frozen=True)
class NormalizedEntry:
    entry: RequirementEntry
    canonical_text: str

    @property
    def tag(self) -> str:
        return self.entry.tag


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of checking one tag (or one tag occurrence)"""

    kind: ResultKind
    tag: str
    location: Location
    expected: str | None = None
    actual: str | None = None
    reason: str | None = None
    entry: RequirementEntry | None = field(default=None, compare=False, repr=False)

    @property
    def is_match(self) -> bool:
        return self.kind is ResultKind.MATCH

    @property
    def message(self) -> str:
        if self.kind is ResultKind.MATCH:
            return "text matches"
        if self.kind is ResultKind.TEXT_MISMATCH:
            return "source text differs from documentation"
        if self.kind is ResultKind.MISSING_IN_SOURCE:
            return "documented requirement has no Codes_ comment in source"
        if self.kind is ResultKind.MISSING_IN_DOC:
            return "Codes_ comment refers to a requirement missing from documentation"
        return self.reason or ""


def malformed(tag: str, location: Location, reason: str) -> ComparisonResult:
    return ComparisonResult(ResultKind.MALFORMED_TAG, tag, location, reason=reason)


@dataclass
class ExtractionResult:
    """Entries and malformed tags found in one file, in order of appearance"""

    file_path: Path
    entries: list[RequirementEntry] = field(default_factory=list)
    malformed: list[ComparisonResult] = field(default_factory=list)
    is_test_file: bool = False

    def items(self) -> list[RequirementEntry | ComparisonResult]:
        """Entries and malformed tags merged by line"""
        merged: list[RequirementEntry | ComparisonResult] = [*self.entries, *self.malformed]
        return sorted(merged, key=lambda item: item.location.line)
