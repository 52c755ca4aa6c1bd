import logging
from collections.abc import Callable
from pathlib import Path

from .models import CommentStyle, ComparisonResult, ResultKind, TagKind

logger = logging.getLogger(__name__)

# (start, end, replacement) byte edit
Edit = tuple[int, int, bytes]


def comment_text(text: str, style: CommentStyle) -> str:
    """Turn canonical requirement text into text that is safe inside a comment"""
    text = _escape_unbalanced_brackets(text)
    if style is CommentStyle.BLOCK:
        text = text.replace("*/", "*\\/").replace("/*", "\\/*")
    return text


def _escape_unbalanced_brackets(text: str) -> str:
    out: list[str] = []
    open_positions: list[int] = []
    for ch in text:
        if ch == "[":
            open_positions.append(len(out))
            out.append(ch)
        elif ch == "]":
            if open_positions:
                open_positions.pop()
                out.append(ch)
            else:
                out.append("\\]")
        else:
            out.append(ch)
    for position in open_positions:
        out[position] = "\\["
    return "".join(out)


class AutoFixEngine:
    """Rewrites source comments so they agree with the documentation"""

    def __init__(self):
        self._fixers: dict[ResultKind, Callable[[ComparisonResult], Edit | None]] = {
            ResultKind.TEXT_MISMATCH: self._fix_text_mismatch,
            ResultKind.MISPLACED_TAG: self._fix_misplaced_tag,
        }

    def can_fix(self, result: ComparisonResult) -> bool:
        return result.kind in self._fixers and result.entry is not None and result.entry.span is not None

    def apply_fixes(self, file_path: Path, results: list[ComparisonResult]) -> bytes:
        """Return the file content with every fixable result in results applied.

        Edits are applied from the end of the file backwards so the byte
        offsets recorded at extraction time stay valid.
        """
        content = file_path.read_bytes()

        edits = []
        for result in results:
            if result.location.file_path != file_path or not self.can_fix(result):
                continue
            edit = self._fixers[result.kind](result)
            if edit is not None:
                edits.append(edit)

        last_start = len(content) + 1
        for start, end, replacement in sorted(set(edits), key=lambda e: e[0], reverse=True):
            if end > last_start:
                logger.warning("%s: skipping overlapping fix at byte %d", file_path, start)
                continue
            content = content[:start] + replacement + content[end:]
            last_start = start

        logger.debug("%s: applied %d fixes", file_path, len(edits))
        return content

    def _fix_text_mismatch(self, result: ComparisonResult) -> Edit | None:
        entry = result.entry
        if result.expected is None:
            return None
        start, end = entry.span
        replacement = f"[ {comment_text(result.expected, entry.style)} ]"
        return start, end, replacement.encode("utf-8")

    def _fix_misplaced_tag(self, result: ComparisonResult) -> Edit | None:
        entry = result.entry
        if entry.prefix_offset is None:
            return None
        prefix = TagKind.TESTS if entry.kind is TagKind.CODES else TagKind.CODES
        start = entry.prefix_offset
        return start, start + len(prefix.value), prefix.value.encode("ascii")


def fixable_files(results: list[ComparisonResult]) -> dict[Path, list[ComparisonResult]]:
    """Group fixable results by the file they point into, keeping order"""
    engine = AutoFixEngine()
    grouped: dict[Path, list[ComparisonResult]] = {}
    for result in results:
        if engine.can_fix(result):
            grouped.setdefault(result.location.file_path, []).append(result)
    return grouped
