"""
Requirement extraction from markdown requirement documents.

A requirement looks like one of:

    **SRS_MODULE_01_001: [** module_create shall allocate memory. **]**
    **SRS_MODULE_01_001:** [** module_create shall allocate memory. **]**
    **SRS_MODULE_01_001: [** `module_create` shall fail when **x** is NULL. ]**

The header is recognised with a small pattern; the bracketed text is read by
an explicit state machine so that escapes, code spans and stray brackets
inside the text are handled one character at a time.
"""

import logging
import re
from enum import Enum
from pathlib import Path

from .models import CommentStyle, ExtractionResult, Location, RequirementEntry, TagKind, malformed
from .tags import is_valid_tag

logger = logging.getLogger(__name__)

HEADER = re.compile(r"\*\*(?P<tag>SRS_[A-Za-z0-9_]*)\s*:[ \t]*(?:\*\*)?[ \t]*(?P<open>\[(?:\*\*)?)?")
BLANK_LINE = re.compile(r"\n[ \t]*\n")


class _State(Enum):
    INSIDE_BRACKET = "inside-bracket"
    INSIDE_ESCAPE = "inside-escape"
    INSIDE_CODE = "inside-code"


class MarkdownExtractor:
    """Extracts requirement entries from markdown text"""

    def extract(self, text: str, file_path: Path) -> ExtractionResult:
        text = text.replace("\r\n", "\n")
        result = ExtractionResult(file_path=file_path)
        seen: set[str] = set()

        pos = 0
        while True:
            header = HEADER.search(text, pos)
            if header is None:
                break

            tag = header["tag"]
            location = Location(file_path, text.count("\n", 0, header.start()) + 1)
            block_end = self._block_end(text, header.end())

            if header["open"] is None:
                result.malformed.append(malformed(tag, location, "expected '[' after requirement tag"))
                pos = header.end()
                continue

            closed = self._scan_bracket(text, header.end(), block_end)
            if closed is None:
                result.malformed.append(
                    malformed(tag, location, "requirement text is not closed with '**]**' before the end of its block")
                )
                pos = block_end
                continue

            raw_text, pos = closed
            if not is_valid_tag(tag):
                result.malformed.append(malformed(tag, location, f"'{tag}' is not a valid SRS tag"))
            elif tag in seen:
                result.malformed.append(malformed(tag, location, f"duplicate requirement tag '{tag}'"))
            else:
                seen.add(tag)
                result.entries.append(
                    RequirementEntry(
                        tag=tag,
                        raw_text=raw_text,
                        location=location,
                        kind=TagKind.DOC,
                        style=CommentStyle.MARKDOWN,
                    )
                )

        logger.debug(
            "%s: %d requirements, %d malformed", file_path, len(result.entries), len(result.malformed)
        )
        return result

    @staticmethod
    def _block_end(text: str, start: int) -> int:
        """End of the logical requirement block: a blank line or the next tag header"""
        ends = [len(text)]
        blank = BLANK_LINE.search(text, start)
        if blank:
            ends.append(blank.start())
        following = HEADER.search(text, start)
        if following:
            ends.append(following.start())
        return min(ends)

    @staticmethod
    def _scan_bracket(text: str, start: int, end: int) -> tuple[str, int] | None:
        """Return (raw text, position after the closing marker) or None when unterminated.

        The text is closed by '**]' or by ']**'; any other ']' is content.
        Backtick code spans are opaque and a backslash escapes the next
        character. The '**' of a '**]' closer stays in the text when it ends
        inline bold text opened earlier.
        """
        state = _State.INSIDE_BRACKET
        bold_markers = 0
        i = start
        while i < end:
            ch = text[i]
            if state is _State.INSIDE_ESCAPE:
                state = _State.INSIDE_BRACKET
            elif state is _State.INSIDE_CODE:
                if ch == "`":
                    state = _State.INSIDE_BRACKET
            elif ch == "\\":
                state = _State.INSIDE_ESCAPE
            elif ch == "`":
                # an unpaired backtick is literal
                if text.find("`", i + 1, end) != -1:
                    state = _State.INSIDE_CODE
            elif text.startswith("**]", i):
                bracket = i + 2
                raw = text[start:bracket] if bold_markers % 2 else text[start:i]
                after = bracket + 1
                if text.startswith("**", after):
                    after += 2
                return raw, after
            elif text.startswith("**", i):
                bold_markers += 1
                i += 2
                continue
            elif ch == "]" and text.startswith("**", i + 1):
                return text[start:i], i + 3
            i += 1
        return None
