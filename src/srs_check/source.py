"""
Requirement extraction from C/C++ source comments.

Two comment dialects are supported:

    /* Codes_SRS_MODULE_01_001: [ module_create shall allocate memory. ]*/
    // Codes_SRS_MODULE_01_002: [ module_create shall format "a[i]=%d"
    // for every element. ]

The closing delimiter is the ']' that balances the opening bracket and is
followed only by the end of the comment ('*/', optionally after whitespace or
more '*'), by another requirement tag in the same comment, or, for '//'
comments, by the end of the line. A ']' inside the requirement text therefore
never truncates it.
"""

import logging
import re
from enum import Enum
from pathlib import Path

from .comments import CommentRegion, CommentScanner, Segment
from .models import CommentStyle, ExtractionResult, Location, RequirementEntry, TagKind, malformed
from .tags import is_valid_tag

logger = logging.getLogger(__name__)

TAG_PREFIX = re.compile(r"(?<![A-Za-z0-9_])(?P<prefix>Codes|Tests)_(?P<tag>SRS_[A-Za-z0-9_]*)")

_PREFIX_KIND = {"Codes": TagKind.CODES, "Tests": TagKind.TESTS}


def _starts_requirement(text: str) -> bool:
    """True when text begins with a prefixed tag followed by a colon"""
    found = TAG_PREFIX.match(text)
    return found is not None and text[found.end() :].lstrip(" \t").startswith(":")


class _State(Enum):
    INSIDE_BRACKET = "inside-bracket"
    INSIDE_ESCAPE = "inside-escape"


class _RegionText:
    """The segments of a comment region joined by newlines, with offset mapping"""

    def __init__(self, region: CommentRegion):
        self.region = region
        self.starts: list[int] = []
        parts = []
        offset = 0
        for segment in region.segments:
            self.starts.append(offset)
            parts.append(segment.text)
            offset += len(segment.text) + 1
        self.text = "\n".join(parts)

    def segment_at(self, index: int) -> tuple[int, Segment]:
        """Return (segment number, segment) containing the joined-text index"""
        number = 0
        for i, start in enumerate(self.starts):
            if start <= index:
                number = i
        return number, self.region.segments[number]

    def byte_offset(self, index: int) -> int:
        number, segment = self.segment_at(index)
        return segment.byte_offset(index - self.starts[number])

    def segment_end(self, number: int) -> int:
        return self.starts[number] + len(self.region.segments[number].text)


class SourceExtractor:
    """Extracts Codes_/Tests_ requirement entries from C/C++ source"""

    def __init__(self, scanner: CommentScanner | None = None):
        self.scanner = scanner or CommentScanner()

    def extract(self, source: bytes, file_path: Path, is_test_file: bool = False) -> ExtractionResult:
        result = ExtractionResult(file_path=file_path, is_test_file=is_test_file)
        for region in self.scanner.scan(source):
            if "SRS_" not in "".join(s.text for s in region.segments):
                continue
            for segment in region.segments:
                # tagged comments must be valid UTF-8
                if segment.decode_error is not None:
                    raise segment.decode_error
            self._extract_region(_RegionText(region), file_path, result)

        logger.debug(
            "%s: %d tagged comments, %d malformed", file_path, len(result.entries), len(result.malformed)
        )
        return result

    def _extract_region(self, region: _RegionText, file_path: Path, result: ExtractionResult) -> None:
        text = region.text
        style = region.region.style
        pos = 0

        while True:
            found = TAG_PREFIX.search(text, pos)
            if found is None:
                return

            tag = found["tag"]
            seg_number, segment = region.segment_at(found.start())
            location = Location(file_path, segment.line + text.count("\n", region.starts[seg_number], found.start()))

            i = self._skip_space(text, found.end())
            if i >= len(text) or text[i] != ":":
                # a mention such as "see Codes_SRS_X_01_001", not a requirement comment
                pos = found.end()
                continue

            i = self._skip_space(text, i + 1)
            if i >= len(text) or text[i] != "[":
                result.malformed.append(malformed(tag, location, "expected '[' after requirement tag"))
                pos = found.end()
                continue

            closing = self._scan_bracket(region, i + 1)
            if closing is None:
                reason = (
                    "requirement text is not closed with ']' at the end of the comment"
                    if style is CommentStyle.BLOCK
                    else "requirement text is not closed with ']' at the end of a '//' line"
                )
                result.malformed.append(malformed(tag, location, reason))
                # resume past this tag so later tags in the comment are still read
                if style is CommentStyle.BLOCK:
                    pos = found.end()
                else:
                    pos = region.segment_end(seg_number) + 1
                continue

            if not is_valid_tag(tag):
                result.malformed.append(malformed(tag, location, f"'{tag}' is not a valid SRS tag"))
            else:
                result.entries.append(
                    RequirementEntry(
                        tag=tag,
                        raw_text=text[i + 1 : closing],
                        location=location,
                        kind=_PREFIX_KIND[found["prefix"]],
                        style=style,
                        span=(region.byte_offset(i), region.byte_offset(closing) + 1),
                        prefix_offset=region.byte_offset(found.start()),
                    )
                )
            pos = closing + 1

    @staticmethod
    def _skip_space(text: str, i: int) -> int:
        while i < len(text) and text[i] in " \t\r\n":
            i += 1
        return i

    def _scan_bracket(self, region: _RegionText, start: int) -> int | None:
        """Index of the closing ']' or None when the text is unterminated"""
        text = region.text
        style = region.region.style
        state = _State.INSIDE_BRACKET
        depth = 0
        i = start
        while i < len(text):
            ch = text[i]
            if state is _State.INSIDE_ESCAPE:
                state = _State.INSIDE_BRACKET
            elif ch == "\\":
                state = _State.INSIDE_ESCAPE
            elif ch == "[":
                depth += 1
            elif ch == "]":
                if depth > 0:
                    depth -= 1
                elif self._closes_here(region, i):
                    return i
            elif ch == "\n" and style is CommentStyle.LINE and i + 1 in region.starts:
                following = region.text[i + 1 :].lstrip(" \t")
                if _starts_requirement(following):
                    # the next '//' line starts another requirement
                    return None
            i += 1
        return None

    @staticmethod
    def _closes_here(region: _RegionText, index: int) -> bool:
        text = region.text
        if region.region.style is CommentStyle.BLOCK:
            # the end of the comment, or another requirement tag in the same comment
            rest = text[index + 1 :].lstrip(" \t\r\n*")
            return not rest or _starts_requirement(rest)
        number, _ = region.segment_at(index)
        return not text[index + 1 : region.segment_end(number)].strip()
