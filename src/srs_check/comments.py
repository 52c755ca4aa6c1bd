"""Comment regions of C/C++ source files, located with tree-sitter-c."""

from collections.abc import Callable
from dataclasses import dataclass, field

import tree_sitter_c as tsc
from tree_sitter import Language, Node, Parser

from .models import CommentStyle


class ASTWalker:
    """Utilities for traversing the C AST"""

    @staticmethod
    def walk(node: Node, callback: Callable[[Node], None]):
        """Perform a depth-first traversal of the AST"""
        callback(node)
        for child in node.children:
            ASTWalker.walk(child, callback)

    @staticmethod
    def find_all_by_type(node: Node, type_name: str) -> list[Node]:
        """Find all descendant nodes of a specific type, in source order"""
        results = []

        def check(n):
            if n.type == type_name:
                results.append(n)

        ASTWalker.walk(node, check)
        return results


@dataclass
class Segment:
    """Comment body of one physical comment (or one '//' line)"""

    text: str
    start_byte: int  # file offset of text[0]
    line: int  # 1-based
    # set when the comment is not valid UTF-8; text then holds replacement characters
    decode_error: UnicodeDecodeError | None = None

    def byte_offset(self, index: int) -> int:
        return self.start_byte + len(self.text[:index].encode("utf-8"))


@dataclass
class CommentRegion:
    """A block comment, or a run of '//' comments on consecutive lines"""

    style: CommentStyle
    segments: list[Segment] = field(default_factory=list)

    @property
    def line(self) -> int:
        return self.segments[0].line


class CommentScanner:
    """Finds comment regions in C source"""

    def __init__(self):
        self.language = Language(tsc.language())
        self.parser = Parser(self.language)

    def scan(self, source: bytes) -> list[CommentRegion]:
        tree = self.parser.parse(source)
        regions: list[CommentRegion] = []
        last_line_row: int | None = None

        for node in ASTWalker.find_all_by_type(tree.root_node, "comment"):
            raw = source[node.start_byte : node.end_byte]
            decode_error = None
            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                text = raw.decode("utf-8", errors="replace")
                decode_error = e
            row = node.start_point[0]

            if text.startswith("//"):
                segment = Segment(text[2:], node.start_byte + 2, row + 1, decode_error)
                if (
                    regions
                    and regions[-1].style is CommentStyle.LINE
                    and last_line_row == row - 1
                    and self._starts_line(source, node.start_byte)
                ):
                    regions[-1].segments.append(segment)
                else:
                    regions.append(CommentRegion(CommentStyle.LINE, [segment]))
                last_line_row = node.end_point[0]
            else:
                body = text[2:-2] if text.endswith("*/") and len(text) >= 4 else text[2:]
                segment = Segment(body, node.start_byte + 2, row + 1, decode_error)
                regions.append(CommentRegion(CommentStyle.BLOCK, [segment]))
                last_line_row = None

        return regions

    @staticmethod
    def _starts_line(source: bytes, offset: int) -> bool:
        """True when only whitespace precedes offset on its line"""
        line_start = source.rfind(b"\n", 0, offset) + 1
        return not source[line_start:offset].strip()

