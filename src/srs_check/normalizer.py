"""
Canonical form of requirement text.

Documentation and code comments express the same requirement with different
markup: markdown escapes (\\<, \\>, \\\\), bold markers, backtick code spans,
line wrapping. normalize() removes all of that so both sides compare equal.
"""

import string
from dataclasses import dataclass

from .errors import AmbiguousEmphasisError
from .models import NormalizedEntry, RequirementEntry

# \X sequences that are unescaped to X. "/" and "*" cover the "\/*" and
# "*\/" forms used to keep comment delimiters out of C comment text.
ESCAPABLE = frozenset("\\<>/*_`[]")

_PUNCTUATION = frozenset(string.punctuation)


def unescape(text: str) -> str:
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text) and text[i + 1] in ESCAPABLE:
            out.append(text[i + 1])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


@dataclass
class _Token:
    kind: str  # 'text', 'code', 'bold'
    value: str
    can_open: bool = False
    can_close: bool = False
    matched: bool = False


def _flanking(prev: str, nxt: str) -> tuple[bool, bool]:
    """Return (can_open, can_close) for a '**' between prev and nxt"""
    can_open = bool(nxt) and not nxt.isspace() and (not prev or prev.isspace() or prev in _PUNCTUATION)
    can_close = bool(prev) and not prev.isspace() and (not nxt or nxt.isspace() or nxt in _PUNCTUATION)
    return can_open, can_close


def _tokenize(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    literal: list[str] = []

    def flush():
        if literal:
            tokens.append(_Token("text", "".join(literal)))
            literal.clear()

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "`":
            end = text.find("`", i + 1)
            if end == -1:
                literal.append(ch)
                i += 1
                continue
            flush()
            tokens.append(_Token("code", text[i + 1 : end]))
            i = end + 1
        elif ch == "*":
            run = 1
            while i + run < n and text[i + run] == "*":
                run += 1
            if run != 2:
                # single '*' (pointers) and longer runs are plain text
                literal.append("*" * run)
                i += run
                continue
            prev = text[i - 1] if i > 0 else ""
            nxt = text[i + 2] if i + 2 < n else ""
            can_open, can_close = _flanking(prev, nxt)
            flush()
            tokens.append(_Token("bold", "**", can_open, can_close))
            i += 2
        else:
            literal.append(ch)
            i += 1
    flush()
    return tokens


def _match_bold(tokens: list[_Token]) -> None:
    opener: _Token | None = None
    for tok in tokens:
        if tok.kind != "bold":
            continue
        if opener is not None and tok.can_close:
            opener.matched = True
            tok.matched = True
            opener = None
        elif tok.can_open:
            opener = tok


def _code_has_delimiter(content: str, want_open: bool) -> bool:
    i = content.find("**")
    while i != -1:
        prev = content[i - 1] if i > 0 else ""
        nxt = content[i + 2] if i + 2 < len(content) else ""
        can_open, can_close = _flanking(prev, nxt)
        if (want_open and can_open) or (not want_open and can_close):
            return True
        i = content.find("**", i + 2)
    return False


def _check_overlap(text: str, tokens: list[_Token]) -> None:
    """Reject bold spans that start outside a code span and end inside it (or the reverse)"""
    for index, tok in enumerate(tokens):
        if tok.kind != "code" or "**" not in tok.value:
            continue
        before = tokens[:index]
        after = tokens[index + 1 :]
        open_before = any(t.kind == "bold" and not t.matched and t.can_open for t in before)
        close_after = any(t.kind == "bold" and not t.matched and t.can_close for t in after)
        if open_before and _code_has_delimiter(tok.value, want_open=False):
            raise AmbiguousEmphasisError(text, "bold text closes inside a code span")
        if close_after and _code_has_delimiter(tok.value, want_open=True):
            raise AmbiguousEmphasisError(text, "bold text opens inside a code span")


def strip_emphasis(text: str) -> str:
    """Drop paired '**' markers and backtick code-span delimiters"""
    tokens = _tokenize(text)
    _match_bold(tokens)
    _check_overlap(text, tokens)

    out = []
    for tok in tokens:
        if tok.kind == "bold":
            if not tok.matched:
                out.append(tok.value)
        else:
            out.append(tok.value)
    return "".join(out)


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def _normalize_once(text: str) -> str:
    return collapse_whitespace(strip_emphasis(unescape(text)))


def normalize(raw: str) -> str:
    """Map raw requirement text to its canonical, comparable form.

    The steps are repeated until nothing changes, so the result is a fixed
    point and normalize(normalize(x)) == normalize(x). Every step either
    shortens the text or leaves its length alone, so the loop terminates.

    Raises AmbiguousEmphasisError when bold and code-span markers overlap.
    """
    text = raw
    while True:
        result = _normalize_once(text)
        if result == text:
            return result
        text = result


def normalize_entry(entry: RequirementEntry) -> NormalizedEntry:
    return NormalizedEntry(entry=entry, canonical_text=normalize(entry.raw_text))
