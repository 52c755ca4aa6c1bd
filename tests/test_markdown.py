from pathlib import Path

from srs_check.markdown import MarkdownExtractor
from srs_check.models import CommentStyle, ResultKind, TagKind

DOC_PATH = Path("devdoc/test_module_requirements.md")


def extract(text):
    return MarkdownExtractor().extract(text, DOC_PATH)


def test_both_header_variants():
    text = """# test_module requirements

**SRS_TEST_MODULE_66_001: [** `test_module_create` shall allocate memory for a new test module instance. **]**

**SRS_TEST_MODULE_66_002:** [** If allocating memory fails, `test_module_create` shall return `NULL`. **]**
"""
    result = extract(text)

    assert not result.malformed
    assert [e.tag for e in result.entries] == ["SRS_TEST_MODULE_66_001", "SRS_TEST_MODULE_66_002"]
    first, second = result.entries
    assert first.raw_text == " `test_module_create` shall allocate memory for a new test module instance. "
    assert first.location.line == 3
    assert first.kind is TagKind.DOC
    assert first.style is CommentStyle.MARKDOWN
    assert second.raw_text == " If allocating memory fails, `test_module_create` shall return `NULL`. "
    assert second.location.line == 5


def test_multiline_text_and_brackets():
    text = """**SRS_M_01_003: [** `m_print` shall print `a[i]`
for every element of the array. **]**
"""
    result = extract(text)

    assert len(result.entries) == 1
    assert result.entries[0].raw_text == " `m_print` shall print `a[i]`\nfor every element of the array. "


def test_partially_bold_text():
    result = extract("**SRS_M_01_004: [** m_run shall **not** fail. ]**\n")

    assert result.entries[0].raw_text == " m_run shall **not** fail. "


def test_escaped_brackets():
    result = extract("**SRS_M_01_005: [** m_parse accepts \\] alone. **]**\n")

    assert result.entries[0].raw_text == " m_parse accepts \\] alone. "


def test_unclosed_block_then_next_tag():
    text = """**SRS_M_01_006: [** this text is never closed

**SRS_M_01_007: [** this one is fine. **]**
"""
    result = extract(text)

    assert [m.tag for m in result.malformed] == ["SRS_M_01_006"]
    assert result.malformed[0].kind is ResultKind.MALFORMED_TAG
    assert result.malformed[0].location.line == 1
    assert [e.tag for e in result.entries] == ["SRS_M_01_007"]


def test_missing_open_bracket():
    result = extract("**SRS_M_01_008:** text without brackets\n")

    assert not result.entries
    assert "expected '['" in result.malformed[0].reason


def test_invalid_tag_reported():
    result = extract("**SRS_BROKEN: [** some text **]**\n")

    assert not result.entries
    assert result.malformed[0].tag == "SRS_BROKEN"


def test_duplicate_tag_reported():
    text = """**SRS_M_01_009: [** first. **]**

**SRS_M_01_009: [** second. **]**
"""
    result = extract(text)

    assert len(result.entries) == 1
    assert result.entries[0].raw_text == " first. "
    assert "duplicate" in result.malformed[0].reason
    assert result.malformed[0].location.line == 3


def test_mentions_are_ignored():
    text = "See **SRS_M_01_001** and SRS_M_01_002 for details.\n"
    result = extract(text)

    assert not result.entries
    assert not result.malformed


def test_items_in_line_order():
    text = """**SRS_M_01_010: [** ok. **]**

**SRS_M_01_011:** nothing

**SRS_M_01_012: [** ok too. **]**
"""
    items = extract(text).items()

    assert [i.tag for i in items] == ["SRS_M_01_010", "SRS_M_01_011", "SRS_M_01_012"]


def test_bracket_in_prose_does_not_close():
    result = extract("**SRS_M_01_013: [** x shall be in (0, 10] range. **]**\n")

    assert not result.malformed
    assert result.entries[0].raw_text == " x shall be in (0, 10] range. "


def test_unmatched_open_bracket_in_prose():
    result = extract("**SRS_M_01_014: [** x shall be in [0, 10). **]**\n")

    assert not result.malformed
    assert result.entries[0].raw_text == " x shall be in [0, 10). "


def test_brackets_inside_code_spans():
    result = extract(
        "**SRS_M_01_015: [** m_parse shall stop at `]`. **]**\n\n"
        "**SRS_M_01_016: [** m_scan shall skip `]**` markers. **]**\n"
    )

    assert not result.malformed
    assert [e.raw_text for e in result.entries] == [
        " m_parse shall stop at `]`. ",
        " m_scan shall skip `]**` markers. ",
    ]


def test_inline_bold_ending_at_closer():
    result = extract("**SRS_M_01_017: [** m_run shall **not**]**\n")

    assert result.entries[0].raw_text == " m_run shall **not**"
