import pytest
from srs_check.errors import AmbiguousEmphasisError
from srs_check.normalizer import collapse_whitespace, normalize, unescape


def test_whitespace_collapsed_and_trimmed():
    assert normalize("  test_module_create shall\n   allocate\tmemory.  ") == "test_module_create shall allocate memory."


def test_markdown_escapes():
    assert unescape(r"returns \<0 on \> error") == "returns <0 on > error"
    assert normalize(r"path is C:\\tmp") == "path is C:\\tmp"


def test_comment_delimiter_escapes():
    assert normalize(r"skips \/* and *\/ sequences") == "skips /* and */ sequences"


def test_backticks_stripped():
    assert normalize("`test_module_create` shall return `NULL`.") == "test_module_create shall return NULL."


def test_bold_stripped():
    assert normalize("shall **not** fail") == "shall not fail"


def test_pointer_asterisks_kept():
    assert normalize("char* p and int *q") == "char* p and int *q"
    assert normalize("`const char**` argument") == "const char** argument"


def test_unpaired_bold_marker_kept():
    assert normalize("a ** b") == "a ** b"


def test_documentation_and_comment_forms_agree():
    doc = "If `handle` is `NULL`, `module_destroy` shall return \\<0\\>.  "
    code = "If handle is NULL,\n   module_destroy shall return <0>."
    assert normalize(doc) == normalize(code)


@pytest.mark.parametrize(
    "raw",
    [
        "`a` **b** c",
        r"x \\\< y",
        "**`nested`**",
        "foo\n\n  bar",
        "``",
        "*\\/",
    ],
)
def test_idempotent(raw):
    once = normalize(raw)
    assert normalize(once) == once


def test_overlapping_bold_and_code_rejected():
    with pytest.raises(AmbiguousEmphasisError) as exc_info:
        normalize("**bold `code** more`")
    assert "code span" in exc_info.value.detail


def test_collapse_whitespace():
    assert collapse_whitespace(" a \r\n b ") == "a b"
