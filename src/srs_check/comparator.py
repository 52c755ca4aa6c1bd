import logging

from .errors import AmbiguousEmphasisError
from .models import (
    ComparisonResult,
    ExtractionResult,
    NormalizedEntry,
    RequirementEntry,
    ResultKind,
    TagKind,
    malformed,
)
from .normalizer import normalize_entry

logger = logging.getLogger(__name__)


def _normalize(entry: RequirementEntry) -> NormalizedEntry | ComparisonResult:
    try:
        return normalize_entry(entry)
    except AmbiguousEmphasisError as e:
        return malformed(entry.tag, entry.location, f"ambiguous emphasis markers ({e.detail})")


def check_placement(entry: RequirementEntry, is_test_file: bool) -> ComparisonResult | None:
    """Codes_ tags belong in production files and Tests_ tags in test files"""
    if entry.kind is TagKind.CODES and is_test_file:
        return ComparisonResult(
            ResultKind.MISPLACED_TAG,
            entry.tag,
            entry.location,
            reason="Codes_ tag in a test file, expected Tests_",
            entry=entry,
        )
    if entry.kind is TagKind.TESTS and not is_test_file:
        return ComparisonResult(
            ResultKind.MISPLACED_TAG,
            entry.tag,
            entry.location,
            reason="Tests_ tag in a production file, expected Codes_",
            entry=entry,
        )
    return None


def compare(
    doc: ExtractionResult | None,
    sources: list[ExtractionResult],
    placement: bool = True,
) -> list[ComparisonResult]:
    """Compare a requirements document against its paired source files.

    Results come in a deterministic order: the document's tags in document
    order, then source-only findings file by file in order of appearance.
    """
    results: list[ComparisonResult] = []

    # Source side: normalize every occurrence once, keeping file order
    occurrences: dict[str, list[NormalizedEntry]] = {}
    source_items: list[list[NormalizedEntry | ComparisonResult]] = []
    source_malformed_tags: set[str] = set()
    for extraction in sources:
        items: list[NormalizedEntry | ComparisonResult] = []
        for item in extraction.items():
            if isinstance(item, RequirementEntry):
                normalized = _normalize(item)
                if isinstance(normalized, NormalizedEntry):
                    occurrences.setdefault(item.tag, []).append(normalized)
                else:
                    source_malformed_tags.add(item.tag)
                items.append(normalized)
            else:
                source_malformed_tags.add(item.tag)
                items.append(item)
        source_items.append(items)

    # Document side
    doc_tags: set[str] = set()
    if doc is not None:
        for item in doc.items():
            doc_tags.add(item.tag)
            if isinstance(item, ComparisonResult):
                results.append(item)
                continue

            normalized = _normalize(item)
            if isinstance(normalized, ComparisonResult):
                results.append(normalized)
                continue
            results.extend(_compare_tag(normalized, occurrences.get(item.tag, []), source_malformed_tags))

    # Source-only findings
    for extraction, items in zip(sources, source_items):
        for item in items:
            if isinstance(item, ComparisonResult):
                results.append(item)
                continue
            entry = item.entry
            if placement:
                misplaced = check_placement(entry, extraction.is_test_file)
                if misplaced is not None:
                    results.append(misplaced)
            if entry.kind is TagKind.CODES and entry.tag not in doc_tags:
                results.append(ComparisonResult(ResultKind.MISSING_IN_DOC, entry.tag, entry.location, entry=entry))

    logger.debug(
        "compared %s against %d source file(s): %d results",
        doc.file_path if doc is not None else "<no document>",
        len(sources),
        len(results),
    )
    return results


def _compare_tag(
    documented: NormalizedEntry,
    found: list[NormalizedEntry],
    source_malformed_tags: set[str],
) -> list[ComparisonResult]:
    results: list[ComparisonResult] = []
    tag = documented.tag
    expected = documented.canonical_text

    has_code = any(o.entry.kind is TagKind.CODES for o in found)
    if not has_code and tag not in source_malformed_tags:
        results.append(ComparisonResult(ResultKind.MISSING_IN_SOURCE, tag, documented.entry.location))

    for occurrence in found:
        if occurrence.canonical_text != expected:
            results.append(
                ComparisonResult(
                    ResultKind.TEXT_MISMATCH,
                    tag,
                    occurrence.entry.location,
                    expected=expected,
                    actual=occurrence.canonical_text,
                    entry=occurrence.entry,
                )
            )

    if has_code and not results:
        results.append(ComparisonResult(ResultKind.MATCH, tag, documented.entry.location, expected=expected))
    return results
