from pathlib import Path

from .engine import ValidationReport
from .models import ComparisonResult, ResultKind


def _display_path(path: Path, root: Path | None) -> str:
    if root is not None:
        try:
            return str(path.relative_to(root))
        except ValueError:
            pass
    return str(path)


def format_result(result: ComparisonResult, root: Path | None = None) -> str:
    """One finding as 'path:line: KIND TAG: detail', plus both texts for mismatches"""
    where = f"{_display_path(result.location.file_path, root)}:{result.location.line}"
    lines = [f"{where}: {result.kind.value} {result.tag}: {result.message}"]
    if result.kind is ResultKind.TEXT_MISMATCH:
        lines.append(f"  expected: {result.expected}")
        lines.append(f"  actual:   {result.actual}")
    return "\n".join(lines)


def format_report(report: ValidationReport) -> str:
    """Render every non-matching result and I/O error, then a summary"""
    out = []
    out.append("=" * 70)
    out.append("SRS CONSISTENCY REPORT")
    out.append("=" * 70)

    for result in report.failures:
        out.append(format_result(result, report.root))

    for error in report.errors:
        out.append(f"{_display_path(error.file_path, report.root)}: IO_ERROR: {error.message}")

    counts = report.counts()
    out.append("")
    out.append("-" * 70)
    out.append(
        f"Checked {report.pairs_checked} file pairs: {counts[ResultKind.MATCH]} matched, "
        f"{len(report.failures)} failures, {len(report.errors)} errors"
    )
    for kind in ResultKind:
        if kind is not ResultKind.MATCH and counts[kind]:
            out.append(f"  {kind.value}: {counts[kind]}")
    out.append("OK" if report.ok else "FAILED")
    return "\n".join(out)
