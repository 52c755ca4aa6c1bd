from srs_check.autofix import AutoFixEngine
from srs_check.engine import ValidationReport
from srs_check.models import ComparisonResult, ResultKind

from .models import ReportDocument, ReportIssue, ReportSummary, Status


def result_to_issue(result: ComparisonResult) -> ReportIssue:
    """Convert an internal comparison result to an external Pydantic issue"""
    return ReportIssue(
        kind=result.kind.value,
        tag=result.tag,
        file_path=str(result.location.file_path),
        line_number=result.location.line,
        message=result.message,
        expected=result.expected,
        actual=result.actual,
        auto_fixable=AutoFixEngine().can_fix(result),
    )


def report_to_document(report: ValidationReport) -> ReportDocument:
    return ReportDocument(
        summary=ReportSummary(
            status=Status.OK if report.ok else Status.FAILED,
            pairs_checked=report.pairs_checked,
            matched=report.count(ResultKind.MATCH),
            failures=len(report.failures),
            errors=len(report.errors),
        ),
        issues=[result_to_issue(r) for r in report.failures],
        io_errors=[f"{e.file_path}: {e.message}" for e in report.errors],
    )
