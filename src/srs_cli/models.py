from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Status(str, Enum):
    OK = "OK"
    FAILED = "FAILED"


class ReportIssue(BaseModel):
    kind: str
    tag: str
    file_path: str
    line_number: int
    message: str
    expected: Optional[str] = None
    actual: Optional[str] = None
    auto_fixable: bool = False


class ReportSummary(BaseModel):
    status: Status
    pairs_checked: int
    matched: int
    failures: int
    errors: int


class ReportDocument(BaseModel):
    summary: ReportSummary
    issues: list[ReportIssue]
    io_errors: list[str] = []
