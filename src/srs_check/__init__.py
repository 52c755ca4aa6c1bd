"""
srs-check - requirement documentation / source consistency checks

This package provides:
- Requirement extraction from markdown requirement documents
- Requirement extraction from Codes_/Tests_ comments in C/C++ sources
- Text normalization and comparison of both sides
- Auto-fix of drifting source comments
"""

__version__ = "0.1.0"

from .autofix import AutoFixEngine
from .comparator import compare
from .config import ValidatorConfig
from .engine import ValidationReport, ValidatorEngine
from .markdown import MarkdownExtractor
from .models import ComparisonResult, RequirementEntry, ResultKind, TagKind
from .normalizer import normalize
from .source import SourceExtractor

__all__ = [
    "AutoFixEngine",
    "ComparisonResult",
    "MarkdownExtractor",
    "RequirementEntry",
    "ResultKind",
    "SourceExtractor",
    "TagKind",
    "ValidationReport",
    "ValidatorConfig",
    "ValidatorEngine",
    "compare",
    "normalize",
]
