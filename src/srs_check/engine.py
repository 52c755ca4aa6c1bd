import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from .comparator import compare
from .config import ValidatorConfig
from .discovery import FilePair, discover_pairs
from .errors import ConfigError
from .markdown import MarkdownExtractor
from .models import ComparisonResult, ExtractionResult, ResultKind
from .source import SourceExtractor

logger = logging.getLogger(__name__)


@dataclass
class PairError:
    """An I/O problem that stopped one file pair from being checked"""

    file_path: Path
    message: str


@dataclass
class PairOutcome:
    pair: FilePair
    results: list[ComparisonResult] = field(default_factory=list)
    errors: list[PairError] = field(default_factory=list)


class ValidationReport:
    """Ordered results of a validation run, merged pair by pair in traversal order"""

    def __init__(self, root: Path | None = None):
        self.root = root
        self.results: list[ComparisonResult] = []
        self.errors: list[PairError] = []
        self.pairs_checked = 0

    def add(self, outcome: PairOutcome) -> None:
        self.pairs_checked += 1
        self.results.extend(outcome.results)
        self.errors.extend(outcome.errors)

    @property
    def failures(self) -> list[ComparisonResult]:
        return [r for r in self.results if not r.is_match]

    @property
    def ok(self) -> bool:
        return not self.errors and all(r.is_match for r in self.results)

    def count(self, kind: ResultKind) -> int:
        return sum(1 for r in self.results if r.kind is kind)

    def counts(self) -> dict[ResultKind, int]:
        return {kind: self.count(kind) for kind in ResultKind}


class ValidatorEngine:
    """Runs the document/source comparison over a directory tree"""

    def __init__(self, config: ValidatorConfig | None = None):
        self.config = config or ValidatorConfig()

    def validate(self, root: Path) -> ValidationReport:
        if not root.exists():
            raise ConfigError(f"path does not exist: {root}")
        if not root.is_dir():
            raise ConfigError(f"not a directory: {root}")

        pairs = discover_pairs(root, self.config)
        report = ValidationReport(root)

        if self.config.jobs > 1 and len(pairs) > 1:
            # map() yields in submission order, which keeps the report deterministic
            with ThreadPoolExecutor(max_workers=self.config.jobs) as executor:
                for outcome in executor.map(self.validate_pair, pairs):
                    report.add(outcome)
        else:
            for pair in pairs:
                report.add(self.validate_pair(pair))

        logger.info(
            "checked %d file pairs: %d results, %d failures, %d errors",
            report.pairs_checked,
            len(report.results),
            len(report.failures),
            len(report.errors),
        )
        return report

    def validate_pair(self, pair: FilePair) -> PairOutcome:
        """Check one document against its sources; reads only this pair's files"""
        outcome = PairOutcome(pair=pair)

        doc: ExtractionResult | None = None
        if pair.doc_path is not None:
            try:
                text = pair.doc_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                outcome.errors.append(PairError(pair.doc_path, f"cannot read document: {e}"))
                return outcome
            doc = MarkdownExtractor().extract(text, pair.doc_path)

        # one extractor per call: tree-sitter parsers are not shared between threads
        extractor = SourceExtractor()
        sources: list[ExtractionResult] = []
        for path in pair.source_paths:
            try:
                data = path.read_bytes()
                sources.append(extractor.extract(data, path, is_test_file=pair.is_test(path)))
            except (OSError, UnicodeDecodeError) as e:
                outcome.errors.append(PairError(path, f"cannot read source file: {e}"))

        if outcome.errors:
            return outcome

        outcome.results = compare(doc, sources, placement=self.config.check_placement)
        return outcome
