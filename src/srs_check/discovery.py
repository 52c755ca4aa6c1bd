"""Finding requirement documents and pairing them with source files by stem."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import ValidatorConfig

logger = logging.getLogger(__name__)

DOC_SUFFIX = "_requirements"


@dataclass
class FilePair:
    """A requirements document and the source files that implement or test it.

    doc_path is None for orphan sources that match no document.
    """

    module: str
    doc_path: Path | None
    source_paths: list[Path] = field(default_factory=list)
    test_paths: set[Path] = field(default_factory=set)

    def is_test(self, path: Path) -> bool:
        return path in self.test_paths


def module_name(doc_path: Path) -> str:
    stem = doc_path.stem
    return stem[: -len(DOC_SUFFIX)] if stem.endswith(DOC_SUFFIX) else stem


def is_test_file(path: Path, root: Path, test_suffixes: list[str]) -> bool:
    """A test file has a test suffix on its stem or on a directory below root"""
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        parts = path.parts
    names = [path.stem, *parts[:-1]]
    return any(name.endswith(suffix) for name in names for suffix in test_suffixes)


def _excluded(path: Path, root: Path, exclude_dirs: list[str]) -> bool:
    try:
        parts = path.relative_to(root).parts[:-1]
    except ValueError:
        parts = path.parts[:-1]
    return any(part in exclude_dirs for part in parts)


def _stem_candidates(stem: str, test_suffixes: list[str]) -> list[str]:
    candidates = [stem]
    for suffix in test_suffixes:
        if stem.endswith(suffix) and len(stem) > len(suffix):
            candidates.append(stem[: -len(suffix)])
    return candidates


def _closest(docs: list[Path], source: Path) -> Path:
    """Pick the document sharing the longest directory prefix with source"""

    def shared(doc: Path) -> int:
        count = 0
        for a, b in zip(doc.parent.parts, source.parent.parts):
            if a != b:
                break
            count += 1
        return count

    return max(docs, key=shared)


def find_documents(root: Path, config: ValidatorConfig) -> list[Path]:
    return sorted(
        p for p in root.glob(config.docs_glob) if p.is_file() and not _excluded(p, root, config.exclude_dirs)
    )


def find_sources(root: Path, config: ValidatorConfig) -> list[Path]:
    extensions = {ext.lower() for ext in config.source_extensions}
    return sorted(
        p
        for p in root.rglob("*")
        if p.suffix.lower() in extensions and p.is_file() and not _excluded(p, root, config.exclude_dirs)
    )


def discover_pairs(root: Path, config: ValidatorConfig) -> list[FilePair]:
    """Pair every requirements document with its sources, in sorted path order.

    Orphan pairs (one per unpaired source file) follow the document pairs when
    config.check_orphans is set.
    """
    docs = find_documents(root, config)
    by_module: dict[str, list[Path]] = {}
    for doc in docs:
        by_module.setdefault(module_name(doc), []).append(doc)

    pairs = {doc: FilePair(module=module_name(doc), doc_path=doc) for doc in docs}
    orphans: list[FilePair] = []

    for source in find_sources(root, config):
        test = is_test_file(source, root, config.test_suffixes)
        module = next(
            (m for m in _stem_candidates(source.stem, config.test_suffixes) if m in by_module), None
        )
        if module is None:
            if config.check_orphans:
                orphans.append(
                    FilePair(
                        module=source.stem,
                        doc_path=None,
                        source_paths=[source],
                        test_paths={source} if test else set(),
                    )
                )
            continue

        pair = pairs[_closest(by_module[module], source)]
        pair.source_paths.append(source)
        if test:
            pair.test_paths.add(source)

    logger.info("found %d requirement documents and %d orphan source files", len(docs), len(orphans))
    return [pairs[doc] for doc in docs] + orphans
