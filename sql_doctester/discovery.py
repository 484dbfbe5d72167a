"""Discover host files and the dialect to scan each one with."""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

import pathspec

from sql_doctester.config import ScanConfig
from sql_doctester.models.region import Dialect

log = logging.getLogger(__name__)

GITIGNORE = ".gitignore"


@dataclass(frozen=True, kw_only=True)
class SourceFile:
    """A host file selected for scanning."""

    path: Path
    dialect: Dialect

    @property
    def file_id(self) -> str:
        """Path with forward slashes, as recorded on test cases."""
        return self.path.as_posix()


def discover_sources(
    paths: Sequence[Path], config: ScanConfig | None = None
) -> Sequence[SourceFile]:
    """Expand input paths into the host files to scan.

    Directories are walked recursively in sorted order, skipping hidden
    entries, entries matched by a ``.gitignore`` in the walked tree and files
    whose suffix has no registered dialect. Each directory is entered once,
    so symlink cycles end, and files are deduplicated by resolved path. Paths
    that are not directories are always kept, even when missing, so that read
    failures surface as file errors. Their dialect falls back to the
    configured default when the suffix is unknown.

    Args:
        paths: Files and directories given by the user
        config: Extension to dialect mapping

    Returns:
        Host files in traversal order, without duplicates

    """
    config = config or ScanConfig()
    sources: list[SourceFile] = []
    seen: set[Path] = set()

    for path in paths:
        if path.is_dir():
            candidates = [
                (candidate, dialect)
                for candidate in _walk(path, (), set())
                if (dialect := config.dialect_for(candidate.suffix)) is not None
            ]
        else:
            candidates = [
                (path, config.dialect_for(path.suffix) or config.fallback_dialect)
            ]

        for candidate, dialect in candidates:
            resolved = candidate.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            sources.append(SourceFile(path=candidate, dialect=dialect))

    log.info("Discovered %d file(s) to scan", len(sources))
    return sources


@dataclass(frozen=True)
class _IgnoreRules:
    base: Path
    spec: pathspec.GitIgnoreSpec

    def ignores(self, entry: Path, is_dir: bool) -> bool:
        relative = entry.relative_to(self.base).as_posix()
        return self.spec.match_file(relative + "/" if is_dir else relative)


def _read_ignore_rules(directory: Path) -> _IgnoreRules | None:
    ignore_file = directory / GITIGNORE
    if not ignore_file.is_file():
        return None
    try:
        lines = ignore_file.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        log.warning("Could not read %s: %s", ignore_file, e)
        return None
    return _IgnoreRules(base=directory, spec=pathspec.GitIgnoreSpec.from_lines(lines))


def _walk(
    directory: Path, rules: tuple[_IgnoreRules, ...], visited: set[Path]
) -> Iterator[Path]:
    resolved = directory.resolve()
    if resolved in visited:
        log.debug("Skipping already visited directory %s", directory)
        return
    visited.add(resolved)

    if (own := _read_ignore_rules(directory)) is not None:
        rules = (*rules, own)

    for entry in sorted(directory.iterdir()):
        if entry.name.startswith("."):
            continue
        is_dir = entry.is_dir()
        if any(r.ignores(entry, is_dir) for r in rules):
            continue
        if is_dir:
            yield from _walk(entry, rules, visited)
        elif entry.is_file():
            yield entry
