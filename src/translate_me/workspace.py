from __future__ import annotations

import fnmatch
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from translate_me.analysis.detector import find_hardcoded_strings
from translate_me.analysis.model import Match, WidgetCatalog
from translate_me.analysis.patterns import (
    DEFAULT_FILTER_TABLES,
    DEFAULT_WIDGET_CATALOG,
    FilterTables,
)
from translate_me.config import (
    TomlTable,
    scan_exclude_dirs,
    scan_exclude_globs,
    scan_extensions,
    scan_include_tests,
)
from translate_me.schema import MatchDTO, ReadFailureDTO, ScanResponseDTO

DEFAULT_EXCLUDE_DIRS = frozenset({".dart_tool", ".git", "build", ".idea", ".fvm"})
TEST_FILE_SUFFIX = "_test.dart"


@dataclass
class ScanConfig:
    project_root: Path | None = None
    exclude_dirs: set[str] = field(default_factory=lambda: set(DEFAULT_EXCLUDE_DIRS))
    exclude_globs: list[str] = field(default_factory=list)
    include_tests: bool = False
    extensions: tuple[str, ...] = (".dart",)

    @classmethod
    def from_section(cls, section: TomlTable | None, project_root: Path | None = None) -> ScanConfig:
        return cls(
            project_root=project_root,
            exclude_dirs=set(DEFAULT_EXCLUDE_DIRS) | scan_exclude_dirs(section),
            exclude_globs=scan_exclude_globs(section),
            include_tests=scan_include_tests(section),
            extensions=scan_extensions(section),
        )

    def is_source_path(self, path: Path) -> bool:
        name = path.name
        if not name.endswith(self.extensions):
            return False
        return self.include_tests or not name.endswith(TEST_FILE_SUFFIX)

    def is_excluded_name(self, path: Path) -> bool:
        return any(fnmatch.fnmatch(path.name, pattern) for pattern in self.exclude_globs)

    def is_ignored_path(self, path: Path) -> bool:
        parts = set(path.parent.parts)
        if self.project_root is not None:
            try:
                parts = set(path.resolve().parent.relative_to(self.project_root.resolve()).parts)
            except ValueError:
                pass
        if self.exclude_dirs & parts:
            return True
        return self.is_excluded_name(path)


@dataclass(frozen=True)
class ReadFailureWitness:
    path: Path
    error: str


@dataclass(frozen=True)
class FileScan:
    path: Path
    matches: tuple[Match, ...]


@dataclass
class WorkspaceScan:
    files: list[FileScan] = field(default_factory=list)
    failures: list[ReadFailureWitness] = field(default_factory=list)
    scanned: int = 0

    @property
    def match_count(self) -> int:
        return sum(len(entry.matches) for entry in self.files)


def iter_source_paths(paths: Iterable[str | Path], *, config: ScanConfig) -> list[Path]:
    """Expand input paths to source files, pruning ignored directories early."""
    out: list[Path] = []
    for p in paths:
        path = Path(p)
        if path.is_dir():
            for root, dirnames, filenames in os.walk(path, topdown=True):
                if config.exclude_dirs:
                    dirnames[:] = [d for d in dirnames if d not in config.exclude_dirs]
                dirnames.sort()
                for filename in sorted(filenames):
                    candidate = Path(root) / filename
                    if not config.is_source_path(candidate):
                        continue
                    if config.is_excluded_name(candidate):
                        continue
                    out.append(candidate)
        else:
            if config.is_ignored_path(path):
                continue
            out.append(path)
    return out


def read_source(path: Path) -> str | ReadFailureWitness:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return ReadFailureWitness(path=path, error=f"{type(exc).__name__}: {exc}")


def scan_text(
    path: Path,
    text: str,
    *,
    catalog: WidgetCatalog = DEFAULT_WIDGET_CATALOG,
    tables: FilterTables = DEFAULT_FILTER_TABLES,
) -> FileScan:
    return FileScan(path=path, matches=tuple(find_hardcoded_strings(text, catalog, tables=tables)))


def scan_paths(
    paths: Iterable[str | Path],
    *,
    config: ScanConfig,
    catalog: WidgetCatalog = DEFAULT_WIDGET_CATALOG,
    tables: FilterTables = DEFAULT_FILTER_TABLES,
) -> WorkspaceScan:
    result = WorkspaceScan()
    for path in iter_source_paths(paths, config=config):
        text = read_source(path)
        if isinstance(text, ReadFailureWitness):
            result.failures.append(text)
            continue
        result.scanned += 1
        scanned = scan_text(path, text, catalog=catalog, tables=tables)
        if scanned.matches:
            result.files.append(scanned)
    return result


def display_path(path: Path, root: Path | None) -> str:
    if root is not None:
        try:
            return path.resolve().relative_to(root.resolve()).as_posix()
        except ValueError:
            pass
    return path.as_posix()


def build_scan_response(result: WorkspaceScan, root: Path | None = None) -> ScanResponseDTO:
    matches = [
        MatchDTO(
            path=display_path(entry.path, root),
            literal=match.literal,
            start_line=match.start_line,
            start_col=match.start_col,
            end_line=match.end_line,
            end_col=match.end_col,
            widget=match.widget,
            parameter=match.parameter,
        )
        for entry in result.files
        for match in entry.matches
    ]
    failures = [
        ReadFailureDTO(path=display_path(failure.path, root), error=failure.error)
        for failure in result.failures
    ]
    return ScanResponseDTO(
        matches=matches,
        failures=failures,
        stats={
            "files_scanned": result.scanned,
            "files_with_matches": len(result.files),
            "matches": len(matches),
            "failures": len(failures),
        },
    )


def match_message(match: Match) -> str:
    target = f"{match.widget}({match.parameter})" if match.parameter else match.widget
    return f"Hardcoded string detected in {target}. Consider using a translation."
