from __future__ import annotations

from pathlib import Path

from translate_me.workspace import (
    ReadFailureWitness,
    ScanConfig,
    WorkspaceScan,
    build_scan_response,
    iter_source_paths,
    match_message,
    read_source,
    scan_paths,
    scan_text,
)


def _layout(write_source) -> None:
    write_source("lib/main.dart", "Text('Hello world');\n")
    write_source("lib/quiet.dart", "final x = 1;\n")
    write_source("lib/main_test.dart", "Text('Test only text');\n")
    write_source("lib/model.g.dart", "Text('Generated text');\n")
    write_source("build/out.dart", "Text('Build output');\n")
    write_source("lib/notes.txt", "Text('Not dart');\n")


def test_iter_source_paths_filters(tmp_path: Path, write_source) -> None:
    _layout(write_source)
    config = ScanConfig(project_root=tmp_path, exclude_globs=["*.g.dart"])
    paths = iter_source_paths([tmp_path], config=config)
    assert [path.relative_to(tmp_path).as_posix() for path in paths] == [
        "lib/main.dart",
        "lib/quiet.dart",
    ]


def test_iter_source_paths_include_tests(tmp_path: Path, write_source) -> None:
    _layout(write_source)
    config = ScanConfig(project_root=tmp_path, include_tests=True)
    names = [path.name for path in iter_source_paths([tmp_path], config=config)]
    assert "main_test.dart" in names
    assert "out.dart" not in names


def test_explicit_files_are_kept_unless_ignored(tmp_path: Path, write_source) -> None:
    _layout(write_source)
    config = ScanConfig(project_root=tmp_path)
    explicit = [tmp_path / "lib" / "main_test.dart", tmp_path / "build" / "out.dart"]
    assert iter_source_paths(explicit, config=config) == [explicit[0]]


def test_scan_config_from_section(tmp_path: Path) -> None:
    config = ScanConfig.from_section(
        {"exclude": "generated", "exclude_globs": ["*.g.dart"], "include_tests": "yes"},
        tmp_path,
    )
    assert {"generated", ".dart_tool", "build"} <= config.exclude_dirs
    assert config.include_tests
    assert config.is_source_path(Path("a_test.dart"))
    assert config.is_ignored_path(tmp_path / "generated" / "a.dart")
    assert config.is_ignored_path(tmp_path / "lib" / "a.g.dart")


def test_scan_paths_collects_matches_and_counts(tmp_path: Path, write_source) -> None:
    _layout(write_source)
    result = scan_paths([tmp_path], config=ScanConfig(project_root=tmp_path))
    assert result.scanned == 3
    assert [entry.path.name for entry in result.files] == ["main.dart", "model.g.dart"]
    assert result.match_count == 2
    assert result.failures == []


def test_read_failure_is_witnessed(tmp_path: Path, write_source) -> None:
    write_source("lib/good.dart", "Text('Hello world');\n")
    bad = write_source("lib/bad.dart", b"Text('\xff\xfe');\n")
    result = scan_paths([tmp_path], config=ScanConfig(project_root=tmp_path))
    assert result.scanned == 1
    assert [failure.path for failure in result.failures] == [bad]
    assert result.failures[0].error.startswith("UnicodeDecodeError")
    assert isinstance(read_source(tmp_path / "missing.dart"), ReadFailureWitness)
    assert [entry.path.name for entry in result.files] == ["good.dart"]


def test_scan_text_and_response(tmp_path: Path) -> None:
    path = tmp_path / "lib" / "page.dart"
    scanned = scan_text(path, "AppBar(title: 'Inbox zero')", catalog={"AppBar": ["title"]})
    assert [match.parameter for match in scanned.matches] == ["title"]
    assert match_message(scanned.matches[0]) == (
        "Hardcoded string detected in AppBar(title). Consider using a translation."
    )
    response = build_scan_response(WorkspaceScan(files=[scanned], scanned=2), tmp_path)
    assert response.stats == {
        "files_scanned": 2,
        "files_with_matches": 1,
        "matches": 1,
        "failures": 0,
    }
    assert response.matches[0].path == "lib/page.dart"
    assert response.matches[0].literal == "'Inbox zero'"
