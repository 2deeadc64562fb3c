from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from translate_me import cli


def _project(write_source) -> None:
    write_source("lib/main.dart", "Text('Hello world');\n")
    write_source("lib/keys.dart", "Hero(tag: 'hero-1', child: Icon(icon));\n")
    write_source("lib/main_test.dart", "Text('Only in tests');\n")


def _invoke(args: list[str]):
    return CliRunner().invoke(cli.app, args)


def test_scan_text_output(tmp_path: Path, write_source) -> None:
    _project(write_source)
    out = tmp_path / "out.txt"
    result = _invoke(["scan", "--root", str(tmp_path), "--output", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_text() == "lib/main.dart:1:6: Text 'Hello world'\n"


def test_scan_json_output(tmp_path: Path, write_source) -> None:
    _project(write_source)
    out = tmp_path / "out.json"
    result = _invoke(["scan", "--root", str(tmp_path), "--format", "json", "--output", str(out)])
    assert result.exit_code == 0, result.output
    payload = json.loads(out.read_text())
    assert payload["stats"] == {
        "files_scanned": 2,
        "files_with_matches": 1,
        "matches": 1,
        "failures": 0,
    }
    assert payload["matches"][0]["widget"] == "Text"
    assert payload["matches"][0]["start_col"] == 5


def test_scan_include_tests_flag(tmp_path: Path, write_source) -> None:
    _project(write_source)
    out = tmp_path / "out.jsonl"
    result = _invoke(
        [
            "scan",
            "--root",
            str(tmp_path),
            "--format",
            "jsonl",
            "--include-tests",
            "--output",
            str(out),
        ]
    )
    assert result.exit_code == 0, result.output
    rows = [json.loads(line) for line in out.read_text().splitlines()]
    assert sorted(row["literal"] for row in rows) == ["'Hello world'", "'Only in tests'"]


def test_scan_include_tests_from_config(tmp_path: Path, write_source) -> None:
    _project(write_source)
    write_source("translate-me.toml", "[scan]\ninclude_tests = true\n")
    out = tmp_path / "out.json"
    result = _invoke(["scan", "--root", str(tmp_path), "--format", "json", "--output", str(out)])
    assert result.exit_code == 0, result.output
    assert json.loads(out.read_text())["stats"]["matches"] == 2
    result = _invoke(
        ["scan", "--root", str(tmp_path), "--no-include-tests", "--format", "json", "--output", str(out)]
    )
    assert json.loads(out.read_text())["stats"]["matches"] == 1


def test_scan_sarif_output(tmp_path: Path, write_source) -> None:
    _project(write_source)
    out = tmp_path / "out.sarif"
    result = _invoke(["scan", "--root", str(tmp_path), "--format", "sarif", "--output", str(out)])
    assert result.exit_code == 0, result.output
    sarif = json.loads(out.read_text())
    assert sarif["version"] == "2.1.0"
    run = sarif["runs"][0]
    assert run["tool"]["driver"]["rules"][0]["id"] == "hardcoded-string"
    location = run["results"][0]["locations"][0]["physicalLocation"]
    assert location["artifactLocation"]["uri"] == "lib/main.dart"
    assert location["region"]["startLine"] == 1
    assert location["region"]["startColumn"] == 6


def test_scan_fail_on_matches(tmp_path: Path, write_source) -> None:
    _project(write_source)
    out = tmp_path / "out.txt"
    result = _invoke(["scan", "--root", str(tmp_path), "--fail-on-matches", "--output", str(out)])
    assert result.exit_code == 1


def test_scan_clean_project_exits_zero(tmp_path: Path, write_source) -> None:
    write_source("lib/clean.dart", "Text(context.l10n.title);\n")
    result = _invoke(["scan", "--root", str(tmp_path), "--fail-on-matches"])
    assert result.exit_code == 0


def test_scan_invalid_filter_pattern(tmp_path: Path, write_source) -> None:
    write_source("translate-me.toml", "[filters]\ntranslation_patterns = ['(']\n")
    result = _invoke(["scan", "--root", str(tmp_path)])
    assert result.exit_code == 2


def test_scan_explicit_paths(tmp_path: Path, write_source) -> None:
    _project(write_source)
    target = tmp_path / "lib" / "keys.dart"
    out = tmp_path / "out.json"
    result = _invoke(
        ["scan", str(target), "--root", str(tmp_path), "--format", "json", "--output", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert json.loads(out.read_text())["stats"]["files_scanned"] == 1


def test_classify_command() -> None:
    result = _invoke(["classify", "Hello world"])
    assert result.exit_code == 0
    assert result.output.strip() == "keep"
    result = _invoke(["classify", "user_name"])
    assert result.output.strip() == "drop: identifier"
    result = _invoke(["classify", "Hero Banner", "--param", "tag"])
    assert result.output.strip() == "drop: technical_argument"


def test_classify_json() -> None:
    result = _invoke(["classify", "https://example.com", "--json"])
    assert json.loads(result.output) == {
        "content": "https://example.com",
        "keep": False,
        "step": "technical_shape",
    }
