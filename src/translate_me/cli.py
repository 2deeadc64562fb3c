from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import List, Optional
import json

import typer

from translate_me.analysis.filters import ClassificationContext, classify
from translate_me.config import (
    filter_defaults,
    filter_tables_from_section,
    merge_payload,
    scan_defaults,
    widget_catalog_from_section,
    widget_defaults,
)
from translate_me.exceptions import ConfigError
from translate_me.schema import ClassifyResponseDTO, ScanResponseDTO
from translate_me.workspace import (
    ScanConfig,
    WorkspaceScan,
    build_scan_response,
    display_path,
    match_message,
    scan_paths,
)

app = typer.Typer(add_completion=False)

SARIF_RULE_ID = "hardcoded-string"


class OutputFormat(StrEnum):
    TEXT = "text"
    JSON = "json"
    JSONL = "jsonl"
    SARIF = "sarif"


def _write_text_to_target(target: Path | None, payload: str) -> None:
    if not payload.endswith("\n"):
        payload += "\n"
    if target is None or str(target) == "-":
        typer.echo(payload, nl=False)
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(payload, encoding="utf-8")


def _render_text(response: ScanResponseDTO) -> str:
    lines = []
    for match in response.matches:
        widget = f"{match.widget}({match.parameter})" if match.parameter else match.widget
        lines.append(
            f"{match.path}:{match.start_line + 1}:{match.start_col + 1}: {widget} {match.literal}"
        )
    return "\n".join(lines)


def _render_jsonl(response: ScanResponseDTO) -> str:
    return "\n".join(
        json.dumps(match.model_dump(), sort_keys=True) for match in response.matches
    )


def _render_sarif(result: WorkspaceScan, root: Path) -> str:
    results: list[dict[str, object]] = []
    for entry in result.files:
        uri = display_path(entry.path, root)
        for match in entry.matches:
            results.append(
                {
                    "ruleId": SARIF_RULE_ID,
                    "level": "warning",
                    "message": {"text": match_message(match)},
                    "locations": [
                        {
                            "physicalLocation": {
                                "artifactLocation": {"uri": uri},
                                "region": {
                                    "startLine": match.start_line + 1,
                                    "startColumn": match.start_col + 1,
                                    "endLine": match.end_line + 1,
                                    "endColumn": match.end_col + 1,
                                },
                            }
                        }
                    ],
                }
            )
    sarif = {
        "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
        "version": "2.1.0",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "translate-me",
                        "rules": [
                            {
                                "id": SARIF_RULE_ID,
                                "name": SARIF_RULE_ID,
                                "shortDescription": {
                                    "text": "Hardcoded user-facing string in a widget"
                                },
                            }
                        ],
                    }
                },
                "results": results,
            }
        ],
    }
    return json.dumps(sarif, indent=2, sort_keys=True)


@app.command()
def scan(
    paths: Optional[List[Path]] = typer.Argument(None),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    output_format: OutputFormat = typer.Option(OutputFormat.TEXT, "--format"),
    output: Optional[Path] = typer.Option(
        None, "--output", help="Write results to file or '-' for stdout."
    ),
    include_tests: Optional[bool] = typer.Option(
        None, "--include-tests/--no-include-tests"
    ),
    fail_on_matches: bool = typer.Option(False, "--fail-on-matches/--no-fail-on-matches"),
) -> None:
    """Scan source files for hardcoded widget strings."""
    scan_section = merge_payload(
        {"include_tests": include_tests}, scan_defaults(root=root, config_path=config)
    )
    try:
        tables = filter_tables_from_section(filter_defaults(root=root, config_path=config))
    except ConfigError as exc:
        typer.echo(f"translate-me: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    catalog = widget_catalog_from_section(widget_defaults(root=root, config_path=config))
    scan_config = ScanConfig.from_section(scan_section, project_root=root)
    result = scan_paths(
        paths or [root], config=scan_config, catalog=catalog, tables=tables
    )
    for failure in result.failures:
        typer.echo(f"warning: could not read {failure.path}: {failure.error}", err=True)
    response = build_scan_response(result, root)
    if output_format is OutputFormat.JSON:
        payload = json.dumps(response.model_dump(), indent=2, sort_keys=True)
    elif output_format is OutputFormat.JSONL:
        payload = _render_jsonl(response)
    elif output_format is OutputFormat.SARIF:
        payload = _render_sarif(result, root)
    else:
        payload = _render_text(response)
    if payload:
        _write_text_to_target(output, payload)
    stats = response.stats
    typer.echo(
        f"{stats['matches']} hardcoded string(s) in {stats['files_with_matches']} of "
        f"{stats['files_scanned']} file(s)",
        err=True,
    )
    if fail_on_matches and response.matches:
        raise typer.Exit(code=1)


@app.command("classify")
def classify_literal(
    text: str = typer.Argument(..., help="Literal content without quotes."),
    param: Optional[str] = typer.Option(None, "--param", help="Named parameter holding it."),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    as_json: bool = typer.Option(False, "--json"),
) -> None:
    """Run the filter pipeline on one literal."""
    try:
        tables = filter_tables_from_section(filter_defaults(root=root, config_path=config))
    except ConfigError as exc:
        typer.echo(f"translate-me: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    delimiter = '"' if "'" in text else "'"
    prefix = f"{param}: " if param else ""
    context = ClassificationContext(text, f"{prefix}{delimiter}{text}{delimiter}", len(prefix))
    outcome = classify(context, tables)
    if as_json:
        dto = ClassifyResponseDTO(content=text, keep=outcome.keep, step=outcome.step)
        typer.echo(json.dumps(dto.model_dump(), sort_keys=True))
    elif outcome.keep:
        typer.echo("keep")
    else:
        typer.echo(f"drop: {outcome.step}")


@app.command()
def lsp() -> None:
    """Run the language server over stdio."""
    from translate_me.server import start

    start()


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()  # pragma: no cover
