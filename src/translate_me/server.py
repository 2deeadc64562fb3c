from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable
from urllib.parse import unquote, urlparse

from pygls.lsp.server import LanguageServer
from lsprotocol.types import (
    TEXT_DOCUMENT_CODE_ACTION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
    CodeAction,
    CodeActionKind,
    CodeActionParams,
    Diagnostic,
    DiagnosticSeverity,
    LogMessageParams,
    MessageType,
    Position,
    PublishDiagnosticsParams,
    Range,
    ShowMessageParams,
    TextEdit,
    WorkspaceEdit,
)

from translate_me import __version__, edits
from translate_me.analysis.detector import find_hardcoded_strings
from translate_me.analysis.model import Match, WidgetPattern
from translate_me.analysis.patterns import (
    DEFAULT_FILTER_TABLES,
    DEFAULT_WIDGET_CATALOG,
    FilterTables,
)
from translate_me.config import (
    filter_defaults,
    filter_tables_from_section,
    scan_defaults,
    widget_catalog_from_section,
    widget_defaults,
)
from translate_me.exceptions import ConfigError
from translate_me.workspace import ScanConfig, build_scan_response, match_message, scan_paths

SERVER_NAME = "translate-me"
DIAGNOSTIC_SOURCE = "translate-me"
DIAGNOSTIC_CODE = "hardcoded-string"
TOGGLE_COMMAND = "translate-me.toggle"
SCAN_COMMAND = "translate-me.scan"
DEBOUNCE_SECONDS = 0.5

ENABLED_MESSAGE = "Translate Me: Detection enabled"
DISABLED_MESSAGE = "Translate Me: Detection disabled"
SCAN_COMPLETED_MESSAGE = "Scan completed."

server = LanguageServer(SERVER_NAME, __version__)


class Debouncer:
    """Per-key delayed calls; scheduling a key again restarts its delay.

    An exception raised by a call goes to its ``on_error`` callback, or is
    re-raised inside the task when there is none.
    """

    def __init__(
        self,
        delay: float = DEBOUNCE_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.delay = delay
        self._sleep = sleep
        self._tasks: dict[str, asyncio.Task[None]] = {}

    @property
    def pending(self) -> set[str]:
        return set(self._tasks)

    def schedule(
        self,
        key: str,
        fn: Callable[[], None],
        on_error: Callable[[str, Exception], None] | None = None,
    ) -> asyncio.Task[None]:
        self.cancel(key)
        task = asyncio.get_running_loop().create_task(self._run(key, fn, on_error))
        self._tasks[key] = task
        return task

    def cancel(self, key: str) -> None:
        task = self._tasks.pop(key, None)
        if task is not None:
            task.cancel()

    def cancel_all(self) -> None:
        for key in list(self._tasks):
            self.cancel(key)

    async def _run(
        self,
        key: str,
        fn: Callable[[], None],
        on_error: Callable[[str, Exception], None] | None,
    ) -> None:
        await self._sleep(self.delay)
        self._tasks.pop(key, None)
        try:
            fn()
        except Exception as exc:
            if on_error is None:
                raise
            on_error(key, exc)


@dataclass
class ProjectSettings:
    scan: ScanConfig
    catalog: tuple[WidgetPattern, ...] = DEFAULT_WIDGET_CATALOG
    tables: FilterTables = DEFAULT_FILTER_TABLES


@dataclass
class ServerState:
    enabled: bool = True
    published: set[str] = field(default_factory=set)
    debouncer: Debouncer = field(default_factory=Debouncer)


state = ServerState()


def _uri_to_path(uri: str) -> Path:
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


def _root_path(ls: LanguageServer) -> Path | None:
    root = getattr(ls.workspace, "root_path", None)
    return Path(root) if root else None


def _log(ls: LanguageServer, message: str, kind: MessageType = MessageType.Warning) -> None:
    ls.window_log_message(LogMessageParams(type=kind, message=message))


def _show(ls: LanguageServer, message: str) -> None:
    ls.window_show_message(ShowMessageParams(type=MessageType.Info, message=message))


def project_settings(ls: LanguageServer) -> ProjectSettings:
    root = _root_path(ls)
    settings = ProjectSettings(scan=ScanConfig.from_section(scan_defaults(root=root), root))
    settings.catalog = widget_catalog_from_section(widget_defaults(root=root))
    try:
        settings.tables = filter_tables_from_section(filter_defaults(root=root))
    except ConfigError as exc:
        _log(ls, f"translate-me: ignoring [filters]: {exc}")
    return settings


def diagnostics_for_matches(matches: list[Match]) -> list[Diagnostic]:
    return [
        Diagnostic(
            range=Range(
                start=Position(line=match.start_line, character=match.start_col),
                end=Position(line=match.end_line, character=match.end_col),
            ),
            message=match_message(match),
            severity=DiagnosticSeverity.Warning,
            source=DIAGNOSTIC_SOURCE,
            code=DIAGNOSTIC_CODE,
        )
        for match in matches
    ]


def _publish(ls: LanguageServer, uri: str, diagnostics: list[Diagnostic]) -> None:
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )
    if diagnostics:
        state.published.add(uri)
    else:
        state.published.discard(uri)


def refresh_document(ls: LanguageServer, uri: str) -> None:
    if not state.enabled:
        return
    settings = project_settings(ls)
    if not settings.scan.is_source_path(_uri_to_path(uri)):
        return
    document = ls.workspace.get_text_document(uri)
    matches = find_hardcoded_strings(document.source, settings.catalog, tables=settings.tables)
    _publish(ls, uri, diagnostics_for_matches(matches))


def clear_all(ls: LanguageServer) -> None:
    for uri in sorted(state.published):
        ls.text_document_publish_diagnostics(PublishDiagnosticsParams(uri=uri, diagnostics=[]))
    state.published.clear()


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params) -> None:
    refresh_document(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_SAVE)
def did_save(ls: LanguageServer, params) -> None:
    refresh_document(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
async def did_change(ls: LanguageServer, params) -> None:
    uri = params.text_document.uri
    if state.enabled:
        state.debouncer.schedule(
            uri,
            lambda: refresh_document(ls, uri),
            on_error=lambda key, exc: _log(
                ls, f"translate-me: could not refresh {key}: {exc}", MessageType.Error
            ),
        )


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: LanguageServer, params) -> None:
    uri = params.text_document.uri
    state.debouncer.cancel(uri)
    _publish(ls, uri, [])


@server.command(TOGGLE_COMMAND)
def toggle_detection(ls: LanguageServer, *args) -> dict:
    state.enabled = not state.enabled
    if state.enabled:
        for uri in sorted(ls.workspace.text_documents):
            refresh_document(ls, uri)
        _show(ls, ENABLED_MESSAGE)
    else:
        state.debouncer.cancel_all()
        clear_all(ls)
        _show(ls, DISABLED_MESSAGE)
    return {"enabled": state.enabled}


@server.command(SCAN_COMMAND)
def scan_workspace(ls: LanguageServer, *args) -> dict:
    root = _root_path(ls) or Path(".")
    settings = project_settings(ls)
    result = scan_paths(
        [root], config=settings.scan, catalog=settings.catalog, tables=settings.tables
    )
    if state.enabled:
        for entry in result.files:
            _publish(ls, entry.path.resolve().as_uri(), diagnostics_for_matches(list(entry.matches)))
    for failure in result.failures:
        _log(ls, f"translate-me: could not read {failure.path}: {failure.error}")
    _show(ls, SCAN_COMPLETED_MESSAGE)
    return build_scan_response(result, root).model_dump()


def _workspace_edit(uri: str, edit: edits.TextEdit) -> WorkspaceEdit:
    position = Position(line=edit.line, character=edit.character)
    return WorkspaceEdit(
        changes={uri: [TextEdit(range=Range(start=position, end=position), new_text=edit.new_text)]}
    )


@server.feature(TEXT_DOCUMENT_CODE_ACTION)
def code_action(ls: LanguageServer, params: CodeActionParams) -> list[CodeAction]:
    uri = params.text_document.uri
    diagnostics = [
        diagnostic
        for diagnostic in params.context.diagnostics
        if diagnostic.source == DIAGNOSTIC_SOURCE
    ]
    if not diagnostics:
        return []
    document = ls.workspace.get_text_document(uri)
    lines = list(document.lines)
    actions: list[CodeAction] = []
    for diagnostic in diagnostics:
        line = diagnostic.range.start.line
        actions.append(
            CodeAction(
                title="Ignore this string (add comment on line above)",
                kind=CodeActionKind.QuickFix,
                diagnostics=[diagnostic],
                edit=_workspace_edit(uri, edits.ignore_next_line_edit(lines, line)),
                is_preferred=True,
            )
        )
        if not edits.has_line_ignore(lines, line):
            actions.append(
                CodeAction(
                    title="Ignore this string (add comment at end of line)",
                    kind=CodeActionKind.QuickFix,
                    diagnostics=[diagnostic],
                    edit=_workspace_edit(uri, edits.ignore_line_edit(lines, line)),
                )
            )
    if not edits.has_file_ignore(document.source):
        actions.append(
            CodeAction(
                title="Ignore ALL strings in this file",
                kind=CodeActionKind.QuickFix,
                diagnostics=diagnostics,
                edit=_workspace_edit(uri, edits.ignore_file_edit(lines)),
            )
        )
    return actions


def start(start_fn: Callable[[], None] | None = None) -> None:
    """Start the language server over stdio."""
    (start_fn or server.start_io)()


if __name__ == "__main__":  # pragma: no cover
    start()  # pragma: no cover
