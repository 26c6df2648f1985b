"""Flags runs of capital letters as warnings.

Supports both pull diagnostics (the client asks, we read the file from disk)
and push diagnostics (computed from the new text on every change).
"""

from lspeasy import CompletionRequest, DiagnosticsRequest, LanguageServer, LanguageServerHandler, serve
from lspeasy.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionOptions,
    Diagnostic,
    DiagnosticOptions,
    DiagnosticSeverity,
    MessageType,
    Position,
    Range,
    ServerCapabilities,
    TextDocumentContentChangeEvent,
    TextDocumentItem,
    TextDocumentSyncKind,
    TextDocumentSyncOptions,
    VersionedTextDocumentIdentifier,
)

CAPITALS_MESSAGE = "Capital Letters detected"


def find_capital_ranges(text: str) -> list[Range]:
    """Ranges covering each run of ASCII capital letters.

    A run ends at the first non-capital character after it. A run still open
    at the end of a line carries over and ends on a later line; one still open
    at the end of the text is dropped.
    """
    ranges: list[Range] = []
    start: Position | None = None

    for line_idx, line in enumerate(text.split("\n")):
        line = line.removesuffix("\r")
        for i, c in enumerate(line):
            if "A" <= c <= "Z":
                if start is None:
                    start = Position(line=line_idx, character=i)
            elif start is not None:
                ranges.append(Range(start=start, end=Position(line=line_idx, character=i)))
                start = None

    return ranges


def get_diagnostics(text: str) -> list[Diagnostic]:
    return [
        Diagnostic(range=r, severity=DiagnosticSeverity.Warning, message=CAPITALS_MESSAGE)
        for r in find_capital_ranges(text)
    ]


class MyHandler(LanguageServerHandler):
    async def init(self, server: LanguageServer) -> None:
        await server.log("Hello thereeeee :)", MessageType.Info)

    async def completion(self, server: LanguageServer, req: CompletionRequest) -> None:
        await req.respond([CompletionItem(label="the", kind=CompletionItemKind.Keyword)])

    async def diagnostics(self, server: LanguageServer, req: DiagnosticsRequest) -> None:
        diagnostics = get_diagnostics(req.path.read_text(encoding="utf-8"))
        await server.log(f"r {[d.range for d in diagnostics]}", MessageType.Info)
        await req.respond(diagnostics)

    async def text_document_opened(self, server: LanguageServer, document: TextDocumentItem) -> None:
        await server.send_diagnostics(document.uri, get_diagnostics(document.text), document.version)

    async def text_document_changed(
        self,
        server: LanguageServer,
        document: VersionedTextDocumentIdentifier,
        changes: list[TextDocumentContentChangeEvent],
    ) -> None:
        await server.log(f"Something changed! document: {document.uri}, changes: {len(changes)}", MessageType.Info)
        if changes:
            await server.send_diagnostics(document.uri, get_diagnostics(changes[0].text), document.version)


CAPABILITIES = ServerCapabilities(
    completion_provider=CompletionOptions(),
    diagnostic_provider=DiagnosticOptions(),
    text_document_sync=TextDocumentSyncOptions(
        open_close=True,
        change=TextDocumentSyncKind.Full,
        will_save=False,
        will_save_wait_until=False,
    ),
)


def main() -> None:
    serve(CAPABILITIES, MyHandler())


if __name__ == "__main__":
    main()
