"""Capability callbacks supplied by the embedding application.

Subclass ``LanguageServerHandler`` and override only the events you care
about; every slot defaults to a no-op.

    class MyHandler(LanguageServerHandler):
        async def completion(self, server, req):
            await req.respond([CompletionItem(label="autocomplete", kind=CompletionItemKind.Keyword)])

Nothing checks that the capabilities passed to ``LanguageServer`` match the
slots overridden here. Advertising a provider without implementing its slot
leaves the client's requests unanswered.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lspeasy.types.common import (
    TextDocumentContentChangeEvent,
    TextDocumentIdentifier,
    TextDocumentItem,
    VersionedTextDocumentIdentifier,
)

if TYPE_CHECKING:
    from lspeasy.server.requests import CompletionRequest, DiagnosticsRequest
    from lspeasy.server.session import LanguageServer


class LanguageServerHandler:
    async def init(self, server: LanguageServer) -> None:
        """Runs once, after the handshake and before the first message is dispatched."""

    async def completion(self, server: LanguageServer, req: CompletionRequest) -> None:
        """Runs when the client requests completions.

        To provide completions, respond to the client with ``req.respond``.
        """

    async def diagnostics(self, server: LanguageServer, req: DiagnosticsRequest) -> None:
        """Runs when the client pulls diagnostics for a document.

        To provide diagnostics, respond to the client with ``req.respond``.

        **Note** that the client may never send this request. It may be
        worth computing diagnostics in ``text_document_changed`` as well and
        pushing them with ``LanguageServer.send_diagnostics``.
        """

    async def text_document_opened(self, server: LanguageServer, document: TextDocumentItem) -> None:
        """Runs when the client opens a text document."""

    async def text_document_changed(
        self,
        server: LanguageServer,
        document: VersionedTextDocumentIdentifier,
        changes: list[TextDocumentContentChangeEvent],
    ) -> None:
        """Runs when the client changes a text document."""

    async def text_document_saved(
        self,
        server: LanguageServer,
        document: TextDocumentIdentifier,
        text: str | None,
    ) -> None:
        """Runs when the client saves a text document. ``text`` is only set if the client includes it."""

    async def text_document_closed(self, server: LanguageServer, document: TextDocumentIdentifier) -> None:
        pass
