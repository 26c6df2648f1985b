"""LSP Text Document Synchronization Types - Parameters of the didOpen/didChange/didSave/didClose notifications."""

from typing import Annotated

from pydantic import Field

from lspeasy.types.base import LSPModel
from lspeasy.types.common import (
    TextDocumentContentChangeEvent,
    TextDocumentIdentifier,
    TextDocumentItem,
    VersionedTextDocumentIdentifier,
)


class DidOpenTextDocumentParams(LSPModel):
    text_document: Annotated[TextDocumentItem, Field(alias="textDocument")]


class DidChangeTextDocumentParams(LSPModel):
    text_document: Annotated[VersionedTextDocumentIdentifier, Field(alias="textDocument")]
    content_changes: Annotated[list[TextDocumentContentChangeEvent], Field(alias="contentChanges")]


class DidSaveTextDocumentParams(LSPModel):
    text_document: Annotated[TextDocumentIdentifier, Field(alias="textDocument")]
    text: str | None = None


class DidCloseTextDocumentParams(LSPModel):
    text_document: Annotated[TextDocumentIdentifier, Field(alias="textDocument")]
