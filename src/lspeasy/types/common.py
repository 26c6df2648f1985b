"""LSP Common Types - Positions, ranges and text document identifiers."""

from typing import Annotated

from pydantic import Field

from lspeasy.types.base import DocumentUri, LSPModel


class Position(LSPModel):
    """A zero-based line and character offset inside a text document."""

    line: Annotated[int, Field(ge=0)]
    character: Annotated[int, Field(ge=0)]


class Range(LSPModel):
    """A range in a text document, ``end`` exclusive."""

    start: Position
    end: Position


class Location(LSPModel):
    uri: DocumentUri
    range: Range


class TextDocumentIdentifier(LSPModel):
    """Identifies a text document by its URI."""

    uri: DocumentUri


class VersionedTextDocumentIdentifier(TextDocumentIdentifier):
    """A text document identifier pinned to a specific version."""

    version: int


class TextDocumentItem(LSPModel):
    """An item to transfer a text document from the client to the server."""

    uri: DocumentUri
    language_id: Annotated[str, Field(alias="languageId")]
    version: int
    text: str


class TextDocumentContentChangeEvent(LSPModel):
    """A change to a text document.

    Without ``range`` the ``text`` is the full content of the document.
    """

    range: Range | None = None
    range_length: Annotated[int | None, Field(alias="rangeLength")] = None
    text: str
