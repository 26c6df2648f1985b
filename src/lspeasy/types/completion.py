"""LSP Completion Types - Types for the textDocument/completion request."""

from enum import IntEnum
from typing import Annotated, Any

from pydantic import Field

from lspeasy.types.base import LSPModel
from lspeasy.types.common import Position, TextDocumentIdentifier


class CompletionItemKind(IntEnum):
    Text = 1
    Method = 2
    Function = 3
    Constructor = 4
    Field = 5
    Variable = 6
    Class = 7
    Interface = 8
    Module = 9
    Property = 10
    Unit = 11
    Value = 12
    Enum = 13
    Keyword = 14
    Snippet = 15
    Color = 16
    File = 17
    Reference = 18
    Folder = 19
    EnumMember = 20
    Constant = 21
    Struct = 22
    Event = 23
    Operator = 24
    TypeParameter = 25


class CompletionTriggerKind(IntEnum):
    Invoked = 1
    TriggerCharacter = 2
    TriggerForIncompleteCompletions = 3


class CompletionItem(LSPModel):
    """A completion item offered to the client."""

    label: str
    kind: CompletionItemKind | None = None
    detail: str | None = None
    documentation: str | None = None
    deprecated: bool | None = None
    preselect: bool | None = None
    sort_text: Annotated[str | None, Field(alias="sortText")] = None
    filter_text: Annotated[str | None, Field(alias="filterText")] = None
    insert_text: Annotated[str | None, Field(alias="insertText")] = None
    data: Any | None = None


class CompletionContext(LSPModel):
    """How the completion was triggered."""

    trigger_kind: Annotated[CompletionTriggerKind, Field(alias="triggerKind")]
    trigger_character: Annotated[str | None, Field(alias="triggerCharacter")] = None


class CompletionParams(LSPModel):
    """Parameters of a textDocument/completion request."""

    text_document: Annotated[TextDocumentIdentifier | None, Field(alias="textDocument")] = None
    position: Position
    context: CompletionContext | None = None
