"""LSP Initialize Types - Types for the initialize handshake."""

from enum import IntEnum
from typing import Annotated, Any

from pydantic import Field

from lspeasy.types.base import DocumentUri, LSPModel


class TextDocumentSyncKind(IntEnum):
    None_ = 0
    Full = 1
    Incremental = 2


class SaveOptions(LSPModel):
    include_text: Annotated[bool | None, Field(alias="includeText")] = None


class TextDocumentSyncOptions(LSPModel):
    """How text documents are synced between client and server."""

    open_close: Annotated[bool | None, Field(alias="openClose")] = None
    change: TextDocumentSyncKind | None = None
    will_save: Annotated[bool | None, Field(alias="willSave")] = None
    will_save_wait_until: Annotated[bool | None, Field(alias="willSaveWaitUntil")] = None
    save: bool | SaveOptions | None = None


class CompletionOptions(LSPModel):
    trigger_characters: Annotated[list[str] | None, Field(alias="triggerCharacters")] = None
    all_commit_characters: Annotated[list[str] | None, Field(alias="allCommitCharacters")] = None
    resolve_provider: Annotated[bool | None, Field(alias="resolveProvider")] = None


class DiagnosticOptions(LSPModel):
    identifier: str | None = None
    inter_file_dependencies: Annotated[bool, Field(alias="interFileDependencies")] = False
    workspace_diagnostics: Annotated[bool, Field(alias="workspaceDiagnostics")] = False


class ServerCapabilities(LSPModel):
    """Capabilities the server advertises during the handshake.

    Only the providers dispatched by lspeasy are typed; anything else can be
    passed as an extra keyword and is sent to the client untouched.
    """

    text_document_sync: Annotated[
        TextDocumentSyncOptions | TextDocumentSyncKind | None, Field(alias="textDocumentSync")
    ] = None
    completion_provider: Annotated[CompletionOptions | None, Field(alias="completionProvider")] = None
    diagnostic_provider: Annotated[DiagnosticOptions | None, Field(alias="diagnosticProvider")] = None
    experimental: Any | None = None


class ClientInfo(LSPModel):
    name: str
    version: str | None = None


class ServerInfo(LSPModel):
    name: str
    version: str | None = None


class InitializeParams(LSPModel):
    """Parameters the client sends with the initialize request."""

    process_id: Annotated[int | None, Field(alias="processId")] = None
    client_info: Annotated[ClientInfo | None, Field(alias="clientInfo")] = None
    locale: str | None = None
    root_path: Annotated[str | None, Field(alias="rootPath")] = None
    root_uri: Annotated[DocumentUri | None, Field(alias="rootUri")] = None
    capabilities: dict[str, Any] = Field(default_factory=dict)
    initialization_options: Annotated[Any | None, Field(alias="initializationOptions")] = None
    trace: str | None = None


class InitializeResult(LSPModel):
    """Server's response to an initialize request."""

    capabilities: dict[str, Any]
    server_info: Annotated[ServerInfo | None, Field(alias="serverInfo")] = None
