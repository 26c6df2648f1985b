"""Payload shapes for the subset of the Language Server Protocol lspeasy dispatches."""

from lspeasy.types.base import (
    CANCEL_REQUEST,
    EXIT,
    INITIALIZE,
    INITIALIZED,
    SHUTDOWN,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DIAGNOSTIC,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
    TEXT_DOCUMENT_PUBLISH_DIAGNOSTICS,
    WINDOW_LOG_MESSAGE,
    DocumentUri,
    LSPModel,
)
from lspeasy.types.common import (
    Location,
    Position,
    Range,
    TextDocumentContentChangeEvent,
    TextDocumentIdentifier,
    TextDocumentItem,
    VersionedTextDocumentIdentifier,
)
from lspeasy.types.completion import (
    CompletionContext,
    CompletionItem,
    CompletionItemKind,
    CompletionParams,
    CompletionTriggerKind,
)
from lspeasy.types.diagnostics import (
    Diagnostic,
    DiagnosticSeverity,
    DiagnosticTag,
    DocumentDiagnosticParams,
    FullDocumentDiagnosticReport,
    PublishDiagnosticsParams,
    RelatedFullDocumentDiagnosticReport,
)
from lspeasy.types.initialize import (
    ClientInfo,
    CompletionOptions,
    DiagnosticOptions,
    InitializeParams,
    InitializeResult,
    SaveOptions,
    ServerCapabilities,
    ServerInfo,
    TextDocumentSyncKind,
    TextDocumentSyncOptions,
)
from lspeasy.types.json_rpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    REQUEST_CANCELLED,
    REQUEST_FAILED,
    SERVER_CANCELLED,
    SERVER_NOT_INITIALIZED,
    UNKNOWN_ERROR_CODE,
    ErrorData,
    JSONRPCErrorResponse,
    JSONRPCMessage,
    JSONRPCMessageAdapter,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCResultResponse,
    RequestId,
)
from lspeasy.types.text_document import (
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
)
from lspeasy.types.window import LogMessageParams, MessageType

__all__ = [
    # methods
    "CANCEL_REQUEST",
    "EXIT",
    "INITIALIZE",
    "INITIALIZED",
    "SHUTDOWN",
    "TEXT_DOCUMENT_COMPLETION",
    "TEXT_DOCUMENT_DIAGNOSTIC",
    "TEXT_DOCUMENT_DID_CHANGE",
    "TEXT_DOCUMENT_DID_CLOSE",
    "TEXT_DOCUMENT_DID_OPEN",
    "TEXT_DOCUMENT_DID_SAVE",
    "TEXT_DOCUMENT_PUBLISH_DIAGNOSTICS",
    "WINDOW_LOG_MESSAGE",
    # base
    "DocumentUri",
    "LSPModel",
    # common
    "Location",
    "Position",
    "Range",
    "TextDocumentContentChangeEvent",
    "TextDocumentIdentifier",
    "TextDocumentItem",
    "VersionedTextDocumentIdentifier",
    # completion
    "CompletionContext",
    "CompletionItem",
    "CompletionItemKind",
    "CompletionParams",
    "CompletionTriggerKind",
    # diagnostics
    "Diagnostic",
    "DiagnosticSeverity",
    "DiagnosticTag",
    "DocumentDiagnosticParams",
    "FullDocumentDiagnosticReport",
    "PublishDiagnosticsParams",
    "RelatedFullDocumentDiagnosticReport",
    # initialize
    "ClientInfo",
    "CompletionOptions",
    "DiagnosticOptions",
    "InitializeParams",
    "InitializeResult",
    "SaveOptions",
    "ServerCapabilities",
    "ServerInfo",
    "TextDocumentSyncKind",
    "TextDocumentSyncOptions",
    # json-rpc
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "REQUEST_CANCELLED",
    "REQUEST_FAILED",
    "SERVER_CANCELLED",
    "SERVER_NOT_INITIALIZED",
    "UNKNOWN_ERROR_CODE",
    "ErrorData",
    "JSONRPCErrorResponse",
    "JSONRPCMessage",
    "JSONRPCMessageAdapter",
    "JSONRPCNotification",
    "JSONRPCRequest",
    "JSONRPCResponse",
    "JSONRPCResultResponse",
    "RequestId",
    # text document sync
    "DidChangeTextDocumentParams",
    "DidCloseTextDocumentParams",
    "DidOpenTextDocumentParams",
    "DidSaveTextDocumentParams",
    # window
    "LogMessageParams",
    "MessageType",
]
