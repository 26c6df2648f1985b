"""LSP Base Types - Core type definitions shared by every payload model."""

from typing import Final

from pydantic import BaseModel, ConfigDict

DocumentUri = str


class LSPModel(BaseModel):
    """Base class for all LSP payload types. Allows extra fields for forward compatibility."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


# Lifecycle methods
INITIALIZE: Final[str] = "initialize"
INITIALIZED: Final[str] = "initialized"
SHUTDOWN: Final[str] = "shutdown"
EXIT: Final[str] = "exit"
CANCEL_REQUEST: Final[str] = "$/cancelRequest"

# Requests the server answers
TEXT_DOCUMENT_COMPLETION: Final[str] = "textDocument/completion"
TEXT_DOCUMENT_DIAGNOSTIC: Final[str] = "textDocument/diagnostic"

# Notifications the client sends to the server
TEXT_DOCUMENT_DID_OPEN: Final[str] = "textDocument/didOpen"
TEXT_DOCUMENT_DID_CHANGE: Final[str] = "textDocument/didChange"
TEXT_DOCUMENT_DID_SAVE: Final[str] = "textDocument/didSave"
TEXT_DOCUMENT_DID_CLOSE: Final[str] = "textDocument/didClose"

# Notifications the server sends to the client
WINDOW_LOG_MESSAGE: Final[str] = "window/logMessage"
TEXT_DOCUMENT_PUBLISH_DIAGNOSTICS: Final[str] = "textDocument/publishDiagnostics"
