from lspeasy import types
from lspeasy.server.handler import LanguageServerHandler
from lspeasy.server.requests import CompletionRequest, DiagnosticsRequest, RequestToken
from lspeasy.server.session import LanguageServer, SessionState
from lspeasy.server.settings import ServerSettings
from lspeasy.server.stdio import StdioTransport, run_stdio, serve
from lspeasy.server.transport import StreamTransport, Transport
from lspeasy.shared.exceptions import (
    FramingError,
    HandshakeError,
    LSPError,
    MalformedMessageError,
    MalformedPayloadError,
    ProtocolError,
    ResponseAlreadySentError,
    TransportError,
    TransportSendError,
)
from lspeasy.version import __version__

__all__ = [
    "CompletionRequest",
    "DiagnosticsRequest",
    "FramingError",
    "HandshakeError",
    "LSPError",
    "LanguageServer",
    "LanguageServerHandler",
    "MalformedMessageError",
    "MalformedPayloadError",
    "ProtocolError",
    "RequestToken",
    "ResponseAlreadySentError",
    "ServerSettings",
    "SessionState",
    "StdioTransport",
    "StreamTransport",
    "Transport",
    "TransportError",
    "TransportSendError",
    "__version__",
    "run_stdio",
    "serve",
    "types",
]
