"""Tests for the LanguageServer session state machine."""

import pytest

from lspeasy.server import session as session_module
from lspeasy.server.handler import LanguageServerHandler
from lspeasy.server.session import _VALID_TRANSITIONS, LanguageServer, SessionState
from lspeasy.shared.exceptions import HandshakeError, MalformedMessageError, ProtocolError, TransportError
from lspeasy.shared.message import MessageKind, classify
from lspeasy.types import CompletionOptions, DiagnosticOptions, ServerCapabilities
from lspeasy.types.json_rpc import (
    INVALID_REQUEST,
    PARSE_ERROR,
    ErrorData,
    JSONRPCErrorResponse,
    JSONRPCResultResponse,
)
from tests.test_helpers import RecordingTransport, notification, request

pytestmark = pytest.mark.anyio


class RecordingHandler(LanguageServerHandler):
    def __init__(self) -> None:
        self.events: list[str] = []
        self.init_state: SessionState | None = None

    async def init(self, server: LanguageServer) -> None:
        self.events.append("init")
        self.init_state = server.state

    async def text_document_opened(self, server, document) -> None:
        self.events.append(f"opened {document.uri}")


DID_OPEN = notification(
    "textDocument/didOpen",
    {"textDocument": {"uri": "file:///a.txt", "languageId": "plaintext", "version": 1, "text": "A"}},
)


def _server(transport: RecordingTransport, handler: LanguageServerHandler | None = None) -> LanguageServer:
    return LanguageServer(ServerCapabilities(), handler or RecordingHandler(), transport)


# ---------------------------------------------------------------------------
# Transition table
# ---------------------------------------------------------------------------


def test_transition_table():
    assert _VALID_TRANSITIONS[SessionState.Init] == {SessionState.Running, SessionState.Terminated}
    assert _VALID_TRANSITIONS[SessionState.Running] == {SessionState.ShuttingDown, SessionState.Terminated}
    assert _VALID_TRANSITIONS[SessionState.ShuttingDown] == {SessionState.Terminated}
    assert _VALID_TRANSITIONS[SessionState.Terminated] == frozenset()


def test_every_state_has_transition_entry():
    assert set(_VALID_TRANSITIONS) == set(SessionState)


def test_invalid_transition_raises():
    server = _server(RecordingTransport())
    assert server.state is SessionState.Init
    with pytest.raises(RuntimeError, match="Init -> ShuttingDown"):
        server._transition(SessionState.ShuttingDown)
    assert server.state is SessionState.Init


# ---------------------------------------------------------------------------
# run()
# ---------------------------------------------------------------------------


async def test_shutdown_stops_dispatch():
    transport = RecordingTransport([DID_OPEN, request(1, "shutdown"), DID_OPEN])
    handler = RecordingHandler()
    server = _server(transport, handler)

    await server.run()

    assert handler.events == ["init", "opened file:///a.txt"]
    assert transport.calls == ["establish", "handshake", "acknowledge_shutdown", "teardown"]
    # The message queued after shutdown is never read
    assert transport.inbound == [DID_OPEN]
    assert transport.sent == [JSONRPCResultResponse(id=1, result=None)]
    assert server.state is SessionState.Terminated


async def test_init_runs_before_running():
    handler = RecordingHandler()
    server = _server(RecordingTransport(), handler)
    await server.run()
    assert handler.init_state is SessionState.Init
    assert server.state is SessionState.Terminated


async def test_params_available_after_handshake():
    server = _server(RecordingTransport())
    assert server.params is None
    await server.run()
    assert server.params is not None
    assert server.params.process_id == 42
    assert server.params.client_info is not None
    assert server.params.client_info.name == "test-client"


async def test_end_of_stream_terminates():
    transport = RecordingTransport([DID_OPEN])
    handler = RecordingHandler()
    server = _server(transport, handler)

    await server.run()

    assert handler.events == ["init", "opened file:///a.txt"]
    assert "acknowledge_shutdown" not in transport.calls
    assert transport.teardown_count == 1
    assert server.state is SessionState.Terminated


async def test_inbound_transport_error_terminates():
    transport = RecordingTransport([TransportError("stdin broke"), DID_OPEN])
    handler = RecordingHandler()
    server = _server(transport, handler)

    await server.run()

    assert handler.events == ["init"]
    assert transport.teardown_count == 1
    assert server.state is SessionState.Terminated


async def test_handshake_failure():
    transport = RecordingTransport([DID_OPEN], handshake_error=HandshakeError("no initialize"))
    handler = RecordingHandler()
    server = _server(transport, handler)

    with pytest.raises(HandshakeError, match="no initialize"):
        await server.run()

    assert handler.events == []
    assert transport.calls == ["establish", "handshake", "teardown"]
    assert server.state is SessionState.Terminated
    assert server.params is None


async def test_shutdown_protocol_error_propagates():
    class BrokenShutdownTransport(RecordingTransport):
        async def acknowledge_shutdown(self, request_id):
            await super().acknowledge_shutdown(request_id)
            raise ProtocolError("Timed out waiting for exit notification")

    transport = BrokenShutdownTransport([request(1, "shutdown")])
    server = _server(transport)

    with pytest.raises(ProtocolError):
        await server.run()

    assert transport.teardown_count == 1
    assert server.state is SessionState.Terminated


async def test_init_error_propagates_unwrapped():
    class FailingHandler(LanguageServerHandler):
        async def init(self, server):
            raise ValueError("bad config")

    transport = RecordingTransport([DID_OPEN])
    server = _server(transport, FailingHandler())

    with pytest.raises(ValueError, match="bad config"):
        await server.run()

    assert transport.inbound == [DID_OPEN]
    assert transport.teardown_count == 1
    assert server.state is SessionState.Terminated


async def test_run_is_single_use():
    server = _server(RecordingTransport())
    await server.run()
    with pytest.raises(RuntimeError, match="only be called once"):
        await server.run()


async def test_capabilities_passed_to_handshake():
    transport = RecordingTransport()
    capabilities = ServerCapabilities(
        completion_provider=CompletionOptions(),
        diagnostic_provider=DiagnosticOptions(),
    )
    await LanguageServer(capabilities, RecordingHandler(), transport).run()
    assert transport.capabilities == {
        "completionProvider": {},
        "diagnosticProvider": {"interFileDependencies": False, "workspaceDiagnostics": False},
    }


async def test_capabilities_mapping_passed_through():
    transport = RecordingTransport()
    await LanguageServer({"hoverProvider": True}, RecordingHandler(), transport).run()
    assert transport.capabilities == {"hoverProvider": True}


async def test_malformed_message_is_answered_and_loop_continues():
    transport = RecordingTransport(
        [MalformedMessageError("bad json"), MalformedMessageError("no method", code=INVALID_REQUEST), DID_OPEN]
    )
    handler = RecordingHandler()
    server = _server(transport, handler)

    await server.run()

    assert handler.events == ["init", "opened file:///a.txt"]
    assert transport.sent == [
        JSONRPCErrorResponse(id=None, error=ErrorData(code=PARSE_ERROR, message="Parse error")),
        JSONRPCErrorResponse(id=None, error=ErrorData(code=INVALID_REQUEST, message="Invalid request")),
    ]
    assert server.state is SessionState.Terminated


async def test_dispatch_uses_message_classifier(monkeypatch: pytest.MonkeyPatch):
    kinds: list[MessageKind] = []

    def recording_classify(message):
        kind = classify(message)
        kinds.append(kind)
        return kind

    monkeypatch.setattr(session_module, "classify", recording_classify)
    transport = RecordingTransport(
        [request(1, "textDocument/hover"), DID_OPEN, JSONRPCResultResponse(id=9, result={})]
    )
    await _server(transport).run()

    assert kinds == [MessageKind.Request, MessageKind.Notification, MessageKind.Response]
