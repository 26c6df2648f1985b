"""
LanguageServer Module

This module provides the LanguageServer class: the session that owns a
transport, runs the initialize handshake, and then drains inbound messages one
at a time, routing each to a callback on the embedding application's
``LanguageServerHandler``.

Common usage pattern:
```
    class Handler(LanguageServerHandler):
        async def completion(self, server: LanguageServer, req: CompletionRequest) -> None:
            line, character = req.position.line, req.position.character
            await req.respond([CompletionItem(label=f"char{character}line{line}")])

    server = LanguageServer(
        ServerCapabilities(completion_provider=CompletionOptions()),
        Handler(),
        StdioTransport(),
    )
    await server.run()
```

Messages are handled strictly in arrival order: a callback runs to completion
before the next message is read, so a slow callback stalls all traffic. The
outbound helpers (``log``, ``send_diagnostics``) may be used at any time from
the event loop, and their ``*_threadsafe`` variants from any other thread
while the session is running.
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from enum import Enum
from typing import Any, cast

import anyio
from anyio.from_thread import BlockingPortal
from pydantic import BaseModel, ValidationError

from lspeasy.server.handler import LanguageServerHandler
from lspeasy.server.requests import CompletionRequest, DiagnosticsRequest, RequestToken
from lspeasy.server.settings import ServerSettings
from lspeasy.server.transport import Transport, describe
from lspeasy.shared.exceptions import MalformedMessageError, MalformedPayloadError, TransportError
from lspeasy.shared.message import MessageKind, classify
from lspeasy.types.base import (
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
from lspeasy.types.diagnostics import Diagnostic, PublishDiagnosticsParams
from lspeasy.types.initialize import InitializeParams, ServerCapabilities
from lspeasy.types.json_rpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    ErrorData,
    JSONRPCErrorResponse,
    JSONRPCMessage,
    JSONRPCNotification,
    JSONRPCRequest,
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
from lspeasy.utilities.logging import get_logger

logger = get_logger(__name__)


class SessionState(Enum):
    Init = 1
    Running = 2
    ShuttingDown = 3
    Terminated = 4


_VALID_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.Init: frozenset({SessionState.Running, SessionState.Terminated}),
    SessionState.Running: frozenset({SessionState.ShuttingDown, SessionState.Terminated}),
    SessionState.ShuttingDown: frozenset({SessionState.Terminated}),
    SessionState.Terminated: frozenset(),
}

NotificationInvoker = Callable[[LanguageServerHandler, "LanguageServer", Any], Awaitable[None]]

# method -> (token type, handler slot)
_REQUEST_ROUTES: dict[str, tuple[type[CompletionRequest] | type[DiagnosticsRequest], str]] = {
    TEXT_DOCUMENT_COMPLETION: (CompletionRequest, "completion"),
    TEXT_DOCUMENT_DIAGNOSTIC: (DiagnosticsRequest, "diagnostics"),
}

# method -> (params model, how to call the handler slot with it)
_NOTIFICATION_ROUTES: dict[str, tuple[type[LSPModel], NotificationInvoker]] = {
    TEXT_DOCUMENT_DID_OPEN: (
        DidOpenTextDocumentParams,
        lambda handler, server, params: handler.text_document_opened(server, params.text_document),
    ),
    TEXT_DOCUMENT_DID_CHANGE: (
        DidChangeTextDocumentParams,
        lambda handler, server, params: handler.text_document_changed(
            server, params.text_document, params.content_changes
        ),
    ),
    TEXT_DOCUMENT_DID_SAVE: (
        DidSaveTextDocumentParams,
        lambda handler, server, params: handler.text_document_saved(server, params.text_document, params.text),
    ),
    TEXT_DOCUMENT_DID_CLOSE: (
        DidCloseTextDocumentParams,
        lambda handler, server, params: handler.text_document_closed(server, params.text_document),
    ),
}


class LanguageServer:
    """A language server session: one per process run.

    ``capabilities`` is passed to the handshake unmodified; nothing checks it
    against the slots ``handler`` overrides.
    """

    def __init__(
        self,
        capabilities: ServerCapabilities | Mapping[str, Any],
        handler: LanguageServerHandler,
        transport: Transport,
        *,
        settings: ServerSettings | None = None,
    ) -> None:
        self._capabilities = capabilities
        self._handler = handler
        self._transport = transport
        self._settings = settings or ServerSettings()
        self._state = SessionState.Init
        self._params: InitializeParams | None = None
        self._portal: BlockingPortal | None = None
        self._started = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def params(self) -> InitializeParams | None:
        """The client's initialize params, once the handshake has completed."""
        return self._params

    @property
    def capabilities(self) -> ServerCapabilities | Mapping[str, Any]:
        return self._capabilities

    @property
    def settings(self) -> ServerSettings:
        return self._settings

    def _transition(self, new_state: SessionState) -> None:
        if new_state not in _VALID_TRANSITIONS[self._state]:
            raise RuntimeError(f"Invalid session state transition: {self._state.name} -> {new_state.name}")
        logger.debug(f"Session state {self._state.name} -> {new_state.name}")
        self._state = new_state

    def _capabilities_payload(self) -> dict[str, Any]:
        if isinstance(self._capabilities, BaseModel):
            return self._capabilities.model_dump(by_alias=True, mode="json", exclude_none=True)
        return dict(self._capabilities)

    async def run(self) -> None:
        """Handshake, dispatch until shutdown or disconnect, then tear the transport down.

        Raises:
            HandshakeError: if the handshake fails; the session never runs
            ProtocolError: if the client breaks the shutdown/exit sequence
            TransportSendError: if the outbound channel fails while sending
        """
        if self._started:
            raise RuntimeError("LanguageServer.run() can only be called once")
        self._started = True

        try:
            await self._transport.establish()
            self._params = await self._transport.handshake(self._capabilities_payload())
            error: Exception | None = None
            async with BlockingPortal() as portal:
                self._portal = portal
                # Raised outside the portal's task group so callers don't get an ExceptionGroup
                try:
                    await self._handler.init(self)
                    self._transition(SessionState.Running)
                    await self._dispatch_loop()
                except Exception as e:
                    error = e
                finally:
                    self._portal = None
            if error is not None:
                raise error
        finally:
            await self._transport.teardown()
            self._transition(SessionState.Terminated)

    async def _dispatch_loop(self) -> None:
        while True:
            try:
                message = await self._transport.next_inbound()
            except anyio.EndOfStream:
                logger.debug("Client closed the channel")
                return
            except MalformedMessageError as e:
                logger.warning(f"Rejecting malformed message: {e}")
                await self._transport.send(JSONRPCErrorResponse(id=None, error=e.to_error_data()))
                continue
            except TransportError as e:
                logger.debug(f"Inbound channel failed, closing session: {e}")
                return

            if isinstance(message, JSONRPCRequest) and message.method == SHUTDOWN:
                self._transition(SessionState.ShuttingDown)
                await self._transport.acknowledge_shutdown(message.id)
                return

            await self._dispatch(message)

    async def _dispatch(self, message: JSONRPCMessage) -> None:
        kind = classify(message)
        if kind is MessageKind.Request:
            await self._handle_request(cast(JSONRPCRequest, message))
        elif kind is MessageKind.Notification:
            await self._handle_notification(cast(JSONRPCNotification, message))
        else:
            # The server never sends requests of its own, so there is nothing to correlate
            logger.debug(f"Discarding {describe(message)}")

    async def _handle_request(self, request: JSONRPCRequest) -> None:
        route = _REQUEST_ROUTES.get(request.method)
        if route is None:
            await self.log(f"Unrecognized {describe(request)}", MessageType.Warning)
            return

        token_type, slot = route
        try:
            token: RequestToken = token_type.from_request(request, self)
        except MalformedPayloadError as e:
            logger.warning(str(e))
            await self._send_response(request.id, e.to_error_data(INVALID_PARAMS))
            return

        logger.debug(f"Dispatching {describe(request)} to {slot}")
        try:
            await getattr(self._handler, slot)(self, token)
        except Exception:
            logger.exception(f"Handler error for {request.method}")
            if not token.completed:
                await token.respond_error(INTERNAL_ERROR, "Internal error")
            return

        if not token.completed:
            logger.warning(f"{slot} returned without responding to {describe(request)}")

    async def _handle_notification(self, notification: JSONRPCNotification) -> None:
        route = _NOTIFICATION_ROUTES.get(notification.method)
        if route is None:
            await self.log(f"Unrecognized {describe(notification)}", MessageType.Warning)
            return

        params_type, invoke = route
        try:
            params = params_type.model_validate(notification.params)
        except ValidationError as e:
            error = MalformedPayloadError(notification.method, e)
            logger.warning(f"Dropping notification: {error}")
            await self.log(str(error), MessageType.Error)
            return

        logger.debug(f"Dispatching {describe(notification)}")
        try:
            await invoke(self._handler, self, params)
        except Exception:
            logger.exception(f"Notification handler error for {notification.method}")

    async def log(self, message: str, message_type: MessageType = MessageType.Info) -> None:
        """Send a ``window/logMessage`` notification to the client."""
        await self._send_notification(WINDOW_LOG_MESSAGE, LogMessageParams(type=message_type, message=message))

    async def send_diagnostics(
        self,
        uri: DocumentUri,
        diagnostics: Sequence[Diagnostic],
        version: int | None = None,
    ) -> None:
        """Push diagnostics for ``uri`` with ``textDocument/publishDiagnostics``.

        Independent of any pull-style diagnostics request; use it when the
        client may never ask, e.g. after a document change.
        """
        await self._send_notification(
            TEXT_DOCUMENT_PUBLISH_DIAGNOSTICS,
            PublishDiagnosticsParams(uri=uri, version=version, diagnostics=list(diagnostics)),
        )

    def log_threadsafe(self, message: str, message_type: MessageType = MessageType.Info) -> None:
        """``log`` for threads other than the event loop's. Blocks until the message is queued."""
        self._require_portal().call(self.log, message, message_type)

    def send_diagnostics_threadsafe(
        self,
        uri: DocumentUri,
        diagnostics: Sequence[Diagnostic],
        version: int | None = None,
    ) -> None:
        """``send_diagnostics`` for threads other than the event loop's."""
        self._require_portal().call(self.send_diagnostics, uri, diagnostics, version)

    def _require_portal(self) -> BlockingPortal:
        portal = self._portal
        if portal is None:
            raise RuntimeError("The language server is not running")
        return portal

    async def _send_notification(self, method: str, params: BaseModel) -> None:
        await self._transport.send(
            JSONRPCNotification(method=method, params=params.model_dump(by_alias=True, mode="json", exclude_none=True))
        )

    async def _send_response(self, request_id: RequestId, response: Any | ErrorData) -> None:
        if isinstance(response, ErrorData):
            await self._transport.send(JSONRPCErrorResponse(id=request_id, error=response))
        else:
            await self._transport.send(JSONRPCResultResponse(id=request_id, result=response))
