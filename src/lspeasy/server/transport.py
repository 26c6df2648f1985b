"""
Transport Module

The session never touches bytes. It talks to a ``Transport``: something that
hands out classified inbound messages one at a time, accepts outbound messages
from any task, and knows the two pieces of protocol machinery that sit below
the dispatch loop, the initialize handshake and the shutdown/exit handshake.

``StreamTransport`` implements all of that on top of a pair of anyio memory
object streams. Byte-level transports (see ``lspeasy.server.stdio``) subclass it
and only add the background tasks that move frames between the streams and the
outside world.
"""

from typing import Any, Protocol

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from pydantic import ValidationError

from lspeasy.server.settings import ServerSettings
from lspeasy.shared.exceptions import (
    HandshakeError,
    MalformedMessageError,
    ProtocolError,
    TransportError,
    TransportSendError,
)
from lspeasy.shared.message import SessionMessage
from lspeasy.types.base import EXIT, INITIALIZE, INITIALIZED
from lspeasy.types.initialize import InitializeParams, InitializeResult, ServerInfo
from lspeasy.types.json_rpc import (
    INVALID_PARAMS,
    SERVER_NOT_INITIALIZED,
    ErrorData,
    JSONRPCErrorResponse,
    JSONRPCMessage,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResultResponse,
    RequestId,
)
from lspeasy.utilities.logging import get_logger

logger = get_logger(__name__)


def describe(message: JSONRPCMessage) -> str:
    """Short human-readable description of a message for logs and errors."""
    if isinstance(message, JSONRPCRequest):
        return f"request {message.method!r} (id={message.id!r})"
    if isinstance(message, JSONRPCNotification):
        return f"notification {message.method!r}"
    return f"response (id={message.id!r})"


class Transport(Protocol):
    """What the session needs from the channel to the client."""

    async def establish(self) -> None:
        """Open the channel and start any background I/O."""
        ...

    async def handshake(self, capabilities: dict[str, Any]) -> InitializeParams:
        """Run the initialize handshake, advertising ``capabilities``.

        Raises:
            HandshakeError: if the handshake does not complete
        """
        ...

    async def next_inbound(self) -> JSONRPCMessage:
        """Wait for the next inbound message.

        Raises:
            anyio.EndOfStream: when the peer closed the channel
            MalformedMessageError: for one undecodable message; the channel stays usable
            TransportError: on a transport-level failure
        """
        ...

    async def send(self, message: JSONRPCMessage) -> None:
        """Enqueue ``message`` for transmission.

        Raises:
            TransportSendError: if the outbound channel is gone
        """
        ...

    async def acknowledge_shutdown(self, request_id: RequestId) -> None:
        """Answer the shutdown request and wait for the ``exit`` notification."""
        ...

    async def teardown(self) -> None:
        """Close the channel and join background I/O."""
        ...


class StreamTransport:
    """Transport over anyio memory object streams.

    The read stream carries ``SessionMessage`` objects or the ``Exception`` a
    reader hit while decoding; the write stream carries ``SessionMessage``
    objects to be encoded by whoever owns the other end.
    """

    def __init__(
        self,
        read_stream: MemoryObjectReceiveStream[SessionMessage | Exception],
        write_stream: MemoryObjectSendStream[SessionMessage],
        *,
        settings: ServerSettings | None = None,
    ) -> None:
        self._read_stream = read_stream
        self._write_stream = write_stream
        self._settings = settings or ServerSettings()
        self._closed = False

    @property
    def settings(self) -> ServerSettings:
        return self._settings

    async def establish(self) -> None:
        """Nothing to start: the streams are connected by whoever created them."""

    async def next_inbound(self) -> JSONRPCMessage:
        try:
            item = await self._read_stream.receive()
        except anyio.ClosedResourceError as e:
            raise anyio.EndOfStream from e
        if isinstance(item, MalformedMessageError):
            raise item
        if isinstance(item, Exception):
            raise TransportError(f"Inbound channel failed: {item}") from item
        return item.message

    async def send(self, message: JSONRPCMessage) -> None:
        try:
            await self._write_stream.send(SessionMessage(message))
        except (anyio.ClosedResourceError, anyio.BrokenResourceError) as e:
            raise TransportSendError(f"Cannot send {describe(message)}: outbound channel is closed") from e

    async def handshake(self, capabilities: dict[str, Any]) -> InitializeParams:
        timeout = self._settings.handshake_timeout_seconds
        try:
            with anyio.fail_after(timeout):
                request = await self._wait_for_initialize()
                params = await self._initialize_params(request)
                result = InitializeResult(
                    capabilities=capabilities,
                    server_info=ServerInfo(name=self._settings.name, version=self._settings.version),
                )
                await self.send(
                    JSONRPCResultResponse(
                        id=request.id,
                        result=result.model_dump(by_alias=True, mode="json", exclude_none=True),
                    )
                )
                await self._wait_for_initialized()
        except TimeoutError:
            raise HandshakeError(f"Timed out after {timeout}s waiting for the initialize handshake") from None
        except (anyio.EndOfStream, TransportError) as e:
            raise HandshakeError("Channel closed during the initialize handshake") from e

        logger.debug("Handshake complete with client %s", params.client_info.name if params.client_info else None)
        return params

    async def _wait_for_initialize(self) -> JSONRPCRequest:
        while True:
            try:
                message = await self.next_inbound()
            except MalformedMessageError as e:
                logger.debug(f"Rejecting malformed message received before initialize: {e}")
                await self.send(JSONRPCErrorResponse(id=None, error=e.to_error_data()))
                continue
            if isinstance(message, JSONRPCRequest):
                if message.method == INITIALIZE:
                    return message
                await self.send(
                    JSONRPCErrorResponse(
                        id=message.id,
                        error=ErrorData(
                            code=SERVER_NOT_INITIALIZED,
                            message=f"Expected initialize request, got {message.method!r}",
                        ),
                    )
                )
            elif isinstance(message, JSONRPCNotification):
                if message.method == EXIT:
                    raise HandshakeError("Received exit notification before initialize")
                logger.debug(f"Dropping {describe(message)} received before initialize")
            else:
                raise HandshakeError(f"Expected initialize request, got {describe(message)}")

    async def _initialize_params(self, request: JSONRPCRequest) -> InitializeParams:
        try:
            return InitializeParams.model_validate(request.params or {})
        except ValidationError as e:
            await self.send(
                JSONRPCErrorResponse(
                    id=request.id,
                    error=ErrorData(code=INVALID_PARAMS, message="Invalid initialize params"),
                )
            )
            raise HandshakeError("Invalid initialize params") from e

    async def _wait_for_initialized(self) -> None:
        try:
            message = await self.next_inbound()
        except MalformedMessageError as e:
            raise HandshakeError("Expected initialized notification, got a malformed message") from e
        if not (isinstance(message, JSONRPCNotification) and message.method == INITIALIZED):
            raise HandshakeError(f"Expected initialized notification, got {describe(message)}")

    async def acknowledge_shutdown(self, request_id: RequestId) -> None:
        await self.send(JSONRPCResultResponse(id=request_id, result=None))

        timeout = self._settings.exit_timeout_seconds
        try:
            with anyio.fail_after(timeout):
                message = await self.next_inbound()
        except TimeoutError:
            raise ProtocolError(f"Timed out after {timeout}s waiting for exit notification") from None
        except MalformedMessageError as e:
            raise ProtocolError("Malformed message during shutdown") from e
        except (anyio.EndOfStream, TransportError) as e:
            raise ProtocolError("Channel closed while waiting for exit notification") from e

        if not (isinstance(message, JSONRPCNotification) and message.method == EXIT):
            raise ProtocolError(f"Unexpected {describe(message)} during shutdown")

    async def teardown(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._write_stream.aclose()
        await self._read_stream.aclose()
