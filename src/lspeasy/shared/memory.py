"""
In-memory transports for testing a LanguageServer without a subprocess.
"""

import math
from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
from typing import Any

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from lspeasy.server.handler import LanguageServerHandler
from lspeasy.server.session import LanguageServer
from lspeasy.server.settings import ServerSettings
from lspeasy.server.transport import StreamTransport
from lspeasy.shared.message import SessionMessage
from lspeasy.types.base import EXIT, INITIALIZE, INITIALIZED, SHUTDOWN
from lspeasy.types.initialize import ServerCapabilities
from lspeasy.types.json_rpc import (
    JSONRPCErrorResponse,
    JSONRPCMessage,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResultResponse,
    RequestId,
)

MessageStream = tuple[
    MemoryObjectReceiveStream[SessionMessage | Exception],
    MemoryObjectSendStream[SessionMessage | Exception],
]


@asynccontextmanager
async def create_client_server_memory_streams(
    max_buffer_size: float = math.inf,
) -> AsyncGenerator[tuple[MessageStream, MessageStream], None]:
    """
    Creates a pair of bidirectional memory streams for client-server communication.

    Returns:
        A tuple of (client_streams, server_streams) where each is a tuple of
        (read_stream, write_stream)
    """
    # Create streams for both directions
    server_to_client_send, server_to_client_receive = anyio.create_memory_object_stream[SessionMessage | Exception](
        max_buffer_size
    )
    client_to_server_send, client_to_server_receive = anyio.create_memory_object_stream[SessionMessage | Exception](
        max_buffer_size
    )

    client_streams = (server_to_client_receive, client_to_server_send)
    server_streams = (client_to_server_receive, server_to_client_send)

    async with (
        server_to_client_receive,
        client_to_server_send,
        client_to_server_receive,
        server_to_client_send,
    ):
        yield client_streams, server_streams


class ClientConnection:
    """Plays the editor's side of a connection.

    Notifications that arrive while waiting for a response are kept in
    ``notifications`` in arrival order.
    """

    def __init__(
        self,
        read_stream: MemoryObjectReceiveStream[SessionMessage | Exception],
        write_stream: MemoryObjectSendStream[SessionMessage | Exception],
        *,
        timeout: float = 5.0,
    ) -> None:
        self._read_stream = read_stream
        self._write_stream = write_stream
        self._timeout = timeout
        self._next_id = 1
        self.notifications: list[JSONRPCNotification] = []

    async def send(self, message: JSONRPCMessage) -> None:
        await self._write_stream.send(SessionMessage(message))

    async def request(self, method: str, params: dict[str, Any] | None = None) -> RequestId:
        request_id = self._next_id
        self._next_id += 1
        await self.send(JSONRPCRequest(id=request_id, method=method, params=params))
        return request_id

    async def notify(self, method: str, params: dict[str, Any] | None = None) -> None:
        await self.send(JSONRPCNotification(method=method, params=params))

    async def receive(self) -> JSONRPCMessage:
        """Next message from the server. Fails after ``timeout`` seconds."""
        with anyio.fail_after(self._timeout):
            item = await self._read_stream.receive()
        if isinstance(item, Exception):
            raise item
        return item.message

    async def receive_response(self, request_id: RequestId) -> JSONRPCResultResponse | JSONRPCErrorResponse:
        while True:
            message = await self.receive()
            if isinstance(message, JSONRPCNotification):
                self.notifications.append(message)
            elif isinstance(message, JSONRPCResultResponse | JSONRPCErrorResponse) and message.id == request_id:
                return message
            else:
                raise AssertionError(f"Unexpected message while waiting for response {request_id!r}: {message!r}")

    async def receive_notification(self) -> JSONRPCNotification:
        if self.notifications:
            return self.notifications.pop(0)
        message = await self.receive()
        if not isinstance(message, JSONRPCNotification):
            raise AssertionError(f"Expected a notification, got {message!r}")
        return message

    async def call(self, method: str, params: dict[str, Any] | None = None) -> JSONRPCResultResponse | JSONRPCErrorResponse:
        return await self.receive_response(await self.request(method, params))

    async def initialize(self, params: dict[str, Any] | None = None) -> JSONRPCResultResponse | JSONRPCErrorResponse:
        response = await self.call(INITIALIZE, params or {"processId": None, "capabilities": {}})
        await self.notify(INITIALIZED, {})
        return response

    async def shutdown(self) -> JSONRPCResultResponse | JSONRPCErrorResponse:
        response = await self.call(SHUTDOWN)
        await self.notify(EXIT)
        return response

    async def aclose(self) -> None:
        await self._write_stream.aclose()


@asynccontextmanager
async def create_connected_server_and_client(
    handler: LanguageServerHandler,
    capabilities: ServerCapabilities | Mapping[str, Any] | None = None,
    *,
    settings: ServerSettings | None = None,
    initialize: bool = True,
) -> AsyncGenerator[tuple[LanguageServer, ClientConnection], None]:
    """Run a LanguageServer on memory streams and yield it with a connected client.

    When the block exits the client side is closed, which ends the session if
    the client has not shut it down already.
    """
    async with create_client_server_memory_streams() as (client_streams, server_streams):
        client_read, client_write = client_streams
        server_read, server_write = server_streams

        transport = StreamTransport(server_read, server_write, settings=settings)
        server = LanguageServer(capabilities or ServerCapabilities(), handler, transport, settings=settings)
        client = ClientConnection(client_read, client_write)

        async with anyio.create_task_group() as tg:
            tg.start_soon(server.run)
            if initialize:
                await client.initialize()
            try:
                yield server, client
            finally:
                await client.aclose()
