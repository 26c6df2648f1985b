from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import anyio
import pytest

from lspeasy.server.settings import ServerSettings
from lspeasy.server.transport import StreamTransport
from lspeasy.shared.exceptions import (
    HandshakeError,
    MalformedMessageError,
    ProtocolError,
    TransportError,
    TransportSendError,
)
from lspeasy.shared.memory import ClientConnection, create_client_server_memory_streams
from lspeasy.shared.message import SessionMessage
from lspeasy.types.json_rpc import (
    INVALID_PARAMS,
    PARSE_ERROR,
    SERVER_NOT_INITIALIZED,
    ErrorData,
    JSONRPCErrorResponse,
    JSONRPCNotification,
    JSONRPCResultResponse,
)

pytestmark = pytest.mark.anyio

INITIALIZE_PARAMS = {"processId": 1234, "rootUri": "file:///project", "capabilities": {}}


@asynccontextmanager
async def _connected(
    settings: ServerSettings | None = None,
) -> AsyncGenerator[tuple[StreamTransport, ClientConnection], None]:
    async with create_client_server_memory_streams() as (client_streams, server_streams):
        transport = StreamTransport(*server_streams, settings=settings)
        yield transport, ClientConnection(*client_streams, timeout=1.0)


async def test_handshake():
    async with _connected(ServerSettings(_env_file=None, name="capitals", version="1.2.3")) as (transport, client):
        request_id = await client.request("initialize", INITIALIZE_PARAMS)
        await client.notify("initialized", {})

        params = await transport.handshake({"completionProvider": {}})

        assert params.process_id == 1234
        assert params.root_uri == "file:///project"
        response = await client.receive_response(request_id)
        assert isinstance(response, JSONRPCResultResponse)
        assert response.result == {
            "capabilities": {"completionProvider": {}},
            "serverInfo": {"name": "capitals", "version": "1.2.3"},
        }


async def test_requests_before_initialize_are_rejected():
    async with _connected() as (transport, client):
        early_id = await client.request("textDocument/completion", {})
        await client.notify("textDocument/didOpen", {})
        init_id = await client.request("initialize", INITIALIZE_PARAMS)
        await client.notify("initialized", {})

        await transport.handshake({})

        early = await client.receive_response(early_id)
        assert isinstance(early, JSONRPCErrorResponse)
        assert early.error.code == SERVER_NOT_INITIALIZED
        assert isinstance(await client.receive_response(init_id), JSONRPCResultResponse)
        # The early notification is dropped silently
        assert client.notifications == []


async def test_exit_before_initialize():
    async with _connected() as (transport, client):
        await client.notify("exit")
        with pytest.raises(HandshakeError, match="exit"):
            await transport.handshake({})


async def test_invalid_initialize_params():
    async with _connected() as (transport, client):
        request_id = await client.request("initialize", {"processId": "not a pid"})
        with pytest.raises(HandshakeError, match="Invalid initialize params"):
            await transport.handshake({})

        response = await client.receive_response(request_id)
        assert isinstance(response, JSONRPCErrorResponse)
        assert response.error.code == INVALID_PARAMS


async def test_missing_initialized_notification():
    async with _connected() as (transport, client):
        await client.request("initialize", INITIALIZE_PARAMS)
        await client.request("textDocument/completion", {})
        with pytest.raises(HandshakeError, match="Expected initialized notification"):
            await transport.handshake({})


async def test_channel_closed_during_handshake():
    async with _connected() as (transport, client):
        await client.aclose()
        with pytest.raises(HandshakeError, match="Channel closed"):
            await transport.handshake({})


async def test_handshake_timeout():
    async with _connected(ServerSettings(_env_file=None, handshake_timeout_seconds=0.05)) as (transport, _):
        with pytest.raises(HandshakeError, match="Timed out"):
            await transport.handshake({})


async def test_acknowledge_shutdown():
    async with _connected() as (transport, client):
        await client.notify("exit")
        await transport.acknowledge_shutdown(7)

        response = await client.receive_response(7)
        assert response == JSONRPCResultResponse(id=7, result=None)


async def test_acknowledge_shutdown_without_exit_times_out():
    async with _connected(ServerSettings(_env_file=None, exit_timeout_seconds=0.05)) as (transport, client):
        with pytest.raises(ProtocolError, match="Timed out"):
            await transport.acknowledge_shutdown(1)
        assert isinstance(await client.receive_response(1), JSONRPCResultResponse)


async def test_acknowledge_shutdown_rejects_other_messages():
    async with _connected() as (transport, client):
        await client.notify("textDocument/didClose", {"textDocument": {"uri": "file:///a"}})
        with pytest.raises(ProtocolError, match="didClose"):
            await transport.acknowledge_shutdown(1)


async def test_acknowledge_shutdown_channel_closed():
    async with _connected() as (transport, client):
        await client.aclose()
        with pytest.raises(ProtocolError, match="Channel closed"):
            await transport.acknowledge_shutdown(1)


async def test_next_inbound_end_of_stream():
    async with _connected() as (transport, client):
        await client.aclose()
        with pytest.raises(anyio.EndOfStream):
            await transport.next_inbound()


async def test_next_inbound_reader_error():
    async with create_client_server_memory_streams() as ((_, client_write), server_streams):
        transport = StreamTransport(*server_streams)
        await client_write.send(ValueError("bad frame"))
        with pytest.raises(TransportError, match="bad frame"):
            await transport.next_inbound()


async def test_send_after_teardown():
    async with _connected() as (transport, _):
        await transport.teardown()
        await transport.teardown()
        with pytest.raises(TransportSendError, match="window/logMessage"):
            await transport.send(JSONRPCNotification(method="window/logMessage", params={"type": 3, "message": "x"}))


async def test_next_inbound_malformed_message_keeps_channel():
    async with create_client_server_memory_streams() as ((_, client_write), server_streams):
        transport = StreamTransport(*server_streams)
        await client_write.send(MalformedMessageError("bad json"))
        await client_write.send(SessionMessage(JSONRPCNotification(method="exit")))

        with pytest.raises(MalformedMessageError):
            await transport.next_inbound()
        assert await transport.next_inbound() == JSONRPCNotification(method="exit")


async def test_malformed_message_before_initialize_is_rejected():
    async with create_client_server_memory_streams() as (client_streams, server_streams):
        client_read, client_write = client_streams
        transport = StreamTransport(*server_streams)
        client = ClientConnection(client_read, client_write, timeout=1.0)

        await client_write.send(MalformedMessageError("bad json"))
        request_id = await client.request("initialize", INITIALIZE_PARAMS)
        await client.notify("initialized", {})

        await transport.handshake({})

        rejected = await client.receive()
        assert rejected == JSONRPCErrorResponse(id=None, error=ErrorData(code=PARSE_ERROR, message="Parse error"))
        assert isinstance(await client.receive_response(request_id), JSONRPCResultResponse)


async def test_malformed_message_during_shutdown():
    async with create_client_server_memory_streams() as ((_, client_write), server_streams):
        transport = StreamTransport(*server_streams)
        await client_write.send(MalformedMessageError("bad json"))
        with pytest.raises(ProtocolError, match="Malformed"):
            await transport.acknowledge_shutdown(1)
