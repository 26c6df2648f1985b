"""Stdio Server Transport Module

This module provides the stdio transport used by editors to launch a language
server as a subprocess, and the entry points that run a ``LanguageServer`` on it.

Example:
    ```python
    from lspeasy import LanguageServerHandler, serve
    from lspeasy.types import MessageType, ServerCapabilities

    class Handler(LanguageServerHandler):
        async def init(self, server):
            await server.log("Server started! :)", MessageType.Info)

    serve(ServerCapabilities(), Handler())
    ```
"""

import sys
from collections.abc import Mapping
from typing import Any

import anyio
import anyio.abc
import anyio.lowlevel
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from lspeasy.server.handler import LanguageServerHandler
from lspeasy.server.session import LanguageServer
from lspeasy.server.settings import ServerSettings
from lspeasy.server.transport import StreamTransport
from lspeasy.shared.exceptions import FramingError, MalformedMessageError
from lspeasy.shared.framing import encode_message, read_message
from lspeasy.shared.message import SessionMessage, parse_message, serialize_message
from lspeasy.types.initialize import ServerCapabilities
from lspeasy.utilities.logging import configure_logging, get_logger

logger = get_logger(__name__)


class StdioTransport(StreamTransport):
    """Transport that speaks the LSP base protocol over stdin/stdout.

    ``establish()`` starts a reader task (stdin -> inbound stream) and a writer
    task (outbound stream -> stdout). ``teardown()`` lets the writer drain,
    stops the reader and joins both. The process' own stdin/stdout handles are
    never closed.
    """

    def __init__(
        self,
        stdin: anyio.AsyncFile[bytes] | None = None,
        stdout: anyio.AsyncFile[bytes] | None = None,
        *,
        settings: ServerSettings | None = None,
    ) -> None:
        read_stream: MemoryObjectReceiveStream[SessionMessage | Exception]
        read_stream_writer: MemoryObjectSendStream[SessionMessage | Exception]

        write_stream: MemoryObjectSendStream[SessionMessage]
        write_stream_reader: MemoryObjectReceiveStream[SessionMessage]

        read_stream_writer, read_stream = anyio.create_memory_object_stream(0)
        write_stream, write_stream_reader = anyio.create_memory_object_stream(0)
        super().__init__(read_stream, write_stream, settings=settings)

        self._stdin = stdin
        self._stdout = stdout
        self._read_stream_writer = read_stream_writer
        self._write_stream_reader = write_stream_reader
        self._reader_scope = anyio.CancelScope()
        self._task_group: anyio.abc.TaskGroup | None = None

    async def establish(self) -> None:
        # Purposely wrapping the binary buffers without taking ownership: the
        # process' stdin/stdout must stay open after the transport is gone.
        if not self._stdin:
            self._stdin = anyio.wrap_file(sys.stdin.buffer)
        if not self._stdout:
            self._stdout = anyio.wrap_file(sys.stdout.buffer)

        self._task_group = anyio.create_task_group()
        await self._task_group.__aenter__()
        self._task_group.start_soon(self._stdin_reader)
        self._task_group.start_soon(self._stdout_writer)

    async def _stdin_reader(self) -> None:
        assert self._stdin is not None
        with self._reader_scope:
            try:
                async with self._read_stream_writer:
                    while True:
                        try:
                            body = await read_message(self._stdin)
                        except FramingError as exc:
                            # Frame boundaries are lost; nothing after this can be trusted
                            await self._read_stream_writer.send(exc)
                            return
                        if body is None:
                            logger.debug("stdin closed")
                            return
                        try:
                            message = parse_message(body)
                        except MalformedMessageError as exc:
                            await self._read_stream_writer.send(exc)
                            continue
                        await self._read_stream_writer.send(SessionMessage(message))
            except (anyio.ClosedResourceError, anyio.BrokenResourceError):
                await anyio.lowlevel.checkpoint()

    async def _stdout_writer(self) -> None:
        assert self._stdout is not None
        try:
            async with self._write_stream_reader:
                async for session_message in self._write_stream_reader:
                    await self._stdout.write(encode_message(serialize_message(session_message.message)))
                    await self._stdout.flush()
        except anyio.ClosedResourceError:  # pragma: no cover
            await anyio.lowlevel.checkpoint()

    async def teardown(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Closing the send side ends the writer once everything queued is written
        await self._write_stream.aclose()
        self._reader_scope.cancel()
        await self._read_stream.aclose()
        if self._task_group is not None:
            task_group, self._task_group = self._task_group, None
            await task_group.__aexit__(None, None, None)


async def run_stdio(
    capabilities: ServerCapabilities | Mapping[str, Any],
    handler: LanguageServerHandler,
    settings: ServerSettings | None = None,
) -> LanguageServer:
    """Run a language server over stdin/stdout until the client goes away.

    Returns the terminated ``LanguageServer`` so callers can inspect it.
    """
    settings = settings or ServerSettings()
    transport = StdioTransport(settings=settings)
    server = LanguageServer(capabilities, handler, transport, settings=settings)
    await server.run()
    return server


def serve(
    capabilities: ServerCapabilities | Mapping[str, Any],
    handler: LanguageServerHandler,
    settings: ServerSettings | None = None,
) -> None:
    """Blocking entry point: configure logging and serve over stdio."""
    settings = settings or ServerSettings()
    configure_logging(settings.log_level)
    anyio.run(run_stdio, capabilities, handler, settings)
