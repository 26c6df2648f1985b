"""LSP base protocol framing.

Each message on the wire is a header part and a content part separated by an
empty line::

    Content-Length: 52\\r\\n
    \\r\\n
    {"jsonrpc":"2.0","id":1,"method":"shutdown"}

Only ``Content-Length`` is interpreted; other headers (``Content-Type``) are
accepted and ignored. The content is always UTF-8.
"""

from typing import Protocol

from lspeasy.shared.exceptions import FramingError

CONTENT_LENGTH = "content-length"


class AsyncByteReader(Protocol):
    async def readline(self) -> bytes: ...
    async def read(self, size: int = -1) -> bytes: ...


async def read_message(stream: AsyncByteReader) -> bytes | None:
    """Read one framed message body from ``stream``.

    Returns None when the stream ends cleanly before a new header starts.

    Raises:
        FramingError: on a missing or invalid ``Content-Length`` header, or a
            stream that ends inside a frame
    """
    content_length: int | None = None
    started = False
    while True:
        line = await stream.readline()
        if not line:
            if started:
                raise FramingError("Unexpected end of stream inside message headers")
            return None
        started = True
        header = line.rstrip(b"\r\n")
        if not header:
            break
        name, sep, value = header.decode("ascii", errors="replace").partition(":")
        if not sep:
            raise FramingError(f"Malformed header line: {header!r}")
        if name.strip().lower() == CONTENT_LENGTH:
            try:
                content_length = int(value.strip())
            except ValueError:
                raise FramingError(f"Invalid Content-Length: {value.strip()!r}") from None
            if content_length < 0:
                raise FramingError(f"Invalid Content-Length: {content_length}")

    if content_length is None:
        raise FramingError("Missing Content-Length header")

    body = b""
    while len(body) < content_length:
        chunk = await stream.read(content_length - len(body))
        if not chunk:
            raise FramingError(f"Unexpected end of stream: read {len(body)} of {content_length} bytes")
        body += chunk
    return body


def encode_message(body: bytes) -> bytes:
    return f"Content-Length: {len(body)}\r\n\r\n".encode("ascii") + body
