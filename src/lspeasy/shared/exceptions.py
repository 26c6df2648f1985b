from pydantic import ValidationError

from lspeasy.types.json_rpc import PARSE_ERROR, ErrorData


class LSPError(Exception):
    """Base class for every error raised by lspeasy."""


class ProtocolError(LSPError):
    """The peer broke the protocol (unexpected message, missing reply, disconnect)."""


class HandshakeError(ProtocolError):
    """The initialize handshake did not complete; the session never runs."""


class TransportError(LSPError):
    """A transport-level failure on the inbound or outbound channel."""


class TransportSendError(TransportError):
    """A message could not be handed to the outbound channel."""


class FramingError(TransportError):
    """A base-protocol frame (``Content-Length`` header + body) was malformed."""


class MalformedMessageError(LSPError):
    """Inbound bytes did not decode to a JSON-RPC message.

    The frame around them was intact, so the channel stays usable.

    Attributes:
        code: ``PARSE_ERROR`` for invalid JSON, ``INVALID_REQUEST`` for JSON that is
            not a JSON-RPC message
    """

    def __init__(self, message: str, *, code: int = PARSE_ERROR):
        super().__init__(message)
        self.code = code

    def to_error_data(self) -> ErrorData:
        return ErrorData(code=self.code, message="Parse error" if self.code == PARSE_ERROR else "Invalid request")


class MalformedPayloadError(LSPError):
    """A message's ``params`` did not match the shape its method requires.

    Attributes:
        method: the method whose params failed validation
        validation_error: the underlying pydantic error
    """

    def __init__(self, method: str, validation_error: ValidationError):
        super().__init__(f"Malformed params for {method!r}: {validation_error.error_count()} validation error(s)")
        self.method = method
        self.validation_error = validation_error

    def to_error_data(self, code: int) -> ErrorData:
        return ErrorData(
            code=code,
            message=f"Invalid params for {self.method}",
            data=self.validation_error.errors(include_url=False, include_context=False, include_input=False),
        )


class ResponseAlreadySentError(LSPError, RuntimeError):
    """A request token was asked to respond a second time."""
