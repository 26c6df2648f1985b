"""Minimum amount of base models to represent the JSON-RPC envelope used by LSP."""

from typing import Annotated, Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter

JSONRPC_VERSION: Final[str] = "2.0"

PARSE_ERROR: Final[int] = -32700
INVALID_REQUEST: Final[int] = -32600
METHOD_NOT_FOUND: Final[int] = -32601
INVALID_PARAMS: Final[int] = -32602
INTERNAL_ERROR: Final[int] = -32603

# LSP reserved error codes
SERVER_NOT_INITIALIZED: Final[int] = -32002
UNKNOWN_ERROR_CODE: Final[int] = -32001
REQUEST_FAILED: Final[int] = -32803
SERVER_CANCELLED: Final[int] = -32802
REQUEST_CANCELLED: Final[int] = -32800

RequestId = Annotated[int, Field(strict=True)] | str


class JSONRPCBase(BaseModel):
    """Base class for all JSON-RPC messages."""

    model_config = ConfigDict(extra="allow")

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION


class JSONRPCRequest(JSONRPCBase):
    """A request that expects a response."""

    id: RequestId
    method: str
    params: dict[str, Any] | list[Any] | None = None


class JSONRPCNotification(JSONRPCBase):
    """A notification which does not expect a response."""

    method: str
    params: dict[str, Any] | list[Any] | None = None


class ErrorData(BaseModel):
    """Error information in a JSON-RPC error response."""

    model_config = ConfigDict(extra="allow")

    code: int
    message: str
    data: Any | None = None


class JSONRPCResultResponse(JSONRPCBase):
    """A successful (non-error) response to a request.

    ``result`` holds already-serialized JSON; ``None`` is sent as ``null``.
    """

    id: RequestId
    result: Any


class JSONRPCErrorResponse(JSONRPCBase):
    """A response to a request that indicates an error occurred."""

    id: RequestId | None = None
    error: ErrorData


def _message_tag(value: Any) -> str | None:
    if isinstance(value, BaseModel):
        if isinstance(value, JSONRPCRequest):
            return "request"
        if isinstance(value, JSONRPCNotification):
            return "notification"
        if isinstance(value, JSONRPCErrorResponse):
            return "error"
        if isinstance(value, JSONRPCResultResponse):
            return "result"
        return None
    if not isinstance(value, dict):
        return None
    if "method" in value:
        return "request" if "id" in value else "notification"
    if "error" in value:
        return "error"
    if "result" in value:
        return "result"
    return None


JSONRPCResponse = JSONRPCResultResponse | JSONRPCErrorResponse
JSONRPCMessage = Annotated[
    Annotated[JSONRPCRequest, Tag("request")]
    | Annotated[JSONRPCNotification, Tag("notification")]
    | Annotated[JSONRPCResultResponse, Tag("result")]
    | Annotated[JSONRPCErrorResponse, Tag("error")],
    Discriminator(_message_tag),
]

JSONRPCMessageAdapter: TypeAdapter[JSONRPCMessage] = TypeAdapter(JSONRPCMessage)
