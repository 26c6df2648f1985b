"""Message wrapper and classifier.

Inbound JSON-RPC messages are validated into one of the envelope models in
``lspeasy.types.json_rpc`` and tagged as a request, response or notification
before the session routes them.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import ValidationError

from lspeasy.shared.exceptions import MalformedMessageError
from lspeasy.types.json_rpc import (
    INVALID_REQUEST,
    PARSE_ERROR,
    JSONRPCErrorResponse,
    JSONRPCMessage,
    JSONRPCMessageAdapter,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResultResponse,
)


class MessageKind(Enum):
    Request = "request"
    Response = "response"
    Notification = "notification"


@dataclass
class SessionMessage:
    """A message travelling through the transport's memory streams."""

    message: JSONRPCMessage


def parse_message(raw: bytes | str | dict[str, Any]) -> JSONRPCMessage:
    """Validate one inbound JSON-RPC message.

    Raises:
        MalformedMessageError: if ``raw`` is not JSON or matches no envelope
    """
    try:
        if isinstance(raw, dict):
            return JSONRPCMessageAdapter.validate_python(raw)
        return JSONRPCMessageAdapter.validate_json(raw)
    except ValidationError as e:
        code = PARSE_ERROR if any(error["type"] == "json_invalid" for error in e.errors()) else INVALID_REQUEST
        raise MalformedMessageError(f"Not a JSON-RPC message: {e}", code=code) from e


def classify(message: JSONRPCMessage) -> MessageKind:
    if isinstance(message, JSONRPCRequest):
        return MessageKind.Request
    if isinstance(message, JSONRPCNotification):
        return MessageKind.Notification
    if isinstance(message, JSONRPCResultResponse | JSONRPCErrorResponse):
        return MessageKind.Response
    raise TypeError(f"Not a JSON-RPC message: {type(message).__name__}")


def dump_message(message: JSONRPCMessage) -> dict[str, Any]:
    """Return the wire form of ``message`` as a JSON-compatible dict."""
    data = message.model_dump(by_alias=True, mode="json", exclude_none=True)
    # A null result and a null error id are still required members
    if isinstance(message, JSONRPCResultResponse):
        data.setdefault("result", None)
    elif isinstance(message, JSONRPCErrorResponse):
        data.setdefault("id", None)
    return data


def serialize_message(message: JSONRPCMessage) -> bytes:
    return json.dumps(dump_message(message), separators=(",", ":"), ensure_ascii=False).encode("utf-8")
