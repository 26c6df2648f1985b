import json
from dataclasses import fields

import pytest
from inline_snapshot import snapshot

from lspeasy.shared.exceptions import MalformedMessageError
from lspeasy.shared.message import (
    MessageKind,
    SessionMessage,
    classify,
    dump_message,
    parse_message,
    serialize_message,
)
from lspeasy.types.json_rpc import (
    INVALID_REQUEST,
    PARSE_ERROR,
    ErrorData,
    JSONRPCErrorResponse,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResultResponse,
)


@pytest.mark.parametrize(
    ("raw", "expected_type", "kind"),
    [
        ({"jsonrpc": "2.0", "id": 1, "method": "shutdown"}, JSONRPCRequest, MessageKind.Request),
        ({"jsonrpc": "2.0", "id": "abc", "method": "textDocument/completion", "params": {}}, JSONRPCRequest, MessageKind.Request),
        ({"jsonrpc": "2.0", "method": "exit"}, JSONRPCNotification, MessageKind.Notification),
        ({"jsonrpc": "2.0", "id": 7, "result": None}, JSONRPCResultResponse, MessageKind.Response),
        ({"jsonrpc": "2.0", "id": 7, "result": {"ok": True}}, JSONRPCResultResponse, MessageKind.Response),
        ({"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "boom"}}, JSONRPCErrorResponse, MessageKind.Response),
    ],
)
def test_parse_and_classify(raw, expected_type, kind):
    message = parse_message(raw)
    assert type(message) is expected_type
    assert classify(message) is kind


def test_parse_accepts_bytes_and_str():
    raw = '{"jsonrpc":"2.0","id":3,"method":"textDocument/diagnostic","params":{"textDocument":{"uri":"file:///a"}}}'
    from_str = parse_message(raw)
    from_bytes = parse_message(raw.encode("utf-8"))
    assert from_str == from_bytes
    assert isinstance(from_str, JSONRPCRequest)
    assert from_str.params == {"textDocument": {"uri": "file:///a"}}


def test_request_with_id_is_never_a_notification():
    message = parse_message({"jsonrpc": "2.0", "id": 0, "method": "initialize"})
    assert isinstance(message, JSONRPCRequest)
    assert message.id == 0


@pytest.mark.parametrize(
    "raw",
    [
        b"not json",
        b"[]",
        b'{"jsonrpc":"2.0"}',
        b'{"jsonrpc":"1.0","method":"exit"}',
        b'{"jsonrpc":"2.0","id":1.5,"method":"shutdown"}',
    ],
)
def test_parse_rejects_malformed(raw):
    with pytest.raises(MalformedMessageError):
        parse_message(raw)


def test_dump_keeps_null_result():
    assert dump_message(JSONRPCResultResponse(id=1, result=None)) == snapshot({"jsonrpc": "2.0", "id": 1, "result": None})


def test_dump_keeps_null_error_id():
    message = JSONRPCErrorResponse(id=None, error=ErrorData(code=-32700, message="Parse error"))
    assert dump_message(message) == snapshot(
        {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}
    )


def test_dump_notification_omits_missing_params():
    assert dump_message(JSONRPCNotification(method="exit")) == {"jsonrpc": "2.0", "method": "exit"}


def test_serialize_is_compact_utf8():
    message = JSONRPCNotification(method="window/logMessage", params={"type": 3, "message": "héllo"})
    body = serialize_message(message)
    assert b" " not in body.replace("héllo".encode(), b"")
    assert json.loads(body.decode("utf-8"))["params"]["message"] == "héllo"


@pytest.mark.parametrize(
    ("raw", "code"),
    [
        (b"{oops", PARSE_ERROR),
        (b'{"jsonrpc":"2.0","params":{}}', INVALID_REQUEST),
    ],
)
def test_malformed_message_error_code(raw, code):
    with pytest.raises(MalformedMessageError) as exc_info:
        parse_message(raw)
    assert exc_info.value.code == code
    assert exc_info.value.to_error_data().code == code


def test_session_message_only_wraps_the_message():
    message = JSONRPCNotification(method="exit")
    assert [f.name for f in fields(SessionMessage)] == ["message"]
    assert SessionMessage(message).message is message
