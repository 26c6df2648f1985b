"""Single-use request tokens.

The session mints one token per dispatched request and hands it to the
matching capability callback. A token knows the id of the request it came
from and the exact result shape its method requires, and it can respond
exactly once:

    async def completion(self, server, req):
        await req.respond([CompletionItem(label="the")])
        await req.respond([])  # raises ResponseAlreadySentError

Nothing forces a callback to respond. A token that is never used leaves the
client's request unanswered.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from lspeasy.shared.exceptions import MalformedPayloadError, ResponseAlreadySentError
from lspeasy.shared.uri import uri_to_path
from lspeasy.types.common import Position, TextDocumentIdentifier
from lspeasy.types.completion import CompletionContext, CompletionItem, CompletionParams
from lspeasy.types.diagnostics import Diagnostic, DocumentDiagnosticParams, RelatedFullDocumentDiagnosticReport
from lspeasy.types.json_rpc import ErrorData, JSONRPCRequest, RequestId

if TYPE_CHECKING:
    from lspeasy.server.session import LanguageServer


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(by_alias=True, mode="json", exclude_none=True)


class RequestToken:
    """Binds a pending request id to its one eventual response."""

    def __init__(self, request_id: RequestId, server: LanguageServer) -> None:
        self.request_id = request_id
        self._server = server
        self._completed = False

    @property
    def completed(self) -> bool:
        """True once a response (result or error) has been sent through this token."""
        return self._completed

    def _consume(self) -> None:
        if self._completed:
            raise ResponseAlreadySentError(f"Request {self.request_id!r} was already responded to")
        self._completed = True

    async def _respond_result(self, result: Any) -> None:
        self._consume()
        await self._server._send_response(self.request_id, result)  # type: ignore[reportPrivateUsage]

    async def respond_error(self, code: int, message: str, data: Any | None = None) -> None:
        """Answer the request with a JSON-RPC error instead of a result. Consumes the token."""
        self._consume()
        await self._server._send_response(  # type: ignore[reportPrivateUsage]
            self.request_id, ErrorData(code=code, message=message, data=data)
        )


class CompletionRequest(RequestToken):
    """Token for a ``textDocument/completion`` request.

    Attributes:
        text_document: the document completions are requested for, if the client named one
        position: the cursor position inside that document
        context: how completion was triggered, if the client said
    """

    def __init__(
        self,
        request_id: RequestId,
        server: LanguageServer,
        *,
        text_document: TextDocumentIdentifier | None = None,
        position: Position,
        context: CompletionContext | None = None,
    ) -> None:
        super().__init__(request_id, server)
        self.text_document = text_document
        self.position = position
        self.context = context

    @classmethod
    def from_request(cls, request: JSONRPCRequest, server: LanguageServer) -> CompletionRequest:
        try:
            params = CompletionParams.model_validate(request.params)
        except ValidationError as e:
            raise MalformedPayloadError(request.method, e) from e
        return cls(
            request.id,
            server,
            text_document=params.text_document,
            position=params.position,
            context=params.context,
        )

    async def respond(self, items: Sequence[CompletionItem]) -> None:
        """Send ``items`` as the result, as-is. Consumes the token."""
        await self._respond_result([_dump(item) for item in items])


class DiagnosticsRequest(RequestToken):
    """Token for a ``textDocument/diagnostic`` (pull diagnostics) request.

    Attributes:
        text_document: URI of the document diagnostics are requested for
        identifier: the diagnostic provider identifier, if registered with one
        previous_result_id: result id of the last report the client received
    """

    def __init__(
        self,
        request_id: RequestId,
        server: LanguageServer,
        *,
        text_document: str,
        identifier: str | None = None,
        previous_result_id: str | None = None,
    ) -> None:
        super().__init__(request_id, server)
        self.text_document = text_document
        self.identifier = identifier
        self.previous_result_id = previous_result_id

    @classmethod
    def from_request(cls, request: JSONRPCRequest, server: LanguageServer) -> DiagnosticsRequest:
        try:
            params = DocumentDiagnosticParams.model_validate(request.params)
        except ValidationError as e:
            raise MalformedPayloadError(request.method, e) from e
        return cls(
            request.id,
            server,
            text_document=params.text_document.uri,
            identifier=params.identifier,
            previous_result_id=params.previous_result_id,
        )

    @property
    def path(self) -> Path:
        """Local path of ``text_document``. Raises ValueError for non-``file`` URIs."""
        return uri_to_path(self.text_document)

    async def respond(self, diagnostics: Sequence[Diagnostic]) -> None:
        """Send ``diagnostics`` wrapped in a full document diagnostic report. Consumes the token."""
        await self._respond_result(_dump(RelatedFullDocumentDiagnosticReport(items=list(diagnostics))))
