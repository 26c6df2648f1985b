"""LSP Diagnostic Types - Pull (textDocument/diagnostic) and push (publishDiagnostics) shapes."""

from enum import IntEnum
from typing import Annotated, Any, Literal

from pydantic import Field

from lspeasy.types.base import DocumentUri, LSPModel
from lspeasy.types.common import Range, TextDocumentIdentifier


class DiagnosticSeverity(IntEnum):
    Error = 1
    Warning = 2
    Information = 3
    Hint = 4


class DiagnosticTag(IntEnum):
    Unnecessary = 1
    Deprecated = 2


class Diagnostic(LSPModel):
    """A reported issue (range, severity, message) associated with a document."""

    range: Range
    message: str
    severity: DiagnosticSeverity | None = None
    code: int | str | None = None
    source: str | None = None
    tags: list[DiagnosticTag] | None = None
    data: Any | None = None


class DocumentDiagnosticParams(LSPModel):
    """Parameters of a textDocument/diagnostic request."""

    text_document: Annotated[TextDocumentIdentifier, Field(alias="textDocument")]
    identifier: str | None = None
    previous_result_id: Annotated[str | None, Field(alias="previousResultId")] = None


class FullDocumentDiagnosticReport(LSPModel):
    """A diagnostic report with a full set of problems."""

    kind: Literal["full"] = "full"
    result_id: Annotated[str | None, Field(alias="resultId")] = None
    items: list[Diagnostic]


class RelatedFullDocumentDiagnosticReport(FullDocumentDiagnosticReport):
    """A full diagnostic report with optional diagnostics for related documents."""

    related_documents: Annotated[dict[DocumentUri, Any] | None, Field(alias="relatedDocuments")] = None


class PublishDiagnosticsParams(LSPModel):
    """Parameters of a textDocument/publishDiagnostics notification."""

    uri: DocumentUri
    version: int | None = None
    diagnostics: list[Diagnostic]
