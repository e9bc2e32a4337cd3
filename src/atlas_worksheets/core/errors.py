"""
Atlas Worksheets: Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros reportados pelo Atlas Worksheets.
Erros fazem parte do contrato operacional (por exemplo, cada falha de um batch
é devolvida como payload estruturado), devendo ser:

- explícitos
- serializáveis
- acionáveis

Nenhuma stack trace é exposta ao chamador.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .exceptions import (
    AlreadyExists,
    ArchiveError,
    Conflict,
    DownloadTimeout,
    EditVersionConflict,
    InvalidPath,
    NameTooLong,
    NotFound,
    PartialBatchFailure,
    UnsupportedLocation,
    WorksheetException,
)


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WorksheetErrorPayload:
    """
    Payload canônico de erro do Atlas Worksheets.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao chamador
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

WORKSHEET_INVALID_PATH = "WORKSHEET_INVALID_PATH"
WORKSHEET_NAME_TOO_LONG = "WORKSHEET_NAME_TOO_LONG"
WORKSHEET_ALREADY_EXISTS = "WORKSHEET_ALREADY_EXISTS"
WORKSHEET_NOT_FOUND = "WORKSHEET_NOT_FOUND"
WORKSHEET_EDIT_VERSION_CONFLICT = "WORKSHEET_EDIT_VERSION_CONFLICT"
WORKSHEET_CONFLICT = "WORKSHEET_CONFLICT"
WORKSHEET_UNSUPPORTED_LOCATION = "WORKSHEET_UNSUPPORTED_LOCATION"
WORKSHEET_PARTIAL_BATCH_FAILURE = "WORKSHEET_PARTIAL_BATCH_FAILURE"
WORKSHEET_ARCHIVE_ERROR = "WORKSHEET_ARCHIVE_ERROR"
WORKSHEET_DOWNLOAD_TIMEOUT = "WORKSHEET_DOWNLOAD_TIMEOUT"
WORKSHEET_INTERNAL_ERROR = "WORKSHEET_INTERNAL_ERROR"

# Ordem importa: subclasses antes das bases.
_CODES = (
    (NameTooLong, WORKSHEET_NAME_TOO_LONG),
    (InvalidPath, WORKSHEET_INVALID_PATH),
    (AlreadyExists, WORKSHEET_ALREADY_EXISTS),
    (NotFound, WORKSHEET_NOT_FOUND),
    (EditVersionConflict, WORKSHEET_EDIT_VERSION_CONFLICT),
    (Conflict, WORKSHEET_CONFLICT),
    (UnsupportedLocation, WORKSHEET_UNSUPPORTED_LOCATION),
    (PartialBatchFailure, WORKSHEET_PARTIAL_BATCH_FAILURE),
    (ArchiveError, WORKSHEET_ARCHIVE_ERROR),
    (DownloadTimeout, WORKSHEET_DOWNLOAD_TIMEOUT),
)


def error_code_for(exc: BaseException) -> str:
    """Retorna o código estável associado à exceção (ou erro interno)."""
    for exc_type, code in _CODES:
        if isinstance(exc, exc_type):
            return code
    return WORKSHEET_INTERNAL_ERROR


def exception_to_error(exc: BaseException) -> WorksheetErrorPayload:
    """Converte exceções em WorksheetErrorPayload (serializável, acionável).

    Regras:
    - WorksheetException: já vem com message/details/hint.
    - Outras exceções: encapsular como WORKSHEET_INTERNAL_ERROR sem expor stack trace.
    """
    if isinstance(exc, WorksheetException):
        return WorksheetErrorPayload(
            type=error_code_for(exc),
            message=exc.message or "Erro de operação",
            details=dict(exc.details or {}),
            hint=exc.hint,
        )

    return WorksheetErrorPayload(
        type=WORKSHEET_INTERNAL_ERROR,
        message=str(exc) or "Erro inesperado durante a operação",
        details={"exception_class": exc.__class__.__name__},
        hint="Verifique os eventos registrados e o estado dos colaboradores externos.",
    )


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def not_found(*, path: str, project_id: Any = None) -> WorksheetErrorPayload:
    return WorksheetErrorPayload(
        type=WORKSHEET_NOT_FOUND,
        message="Worksheet não encontrado",
        details={"path": path, "project_id": project_id},
        hint="Atualize a listagem do projeto; o nó pode ter sido removido ou renomeado.",
    )


__all__ = [
    "WorksheetErrorPayload",
    "error_code_for",
    "exception_to_error",
    "not_found",
    "WORKSHEET_INVALID_PATH",
    "WORKSHEET_NAME_TOO_LONG",
    "WORKSHEET_ALREADY_EXISTS",
    "WORKSHEET_NOT_FOUND",
    "WORKSHEET_EDIT_VERSION_CONFLICT",
    "WORKSHEET_CONFLICT",
    "WORKSHEET_UNSUPPORTED_LOCATION",
    "WORKSHEET_PARTIAL_BATCH_FAILURE",
    "WORKSHEET_ARCHIVE_ERROR",
    "WORKSHEET_DOWNLOAD_TIMEOUT",
    "WORKSHEET_INTERNAL_ERROR",
]
