"""
Atlas Worksheets: Canonical Exceptions (v1)

Este módulo define as exceções tipadas do Atlas Worksheets.

Objetivo:
- Permitir que serviços e álgebra de paths levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para WorksheetErrorPayload
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Toda validação ocorre antes de qualquer mutação persistente.
- Exceções devem carregar apenas dados estruturados (serializáveis).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class WorksheetException(Exception):
    """Base class para exceções internas do Atlas Worksheets.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InvalidPath(WorksheetException):
    """Path malformado ou não classificável em nenhuma zona conhecida."""


@dataclass(frozen=True)
class NameTooLong(InvalidPath):
    """Segmento de path excede o limite de tamanho configurado."""


# ---------------------------------------------------------------------------
# Nós (Worksheets)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AlreadyExists(WorksheetException):
    """Já existe um nó vivo ocupando o path de destino."""


@dataclass(frozen=True)
class NotFound(WorksheetException):
    """Operação sobre um nó inexistente."""


@dataclass(frozen=True)
class EditVersionConflict(WorksheetException):
    """Versão esperada difere da versão armazenada (concorrência otimista).

    Nunca é resolvido automaticamente: o chamador decide se recarrega e tenta de novo.
    """


@dataclass(frozen=True)
class Conflict(WorksheetException):
    """Rename colidiria com um nó existente em algum descendente."""


# ---------------------------------------------------------------------------
# Roteamento / Batch / Download
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UnsupportedLocation(WorksheetException):
    """Nenhum serviço registrado para a zona (location) do path."""


@dataclass(frozen=True)
class PartialBatchFailure(WorksheetException):
    """Batch concluído com falhas em parte dos paths.

    Não é levantada pelo coordinator: o resultado estruturado é o contrato.
    Existe para chamadores que optam pelo modo estrito (`raise_for_failures`).
    """


@dataclass(frozen=True)
class ArchiveError(WorksheetException):
    """Falha ao produzir o artefato compactado de download."""


@dataclass(frozen=True)
class DownloadTimeout(WorksheetException):
    """Materialização dos arquivos de download excedeu o timeout configurado."""


__all__ = [
    "WorksheetException",
    "InvalidPath",
    "NameTooLong",
    "AlreadyExists",
    "NotFound",
    "EditVersionConflict",
    "Conflict",
    "UnsupportedLocation",
    "PartialBatchFailure",
    "ArchiveError",
    "DownloadTimeout",
]
