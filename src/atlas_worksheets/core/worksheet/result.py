"""
Resultado agregado de operações em batch.

Este módulo define as estruturas que padronizam o retorno de operações
multi-path (criação, remoção) do Atlas Worksheets:

    - BatchStatus          → enum do estado agregado (SUCCESS, PARTIAL_FAILURE, FAILED, EMPTY)
    - BatchFailure         → falha imutável de um path, com payload de erro serializável
    - BatchOperationResult → acumulador de sucessos e falhas

Princípios fundamentais:
    - Sucesso parcial é um resultado esperado e reportável, não um erro fatal
    - Falhas carregam payloads estruturados (`WorksheetErrorPayload`), nunca stack traces
    - O acumulador não é thread-safe: cada zona produz o seu, e o coordinator
      os mescla após o join

Limites explícitos:
    - Não executa operações
    - Não decide roteamento entre zonas
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Set

from atlas_worksheets.core.errors import WorksheetErrorPayload
from atlas_worksheets.core.exceptions import PartialBatchFailure

from .model import Worksheet


class BatchStatus(str, Enum):
    """
    Estado agregado de um batch.

    - SUCCESS: todos os paths processados com sucesso
    - PARTIAL_FAILURE: ao menos um sucesso e ao menos uma falha
    - FAILED: nenhum sucesso, ao menos uma falha
    - EMPTY: nada foi processado
    """
    SUCCESS = "success"
    PARTIAL_FAILURE = "partial_failure"
    FAILED = "failed"
    EMPTY = "empty"


@dataclass(frozen=True)
class BatchFailure:
    path: str
    error: WorksheetErrorPayload

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "error": self.error.to_dict()}


@dataclass
class BatchOperationResult:
    """Acumulador de sucessos (worksheets afetados) e falhas por path."""

    successes: List[Worksheet] = field(default_factory=list)
    failures: List[BatchFailure] = field(default_factory=list)

    @classmethod
    def failed_for(cls, paths: Iterable[Any], error: WorksheetErrorPayload) -> "BatchOperationResult":
        """Resultado em que todos os `paths` falharam com o mesmo erro."""
        return cls(failures=[BatchFailure(path=str(p), error=error) for p in paths])

    def add_success(self, worksheet: Worksheet) -> None:
        self.successes.append(worksheet)

    def add_failure(self, path: Any, error: WorksheetErrorPayload) -> None:
        self.failures.append(BatchFailure(path=str(path), error=error))

    def merge(self, other: "BatchOperationResult") -> "BatchOperationResult":
        self.successes.extend(other.successes)
        self.failures.extend(other.failures)
        return self

    @property
    def status(self) -> BatchStatus:
        if self.failures and self.successes:
            return BatchStatus.PARTIAL_FAILURE
        if self.failures:
            return BatchStatus.FAILED
        if self.successes:
            return BatchStatus.SUCCESS
        return BatchStatus.EMPTY

    @property
    def all_successful(self) -> bool:
        return not self.failures

    def removed_ids(self) -> Set[int]:
        return {w.id for w in self.successes if w.id is not None}

    def failed_paths(self) -> List[str]:
        return [f.path for f in self.failures]

    def raise_for_failures(self) -> None:
        """Modo estrito: levanta PartialBatchFailure se houver qualquer falha."""
        if not self.failures:
            return
        raise PartialBatchFailure(
            "Batch concluído com falhas",
            {
                "status": self.status.value,
                "succeeded": len(self.successes),
                "failures": [f.to_dict() for f in self.failures],
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "successes": [w.to_dict() for w in self.successes],
            "failures": [f.to_dict() for f in self.failures],
        }


__all__ = ["BatchStatus", "BatchFailure", "BatchOperationResult"]
