"""
Worksheet: agregado de domínio de um nó (arquivo ou diretório).

Este módulo define o `Worksheet`, a entidade que carrega identidade, path,
ponteiro para o object store e versão de edição de um nó do namespace.

Princípios fundamentais:
    - O agregado é imutável; toda mutação produz uma nova instância
      (`dataclasses.replace`), persistida explicitamente pelo serviço de zona
    - A versão cresce exatamente 1 a cada edição de conteúdo bem-sucedida
    - Diretórios nunca possuem `object_key`

Invariantes:
    - `version >= 0`
    - `path.is_directory()` implica `object_key is None`
    - Timestamps são timezone-aware em UTC

Limites explícitos:
    - Não persiste nada (responsabilidade do repositório)
    - Não acessa o object store
    - Não resolve ancestrais (materializados pelo serviço de zona)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from atlas_worksheets.core.exceptions import EditVersionConflict, InvalidPath
from atlas_worksheets.core.path import WorksheetPath


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Worksheet:
    """
    Nó do namespace de um projeto.

    Campos:
        - id: identidade atribuída pelo repositório (None antes de persistir)
        - project_id: projeto dono do nó
        - path: localização normalizada
        - object_key: ponteiro no object store (None para diretórios)
        - version: versão de edição (concorrência otimista)
        - size / checksum: metadados do conteúdo, quando conhecidos
        - created_at / updated_at: timestamps UTC
    """

    project_id: Any
    path: WorksheetPath
    object_key: Optional[str] = None
    version: int = 0
    id: Optional[int] = None
    size: Optional[int] = None
    checksum: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if self.path.is_directory() and self.object_key is not None:
            raise InvalidPath(
                "Diretório não pode referenciar objeto",
                {"path": str(self.path), "object_key": self.object_key},
            )
        if self.version < 0:
            raise ValueError(f"version deve ser >= 0, recebido: {self.version}")

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def of_directory(cls, project_id: Any, path: WorksheetPath) -> "Worksheet":
        return cls(project_id=project_id, path=path)

    @classmethod
    def of_file(
        cls,
        project_id: Any,
        path: WorksheetPath,
        object_key: str,
        *,
        size: Optional[int] = None,
        checksum: Optional[str] = None,
    ) -> "Worksheet":
        if not path.is_file():
            raise InvalidPath("Path de arquivo esperado", {"path": str(path)})
        return cls(
            project_id=project_id,
            path=path,
            object_key=object_key,
            size=size,
            checksum=checksum,
        )

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------
    def is_file(self) -> bool:
        return self.path.is_file()

    def is_directory(self) -> bool:
        return self.path.is_directory()

    # ------------------------------------------------------------------
    # Transições
    # ------------------------------------------------------------------
    def with_id(self, worksheet_id: int) -> "Worksheet":
        return replace(self, id=worksheet_id)

    def renamed(self, source: WorksheetPath, target: WorksheetPath) -> "Worksheet":
        """Aplica o rename ao path; versão e conteúdo são preservados."""
        return replace(self, path=self.path.rename(source, target), updated_at=utc_now())

    def edited(
        self,
        *,
        object_key: str,
        expected_version: int,
        destination: Optional[WorksheetPath] = None,
        size: Optional[int] = None,
        checksum: Optional[str] = None,
    ) -> "Worksheet":
        """
        Produz a próxima versão do arquivo.

        Raises:
            InvalidPath: Se o nó for diretório.
            EditVersionConflict: Se `expected_version` diferir da versão atual.
        """
        if not self.is_file():
            raise InvalidPath("Apenas arquivos podem ser editados", {"path": str(self.path)})
        if expected_version != self.version:
            raise EditVersionConflict(
                "Worksheet foi alterado por outra edição",
                {
                    "path": str(self.path),
                    "expected_version": expected_version,
                    "stored_version": self.version,
                },
                hint="Recarregue o conteúdo atual e reaplique a edição sobre a versão armazenada.",
            )
        return replace(
            self,
            path=destination or self.path,
            object_key=object_key,
            version=self.version + 1,
            size=size,
            checksum=checksum,
            updated_at=utc_now(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "path": str(self.path),
            "type": self.path.type.value,
            "location": self.path.location.value,
            "object_key": self.object_key,
            "version": self.version,
            "size": self.size,
            "checksum": self.checksum,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class WorksheetDraft:
    """Pedido de criação de um nó (item de um batch de upload)."""

    path: WorksheetPath
    object_key: Optional[str] = None
    size: Optional[int] = None
    checksum: Optional[str] = None


@dataclass(frozen=True)
class DownloadTarget:
    """Entrada a ser materializada sob a raiz do arquivo de download.

    `object_key is None` marca um diretório (materializado vazio).
    """

    relative_path: str
    object_key: Optional[str] = None

    def is_directory(self) -> bool:
        return self.object_key is None


__all__ = ["Worksheet", "WorksheetDraft", "DownloadTarget", "utc_now"]
