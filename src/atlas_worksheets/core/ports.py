"""
Contratos dos colaboradores externos do Atlas Worksheets.

Este módulo define, via `typing.Protocol`, as interfaces mínimas que o core
consome e não implementa:

    - WorksheetRepository → metadados dos nós (leitura, escrita atômica multi-linha)
    - ProjectRepository   → metadados de projeto (nome usado em downloads)
    - ObjectStoreGateway  → upload, download e URLs de objetos
    - Archiver            → compactação de um diretório em um único arquivo

A conformidade é estrutural (duck typing, `@runtime_checkable`): nenhum
adapter precisa herdar destas classes.

Invariantes exigidas dos repositórios:
    - `batch_add`, `batch_update` e `batch_delete` são atômicos: ou toda a
      coleção é aplicada, ou nada é
    - `batch_update` com `expected_versions` é um compare-and-set: se a versão
      armazenada de qualquer nó diferir, levanta `EditVersionConflict` sem
      aplicar nenhuma linha
    - paths vivos são únicos por projeto: escritas que colidam levantam
      `AlreadyExists` (add) ou `Conflict` (update) sem aplicar nenhuma linha

Limites explícitos:
    - Não define transporte, credenciais ou formato de armazenamento
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Collection, Dict, List, Optional, Protocol, Set, runtime_checkable

from atlas_worksheets.core.path import WorksheetPath
from atlas_worksheets.core.worksheet import Worksheet


@runtime_checkable
class WorksheetRepository(Protocol):
    """Repositório de metadados de worksheets."""

    def find_by_path(self, project_id: Any, path: WorksheetPath) -> Optional[Worksheet]:
        """Nó vivo exatamente em `path` (tipo incluso), ou None."""
        ...

    def list_by_path_prefix(
        self,
        project_id: Any,
        path: WorksheetPath,
        include_descendants: bool,
    ) -> List[Worksheet]:
        """Filhos diretos de `path` ou, com `include_descendants`, toda a subárvore."""
        ...

    def list_by_name_like(
        self,
        project_id: Any,
        fragment: str,
        limit: int,
        within: Optional[WorksheetPath] = None,
    ) -> List[Worksheet]:
        """Nós cujo nome contém `fragment`, restritos à subárvore de `within` quando informado."""
        ...

    def batch_add(self, worksheets: Collection[Worksheet]) -> List[Worksheet]:
        """Persiste novos nós e os retorna com `id` atribuído."""
        ...

    def batch_update(
        self,
        worksheets: Collection[Worksheet],
        expected_versions: Optional[Dict[int, int]] = None,
    ) -> List[Worksheet]:
        ...

    def batch_delete(self, ids: Collection[int]) -> Set[int]:
        """Remove os ids informados e retorna os efetivamente removidos."""
        ...


@runtime_checkable
class ProjectRepository(Protocol):
    def get_project_name(self, project_id: Any) -> str:
        ...


@runtime_checkable
class ObjectStoreGateway(Protocol):
    """Gateway do object store."""

    def upload_file(self, local_file: Path, ttl_seconds: int) -> str:
        """Envia o arquivo e retorna a object key."""
        ...

    def generate_download_url(self, object_key: str) -> str:
        ...

    def download_to_file(self, object_key: str, local_file: Path) -> None:
        ...


@runtime_checkable
class Archiver(Protocol):
    def archive(self, source_dir: Path, archive_file: Path) -> Path:
        """Compacta `source_dir` (incluindo o próprio diretório como raiz) em `archive_file`."""
        ...


__all__ = [
    "WorksheetRepository",
    "ProjectRepository",
    "ObjectStoreGateway",
    "Archiver",
]
