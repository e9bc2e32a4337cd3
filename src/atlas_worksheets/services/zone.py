"""
Serviços de zona: operações estruturais sobre uma zona do namespace.

Cada zona (`/Worksheets/` e `/Repos/`) é atendida por uma instância de
`WorksheetZoneService`, que implementa uma única vez o conjunto de capacidades:

    create, get_detail, list, search, rename, edit,
    batch_delete, batch_create, download_targets, download_url

As especializações (`WorksheetsZoneService`, `ReposZoneService`) fixam apenas
a zona atendida e a profundidade mínima gravável. A seleção entre elas é feita
por `LocationRouter`, sem inspeção de tipos em runtime.

Princípios fundamentais:
    - Toda validação ocorre antes de qualquer escrita no repositório
    - Subárvores (rename, delete) são persistidas em uma única chamada atômica
    - Edições usam concorrência otimista: a única detecção de conflito é o
      compare-and-set do repositório, nunca um lock mantido entre leitura e escrita
    - Diretórios intermediários são materializados de forma preguiçosa:
      criados implicitamente no `create` e sintetizados no `list`/`get_detail`

Invariantes:
    - Toda operação recusa paths de outra zona (`UnsupportedLocation`)
    - Nós definidos pelo sistema (raiz, raízes de zona, raízes de git repo)
      nunca são criados, renomeados, editados ou removidos
    - Um nome é ocupado tanto pelo arquivo quanto pelo diretório homônimo

Limites explícitos:
    - Não sincroniza conteúdo de git repos
    - Não remove objetos do object store (o conteúdo é referenciado por versão)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from atlas_worksheets.core.config import WorksheetSettings
from atlas_worksheets.core.errors import exception_to_error, not_found
from atlas_worksheets.core.exceptions import (
    AlreadyExists,
    Conflict,
    EditVersionConflict,
    InvalidPath,
    NameTooLong,
    NotFound,
    UnsupportedLocation,
    WorksheetException,
)
from atlas_worksheets.core.path import Location, WorksheetPath, path_sort_key
from atlas_worksheets.core.ports import ObjectStoreGateway, WorksheetRepository
from atlas_worksheets.core.traceability import EventLog
from atlas_worksheets.core.worksheet import (
    BatchOperationResult,
    DownloadTarget,
    Worksheet,
    WorksheetDraft,
)


class WorksheetZoneService(ABC):
    """
    Implementação única das capacidades de uma zona.

    Subclasses definem:
        - location: zona atendida
        - min_writable_level: nós com nível <= este valor são definidos pelo sistema
        - zone_root(): diretório raiz da zona
    """

    location: Location = Location.ROOT
    min_writable_level: int = 0

    def __init__(
        self,
        *,
        repository: WorksheetRepository,
        gateway: ObjectStoreGateway,
        settings: Optional[WorksheetSettings] = None,
        events: Optional[EventLog] = None,
    ):
        self.repository = repository
        self.gateway = gateway
        self.settings = settings or WorksheetSettings()
        self.events = events if events is not None else EventLog()

    # ------------------------------------------------------------------
    # Guardrails
    # ------------------------------------------------------------------
    def _ensure_zone(self, path: WorksheetPath) -> None:
        if path.location != self.location:
            raise UnsupportedLocation(
                "Path não pertence a esta zona",
                {"path": str(path), "location": path.location.value, "zone": self.location.value},
            )

    def _ensure_writable(self, path: WorksheetPath) -> None:
        if path.level <= self.min_writable_level or not path.can_rename():
            raise InvalidPath(
                "Nó definido pelo sistema não pode ser alterado",
                {"path": str(path), "type": path.type.value},
            )

    def _ensure_name_length(self, path: WorksheetPath) -> None:
        limit = self.settings.name_length_limit
        if path.is_name_too_long(limit):
            raise NameTooLong(
                "Nome excede o limite de tamanho",
                {"path": str(path), "name_length": len(path.name), "limit": limit},
            )

    @staticmethod
    def _twin(path: WorksheetPath) -> WorksheetPath:
        """Path homônimo do outro tipo (arquivo <-> diretório)."""
        if path.is_file():
            return WorksheetPath.of_directory(*path.segments)
        return WorksheetPath.of_file(*path.segments)

    def _exists(self, project_id: Any, path: WorksheetPath) -> bool:
        if path.is_system_defined():
            return True
        if self.repository.find_by_path(project_id, path) is not None:
            return True
        return path.is_directory() and bool(
            self.repository.list_by_path_prefix(project_id, path, include_descendants=True)
        )

    def _ensure_free(self, project_id: Any, path: WorksheetPath) -> None:
        for candidate in (path, self._twin(path)):
            if self._exists(project_id, candidate):
                raise AlreadyExists(
                    "Path já ocupado",
                    {"path": str(path), "occupied_by": str(candidate)},
                    hint="Escolha outro nome ou remova o nó existente.",
                )

    def _subtree(self, project_id: Any, path: WorksheetPath) -> List[Worksheet]:
        """Nó armazenado em `path` (se houver) seguido de todos os descendentes."""
        rows: List[Worksheet] = []
        stored = self.repository.find_by_path(project_id, path)
        if stored is not None:
            rows.append(stored)
        if path.is_directory():
            rows.extend(self.repository.list_by_path_prefix(project_id, path, include_descendants=True))
        return rows

    # ------------------------------------------------------------------
    # Criação
    # ------------------------------------------------------------------
    def create(
        self,
        project_id: Any,
        path: WorksheetPath,
        object_key: Optional[str] = None,
        *,
        size: Optional[int] = None,
        checksum: Optional[str] = None,
    ) -> Worksheet:
        """
        Cria um nó e os diretórios ancestrais ausentes, em uma única escrita.

        Raises:
            UnsupportedLocation: Se o path for de outra zona.
            InvalidPath: Para nós do sistema ou arquivo sem `object_key`.
            NameTooLong: Se o nome exceder o limite configurado.
            AlreadyExists: Se o nome já estiver ocupado.
        """
        self._ensure_zone(path)
        self._ensure_writable(path)
        self._ensure_name_length(path)
        if path.is_file() and not object_key:
            raise InvalidPath("Arquivo requer object_key", {"path": str(path)})
        self._ensure_free(project_id, path)

        if path.is_file():
            node = Worksheet.of_file(project_id, path, object_key, size=size, checksum=checksum)
        else:
            node = Worksheet.of_directory(project_id, path)

        ancestors = [
            Worksheet.of_directory(project_id, a)
            for a in path.all_non_root_ancestors()
            if self.repository.find_by_path(project_id, a) is None
        ]
        added = self.repository.batch_add(ancestors + [node])
        created = added[-1]

        self.events.add(
            "worksheet_created",
            project_id=project_id,
            payload={
                "path": str(path),
                "type": path.type.value,
                "implicit_ancestors": [str(a.path) for a in ancestors],
            },
        )
        return created

    def batch_create(self, project_id: Any, drafts: Iterable[WorksheetDraft]) -> BatchOperationResult:
        """Cria cada rascunho de forma independente; falhas são reportadas por path."""
        result = BatchOperationResult()
        for draft in drafts:
            try:
                created = self.create(
                    project_id,
                    draft.path,
                    draft.object_key,
                    size=draft.size,
                    checksum=draft.checksum,
                )
            except WorksheetException as e:
                result.add_failure(draft.path, exception_to_error(e))
            else:
                result.add_success(created)
        return result

    # ------------------------------------------------------------------
    # Leitura
    # ------------------------------------------------------------------
    def get_detail(self, project_id: Any, path: WorksheetPath) -> Worksheet:
        """
        Retorna o nó em `path`.

        Diretórios não armazenados, mas com descendentes, e nós do sistema
        são sintetizados.

        Raises:
            NotFound: Se nada existir em `path`.
        """
        self._ensure_zone(path)
        if path.is_system_defined():
            return Worksheet.of_directory(project_id, path)
        stored = self.repository.find_by_path(project_id, path)
        if stored is not None:
            return stored
        if path.is_directory() and self.repository.list_by_path_prefix(
            project_id, path, include_descendants=True
        ):
            return Worksheet.of_directory(project_id, path)
        raise NotFound("Worksheet não encontrado", {"path": str(path), "project_id": project_id})

    def list(self, project_id: Any, path: WorksheetPath) -> List[Worksheet]:
        """Filhos diretos de um diretório, na ordem do comparador hierárquico."""
        self._ensure_zone(path)
        if path.is_file():
            raise InvalidPath("Apenas diretórios podem ser listados", {"path": str(path)})
        self.get_detail(project_id, path)

        children: Dict[WorksheetPath, Worksheet] = {}
        for w in self.repository.list_by_path_prefix(project_id, path, include_descendants=True):
            if w.path.level == path.level + 1:
                children[w.path] = w
            else:
                child = w.path.path_at(path.level)
                children.setdefault(child, Worksheet.of_directory(project_id, child))
        return sorted(children.values(), key=lambda w: path_sort_key(w.path))

    def search(self, project_id: Any, name_like: str, limit: Optional[int] = None) -> List[Worksheet]:
        """Busca por substring no nome, restrita à zona; fragmento em branco retorna vazio."""
        if not name_like or not name_like.strip():
            return []
        limit = self.settings.search_limit if limit is None else limit
        if limit <= 0:
            return []
        rows = self.repository.list_by_name_like(project_id, name_like, limit, within=self.zone_root())
        return sorted(rows, key=lambda w: path_sort_key(w.path))[:limit]

    @abstractmethod
    def zone_root(self) -> WorksheetPath:
        """Diretório raiz da zona."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Rename
    # ------------------------------------------------------------------
    def rename(self, project_id: Any, source: WorksheetPath, target: WorksheetPath) -> List[Worksheet]:
        """
        Renomeia `source` (e toda a sua subárvore) para `target`.

        Validações, todas antes de qualquer escrita:
            - ambos renomeáveis, mesma zona, mesmo tipo e mesmo diretório pai
            - nome de destino dentro do limite
            - `target` livre e `source` existente

        Returns:
            List[Worksheet]: nós reescritos, na ordem do comparador.

        Raises:
            InvalidPath, NameTooLong, AlreadyExists, NotFound, Conflict
        """
        self._ensure_zone(source)
        if target.location != source.location:
            raise InvalidPath(
                "Rename entre zonas não é suportado",
                {"source": str(source), "target": str(target)},
            )
        self._ensure_writable(source)
        self._ensure_writable(target)
        if source.type != target.type:
            raise InvalidPath(
                "Rename não pode alterar o tipo do nó",
                {"source": str(source), "target": str(target)},
            )
        if source.parent_segments != target.parent_segments:
            raise InvalidPath(
                "Rename não pode mover o nó para outro diretório",
                {"source": str(source), "target": str(target)},
            )
        if source == target:
            raise InvalidPath("Origem e destino são o mesmo path", {"path": str(source)})
        self._ensure_name_length(target)
        self._ensure_free(project_id, target)

        affected = self._subtree(project_id, source)
        if not affected:
            raise NotFound("Worksheet não encontrado", {"path": str(source), "project_id": project_id})

        renamed = [w.renamed(source, target) for w in affected]
        affected_ids = {w.id for w in affected}
        for w in renamed:
            existing = self.repository.find_by_path(project_id, w.path)
            if existing is not None and existing.id not in affected_ids:
                raise Conflict(
                    "Rename colide com nó existente",
                    {"source": str(source), "target": str(target), "collision": str(w.path)},
                )

        persisted = self.repository.batch_update(renamed)
        self.events.add(
            "worksheets_renamed",
            project_id=project_id,
            payload={"source": str(source), "target": str(target), "count": len(persisted)},
        )
        return sorted(persisted, key=lambda w: path_sort_key(w.path))

    # ------------------------------------------------------------------
    # Edit (concorrência otimista)
    # ------------------------------------------------------------------
    def edit(
        self,
        project_id: Any,
        path: WorksheetPath,
        object_key: str,
        expected_version: int,
        *,
        destination: Optional[WorksheetPath] = None,
        size: Optional[int] = None,
        checksum: Optional[str] = None,
    ) -> Worksheet:
        """
        Grava uma nova versão do arquivo, opcionalmente movendo-o para `destination`.

        Raises:
            InvalidPath: Se o path não for arquivo ou o destino for inválido.
            NotFound: Se o arquivo (ou o diretório do destino) não existir.
            AlreadyExists: Se o destino estiver ocupado.
            EditVersionConflict: Se a versão armazenada diferir de `expected_version`.
        """
        self._ensure_zone(path)
        if not path.is_file():
            raise InvalidPath("Apenas arquivos podem ser editados", {"path": str(path)})
        if not object_key:
            raise InvalidPath("Edição requer object_key", {"path": str(path)})

        current = self.repository.find_by_path(project_id, path)
        if current is None:
            raise NotFound("Worksheet não encontrado", {"path": str(path), "project_id": project_id})

        if destination is not None and destination == path:
            destination = None
        if destination is not None:
            self._ensure_destination(project_id, path, destination)

        try:
            updated = current.edited(
                object_key=object_key,
                expected_version=expected_version,
                destination=destination,
                size=size,
                checksum=checksum,
            )
            self.repository.batch_update([updated], expected_versions={current.id: expected_version})
        except EditVersionConflict as e:
            self.events.add("edit_version_conflict", project_id=project_id, payload=dict(e.details))
            raise

        self.events.add(
            "worksheet_edited",
            project_id=project_id,
            payload={
                "path": str(path),
                "destination": str(updated.path),
                "version": updated.version,
            },
        )
        return updated

    def _ensure_destination(self, project_id: Any, path: WorksheetPath, destination: WorksheetPath) -> None:
        if destination.location != path.location:
            raise InvalidPath(
                "Destino de edição deve estar na mesma zona",
                {"path": str(path), "destination": str(destination)},
            )
        if not destination.is_file():
            raise InvalidPath("Destino de edição deve ser arquivo", {"destination": str(destination)})
        self._ensure_writable(destination)
        self._ensure_name_length(destination)
        self._ensure_free(project_id, destination)
        parent = destination.parent_path()
        if not self._exists(project_id, parent):
            raise NotFound(
                "Diretório de destino não encontrado",
                {"destination": str(destination), "parent": str(parent)},
            )

    # ------------------------------------------------------------------
    # Remoção
    # ------------------------------------------------------------------
    def batch_delete(self, project_id: Any, paths: Iterable[WorksheetPath]) -> BatchOperationResult:
        """
        Remove cada path (e, para diretórios, toda a subárvore) em uma única escrita.

        Paths ausentes são reportados como falhas `NotFound` e não causam
        nenhuma mutação; repetir o batch é seguro.
        """
        result = BatchOperationResult()
        rows: Dict[int, Worksheet] = {}
        requested: List[str] = []

        for path in paths:
            try:
                self._ensure_zone(path)
                self._ensure_writable(path)
            except WorksheetException as e:
                result.add_failure(path, exception_to_error(e))
                continue

            affected = self._subtree(project_id, path)
            if not affected:
                result.add_failure(path, not_found(path=str(path), project_id=project_id))
                continue
            requested.append(str(path))
            for w in affected:
                rows.setdefault(w.id, w)

        if not rows:
            return result

        removed = self.repository.batch_delete(list(rows))
        for row_id, w in rows.items():
            if row_id in removed:
                result.add_success(w)

        self.events.add(
            "worksheets_deleted",
            project_id=project_id,
            payload={"paths": requested, "removed": len(removed)},
        )
        return result

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------
    def download_targets(
        self,
        project_id: Any,
        paths: Iterable[WorksheetPath],
        common_ancestor: WorksheetPath,
    ) -> List[DownloadTarget]:
        """
        Resolve os paths em entradas relativas a `common_ancestor`.

        Diretórios expandem para toda a subárvore (arquivos e diretórios).

        Raises:
            NotFound: Se algum path não existir.
            InvalidPath: Se `common_ancestor` não for ancestral estrito de algum path.
        """
        targets: Dict[str, DownloadTarget] = {}

        def add(node_path: WorksheetPath, object_key: Optional[str]) -> None:
            relative = node_path.strip_prefix(common_ancestor)
            if relative is None:
                raise InvalidPath(
                    "Path fora do ancestral comum",
                    {"path": str(node_path), "common_ancestor": str(common_ancestor)},
                )
            targets.setdefault(relative, DownloadTarget(relative_path=relative, object_key=object_key))

        for path in paths:
            self._ensure_zone(path)
            node = self.get_detail(project_id, path)
            add(path, node.object_key)
            if path.is_directory():
                for w in self.repository.list_by_path_prefix(project_id, path, include_descendants=True):
                    add(w.path, w.object_key)
        return list(targets.values())

    def download_url(self, project_id: Any, path: WorksheetPath) -> str:
        self._ensure_zone(path)
        if not path.is_file():
            raise InvalidPath("URL direta disponível apenas para arquivos", {"path": str(path)})
        node = self.get_detail(project_id, path)
        return self.gateway.generate_download_url(node.object_key)


class WorksheetsZoneService(WorksheetZoneService):
    """Zona plana `/Worksheets/`: tudo abaixo da raiz da zona é gravável."""

    location = Location.WORKSHEETS
    min_writable_level = 1

    def zone_root(self) -> WorksheetPath:
        return WorksheetPath.worksheets()


class ReposZoneService(WorksheetZoneService):
    """Zona `/Repos/`: raízes de git repo são do sistema; grava-se dentro de cada repo."""

    location = Location.REPOS
    min_writable_level = 2

    def zone_root(self) -> WorksheetPath:
        return WorksheetPath.repos()


__all__ = ["WorksheetZoneService", "WorksheetsZoneService", "ReposZoneService"]
