"""
Facade do Atlas Worksheets: ponto único de entrada em nível de string.

Recebe paths brutos, resolve-os na álgebra de paths e delega:

    - operações de um único path → serviço da zona (via `LocationRouter`)
    - operações multi-path       → `BatchOperationCoordinator`
    - downloads                  → `DownloadAggregator`

A raiz (`/`) é tratada aqui: não pertence a nenhuma zona, e sua listagem é
composta pelas raízes das zonas registradas.

`build_facade` monta o grafo completo de colaboradores a partir de
`WorksheetSettings`, com injeção de dependência explícita.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from atlas_worksheets.core.config import WorksheetSettings
from atlas_worksheets.core.path import Location, WorksheetPath
from atlas_worksheets.core.ports import Archiver, ObjectStoreGateway, ProjectRepository, WorksheetRepository
from atlas_worksheets.core.traceability import EventLog
from atlas_worksheets.core.worksheet import BatchOperationResult, Worksheet
from atlas_worksheets.persistence import ZipArchiver
from atlas_worksheets.services import (
    BatchOperationCoordinator,
    DownloadAggregator,
    LocationRouter,
    ReposZoneService,
    WorksheetsZoneService,
)
from atlas_worksheets.services.batch import RawDraft, RawPath


class WorksheetFacade:
    def __init__(
        self,
        *,
        router: LocationRouter,
        coordinator: BatchOperationCoordinator,
        downloads: DownloadAggregator,
        settings: Optional[WorksheetSettings] = None,
        events: Optional[EventLog] = None,
    ):
        self.router = router
        self.coordinator = coordinator
        self.downloads = downloads
        self.settings = settings or WorksheetSettings()
        self.events = events if events is not None else EventLog()

    def _parse(self, raw: RawPath) -> WorksheetPath:
        if isinstance(raw, WorksheetPath):
            return raw
        return WorksheetPath.parse(raw, name_length_limit=self.settings.name_length_limit)

    # ------------------------------------------------------------------
    # Nó único
    # ------------------------------------------------------------------
    def create_worksheet(
        self,
        project_id: Any,
        path: RawPath,
        object_key: Optional[str] = None,
        *,
        size: Optional[int] = None,
        checksum: Optional[str] = None,
    ) -> Worksheet:
        target = self._parse(path)
        return self.router.route(target).create(project_id, target, object_key, size=size, checksum=checksum)

    def get_worksheet_detail(self, project_id: Any, path: RawPath) -> Worksheet:
        target = self._parse(path)
        if target.is_root():
            return Worksheet.of_directory(project_id, target)
        return self.router.route(target).get_detail(project_id, target)

    def list_worksheets(self, project_id: Any, path: RawPath = "/") -> List[Worksheet]:
        target = self._parse(path)
        if target.is_root():
            return [
                Worksheet.of_directory(project_id, self.router.for_location(loc).zone_root())
                for loc in self.router.locations()
            ]
        return self.router.route(target).list(project_id, target)

    def search_worksheets(self, project_id: Any, name_like: str, limit: Optional[int] = None) -> List[Worksheet]:
        return self.coordinator.search(project_id, name_like, limit)

    def rename_worksheet(self, project_id: Any, source: RawPath, target: RawPath) -> List[Worksheet]:
        src = self._parse(source)
        dst = self._parse(target)
        return self.router.route(src).rename(project_id, src, dst)

    def edit_worksheet(
        self,
        project_id: Any,
        path: RawPath,
        object_key: str,
        expected_version: int,
        *,
        destination: Optional[RawPath] = None,
        size: Optional[int] = None,
        checksum: Optional[str] = None,
    ) -> Worksheet:
        target = self._parse(path)
        moved_to = self._parse(destination) if destination is not None else None
        return self.router.route(target).edit(
            project_id,
            target,
            object_key,
            expected_version,
            destination=moved_to,
            size=size,
            checksum=checksum,
        )

    # ------------------------------------------------------------------
    # Multi-path
    # ------------------------------------------------------------------
    def batch_create_worksheets(self, project_id: Any, items: Iterable[RawDraft]) -> BatchOperationResult:
        return self.coordinator.batch_create(project_id, items)

    def batch_delete_worksheets(self, project_id: Any, paths: Iterable[RawPath]) -> BatchOperationResult:
        return self.coordinator.batch_delete(project_id, paths)

    def batch_download_worksheets(self, project_id: Any, paths: Iterable[RawPath]) -> str:
        return self.downloads.download(project_id, paths)


def build_facade(
    *,
    repository: WorksheetRepository,
    projects: ProjectRepository,
    gateway: ObjectStoreGateway,
    archiver: Optional[Archiver] = None,
    settings: Optional[WorksheetSettings] = None,
    events: Optional[EventLog] = None,
) -> WorksheetFacade:
    """Monta router, coordinator e agregador de downloads compartilhando settings e Event Log."""
    settings = settings or WorksheetSettings()
    events = events if events is not None else EventLog()

    zone_kwargs = dict(repository=repository, gateway=gateway, settings=settings, events=events)
    router = LocationRouter(
        {
            Location.WORKSHEETS: WorksheetsZoneService(**zone_kwargs),
            Location.REPOS: ReposZoneService(**zone_kwargs),
        }
    )
    coordinator = BatchOperationCoordinator(router=router, settings=settings, events=events)
    downloads = DownloadAggregator(
        coordinator=coordinator,
        projects=projects,
        gateway=gateway,
        archiver=archiver or ZipArchiver(settings.archive_format),
        settings=settings,
        events=events,
    )
    return WorksheetFacade(
        router=router,
        coordinator=coordinator,
        downloads=downloads,
        settings=settings,
        events=events,
    )


__all__ = ["WorksheetFacade", "build_facade"]
