"""
Agregador de downloads multi-path.

Fluxo (`download`):
    - exatamente um arquivo → URL direta do object store (sem staging)
    - caso contrário:
        1. ancestral comum = `find_common_parent_path` dos paths pedidos
        2. nome da raiz do arquivo = nome do ancestral, ou nome do projeto se
           o ancestral for a raiz
        3. cada `DownloadTarget` é materializado em
           `<scratch>/<raiz>/<caminho relativo>`
        4. o diretório é compactado pelo `Archiver`, enviado ao object store
           com `download.archive_ttl_seconds` e a URL é retornada

Decisões arquiteturais:
    - Os downloads de objetos rodam em threads (`joblib.Parallel`), limitados
      por `download.workers` e por `download.timeout_seconds` por tarefa
    - O diretório de scratch é removido em toda saída, sucesso ou falha; após
      um timeout, a remoção espera as cópias já iniciadas e as pendentes são
      canceladas (`_ScratchArea`)
    - O nome da raiz do arquivo precisa ser um segmento válido (`check_segment`)

Limites explícitos:
    - Não implementa compactação (delegada ao `Archiver`)
    - Não emite credenciais (delegado ao `ObjectStoreGateway`)
"""

from __future__ import annotations

import multiprocessing
import shutil
import tempfile
import threading
from pathlib import Path
from typing import Any, Iterable, List, Optional

from joblib import Parallel, delayed

from atlas_worksheets.core.config import WorksheetSettings
from atlas_worksheets.core.exceptions import DownloadTimeout, InvalidPath
from atlas_worksheets.core.path import WorksheetPath, check_segment, find_common_parent_path
from atlas_worksheets.core.ports import Archiver, ObjectStoreGateway, ProjectRepository
from atlas_worksheets.core.traceability import EventLog
from atlas_worksheets.core.worksheet import DownloadTarget

from .batch import BatchOperationCoordinator, RawPath


class _ScratchArea:
    """
    Diretório de scratch de um download.

    É removido quando o dono o libera e nenhuma cópia está em andamento; cópias
    que ainda não começaram são canceladas na liberação.
    """

    def __init__(self, path: Path):
        self.path = path
        self.cancelled = threading.Event()
        self._lock = threading.Lock()
        self._in_flight = 0
        self._released = False

    def fetch(self, gateway: ObjectStoreGateway, object_key: str, local_file: Path) -> None:
        with self._lock:
            if self.cancelled.is_set():
                return
            self._in_flight += 1
        try:
            gateway.download_to_file(object_key, local_file)
        finally:
            with self._lock:
                self._in_flight -= 1
                drained = self._released and self._in_flight == 0
            if drained:
                self._remove()

    def release(self) -> None:
        self.cancelled.set()
        with self._lock:
            self._released = True
            drained = self._in_flight == 0
        if drained:
            self._remove()

    def _remove(self) -> None:
        shutil.rmtree(self.path, ignore_errors=True)


class DownloadAggregator:
    def __init__(
        self,
        *,
        coordinator: BatchOperationCoordinator,
        projects: ProjectRepository,
        gateway: ObjectStoreGateway,
        archiver: Archiver,
        settings: Optional[WorksheetSettings] = None,
        events: Optional[EventLog] = None,
    ):
        self.coordinator = coordinator
        self.projects = projects
        self.gateway = gateway
        self.archiver = archiver
        self.settings = settings or WorksheetSettings()
        self.events = events if events is not None else EventLog()

    def archive_root_name(self, project_id: Any, common_ancestor: WorksheetPath) -> str:
        if not common_ancestor.is_root():
            return common_ancestor.name
        name = self.projects.get_project_name(project_id)
        try:
            check_segment(name)
        except InvalidPath as e:
            raise InvalidPath(
                "Nome do projeto não pode ser usado como raiz do arquivo",
                {"project_id": project_id, "project_name": name},
                hint="Baixe a partir de uma zona ou renomeie o projeto.",
            ) from e
        return name

    def resolve_targets(
        self,
        project_id: Any,
        paths: List[WorksheetPath],
        common_ancestor: WorksheetPath,
    ) -> List[DownloadTarget]:
        divided = self.coordinator.divide(paths)
        targets: List[DownloadTarget] = []
        for location in divided.locations():
            service = self.coordinator.router.for_location(location)
            targets.extend(service.download_targets(project_id, divided.items(location), common_ancestor))
        return targets

    def download(self, project_id: Any, raw_paths: Iterable[RawPath]) -> str:
        """
        Retorna a URL de download dos paths pedidos.

        Raises:
            InvalidPath: Se nenhum path for informado ou algum for inválido.
            NotFound: Se algum path não existir.
            DownloadTimeout: Se algum objeto exceder `download.timeout_seconds`.
            ArchiveError: Se a compactação falhar.
        """
        divided = self.coordinator.divide(raw_paths)
        paths = [p for location in divided.locations() for p in divided.items(location)]
        if not paths:
            raise InvalidPath("Nenhum path informado para download", {})

        if len(paths) == 1 and paths[0].is_file():
            return self.coordinator.router.route(paths[0]).download_url(project_id, paths[0])

        common = find_common_parent_path(paths)
        root_name = self.archive_root_name(project_id, common)
        targets = self.resolve_targets(project_id, paths, common)

        scratch = _ScratchArea(Path(tempfile.mkdtemp(prefix="atlas-worksheets-", dir=self.settings.staging_dir)))
        try:
            stage_root = scratch.path / root_name
            stage_root.mkdir(parents=True)
            self._stage(scratch, stage_root, targets)

            archive_file = self.archiver.archive(stage_root, scratch.path / root_name)
            object_key = self.gateway.upload_file(archive_file, self.settings.archive_ttl_seconds)
            url = self.gateway.generate_download_url(object_key)
        finally:
            scratch.release()

        self.events.add(
            "worksheets_downloaded",
            project_id=project_id,
            payload={
                "paths": [str(p) for p in paths],
                "common_ancestor": str(common),
                "archive_root": root_name,
                "entries": len(targets),
                "object_key": object_key,
            },
        )
        return url

    def _stage(self, scratch: _ScratchArea, stage_root: Path, targets: List[DownloadTarget]) -> None:
        files = []
        for target in targets:
            local = stage_root / target.relative_path
            if target.is_directory():
                local.mkdir(parents=True, exist_ok=True)
            else:
                local.parent.mkdir(parents=True, exist_ok=True)
                files.append((target.object_key, local))
        if not files:
            return

        timeout = self.settings.download_timeout_seconds
        # joblib só aplica `timeout` com n_jobs > 1
        try:
            Parallel(
                n_jobs=max(2, min(len(files), self.settings.download_workers)),
                prefer="threads",
                timeout=timeout,
            )(delayed(scratch.fetch)(self.gateway, key, local) for key, local in files)
        except (TimeoutError, multiprocessing.TimeoutError) as e:
            scratch.cancelled.set()
            raise DownloadTimeout(
                "Download de objetos excedeu o tempo limite",
                {"timeout_seconds": timeout, "files": len(files)},
                hint="Reduza a seleção ou aumente download.timeout_seconds.",
            ) from e


__all__ = ["DownloadAggregator"]
