"""
Coordinator de batches multi-zona.

Faz um pedido com paths de zonas diferentes parecer uma única chamada:

    1. `divide`: interpreta e particiona a entrada por `Location`
       (falha rápida com `InvalidPath` antes de qualquer despacho)
    2. `dispatch_and_aggregate`: executa a operação por sub-batch não vazio
       e mescla os resultados

Decisões arquiteturais:
    - Sub-batches rodam em threads (`joblib.Parallel(prefer="threads")`),
      limitadas por `batch.max_workers`; `batch.parallel: false` força execução
      sequencial
    - Cada zona produz seu próprio `BatchOperationResult`; a mesclagem ocorre
      uma única vez, na thread do coordinator, após o join
    - Uma exceção em uma zona vira falha por path daquela zona; as demais
      zonas seguem normalmente (sucesso parcial é resultado esperado)

Limites explícitos:
    - Fronteiras entre zonas não são transacionais
    - A atomicidade de subárvores é responsabilidade do serviço de zona
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from joblib import Parallel, delayed

from atlas_worksheets.core.config import WorksheetSettings
from atlas_worksheets.core.errors import exception_to_error
from atlas_worksheets.core.exceptions import InvalidPath
from atlas_worksheets.core.path import Location, WorksheetPath, path_sort_key
from atlas_worksheets.core.traceability import EventLog
from atlas_worksheets.core.worksheet import BatchOperationResult, Worksheet, WorksheetDraft

from .router import LocationRouter
from .zone import WorksheetZoneService

RawPath = Union[str, WorksheetPath]
RawDraft = Union[WorksheetDraft, Mapping[str, Any]]
ZoneOperation = Callable[[WorksheetZoneService, List[Any]], BatchOperationResult]


def _path_of(item: Any) -> WorksheetPath:
    return item.path if isinstance(item, WorksheetDraft) else item


@dataclass
class DividedBatch:
    """Sub-batches por zona, na ordem de entrada e sem duplicatas."""

    by_location: Dict[Location, List[Any]] = field(default_factory=dict)

    def add(self, item: Any) -> None:
        self.by_location.setdefault(_path_of(item).location, []).append(item)

    def items(self, location: Location) -> List[Any]:
        return list(self.by_location.get(location, []))

    def locations(self) -> List[Location]:
        return [loc for loc in Location if self.by_location.get(loc)]

    def is_empty(self) -> bool:
        return not self.locations()

    def __len__(self) -> int:
        return sum(len(items) for items in self.by_location.values())


class BatchOperationCoordinator:
    def __init__(
        self,
        *,
        router: LocationRouter,
        settings: Optional[WorksheetSettings] = None,
        events: Optional[EventLog] = None,
    ):
        self.router = router
        self.settings = settings or WorksheetSettings()
        self.events = events if events is not None else EventLog()

    # ------------------------------------------------------------------
    # Divide
    # ------------------------------------------------------------------
    def _parse(self, raw: RawPath) -> WorksheetPath:
        if isinstance(raw, WorksheetPath):
            path = raw
        else:
            path = WorksheetPath.parse(raw, name_length_limit=self.settings.name_length_limit)
        if path.is_root():
            raise InvalidPath("A raiz não pode participar de um batch", {"path": str(path)})
        return path

    def divide(self, raw_paths: Iterable[RawPath]) -> DividedBatch:
        """
        Particiona paths brutos por zona.

        Raises:
            InvalidPath: Na primeira entrada inválida (nada é despachado).
        """
        divided = DividedBatch()
        seen = set()
        for raw in raw_paths:
            path = self._parse(raw)
            if path in seen:
                continue
            seen.add(path)
            divided.add(path)
        return divided

    def divide_drafts(self, raw_drafts: Iterable[RawDraft]) -> DividedBatch:
        """Particiona pedidos de criação (`WorksheetDraft` ou mapeamentos com "path")."""
        divided = DividedBatch()
        seen = set()
        for raw in raw_drafts:
            if isinstance(raw, WorksheetDraft):
                draft = WorksheetDraft(
                    path=self._parse(raw.path),
                    object_key=raw.object_key,
                    size=raw.size,
                    checksum=raw.checksum,
                )
            else:
                if "path" not in raw:
                    raise InvalidPath("Item de batch sem 'path'", {"item": dict(raw)})
                draft = WorksheetDraft(
                    path=self._parse(raw["path"]),
                    object_key=raw.get("object_key"),
                    size=raw.get("size"),
                    checksum=raw.get("checksum"),
                )
            if draft.path in seen:
                continue
            seen.add(draft.path)
            divided.add(draft)
        return divided

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def _run_zone(self, location: Location, items: List[Any], operation: ZoneOperation) -> BatchOperationResult:
        try:
            service = self.router.for_location(location)
            return operation(service, items)
        except Exception as e:
            return BatchOperationResult.failed_for([_path_of(i) for i in items], exception_to_error(e))

    def _n_jobs(self, zones: int) -> int:
        if not self.settings.batch_parallel:
            return 1
        return max(1, min(zones, self.settings.batch_max_workers))

    def dispatch_and_aggregate(self, divided: DividedBatch, operation: ZoneOperation) -> BatchOperationResult:
        """Executa `operation` em cada sub-batch não vazio e mescla os resultados."""
        jobs = [(location, divided.items(location)) for location in divided.locations()]
        result = BatchOperationResult()
        if not jobs:
            return result

        outcomes = Parallel(n_jobs=self._n_jobs(len(jobs)), prefer="threads")(
            delayed(self._run_zone)(location, items, operation) for location, items in jobs
        )
        for outcome in outcomes:
            result.merge(outcome)
        return result

    # ------------------------------------------------------------------
    # Operações
    # ------------------------------------------------------------------
    def batch_delete(self, project_id: Any, raw_paths: Iterable[RawPath]) -> BatchOperationResult:
        divided = self.divide(raw_paths)
        result = self.dispatch_and_aggregate(
            divided,
            lambda service, paths: service.batch_delete(project_id, paths),
        )
        self._record("batch_delete", project_id, divided, result)
        return result

    def batch_create(self, project_id: Any, raw_drafts: Iterable[RawDraft]) -> BatchOperationResult:
        divided = self.divide_drafts(raw_drafts)
        result = self.dispatch_and_aggregate(
            divided,
            lambda service, drafts: service.batch_create(project_id, drafts),
        )
        self._record("batch_create", project_id, divided, result)
        return result

    def search(self, project_id: Any, name_like: str, limit: Optional[int] = None) -> List[Worksheet]:
        """Busca em todas as zonas registradas; resultado mesclado, ordenado e limitado."""
        limit = self.settings.search_limit if limit is None else limit
        found: List[Worksheet] = []
        for location in self.router.locations():
            found.extend(self.router.for_location(location).search(project_id, name_like, limit))
        return sorted(found, key=lambda w: path_sort_key(w.path))[:limit]

    def _record(self, operation: str, project_id: Any, divided: DividedBatch, result: BatchOperationResult) -> None:
        self.events.add(
            "batch_completed",
            project_id=project_id,
            payload={
                "operation": operation,
                "zones": [loc.value for loc in divided.locations()],
                "requested": len(divided),
                "status": result.status.value,
                "succeeded": len(result.successes),
                "failed": len(result.failures),
            },
        )


__all__ = ["DividedBatch", "BatchOperationCoordinator"]
