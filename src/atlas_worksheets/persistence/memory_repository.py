"""Repositórios em memória (v1).

Implementação de referência de `WorksheetRepository` e `ProjectRepository`,
usada pelos testes e por execuções locais. Honra os invariantes de atomicidade
exigidos pelo core:

- toda escrita multi-linha valida o conjunto inteiro antes de aplicar qualquer linha
- `batch_update` com `expected_versions` é um compare-and-set
- paths vivos são únicos por projeto (arquivo e diretório com o mesmo nome colidem)

Limites explícitos:
- Sem durabilidade: o estado vive apenas no processo
"""

from __future__ import annotations

import threading
from typing import Any, Collection, Dict, List, Optional, Set, Tuple

from atlas_worksheets.core.exceptions import AlreadyExists, Conflict, EditVersionConflict, NotFound
from atlas_worksheets.core.path import WorksheetPath, path_sort_key
from atlas_worksheets.core.worksheet import Worksheet

_Key = Tuple[Any, Tuple[str, ...]]


def _key(worksheet: Worksheet) -> _Key:
    return (worksheet.project_id, worksheet.path.segments)


class InMemoryWorksheetRepository:
    """Repositório de worksheets thread-safe em memória."""

    def __init__(self) -> None:
        self._rows: Dict[int, Worksheet] = {}
        self._index: Dict[_Key, int] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Leitura
    # ------------------------------------------------------------------
    def find_by_path(self, project_id: Any, path: WorksheetPath) -> Optional[Worksheet]:
        with self._lock:
            row_id = self._index.get((project_id, path.segments))
            if row_id is None:
                return None
            row = self._rows[row_id]
            return row if row.path == path else None

    def list_by_path_prefix(
        self,
        project_id: Any,
        path: WorksheetPath,
        include_descendants: bool,
    ) -> List[Worksheet]:
        with self._lock:
            rows = [
                w
                for w in self._rows.values()
                if w.project_id == project_id
                and w.path.is_child_of_any(path)
                and (include_descendants or w.path.level == path.level + 1)
            ]
        return sorted(rows, key=lambda w: path_sort_key(w.path))

    def list_by_name_like(
        self,
        project_id: Any,
        fragment: str,
        limit: int,
        within: Optional[WorksheetPath] = None,
    ) -> List[Worksheet]:
        with self._lock:
            rows = [
                w
                for w in self._rows.values()
                if w.project_id == project_id
                and w.path.is_name_contains(fragment)
                and (within is None or w.path.is_child_of_any(within))
            ]
        return sorted(rows, key=lambda w: path_sort_key(w.path))[:limit]

    def list_all(self, project_id: Any) -> List[Worksheet]:
        with self._lock:
            rows = [w for w in self._rows.values() if w.project_id == project_id]
        return sorted(rows, key=lambda w: path_sort_key(w.path))

    # ------------------------------------------------------------------
    # Escrita (atômica)
    # ------------------------------------------------------------------
    def batch_add(self, worksheets: Collection[Worksheet]) -> List[Worksheet]:
        with self._lock:
            seen: Set[_Key] = set()
            for w in worksheets:
                key = _key(w)
                if key in self._index or key in seen:
                    raise AlreadyExists("Path já ocupado", {"path": str(w.path)})
                seen.add(key)

            added: List[Worksheet] = []
            for w in worksheets:
                stored = w.with_id(self._next_id)
                self._next_id += 1
                self._rows[stored.id] = stored
                self._index[_key(stored)] = stored.id
                added.append(stored)
            return added

    def batch_update(
        self,
        worksheets: Collection[Worksheet],
        expected_versions: Optional[Dict[int, int]] = None,
    ) -> List[Worksheet]:
        expected_versions = expected_versions or {}
        with self._lock:
            updating = {w.id: w for w in worksheets}
            for w in worksheets:
                current = self._rows.get(w.id) if w.id is not None else None
                if current is None:
                    raise NotFound("Worksheet não persistido", {"id": w.id, "path": str(w.path)})
                if w.id in expected_versions and current.version != expected_versions[w.id]:
                    raise EditVersionConflict(
                        "Worksheet foi alterado por outra edição",
                        {
                            "path": str(current.path),
                            "expected_version": expected_versions[w.id],
                            "stored_version": current.version,
                        },
                    )

            new_keys: Dict[_Key, int] = {}
            for w in worksheets:
                key = _key(w)
                owner = self._index.get(key)
                if key in new_keys or (owner is not None and owner not in updating):
                    raise Conflict("Path de destino já ocupado", {"path": str(w.path)})
                new_keys[key] = w.id

            for w in worksheets:
                del self._index[_key(self._rows[w.id])]
            for w in worksheets:
                self._rows[w.id] = w
                self._index[_key(w)] = w.id
            return list(worksheets)

    def batch_delete(self, ids: Collection[int]) -> Set[int]:
        with self._lock:
            removed: Set[int] = set()
            for row_id in ids:
                row = self._rows.pop(row_id, None)
                if row is None:
                    continue
                self._index.pop(_key(row), None)
                removed.add(row_id)
            return removed


class InMemoryProjectRepository:
    def __init__(self, names: Optional[Dict[Any, str]] = None) -> None:
        self._names: Dict[Any, str] = dict(names or {})

    def add_project(self, project_id: Any, name: str) -> None:
        self._names[project_id] = name

    def get_project_name(self, project_id: Any) -> str:
        if project_id not in self._names:
            raise NotFound("Projeto não encontrado", {"project_id": project_id})
        return self._names[project_id]


__all__ = ["InMemoryWorksheetRepository", "InMemoryProjectRepository"]
