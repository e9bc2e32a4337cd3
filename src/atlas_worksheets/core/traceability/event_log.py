"""
Event Log v1: rastreabilidade das operações estruturais do Atlas Worksheets.

Este módulo define o `EventLog`, o registro ordenado de eventos explícitos
emitidos pelos serviços de zona, pelo coordinator de batches e pelo
agregador de downloads.

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - A ordem do log reflete a ordem real de registro
    - O log é serializável e reconstruível (round-trip JSON)

Decisões arquiteturais:
    - UTC é o timezone canônico para todos os timestamps
    - O append é protegido por lock: sub-batches de zonas diferentes podem
      registrar eventos a partir de threads distintas
    - O log não depende de serviços, repositórios ou do object store

Limites explícitos:
    - Não decide políticas de operação
    - Não persiste automaticamente (ver `save_event_log`)
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """Normaliza um timestamp para timezone-aware em UTC (naive é assumido como UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


@dataclass
class EventLog:
    """
    Registro ordenado de eventos de operação.

    Campos:
        - source: identificador de quem produz o log (ex.: "worksheets")
        - events: lista ordenada de eventos (dicts serializáveis)

    Formato de um evento:
        {"event_type": str, "timestamp": ISO-8601 UTC,
         "project_id": opcional, "payload": opcional}
    """

    source: str = "atlas_worksheets"
    events: List[Dict[str, Any]] = field(default_factory=list)
    _lock: Any = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    def add(
        self,
        event_type: str,
        *,
        project_id: Any = None,
        payload: Optional[Dict[str, Any]] = None,
        ts: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Adiciona um evento explícito ao log e o retorna."""
        ev: Dict[str, Any] = {
            "event_type": event_type,
            "timestamp": _iso(ts or datetime.now(timezone.utc)),
        }
        if project_id is not None:
            ev["project_id"] = project_id
        if payload is not None:
            ev["payload"] = payload
        with self._lock:
            self.events.append(ev)
        return ev

    def events_of(self, event_type: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(e) for e in self.events if e.get("event_type") == event_type]

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {"source": self.source, "events": [dict(e) for e in self.events]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventLog":
        return cls(
            source=str(data.get("source", "atlas_worksheets")),
            events=[dict(e) for e in data.get("events", []) or []],
        )


def save_event_log(log: EventLog, path: Path) -> None:
    """Persiste o log em JSON determinístico (chaves ordenadas, UTF-8)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(log.to_dict(), ensure_ascii=False, sort_keys=True, indent=2),
        encoding="utf-8",
    )


def load_event_log(path: Path) -> EventLog:
    """Restaura um log persistido por `save_event_log`."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return EventLog.from_dict(data)


__all__ = ["EventLog", "save_event_log", "load_event_log"]
