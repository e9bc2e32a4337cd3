"""
LocationRouter: tabela de despacho explícita de zona para serviço.

O roteador recebe, por injeção de dependência, o mapeamento
`Location -> WorksheetZoneService`. Não há registry global nem inspeção de
tipos: a zona de um path é um atributo derivado (`WorksheetPath.location`).

Invariantes:
    - A raiz (`Location.ROOT`) nunca possui serviço associado
    - Zona sem serviço registrado → `UnsupportedLocation`
"""

from __future__ import annotations

from typing import Dict, List, Mapping

from atlas_worksheets.core.exceptions import UnsupportedLocation
from atlas_worksheets.core.path import Location, WorksheetPath

from .zone import WorksheetZoneService


class LocationRouter:
    def __init__(self, services: Mapping[Location, WorksheetZoneService]):
        if Location.ROOT in services:
            raise UnsupportedLocation(
                "A raiz não pode ter serviço de zona",
                {"location": Location.ROOT.value},
            )
        for location, service in services.items():
            if service.location != location:
                raise UnsupportedLocation(
                    "Serviço registrado para zona diferente da sua",
                    {"location": location.value, "service_location": service.location.value},
                )
        self._services: Dict[Location, WorksheetZoneService] = dict(services)

    def for_location(self, location: Location) -> WorksheetZoneService:
        service = self._services.get(location)
        if service is None:
            raise UnsupportedLocation(
                "Nenhum serviço registrado para a zona",
                {"location": location.value, "registered": [loc.value for loc in self._services]},
            )
        return service

    def route(self, path: WorksheetPath) -> WorksheetZoneService:
        return self.for_location(path.location)

    def locations(self) -> List[Location]:
        """Zonas registradas, na ordem de `Location`."""
        return [loc for loc in Location if loc in self._services]


__all__ = ["LocationRouter"]
