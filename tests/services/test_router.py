# tests/services/test_router.py
"""Testes do LocationRouter (despacho explícito por zona)."""

import pytest

from atlas_worksheets.core.exceptions import UnsupportedLocation
from atlas_worksheets.core.path import Location, WorksheetPath
from atlas_worksheets.services import LocationRouter
from atlas_worksheets.services.zone import WorksheetZoneService


def test_route_selects_service_by_location(router, worksheets_service, repos_service):
    assert router.route(WorksheetPath.parse("/Worksheets/a.sql")) is worksheets_service
    assert router.route(WorksheetPath.parse("/Repos/demo/y")) is repos_service
    assert router.locations() == [Location.WORKSHEETS, Location.REPOS]


def test_root_has_no_handler(router):
    with pytest.raises(UnsupportedLocation):
        router.route(WorksheetPath.root())


def test_missing_handler_raises(worksheets_service):
    router = LocationRouter({Location.WORKSHEETS: worksheets_service})

    with pytest.raises(UnsupportedLocation) as exc:
        router.for_location(Location.REPOS)

    assert exc.value.details["registered"] == ["worksheets"]


def test_registration_must_match_service_zone(worksheets_service):
    with pytest.raises(UnsupportedLocation):
        LocationRouter({Location.REPOS: worksheets_service})

    with pytest.raises(UnsupportedLocation):
        LocationRouter({Location.ROOT: worksheets_service})


def test_zone_base_requires_zone_root(repository, gateway, worksheets_service, repos_service):
    with pytest.raises(TypeError):
        WorksheetZoneService(repository=repository, gateway=gateway)

    assert worksheets_service.zone_root() == WorksheetPath.worksheets()
    assert repos_service.zone_root() == WorksheetPath.repos()
