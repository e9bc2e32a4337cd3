# tests/services/test_batch_coordinator.py
"""
Testes do BatchOperationCoordinator.

Os testes asseguram que:
- a divisão por zona falha rápido em entradas inválidas (nada é despachado)
- cada zona é processada de forma independente
- sucesso parcial é um resultado reportável, não um erro fatal
- uma exceção em uma zona vira falhas por path apenas daquela zona
"""

import pytest

from atlas_worksheets.core.config import WorksheetSettings
from atlas_worksheets.core.errors import WORKSHEET_INTERNAL_ERROR, WORKSHEET_NOT_FOUND
from atlas_worksheets.core.exceptions import InvalidPath
from atlas_worksheets.core.path import Location, WorksheetPath
from atlas_worksheets.core.worksheet import BatchStatus, WorksheetDraft
from atlas_worksheets.services import BatchOperationCoordinator, LocationRouter, ReposZoneService

P = WorksheetPath.parse


def test_divide_partitions_by_location_and_deduplicates(coordinator):
    divided = coordinator.divide(["/Worksheets/a.sql", "/Repos/demo/y", "/Worksheets/a.sql", P("/Worksheets/b/")])

    assert divided.locations() == [Location.WORKSHEETS, Location.REPOS]
    assert divided.items(Location.WORKSHEETS) == [P("/Worksheets/a.sql"), P("/Worksheets/b/")]
    assert divided.items(Location.REPOS) == [P("/Repos/demo/y")]
    assert len(divided) == 3


@pytest.mark.parametrize("bad", ["/", "relative", "/Nope/x", ""])
def test_divide_fails_fast_on_invalid_entry(coordinator, bad):
    with pytest.raises(InvalidPath):
        coordinator.divide(["/Worksheets/a.sql", bad])


def test_invalid_entry_prevents_any_mutation(coordinator, worksheets_service, repository, project_id):
    worksheets_service.create(project_id, P("/Worksheets/a.sql"), "k")

    with pytest.raises(InvalidPath):
        coordinator.batch_delete(project_id, ["/Worksheets/a.sql", "/Worksheets//x"])

    assert len(repository.list_all(project_id)) == 1


def test_mixed_zone_delete_reports_partial_success(coordinator, repos_service, repository, project_id, events):
    repos_service.create(project_id, P("/Repos/demo/y"), "k")

    result = coordinator.batch_delete(project_id, ["/Worksheets/x", "/Repos/demo/y"])

    assert result.status == BatchStatus.PARTIAL_FAILURE
    assert [str(w.path) for w in result.successes] == ["/Repos/demo/y"]
    assert result.failed_paths() == ["/Worksheets/x"]
    assert result.failures[0].error.type == WORKSHEET_NOT_FOUND
    assert repository.list_all(project_id) == []
    assert events.events_of("batch_completed")[0]["payload"]["status"] == "partial_failure"


class _BrokenReposService(ReposZoneService):
    def batch_delete(self, project_id, paths):
        raise RuntimeError("git backend unavailable")


def test_exception_in_one_zone_does_not_block_the_other(
    worksheets_service, repository, gateway, settings, events, project_id
):
    router = LocationRouter(
        {
            Location.WORKSHEETS: worksheets_service,
            Location.REPOS: _BrokenReposService(repository=repository, gateway=gateway, settings=settings),
        }
    )
    coordinator = BatchOperationCoordinator(router=router, settings=settings, events=events)
    worksheets_service.create(project_id, P("/Worksheets/a.sql"), "k")

    result = coordinator.batch_delete(project_id, ["/Worksheets/a.sql", "/Repos/demo/y", "/Repos/demo/z"])

    assert [str(w.path) for w in result.successes] == ["/Worksheets/a.sql"]
    assert result.failed_paths() == ["/Repos/demo/y", "/Repos/demo/z"]
    assert {f.error.type for f in result.failures} == {WORKSHEET_INTERNAL_ERROR}
    assert result.failures[0].error.details == {"exception_class": "RuntimeError"}


def test_sequential_mode_gives_same_result(router, events, project_id, repos_service, worksheets_service):
    coordinator = BatchOperationCoordinator(
        router=router, settings=WorksheetSettings(batch_parallel=False), events=events
    )
    worksheets_service.create(project_id, P("/Worksheets/a.sql"), "k")
    repos_service.create(project_id, P("/Repos/demo/y"), "k")

    result = coordinator.batch_delete(project_id, ["/Repos/demo/y", "/Worksheets/a.sql"])

    assert result.status == BatchStatus.SUCCESS
    assert len(result.removed_ids()) == 2


def test_empty_batch(coordinator, project_id):
    assert coordinator.batch_delete(project_id, []).status == BatchStatus.EMPTY


def test_batch_create_accepts_mappings_and_drafts(coordinator, repository, project_id):
    result = coordinator.batch_create(
        project_id,
        [
            {"path": "/Worksheets/q/a.sql", "object_key": "k1", "size": 3},
            WorksheetDraft(P("/Repos/demo/b.sql"), "k2"),
            {"path": "/Worksheets/q/", "object_key": None},
        ],
    )

    assert result.status == BatchStatus.PARTIAL_FAILURE
    assert sorted(str(w.path) for w in result.successes) == ["/Repos/demo/b.sql", "/Worksheets/q/a.sql"]
    assert result.failed_paths() == ["/Worksheets/q/"]
    assert len(repository.list_all(project_id)) == 3


def test_batch_create_requires_path(coordinator, project_id):
    with pytest.raises(InvalidPath):
        coordinator.batch_create(project_id, [{"object_key": "k"}])


def test_search_merges_zones(coordinator, worksheets_service, repos_service, project_id):
    worksheets_service.create(project_id, P("/Worksheets/orders.sql"), "k")
    repos_service.create(project_id, P("/Repos/demo/orders.py"), "k")
    worksheets_service.create(project_id, P("/Worksheets/misc.sql"), "k")

    found = coordinator.search(project_id, "orders")

    assert [str(w.path) for w in found] == ["/Worksheets/orders.sql", "/Repos/demo/orders.py"]
    assert len(coordinator.search(project_id, "orders", limit=1)) == 1
    assert coordinator.search(project_id, "") == []
