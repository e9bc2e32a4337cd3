"""
E2E: Atlas Worksheets (facade)

Valida o fluxo completo em nível de string, montado por `build_facade`
a partir de configuração carregada de arquivo:
- criação em ambas as zonas
- listagem da raiz e das zonas
- busca multi-zona limitada pela configuração
- rename de subárvore e edição com concorrência otimista
- download multi-path compactado
- remoção multi-zona com sucesso parcial
- Event Log persistido e restaurado
"""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from atlas_worksheets import build_facade
from atlas_worksheets.core.config import WorksheetSettings
from atlas_worksheets.core.exceptions import EditVersionConflict
from atlas_worksheets.core.traceability import EventLog, load_event_log, save_event_log
from atlas_worksheets.core.worksheet import BatchStatus
from atlas_worksheets.persistence import (
    InMemoryProjectRepository,
    InMemoryWorksheetRepository,
    LocalObjectStoreGateway,
)


def test_facade_end_to_end(tmp_path: Path) -> None:
    local_config = Path(__file__).parents[1] / "fixtures" / "worksheets" / "local.yaml"
    assert local_config.exists()

    settings = WorksheetSettings.load(local_path=str(local_config))
    assert settings.search_limit == 3

    events = EventLog(source="e2e")
    gateway = LocalObjectStoreGateway(root_dir=tmp_path / "objects")
    facade = build_facade(
        repository=InMemoryWorksheetRepository(),
        projects=InMemoryProjectRepository({"p1": "analytics"}),
        gateway=gateway,
        settings=settings,
        events=events,
    )

    # criação
    for raw, content in [
        ("/Worksheets/reports/q1.sql", "select 1"),
        ("/Worksheets/reports/q2.sql", "select 2"),
        ("/Worksheets/reports/drafts/q3.sql", "select 3"),
        ("/Repos/etl/jobs/q4.py", "print(4)"),
    ]:
        key = gateway.put_bytes("seed" + raw, content.encode("utf-8"))
        facade.create_worksheet("p1", raw, key)

    # listagem
    assert [str(w.path) for w in facade.list_worksheets("p1", "/")] == ["/Worksheets/", "/Repos/"]
    assert [str(w.path) for w in facade.list_worksheets("p1", "/Worksheets/reports/")] == [
        "/Worksheets/reports/drafts/",
        "/Worksheets/reports/q1.sql",
        "/Worksheets/reports/q2.sql",
    ]
    assert [str(w.path) for w in facade.list_worksheets("p1", "/Repos/")] == ["/Repos/etl/"]
    assert facade.get_worksheet_detail("p1", "/").path.is_root()

    # busca limitada por search.limit
    found = facade.search_worksheets("p1", "q")
    assert [str(w.path) for w in found] == [
        "/Worksheets/reports/drafts/q3.sql",
        "/Worksheets/reports/q1.sql",
        "/Worksheets/reports/q2.sql",
    ]

    # rename de subárvore
    facade.rename_worksheet("p1", "/Worksheets/reports/", "/Worksheets/archive/")
    assert facade.get_worksheet_detail("p1", "/Worksheets/archive/drafts/q3.sql").object_key

    # edição otimista
    edited = facade.edit_worksheet(
        "p1",
        "/Worksheets/archive/q1.sql",
        gateway.put_bytes("seed/q1-v2", b"select 11"),
        expected_version=0,
    )
    assert edited.version == 1
    with pytest.raises(EditVersionConflict):
        facade.edit_worksheet("p1", "/Worksheets/archive/q1.sql", "stale", expected_version=0)

    # download multi-path
    url = facade.batch_download_worksheets("p1", ["/Worksheets/archive/q1.sql", "/Repos/etl/jobs/q4.py"])
    assert url.startswith("file://")
    key = events.events_of("worksheets_downloaded")[0]["payload"]["object_key"]
    with zipfile.ZipFile(gateway.object_path(key)) as zf:
        assert zf.read("analytics/Worksheets/archive/q1.sql") == b"select 11"
        assert zf.read("analytics/Repos/etl/jobs/q4.py") == b"print(4)"

    # remoção multi-zona com sucesso parcial
    result = facade.batch_delete_worksheets("p1", ["/Worksheets/archive/", "/Repos/etl/missing.py"])
    assert result.status == BatchStatus.PARTIAL_FAILURE
    assert result.failed_paths() == ["/Repos/etl/missing.py"]
    assert [str(w.path) for w in facade.list_worksheets("p1", "/Worksheets/")] == []

    # Event Log
    log_path = tmp_path / "events.json"
    save_event_log(events, log_path)
    restored = load_event_log(log_path)
    types = [e["event_type"] for e in restored.events]
    assert types.count("worksheet_created") == 4
    assert "worksheets_renamed" in types
    assert "edit_version_conflict" in types
    assert types[-1] == "batch_completed"
