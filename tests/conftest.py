# tests/conftest.py
"""
Fixtures compartilhados para testes do Atlas Worksheets.

Este módulo define fixtures reutilizáveis que fornecem:
- settings determinísticos
- Event Log isolado por teste
- adapters de referência (repositório em memória, object store em diretório, zip)
- serviços de zona, roteador, coordinator e facade já montados

Decisões arquiteturais:
    - Toda I/O de arquivos acontece sob `tmp_path`
    - Nenhuma fixture acessa rede
    - Serviços são montados por injeção explícita, como em produção

Invariantes:
    - Cada teste recebe instâncias novas (sem estado compartilhado)
    - O projeto padrão é `PROJECT_ID`, de nome `PROJECT_NAME`
"""

from pathlib import Path

import pytest

from atlas_worksheets.core.config import WorksheetSettings
from atlas_worksheets.core.path import Location
from atlas_worksheets.core.traceability import EventLog
from atlas_worksheets.facade import build_facade
from atlas_worksheets.persistence import (
    InMemoryProjectRepository,
    InMemoryWorksheetRepository,
    LocalObjectStoreGateway,
    ZipArchiver,
)
from atlas_worksheets.services import (
    BatchOperationCoordinator,
    LocationRouter,
    ReposZoneService,
    WorksheetsZoneService,
)

PROJECT_ID = 7
PROJECT_NAME = "demo-project"


@pytest.fixture
def project_id() -> int:
    return PROJECT_ID


@pytest.fixture
def project_name() -> str:
    return PROJECT_NAME


@pytest.fixture
def settings(tmp_path: Path) -> WorksheetSettings:
    staging = tmp_path / "staging"
    staging.mkdir()
    return WorksheetSettings(staging_dir=str(staging), download_timeout_seconds=30)


@pytest.fixture
def events() -> EventLog:
    return EventLog(source="tests")


@pytest.fixture
def repository() -> InMemoryWorksheetRepository:
    return InMemoryWorksheetRepository()


@pytest.fixture
def projects() -> InMemoryProjectRepository:
    return InMemoryProjectRepository({PROJECT_ID: PROJECT_NAME})


@pytest.fixture
def gateway(tmp_path: Path) -> LocalObjectStoreGateway:
    return LocalObjectStoreGateway(root_dir=tmp_path / "objects")


@pytest.fixture
def archiver() -> ZipArchiver:
    return ZipArchiver()


@pytest.fixture
def worksheets_service(repository, gateway, settings, events) -> WorksheetsZoneService:
    return WorksheetsZoneService(repository=repository, gateway=gateway, settings=settings, events=events)


@pytest.fixture
def repos_service(repository, gateway, settings, events) -> ReposZoneService:
    return ReposZoneService(repository=repository, gateway=gateway, settings=settings, events=events)


@pytest.fixture
def router(worksheets_service, repos_service) -> LocationRouter:
    return LocationRouter({Location.WORKSHEETS: worksheets_service, Location.REPOS: repos_service})


@pytest.fixture
def coordinator(router, settings, events) -> BatchOperationCoordinator:
    return BatchOperationCoordinator(router=router, settings=settings, events=events)


@pytest.fixture
def facade(repository, projects, gateway, archiver, settings, events):
    return build_facade(
        repository=repository,
        projects=projects,
        gateway=gateway,
        archiver=archiver,
        settings=settings,
        events=events,
    )


@pytest.fixture
def put_object(gateway):
    """Grava conteúdo no object store e retorna a object key."""

    def _put(object_key: str, content: str) -> str:
        return gateway.put_bytes(object_key, content.encode("utf-8"))

    return _put
