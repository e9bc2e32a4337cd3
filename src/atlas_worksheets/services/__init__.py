"""
Serviços do Atlas Worksheets.

    - zone     → capacidades por zona (`WorksheetsZoneService`, `ReposZoneService`)
    - router   → despacho explícito `Location -> serviço`
    - batch    → divisão, despacho e agregação de batches multi-zona
    - download → staging, compactação e publicação de downloads multi-path
"""

from .zone import ReposZoneService, WorksheetsZoneService, WorksheetZoneService
from .router import LocationRouter
from .batch import BatchOperationCoordinator, DividedBatch
from .download import DownloadAggregator

__all__ = [
    "WorksheetZoneService",
    "WorksheetsZoneService",
    "ReposZoneService",
    "LocationRouter",
    "BatchOperationCoordinator",
    "DividedBatch",
    "DownloadAggregator",
]
