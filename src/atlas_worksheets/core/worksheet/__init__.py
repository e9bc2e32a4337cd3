"""
Agregado Worksheet e resultado de batches.

    - model  → `Worksheet` (nó imutável, versão de edição) e `DownloadTarget`
    - result → `BatchOperationResult`, `BatchFailure`, `BatchStatus`
"""

from .model import DownloadTarget, Worksheet, WorksheetDraft, utc_now
from .result import BatchFailure, BatchOperationResult, BatchStatus

__all__ = [
    "Worksheet",
    "WorksheetDraft",
    "DownloadTarget",
    "utc_now",
    "BatchFailure",
    "BatchOperationResult",
    "BatchStatus",
]
