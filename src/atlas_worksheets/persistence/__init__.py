"""
Adapters de referência do Atlas Worksheets.

    - memory_repository → `InMemoryWorksheetRepository`, `InMemoryProjectRepository`
    - object_store      → `LocalObjectStoreGateway` (diretório local, URLs file://)
    - archiver          → `ZipArchiver`

Não são backends de produção: existem para testes e execuções locais.
"""

from .archiver import ZipArchiver
from .memory_repository import InMemoryProjectRepository, InMemoryWorksheetRepository
from .object_store import LocalObjectStoreGateway

__all__ = [
    "InMemoryWorksheetRepository",
    "InMemoryProjectRepository",
    "LocalObjectStoreGateway",
    "ZipArchiver",
]
