"""
Álgebra de paths do Atlas Worksheets.

Este pacote reúne o tipo de valor `WorksheetPath` e as funções puras sobre ele:

    - types    → `Location`, `PathType` e constantes da gramática
    - parsing  → divisão, validação e classificação de strings de path
    - model    → `WorksheetPath` (imutável) e `AncestorChain`
    - ordering → comparador hierárquico e ancestrais comuns

Nenhum módulo deste pacote acessa repositórios, object store ou estado global.
"""

from .types import (
    DEFAULT_NAME_LENGTH_LIMIT,
    Location,
    PathType,
    TYPE_ORDER,
)
from .parsing import check_segment, classify_items, split_path
from .model import AncestorChain, WorksheetPath
from .ordering import (
    compare_paths,
    find_common_parent_path,
    find_common_path,
    path_sort_key,
    sort_paths,
)

__all__ = [
    "DEFAULT_NAME_LENGTH_LIMIT",
    "Location",
    "PathType",
    "TYPE_ORDER",
    "check_segment",
    "split_path",
    "classify_items",
    "AncestorChain",
    "WorksheetPath",
    "compare_paths",
    "find_common_parent_path",
    "find_common_path",
    "path_sort_key",
    "sort_paths",
]
