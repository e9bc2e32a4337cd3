"""
Ordenação e ancestrais comuns de `WorksheetPath`.

Política de ordenação (v1):
    - ancestrais sempre antes de descendentes
    - irmãos sob o mesmo diretório: precedência fixa de tipo (`TYPE_ORDER`),
      depois ordem lexicográfica de nome

O resultado é a ordem de uma travessia em profundidade (pre-order) da árvore,
adequada para exibição em árvore de diretórios. A ordem é total: transitiva,
antissimétrica e com a raiz antes de qualquer outro path.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable, List, Sequence, Tuple

from .model import WorksheetPath
from .types import TYPE_ORDER


def _directory_chain(path: WorksheetPath) -> Tuple[str, ...]:
    """Nomes dos diretórios no caminho até `path`, incluindo o próprio se for diretório."""
    if path.is_file():
        return path.parent_segments
    return path.segments


def _common_prefix_length(chains: Sequence[Tuple[str, ...]]) -> int:
    if not chains:
        return 0
    shortest = min(len(chain) for chain in chains)
    for depth in range(shortest):
        head = chains[0][depth]
        if any(chain[depth] != head for chain in chains[1:]):
            return depth
    return shortest


def find_common_path(paths: Iterable[WorksheetPath]) -> WorksheetPath:
    """
    Diretório mais profundo que é ancestral de (ou igual a) todos os paths.

    Arquivos contribuem com o diretório que os contém; diretórios contribuem
    consigo mesmos. Conjunto vazio resulta na raiz.
    """
    chains = [_directory_chain(p) for p in paths]
    depth = _common_prefix_length(chains)
    return WorksheetPath.of_directory(*chains[0][:depth]) if depth else WorksheetPath.root()


def find_common_parent_path(paths: Iterable[WorksheetPath]) -> WorksheetPath:
    """
    Diretório mais profundo que é ancestral ESTRITO de todos os paths.

    Usado para definir a raiz de um download: todo path solicitado precisa
    ser relativo a ele (`strip_prefix`). Resulta na raiz se nada mais
    profundo for compartilhado.
    """
    chains = [p.parent_segments for p in paths]
    depth = _common_prefix_length(chains)
    return WorksheetPath.of_directory(*chains[0][:depth]) if depth else WorksheetPath.root()


def _compare_siblings(left: WorksheetPath, right: WorksheetPath) -> int:
    if left.level != right.level:
        raise ValueError(f"paths em níveis diferentes: {left} vs {right}")
    if left.type == right.type:
        return (left.name > right.name) - (left.name < right.name)
    return (TYPE_ORDER[left.type] > TYPE_ORDER[right.type]) - (
        TYPE_ORDER[left.type] < TYPE_ORDER[right.type]
    )


def compare_paths(left: WorksheetPath, right: WorksheetPath) -> int:
    """Comparador total (-1, 0, 1) respeitando a hierarquia."""
    if left == right:
        return 0
    depth = _common_prefix_length([_directory_chain(left), _directory_chain(right)])
    if depth == left.level:
        return -1
    if depth == right.level:
        return 1
    return _compare_siblings(left.path_at(depth), right.path_at(depth))


path_sort_key = cmp_to_key(compare_paths)


def sort_paths(paths: Iterable[WorksheetPath]) -> List[WorksheetPath]:
    return sorted(paths, key=path_sort_key)


__all__ = [
    "find_common_path",
    "find_common_parent_path",
    "compare_paths",
    "path_sort_key",
    "sort_paths",
]
