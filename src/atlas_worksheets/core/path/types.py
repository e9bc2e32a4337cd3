"""
Tipos canônicos da álgebra de paths do Atlas Worksheets.

Componentes:
    - Location → zona de topo à qual um path pertence (ROOT, WORKSHEETS, REPOS)
    - PathType → classificação estrutural de um path
    - TYPE_ORDER → precedência fixa usada na ordenação de irmãos

Os valores dos enums são strings para facilitar serialização em JSON,
eventos e payloads de erro.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict


SEPARATOR = "/"
ROOT_PATH_NAME = "/"
WORKSHEETS_SEGMENT = "Worksheets"
REPOS_SEGMENT = "Repos"

DEFAULT_NAME_LENGTH_LIMIT = 64


class Location(str, Enum):
    """
    Zona de topo de um path.

    - ROOT: a raiz virtual do projeto (não pertence a nenhuma zona)
    - WORKSHEETS: zona plana de worksheets (`/Worksheets/...`)
    - REPOS: zona de repositórios git (`/Repos/<repo>/...`)
    """
    ROOT = "root"
    WORKSHEETS = "worksheets"
    REPOS = "repos"


class PathType(str, Enum):
    """
    Classificação estrutural de um path.

    Os quatro primeiros tipos são "definidos pelo sistema" (nomes imutáveis):
        - ROOT: `/`
        - WORKSHEETS: `/Worksheets/`
        - REPOS: `/Repos/`
        - GIT_REPO: `/Repos/<repo>/`

    Os demais são nós gerenciados pelo usuário:
        - DIRECTORY: termina com separador
        - FILE: nunca termina com separador
    """
    ROOT = "root"
    WORKSHEETS = "worksheets"
    REPOS = "repos"
    GIT_REPO = "git_repo"
    DIRECTORY = "directory"
    FILE = "file"


# Diretórios antes de arquivos; zonas na ordem de exibição.
TYPE_ORDER: Dict[PathType, int] = {
    PathType.ROOT: 0,
    PathType.WORKSHEETS: 1,
    PathType.REPOS: 2,
    PathType.GIT_REPO: 3,
    PathType.DIRECTORY: 4,
    PathType.FILE: 5,
}

SYSTEM_DEFINED_TYPES = frozenset(
    {PathType.ROOT, PathType.WORKSHEETS, PathType.REPOS, PathType.GIT_REPO}
)


__all__ = [
    "SEPARATOR",
    "ROOT_PATH_NAME",
    "WORKSHEETS_SEGMENT",
    "REPOS_SEGMENT",
    "DEFAULT_NAME_LENGTH_LIMIT",
    "Location",
    "PathType",
    "TYPE_ORDER",
    "SYSTEM_DEFINED_TYPES",
]
