"""
Parser canônico de paths do Atlas Worksheets.

Este módulo converte strings de path em sequências de segmentos ("items")
e classifica essas sequências em `(PathType, Location)`.

Gramática (v1):
    - segmentos separados por `/`
    - todo path começa com `/`; `/` sozinho é a raiz
    - `/` final denota diretório; o marcador é preservado como último item
    - `/Worksheets/` ou `/Repos/<repo>/` selecionam a zona
    - segmentos vazios (fora o marcador final), `.` e `..` são rejeitados
    - cada segmento respeita um limite de tamanho

Exemplos de items:
    - "/"                    → ["/"]
    - "/Worksheets/"         → ["Worksheets", "/"]
    - "/Worksheets/a/b.sql"  → ["Worksheets", "a", "b.sql"]
    - "/Repos/demo/dir/"     → ["Repos", "demo", "dir", "/"]

Limites explícitos:
    - Não constrói `WorksheetPath` (responsabilidade de `model`)
    - Não normaliza entradas inválidas: rejeita
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from atlas_worksheets.core.exceptions import InvalidPath, NameTooLong

from .types import (
    DEFAULT_NAME_LENGTH_LIMIT,
    REPOS_SEGMENT,
    SEPARATOR,
    WORKSHEETS_SEGMENT,
    Location,
    PathType,
)

_FORBIDDEN_SEGMENTS = frozenset({"", ".", ".."})


def split_path(raw: str) -> List[str]:
    """
    Divide uma string de path em items, preservando o marcador de diretório.

    Args:
        raw (str): Path bruto (ex.: "/Worksheets/a/").

    Returns:
        List[str]: Items do path; o último é "/" quando o path é diretório.

    Raises:
        InvalidPath: Se a entrada for vazia, não começar com "/" ou contiver
            segmentos vazios/relativos.
    """
    if not isinstance(raw, str) or not raw:
        raise InvalidPath("Path vazio", {"path": raw})
    if not raw.startswith(SEPARATOR):
        raise InvalidPath("Path deve começar com '/'", {"path": raw})
    if raw == SEPARATOR:
        return [SEPARATOR]

    body = raw[1:]
    is_directory = body.endswith(SEPARATOR)
    if is_directory:
        body = body[:-1]

    segments = body.split(SEPARATOR)
    for segment in segments:
        if segment in _FORBIDDEN_SEGMENTS:
            raise InvalidPath(
                "Path contém segmento vazio ou relativo",
                {"path": raw, "segment": segment},
            )

    if is_directory:
        segments.append(SEPARATOR)
    return segments


def check_segment(name: str) -> None:
    """Levanta InvalidPath se `name` não puder ser um único segmento de path."""
    if not isinstance(name, str) or name in _FORBIDDEN_SEGMENTS or SEPARATOR in name or "\\" in name:
        raise InvalidPath("Nome não é um segmento válido", {"name": name})


def check_name_lengths(names: Sequence[str], limit: Optional[int]) -> None:
    """Levanta NameTooLong se algum segmento exceder `limit` (None desliga a checagem)."""
    if limit is None:
        return
    for name in names:
        if len(name) > limit:
            raise NameTooLong(
                "Nome excede o limite de tamanho",
                {"name": name, "length": len(name), "limit": limit},
                hint="Escolha um nome mais curto.",
            )


def classify_items(items: Sequence[str]) -> Tuple[PathType, Location]:
    """
    Classifica uma sequência de items em `(PathType, Location)`.

    Regras:
        - ["/"] → (ROOT, ROOT)
        - ["Worksheets", "/"] → (WORKSHEETS, WORKSHEETS)
        - ["Repos", "/"] → (REPOS, REPOS)
        - ["Repos", <repo>, "/"] → (GIT_REPO, REPOS)
        - demais com marcador final → DIRECTORY; sem marcador → FILE

    Formas sem zona reconhecida, zonas sem marcador final ("/Worksheets")
    e arquivos diretamente sob "/Repos/" são inválidos.

    Raises:
        InvalidPath: Se a classificação for ambígua ou impossível.
    """
    if not items:
        raise InvalidPath("Path sem segmentos", {"items": list(items)})
    if list(items) == [SEPARATOR]:
        return PathType.ROOT, Location.ROOT

    is_directory = items[-1] == SEPARATOR
    names = list(items[:-1]) if is_directory else list(items)
    if not names or any(SEPARATOR in n or n in _FORBIDDEN_SEGMENTS for n in names):
        raise InvalidPath("Segmentos inválidos", {"items": list(items)})

    head = names[0]
    if head == WORKSHEETS_SEGMENT:
        location = Location.WORKSHEETS
        zone_types = (PathType.WORKSHEETS,)
    elif head == REPOS_SEGMENT:
        location = Location.REPOS
        zone_types = (PathType.REPOS, PathType.GIT_REPO)
    else:
        raise InvalidPath(
            "Path fora de qualquer zona reconhecida",
            {"items": list(items)},
            hint="Use um prefixo /Worksheets/ ou /Repos/<repo>/.",
        )

    depth = len(names)
    if depth <= len(zone_types):
        # zona ou raiz de repositório: sempre diretório
        if not is_directory:
            raise InvalidPath(
                "Caminho reservado deve ser diretório",
                {"items": list(items)},
            )
        return zone_types[depth - 1], location

    return (PathType.DIRECTORY if is_directory else PathType.FILE), location


def join_items(names: Sequence[str], *, directory: bool) -> str:
    """Monta a string canônica a partir dos nomes (sem marcador)."""
    if not names:
        return SEPARATOR
    text = SEPARATOR + SEPARATOR.join(names)
    return text + SEPARATOR if directory else text


def parse_items(
    raw: str,
    *,
    name_length_limit: Optional[int] = DEFAULT_NAME_LENGTH_LIMIT,
) -> Tuple[List[str], PathType, Location]:
    """Divide, valida tamanhos e classifica um path bruto."""
    items = split_path(raw)
    names = [item for item in items if item != SEPARATOR]
    check_name_lengths(names, name_length_limit)
    path_type, location = classify_items(items)
    return items, path_type, location


__all__ = [
    "split_path",
    "check_name_lengths",
    "classify_items",
    "join_items",
    "parse_items",
]
