"""
WorksheetPath: valor canônico de localização no namespace de worksheets.

Este módulo define o `WorksheetPath`, o tipo de valor central do Atlas
Worksheets: um local hierárquico normalizado, imutável e classificado
estruturalmente em `(PathType, Location)`.

Princípios fundamentais:
    - O path é imutável; transformações (ex.: `rename`) retornam um novo valor
    - Tipo e zona são derivados exclusivamente da sequência de segmentos
    - Diretório e arquivo com o mesmo nome são paths distintos
    - A sequência de segmentos pertence exclusivamente à instância

Representação:
    - parent_segments: todos os segmentos antes do último
    - name: último segmento ("/" para a raiz)
    - type: classificação estrutural (ROOT, WORKSHEETS, REPOS, GIT_REPO,
      DIRECTORY, FILE)
    - location (derivado): ROOT, WORKSHEETS ou REPOS
    - level (derivado): profundidade a partir da raiz (raiz = 0)

Invariantes:
    - `parse(raw).standard_path == raw` para todo path aceito
    - Igualdade e hash consideram (parent_segments, name, type)
    - Um diretório sempre serializa com separador final; um arquivo nunca

Limites explícitos:
    - Não acessa repositórios nem object store
    - Não decide políticas de zona (responsabilidade dos serviços)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Sequence, Tuple

from atlas_worksheets.core.exceptions import InvalidPath

from .parsing import classify_items, join_items, parse_items
from .types import (
    DEFAULT_NAME_LENGTH_LIMIT,
    REPOS_SEGMENT,
    ROOT_PATH_NAME,
    SEPARATOR,
    SYSTEM_DEFINED_TYPES,
    WORKSHEETS_SEGMENT,
    Location,
    PathType,
)

_LOCATION_BY_HEAD = {
    WORKSHEETS_SEGMENT: Location.WORKSHEETS,
    REPOS_SEGMENT: Location.REPOS,
}


@dataclass(frozen=True)
class WorksheetPath:
    """
    Local hierárquico normalizado de um nó (arquivo ou diretório).

    Instâncias devem ser obtidas via `parse`, `root`, `worksheets`, `repos`,
    `of_file` ou `of_directory`. A construção direta é validada em
    `__post_init__`: o tipo declarado precisa coincidir com a classificação
    da sequência de segmentos.
    """

    parent_segments: Tuple[str, ...]
    name: str
    type: PathType

    def __post_init__(self) -> None:
        if not isinstance(self.parent_segments, tuple):
            object.__setattr__(self, "parent_segments", tuple(self.parent_segments))
        expected, _ = classify_items(self._items())
        if expected != self.type:
            raise InvalidPath(
                "Tipo inconsistente com os segmentos",
                {"items": self._items(), "type": self.type.value, "expected": expected.value},
            )

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def parse(
        cls,
        raw: str,
        *,
        name_length_limit: Optional[int] = DEFAULT_NAME_LENGTH_LIMIT,
    ) -> "WorksheetPath":
        """
        Interpreta uma string de path bruto.

        Raises:
            InvalidPath: Para entrada vazia, malformada ou não classificável.
            NameTooLong: Se algum segmento exceder `name_length_limit`.
        """
        items, _, _ = parse_items(raw, name_length_limit=name_length_limit)
        return cls.from_items(items)

    @classmethod
    def from_items(cls, items: Sequence[str]) -> "WorksheetPath":
        path_type, _ = classify_items(items)
        if path_type == PathType.ROOT:
            return cls((), ROOT_PATH_NAME, PathType.ROOT)
        names = [item for item in items if item != SEPARATOR]
        return cls(tuple(names[:-1]), names[-1], path_type)

    @classmethod
    def root(cls) -> "WorksheetPath":
        return cls((), ROOT_PATH_NAME, PathType.ROOT)

    @classmethod
    def worksheets(cls) -> "WorksheetPath":
        return cls((), WORKSHEETS_SEGMENT, PathType.WORKSHEETS)

    @classmethod
    def repos(cls) -> "WorksheetPath":
        return cls((), REPOS_SEGMENT, PathType.REPOS)

    @classmethod
    def of_file(cls, *segments: str) -> "WorksheetPath":
        return cls.from_items(list(segments))

    @classmethod
    def of_directory(cls, *segments: str) -> "WorksheetPath":
        if not segments:
            return cls.root()
        return cls.from_items(list(segments) + [SEPARATOR])

    # ------------------------------------------------------------------
    # Atributos derivados
    # ------------------------------------------------------------------
    @property
    def location(self) -> Location:
        if self.type == PathType.ROOT:
            return Location.ROOT
        head = self.parent_segments[0] if self.parent_segments else self.name
        return _LOCATION_BY_HEAD[head]

    @property
    def level(self) -> int:
        if self.type == PathType.ROOT:
            return 0
        return len(self.parent_segments) + 1

    @property
    def segments(self) -> Tuple[str, ...]:
        """Todos os nomes do path, da zona até o próprio nome (vazio para a raiz)."""
        if self.is_root():
            return ()
        return self.parent_segments + (self.name,)

    @property
    def standard_path(self) -> str:
        return join_items(self.segments, directory=self.is_directory())

    def _items(self) -> List[str]:
        if self.name == ROOT_PATH_NAME and not self.parent_segments:
            return [SEPARATOR]
        items = list(self.parent_segments) + [self.name]
        if self.type != PathType.FILE:
            items.append(SEPARATOR)
        return items

    # ------------------------------------------------------------------
    # Classificação
    # ------------------------------------------------------------------
    def is_root(self) -> bool:
        return self.type == PathType.ROOT

    def is_worksheets(self) -> bool:
        return self.type == PathType.WORKSHEETS

    def is_repos(self) -> bool:
        return self.type == PathType.REPOS

    def is_git_repo(self) -> bool:
        return self.type == PathType.GIT_REPO

    def is_system_defined(self) -> bool:
        return self.type in SYSTEM_DEFINED_TYPES

    def is_file(self) -> bool:
        return self.type == PathType.FILE

    def is_directory(self) -> bool:
        return self.type != PathType.FILE

    def is_name_too_long(self, limit: int) -> bool:
        return len(self.name) > limit

    def is_name_contains(self, fragment: str) -> bool:
        return fragment in self.name

    def can_rename(self) -> bool:
        """Apenas nós dentro de /Worksheets/ ou de /Repos/<repo>/ podem ser renomeados."""
        return (self.location == Location.WORKSHEETS and self.level > 1) or (
            self.location == Location.REPOS and self.level > 2
        )

    # ------------------------------------------------------------------
    # Hierarquia
    # ------------------------------------------------------------------
    def parent_path(self) -> Optional["WorksheetPath"]:
        """Diretório um nível acima; None apenas para a raiz."""
        if self.is_root():
            return None
        return WorksheetPath.of_directory(*self.parent_segments)

    def all_non_root_ancestors(self) -> "AncestorChain":
        """Ancestrais estritos não definidos pelo sistema, do mais raso ao mais profundo."""
        return AncestorChain(self)

    def path_at(self, index: int) -> "WorksheetPath":
        """
        Retorna o prefixo do path no nível `index + 1`.

        Raises:
            IndexError: Se `index` estiver fora de [0, level - 1].
        """
        if index < 0 or index > self.level - 1:
            raise IndexError(f"index fora dos limites: index={index}, level={self.level}")
        if index == self.level - 1:
            return self
        return WorksheetPath.of_directory(*self.parent_segments[: index + 1])

    def _is_strict_descendant_of(self, candidate: "WorksheetPath") -> bool:
        if self.is_root() or candidate.is_file():
            return False
        if candidate.is_root():
            return True
        depth = candidate.level
        if depth >= self.level:
            return False
        return (
            self.parent_segments[: depth - 1] == candidate.parent_segments
            and self.parent_segments[depth - 1] == candidate.name
        )

    def is_child_of_any(self, *candidates: "WorksheetPath") -> bool:
        """True se este path for descendente estrito de ao menos um candidato."""
        return any(self._is_strict_descendant_of(c) for c in candidates)

    # ------------------------------------------------------------------
    # Rename
    # ------------------------------------------------------------------
    def is_rename_match(self, source: "WorksheetPath") -> bool:
        """True se este path é `source` ou um descendente estrito do diretório `source`."""
        if self == source:
            return True
        return source.is_directory() and self._is_strict_descendant_of(source)

    def rename(self, source: "WorksheetPath", target: "WorksheetPath") -> "WorksheetPath":
        """
        Retorna o path resultante de renomear `source` para `target`.

        Se este path é o próprio `source`, troca o nome; caso contrário reescreve
        apenas o segmento do nível de `source`, preservando todos os demais.

        Raises:
            InvalidPath: Se este path não casar com `source`.
        """
        if not self.is_rename_match(source):
            raise InvalidPath(
                "Path não é afetado pelo rename",
                {"path": str(self), "source": str(source)},
            )
        if self.level == source.level:
            return replace(self, name=target.name)
        parents = list(self.parent_segments)
        parents[source.level - 1] = target.name
        return replace(self, parent_segments=tuple(parents))

    def strip_prefix(self, prefix: "WorksheetPath") -> Optional[str]:
        """
        Remove os segmentos de um ancestral estrito e retorna o path relativo.

        Exemplo: "/Worksheets/a/b/c.sql" sem "/Worksheets/a/" → "b/c.sql".
        Diretórios mantêm o separador final. Retorna None se `prefix` não for
        ancestral estrito; com a raiz como prefixo o resultado
        é o path completo sem a barra inicial.
        """
        if not self._is_strict_descendant_of(prefix):
            return None
        relative = SEPARATOR.join(self.segments[prefix.level:])
        return relative + SEPARATOR if self.is_directory() else relative

    # ------------------------------------------------------------------
    # Representação
    # ------------------------------------------------------------------
    def __str__(self) -> str:
        return self.standard_path

    def __repr__(self) -> str:
        return f"WorksheetPath({self.standard_path!r})"


class AncestorChain:
    """Sequência preguiçosa e reiniciável dos ancestrais não-sistema de um path."""

    def __init__(self, path: WorksheetPath):
        self._path = path

    def __iter__(self) -> Iterator[WorksheetPath]:
        path = self._path
        if path.is_system_defined():
            return
        for depth in range(1, path.level):
            ancestor = WorksheetPath.of_directory(*path.parent_segments[:depth])
            if ancestor.is_system_defined():
                continue
            yield ancestor

    def __repr__(self) -> str:
        return f"AncestorChain({self._path.standard_path!r})"


__all__ = ["WorksheetPath", "AncestorChain"]
