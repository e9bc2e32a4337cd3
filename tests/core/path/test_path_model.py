# tests/core/path/test_path_model.py
"""
Testes das operações puras de `WorksheetPath`.

Cobre navegação (pai, ancestrais, prefixos), descendência, rename,
`strip_prefix` e a política estrutural de `can_rename`.
"""

import pytest

from atlas_worksheets.core.exceptions import InvalidPath
from atlas_worksheets.core.path import WorksheetPath

P = WorksheetPath.parse


# ---------------------------------------------------------------------------
# Hierarquia
# ---------------------------------------------------------------------------

def test_parent_path_chain():
    assert P("/Worksheets/a/b.sql").parent_path() == P("/Worksheets/a/")
    assert P("/Worksheets/a/").parent_path() == P("/Worksheets/")
    assert P("/Worksheets/").parent_path() == P("/")
    assert P("/").parent_path() is None


def test_all_non_root_ancestors_skips_system_paths():
    ancestors = list(P("/Worksheets/a/b/c.sql").all_non_root_ancestors())

    assert ancestors == [P("/Worksheets/a/"), P("/Worksheets/a/b/")]


def test_all_non_root_ancestors_in_repos_skips_git_repo_root():
    ancestors = list(P("/Repos/demo/src/main.py").all_non_root_ancestors())

    assert ancestors == [P("/Repos/demo/src/")]


@pytest.mark.parametrize("raw", ["/", "/Worksheets/", "/Repos/", "/Repos/demo/"])
def test_all_non_root_ancestors_is_empty_for_system_paths(raw):
    assert list(P(raw).all_non_root_ancestors()) == []


def test_all_non_root_ancestors_is_restartable():
    chain = P("/Worksheets/a/b/c.sql").all_non_root_ancestors()

    assert list(chain) == list(chain)


def test_path_at_returns_prefixes():
    path = P("/Worksheets/a/b.sql")

    assert path.path_at(0) == P("/Worksheets/")
    assert path.path_at(1) == P("/Worksheets/a/")
    assert path.path_at(2) == path
    with pytest.raises(IndexError):
        path.path_at(3)


def test_is_child_of_any():
    path = P("/Worksheets/a/b.sql")

    assert path.is_child_of_any(P("/"))
    assert path.is_child_of_any(P("/Worksheets/"))
    assert path.is_child_of_any(P("/Repos/"), P("/Worksheets/a/"))
    assert not path.is_child_of_any(P("/Worksheets/b/"))
    assert not path.is_child_of_any(path)
    assert not P("/").is_child_of_any(P("/"))


def test_file_candidate_never_matches_as_ancestor():
    assert not P("/Worksheets/a/b.sql").is_child_of_any(P("/Worksheets/a"))


# ---------------------------------------------------------------------------
# Rename
# ---------------------------------------------------------------------------

def test_rename_self_replaces_name():
    source = P("/Worksheets/a/")
    target = P("/Worksheets/b/")

    assert source.rename(source, target) == target


def test_rename_descendant_rewrites_only_matched_segment():
    source = P("/Worksheets/a/")
    target = P("/Worksheets/b/")
    renamed = P("/Worksheets/a/a/a.sql").rename(source, target)

    assert renamed == P("/Worksheets/b/a/a.sql")


def test_rename_returns_new_value_and_keeps_original():
    original = P("/Worksheets/a/x.sql")
    original.rename(P("/Worksheets/a/"), P("/Worksheets/b/"))

    assert original == P("/Worksheets/a/x.sql")


def test_rename_non_matching_path_raises():
    with pytest.raises(InvalidPath):
        P("/Worksheets/c/x.sql").rename(P("/Worksheets/a/"), P("/Worksheets/b/"))


def test_is_rename_match():
    source = P("/Worksheets/a/")

    assert P("/Worksheets/a/").is_rename_match(source)
    assert P("/Worksheets/a/x/y.sql").is_rename_match(source)
    assert not P("/Worksheets/ab/x.sql").is_rename_match(source)
    assert not P("/Worksheets/a/x.sql").is_rename_match(P("/Worksheets/a"))


def test_rename_preserves_relative_structure():
    source = P("/Worksheets/a/")
    target = P("/Worksheets/b/")
    descendants = [P("/Worksheets/a/x.sql"), P("/Worksheets/a/d/"), P("/Worksheets/a/d/y.sql")]

    for path in descendants:
        assert path.rename(source, target).strip_prefix(target) == path.strip_prefix(source)


# ---------------------------------------------------------------------------
# strip_prefix / can_rename
# ---------------------------------------------------------------------------

def test_strip_prefix():
    path = P("/Worksheets/a/b/c.sql")

    assert path.strip_prefix(P("/Worksheets/a/")) == "b/c.sql"
    assert P("/Worksheets/a/b/").strip_prefix(P("/Worksheets/a/")) == "b/"
    assert path.strip_prefix(P("/")) == "Worksheets/a/b/c.sql"
    assert path.strip_prefix(P("/Worksheets/z/")) is None
    assert path.strip_prefix(path) is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("/", False),
        ("/Worksheets/", False),
        ("/Worksheets/a.sql", True),
        ("/Worksheets/a/", True),
        ("/Repos/", False),
        ("/Repos/demo/", False),
        ("/Repos/demo/y", True),
        ("/Repos/demo/src/", True),
    ],
)
def test_can_rename(raw, expected):
    assert P(raw).can_rename() is expected


def test_name_predicates():
    path = P("/Worksheets/report_2024.sql")

    assert path.is_name_contains("2024")
    assert not path.is_name_contains("2023")
    assert path.is_name_too_long(5)
    assert not path.is_name_too_long(64)
