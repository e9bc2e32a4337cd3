# tests/persistence/test_object_store.py
"""Testes do object store local e do archiver."""

import zipfile
from pathlib import Path

import pytest

from atlas_worksheets.core.exceptions import ArchiveError, InvalidPath, NotFound
from atlas_worksheets.core.ports import Archiver, ObjectStoreGateway
from atlas_worksheets.persistence import LocalObjectStoreGateway, ZipArchiver


def test_gateway_conforms_to_port(gateway):
    assert isinstance(gateway, ObjectStoreGateway)
    assert isinstance(ZipArchiver(), Archiver)


def test_upload_and_download_round_trip(gateway, tmp_path: Path):
    local = tmp_path / "report.sql"
    local.write_text("select 1", encoding="utf-8")

    key = gateway.upload_file(local, ttl_seconds=60)
    copy = tmp_path / "out" / "copy.sql"
    gateway.download_to_file(key, copy)

    assert key.endswith("/report.sql")
    assert copy.read_text(encoding="utf-8") == "select 1"
    assert gateway.expires_at(key) is not None


def test_download_url_is_file_uri(gateway):
    key = gateway.put_bytes("a/b.sql", b"x")

    url = gateway.generate_download_url(key)

    assert url.startswith("file://")
    assert url.endswith("/a/b.sql")


def test_missing_object_raises(gateway, tmp_path: Path):
    with pytest.raises(NotFound):
        gateway.generate_download_url("missing")
    with pytest.raises(NotFound):
        gateway.download_to_file("missing", tmp_path / "x")


@pytest.mark.parametrize("key", ["", "/etc/passwd", "../escape"])
def test_invalid_keys_are_rejected(gateway, key):
    with pytest.raises(InvalidPath):
        gateway.object_path(key)


def test_archiver_keeps_directory_as_root(tmp_path: Path):
    source = tmp_path / "stage" / "a"
    (source / "sub").mkdir(parents=True)
    (source / "1.sql").write_text("one", encoding="utf-8")

    produced = ZipArchiver().archive(source, tmp_path / "stage" / "a")

    assert produced.suffix == ".zip"
    with zipfile.ZipFile(produced) as zf:
        names = set(zf.namelist())
    assert "a/1.sql" in names
    assert "a/sub/" in names


def test_archiver_rejects_missing_source(tmp_path: Path):
    with pytest.raises(ArchiveError):
        ZipArchiver().archive(tmp_path / "missing", tmp_path / "out")


def test_archiver_rejects_unknown_format():
    with pytest.raises(ArchiveError):
        ZipArchiver("rar")


def test_gateway_creates_root(tmp_path: Path):
    LocalObjectStoreGateway(root_dir=tmp_path / "deep" / "root")

    assert (tmp_path / "deep" / "root").is_dir()
