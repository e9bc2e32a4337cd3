# tests/core/config/test_settings.py
"""Testes da visão validada `WorksheetSettings`."""

from pathlib import Path

import pytest

from atlas_worksheets.core.config import InvalidSettingError, WorksheetSettings, load_config


def test_defaults_match_packaged_config():
    assert WorksheetSettings.from_config(load_config()) == WorksheetSettings()


def test_load_applies_local_overrides(tmp_path: Path):
    local = tmp_path / "local.yaml"
    local.write_text("batch:\n  parallel: false\n  max_workers: 4\n", encoding="utf-8")

    settings = WorksheetSettings.load(local_path=str(local))

    assert settings.batch_parallel is False
    assert settings.batch_max_workers == 4
    assert settings.name_length_limit == 64


@pytest.mark.parametrize("value", [0, -1, "10", True])
def test_invalid_positive_int_raises(value):
    cfg = load_config()
    cfg["search"]["limit"] = value

    with pytest.raises(InvalidSettingError):
        WorksheetSettings.from_config(cfg)


def test_staging_dir_must_be_string():
    cfg = load_config()
    cfg["download"]["staging_dir"] = 42

    with pytest.raises(InvalidSettingError):
        WorksheetSettings.from_config(cfg)


def test_section_must_be_dict():
    with pytest.raises(InvalidSettingError):
        WorksheetSettings.from_config({"worksheet": [1, 2]})
