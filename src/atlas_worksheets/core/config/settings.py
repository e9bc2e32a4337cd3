"""
Visão tipada e validada da configuração efetiva.

`WorksheetSettings` converte o dicionário resolvido por `load_config` em um
objeto imutável consumido pelos serviços. Valores fora do domínio aceito
levantam `InvalidSettingError` no momento da construção, antes de qualquer
operação.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import InvalidSettingError
from .loader import load_config


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = (config or {}).get(name, {}) or {}
    if not isinstance(section, dict):
        raise InvalidSettingError(f"Seção '{name}' deve ser dict, recebido: {type(section).__name__}")
    return section


def _positive_int(section: Dict[str, Any], key: str, where: str) -> int:
    value = section.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidSettingError(f"'{where}.{key}' deve ser inteiro positivo, recebido: {value!r}")
    return value


@dataclass(frozen=True)
class WorksheetSettings:
    name_length_limit: int = 64
    search_limit: int = 50
    batch_parallel: bool = True
    batch_max_workers: int = 2
    archive_ttl_seconds: int = 86400
    download_timeout_seconds: int = 300
    download_workers: int = 4
    staging_dir: Optional[str] = None
    archive_format: str = "zip"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "WorksheetSettings":
        worksheet = _section(config, "worksheet")
        search = _section(config, "search")
        batch = _section(config, "batch")
        download = _section(config, "download")

        staging_dir = download.get("staging_dir")
        if staging_dir is not None and not isinstance(staging_dir, str):
            raise InvalidSettingError(f"'download.staging_dir' deve ser string, recebido: {staging_dir!r}")

        return cls(
            name_length_limit=_positive_int(worksheet, "name_length_limit", "worksheet"),
            search_limit=_positive_int(search, "limit", "search"),
            batch_parallel=bool(batch.get("parallel", True)),
            batch_max_workers=_positive_int(batch, "max_workers", "batch"),
            archive_ttl_seconds=_positive_int(download, "archive_ttl_seconds", "download"),
            download_timeout_seconds=_positive_int(download, "timeout_seconds", "download"),
            download_workers=_positive_int(download, "workers", "download"),
            staging_dir=staging_dir,
            archive_format=str(download.get("archive_format", "zip")),
        )

    @classmethod
    def load(
        cls,
        *,
        defaults_path: Optional[str] = None,
        local_path: Optional[str] = None,
    ) -> "WorksheetSettings":
        return cls.from_config(load_config(defaults_path=defaults_path, local_path=local_path))


__all__ = ["WorksheetSettings"]
