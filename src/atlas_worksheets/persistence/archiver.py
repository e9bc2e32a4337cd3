"""Archiver baseado em `shutil.make_archive`."""

from __future__ import annotations

import shutil
from pathlib import Path

from atlas_worksheets.core.exceptions import ArchiveError

_SUFFIXES = {
    "zip": ".zip",
    "tar": ".tar",
    "gztar": ".tar.gz",
    "bztar": ".tar.bz2",
    "xztar": ".tar.xz",
}


class ZipArchiver:
    """Compacta um diretório preservando-o como raiz do arquivo gerado.

    O formato padrão é zip; qualquer formato registrado em `shutil` é aceito.
    """

    def __init__(self, archive_format: str = "zip"):
        if archive_format not in _SUFFIXES:
            raise ArchiveError(
                "Formato de arquivo não suportado",
                {"archive_format": archive_format, "supported": sorted(_SUFFIXES)},
            )
        self.archive_format = archive_format

    @property
    def suffix(self) -> str:
        return _SUFFIXES[self.archive_format]

    def archive(self, source_dir: Path, archive_file: Path) -> Path:
        source_dir = Path(source_dir)
        archive_file = Path(archive_file)
        if not source_dir.is_dir():
            raise ArchiveError("Diretório de origem inexistente", {"source_dir": str(source_dir)})

        base_name = str(archive_file)
        if base_name.endswith(self.suffix):
            base_name = base_name[: -len(self.suffix)]

        try:
            produced = shutil.make_archive(
                base_name,
                self.archive_format,
                root_dir=str(source_dir.parent),
                base_dir=source_dir.name,
            )
        except (OSError, ValueError) as e:
            raise ArchiveError(
                "Falha ao gerar arquivo",
                {"source_dir": str(source_dir), "error": str(e)},
            ) from e
        return Path(produced)


__all__ = ["ZipArchiver"]
