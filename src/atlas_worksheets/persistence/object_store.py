"""Object store local em diretório (v1).

Implementação de referência de `ObjectStoreGateway` para testes e execuções
locais: cada objeto é um arquivo sob `root_dir/<object_key>`, e as URLs de
download são URIs `file://`.

Decisões (v1):
- Object keys de upload: `<uuid hex>/<nome do arquivo>` (nunca colidem)
- O TTL é registrado por objeto, mas não há expiração ativa
- Chaves são sempre relativas; `..` e caminhos absolutos são recusados

Limites explícitos:
- Não emite credenciais nem URLs assinadas
"""

from __future__ import annotations

import shutil
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path, PurePosixPath
from typing import Dict, Union

from atlas_worksheets.core.exceptions import InvalidPath, NotFound


class LocalObjectStoreGateway:
    """Gateway de object store baseado no sistema de arquivos local."""

    def __init__(self, *, root_dir: Union[str, Path]):
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self._expires_at: Dict[str, datetime] = {}

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def object_path(self, object_key: str) -> Path:
        """Retorna o caminho absoluto do objeto dentro de `root_dir`."""
        key = PurePosixPath(object_key)
        if not object_key or key.is_absolute() or ".." in key.parts:
            raise InvalidPath("Object key inválida", {"object_key": object_key})
        return self.root_dir.joinpath(*key.parts)

    def _existing(self, object_key: str) -> Path:
        path = self.object_path(object_key)
        if not path.is_file():
            raise NotFound("Objeto não encontrado", {"object_key": object_key})
        return path

    # ------------------------------------------------------------------
    # Escrita
    # ------------------------------------------------------------------
    def put_bytes(self, object_key: str, content: bytes) -> str:
        """Grava `content` sob `object_key` (usado para semear conteúdo)."""
        path = self.object_path(object_key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return object_key

    def upload_file(self, local_file: Path, ttl_seconds: int) -> str:
        local_file = Path(local_file)
        object_key = f"{uuid.uuid4().hex}/{local_file.name}"
        path = self.object_path(object_key)
        path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(local_file, path)
        self._expires_at[object_key] = datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
        return object_key

    # ------------------------------------------------------------------
    # Leitura
    # ------------------------------------------------------------------
    def generate_download_url(self, object_key: str) -> str:
        return self._existing(object_key).resolve().as_uri()

    def download_to_file(self, object_key: str, local_file: Path) -> None:
        local_file = Path(local_file)
        local_file.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(self._existing(object_key), local_file)

    def expires_at(self, object_key: str) -> datetime:
        """Expiração registrada no upload; NotFound para objetos sem TTL."""
        if object_key not in self._expires_at:
            raise NotFound("Objeto sem TTL registrado", {"object_key": object_key})
        return self._expires_at[object_key]


__all__ = ["LocalObjectStoreGateway"]
