"""
Loader canônico de configuração do Atlas Worksheets.

A configuração efetiva é resolvida a partir de:
    - um arquivo de defaults (o `defaults.yaml` empacotado, quando omitido)
    - um arquivo local de overrides (opcional)

Política de merge (v1):
    - dict + dict → merge recursivo por chave
    - list        → sobrescrita total
    - escalar     → sobrescrita direta
    - None        → compatível com qualquer tipo (valor "não definido")
    - conflito de tipos → ConfigTypeConflictError

Invariantes:
    - O resultado é sempre um dicionário puro (`dict`)
    - Overrides nunca mutam os defaults
    - A mesma entrada sempre produz a mesma configuração final

Limites explícitos:
    - Não valida domínio dos valores (ver `settings.WorksheetSettings`)
    - Não lê variáveis de ambiente
"""

from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional
import json

import yaml  # PyYAML

from .errors import (
    ConfigFileNotFoundError,
    ConfigTypeConflictError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)

PACKAGED_DEFAULTS = Path(__file__).with_name("defaults.yaml")


def _read_file(path: Path) -> Dict[str, Any]:
    """
    Lê um arquivo YAML/JSON e valida que o conteúdo raiz é um dicionário.

    Arquivos vazios são interpretados como dicionários vazios.

    Raises:
        ConfigFileNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise ConfigFileNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    suffix = path.suffix.lower()
    with path.open("r", encoding="utf-8") as f:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )
    return data


def _merge(base: Dict[str, Any], override: Dict[str, Any], *, trail: str = "") -> Dict[str, Any]:
    result = deepcopy(base)
    for key, value in override.items():
        where = f"{trail}.{key}" if trail else str(key)
        current = result.get(key)

        if key not in result or current is None or value is None:
            result[key] = deepcopy(value)
        elif isinstance(current, dict) and isinstance(value, dict):
            result[key] = _merge(current, value, trail=where)
        elif isinstance(value, list):
            result[key] = deepcopy(value)
        elif type(current) is not type(value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{where}': "
                f"{type(current).__name__} vs {type(value).__name__}"
            )
        else:
            result[key] = deepcopy(value)
    return result


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge puramente funcional de `override` sobre `base`."""
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )
    return _merge(base, override)


def load_config(
    *,
    defaults_path: Optional[str] = None,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva.

    Args:
        defaults_path (Optional[str]): Arquivo base; o `defaults.yaml`
            empacotado é usado quando omitido.
        local_path (Optional[str]): Overrides locais; ignorado se não existir.

    Returns:
        Dict[str, Any]: Configuração final resolvida.

    Raises:
        ConfigFileNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se o formato não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
    """
    defaults = _read_file(Path(defaults_path) if defaults_path else PACKAGED_DEFAULTS)

    if local_path is None:
        return defaults

    local_file = Path(local_path)
    if not local_file.exists():
        return defaults
    return deep_merge(defaults, _read_file(local_file))


__all__ = ["load_config", "deep_merge", "PACKAGED_DEFAULTS"]
