"""
Camada de configuração do Atlas Worksheets.

A configuração é declarativa (YAML/JSON), resolvida por deep-merge
determinístico de defaults + overrides locais e exposta aos serviços como
`WorksheetSettings` imutável.

Limites explícitos:
    - Não contém lógica de domínio
    - Não interage com serviços ou repositórios
"""

from .errors import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigTypeConflictError,
    InvalidConfigRootTypeError,
    InvalidSettingError,
    UnsupportedConfigFormatError,
)
from .loader import PACKAGED_DEFAULTS, deep_merge, load_config
from .settings import WorksheetSettings

__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigTypeConflictError",
    "InvalidConfigRootTypeError",
    "InvalidSettingError",
    "UnsupportedConfigFormatError",
    "PACKAGED_DEFAULTS",
    "deep_merge",
    "load_config",
    "WorksheetSettings",
]
