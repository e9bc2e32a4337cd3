"""
Exceções canônicas da camada de configuração do Atlas Worksheets.

As exceções aqui definidas representam violações estruturais explícitas
da configuração, e não erros de operação sobre worksheets.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa erro de domínio (paths, versões, batches)
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração.

    Permite captura genérica de falhas de carregamento, merge e validação
    de settings, distinta das exceções de domínio (`WorksheetException`).
    """


class ConfigFileNotFoundError(ConfigError):
    """
    Arquivo de defaults informado explicitamente não existe.

    O arquivo local de overrides é opcional e nunca gera este erro.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato de arquivo de configuração não suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz da configuração não é um dicionário."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge (defaults vs. override).

    Exemplo:
        - defaults: {"batch": {"parallel": true}}
        - override: {"batch": "sequential"}
    """


class InvalidSettingError(ConfigError):
    """Valor de configuração fora do domínio aceito (ex.: limite negativo)."""
