# src/atlas_worksheets/__init__.py
"""
Atlas Worksheets: namespace hierárquico de worksheets por projeto.

Este pacote raiz define o namespace público do Atlas Worksheets: um
sistema de arquivos virtual, com escopo de projeto, sobre um object store e
um armazenamento opcional baseado em git repos.

Princípios centrais:
    - Todo nó é identificado por um `WorksheetPath` imutável e classificado
    - Cada zona (`/Worksheets/`, `/Repos/`) é atendida por um serviço próprio,
      selecionado por um roteador explícito
    - Batches multi-zona reportam sucesso parcial por path, nunca tudo-ou-nada
    - Edições usam concorrência otimista por versão

Arquitetura em alto nível:
    - core.path         → álgebra de paths
    - core.worksheet    → agregado Worksheet e resultado de batches
    - core.ports        → contratos dos colaboradores externos
    - core.config       → carregamento e validação de configuração
    - core.traceability → Event Log das operações
    - services          → zonas, roteamento, batches e downloads
    - persistence       → adapters de referência (memória, diretório local, zip)

Limites explícitos:
    - Não implementa a camada HTTP
    - Não sincroniza conteúdo de git repos
"""
from .facade import WorksheetFacade, build_facade

__all__ = ["WorksheetFacade", "build_facade"]
