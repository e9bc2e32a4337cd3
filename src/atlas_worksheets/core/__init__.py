"""
Core do Atlas Worksheets.

Este pacote contém a implementação canônica e independente de adapters do
namespace virtual de worksheets:

    - path         → álgebra de paths (parse, ancestrais, rename, ordenação)
    - worksheet    → agregado `Worksheet` e resultado de batches
    - ports        → contratos dos colaboradores externos (repositórios, object store, archiver)
    - exceptions   → exceções tipadas do domínio
    - errors       → payloads de erro serializáveis
    - config       → carregamento e validação de configuração
    - traceability → Event Log das operações

Limites explícitos:
    - Não implementa armazenamento real de metadados ou objetos
    - Não depende de HTTP, UI ou notebooks
"""
