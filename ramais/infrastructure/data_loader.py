# ramais/infrastructure/data_loader.py
#
# Startup load: base dataset file + overrides file → MemorySetorRepo.
#
# Design decisions:
#   - The base dataset is read-only seed data. Runtime edits live only in the
#     overrides file, which is applied on top, record by record.
#   - Startup is best-effort: a missing or unparsable base file is logged and
#     the directory starts empty. The process never fails because of data.
#   - Overrides are applied even when the base load failed, so setores created
#     at runtime survive a broken or missing seed file.
#   - Applying overrides does not rewrite the overrides file (no backup churn
#     on every restart).
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from .log import log
from .overrides_store import OverridesStore
from .repositories.memory_setor_repo import MemorySetorRepo

_ARQUIVO_PADRAO = "dados estruturados normalizado_1763396739562.json"


@dataclass(frozen=True)
class LoadReport:
    data_file: str | None
    base_count: int
    overrides_applied: int
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _mais_recente(arquivos: list[Path]) -> Path | None:
    if not arquivos:
        return None
    return max(arquivos, key=lambda p: p.stat().st_mtime)


def resolver_arquivo_base(assets_dir: Path, data_file: str, excluir: Path | None = None) -> Path:
    """Escolhe o arquivo base.

    DATA_FILE explicito vence (nome simples e resolvido dentro de assets_dir).
    Sem ele: o .json mais recente cujo nome contem "dados" e "normalizado";
    senao o .json mais recente do diretorio; senao o nome historico padrao.
    """
    if data_file:
        if "/" not in data_file and "\\" not in data_file:
            return assets_dir / data_file
        return Path(data_file)

    arquivos: list[Path] = []
    if assets_dir.is_dir():
        arquivos = [
            p for p in assets_dir.iterdir()
            if p.is_file() and p.suffix.lower() == ".json" and p != excluir
            and not p.name.endswith(".tmp.json")
        ]
    candidatos = [
        p for p in arquivos
        if "dados" in p.name.lower() and "normalizado" in p.name.lower()
    ]
    escolhido = _mais_recente(candidatos) or _mais_recente(arquivos)
    return escolhido or assets_dir / _ARQUIVO_PADRAO


def carregar_diretorio(
    repo: MemorySetorRepo,
    overrides: OverridesStore,
    assets_dir: Path,
    data_file: str = "",
) -> LoadReport:
    caminho: Path | None = None
    erro: str | None = None
    try:
        caminho = resolver_arquivo_base(assets_dir, data_file, excluir=overrides.path)
        itens = json.loads(caminho.read_text(encoding="utf-8"))
        if not isinstance(itens, list):
            raise ValueError("arquivo base deve conter uma lista de setores")
        repo.importar_brutos(itens, "replace")
        log(f"Carregados {len(repo)} setores de {caminho}")
    except (OSError, ValueError) as err:
        erro = f"{type(err).__name__}: {err}"
        log(f"Erro ao carregar dados base: {erro}")
    base_count = len(repo)

    aplicados = 0
    for override in overrides.carregar():
        try:
            repo.aplicar_override(override)
            aplicados += 1
        except (TypeError, ValueError, OverflowError) as err:
            log(f"Override ignorado ({override.get('slug')!r}): {err}")
    if aplicados:
        log(f"Aplicados {aplicados} override(s)")

    return LoadReport(
        data_file=str(caminho) if caminho else None,
        base_count=base_count,
        overrides_applied=aplicados,
        error=erro,
    )
