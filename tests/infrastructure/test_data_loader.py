# tests/infrastructure/test_data_loader.py
from __future__ import annotations

import json
import os
from pathlib import Path

from ramais.infrastructure.data_loader import carregar_diretorio, resolver_arquivo_base
from ramais.infrastructure.overrides_store import OverridesStore
from ramais.infrastructure.repositories.memory_setor_repo import MemorySetorRepo


def _escrever(caminho: Path, dados: object, mtime: float | None = None) -> Path:
    caminho.write_text(json.dumps(dados, ensure_ascii=False), encoding="utf-8")
    if mtime is not None:
        os.utime(caminho, (mtime, mtime))
    return caminho


def test_data_file_explicito_resolve_em_assets(tmp_path: Path) -> None:
    assert resolver_arquivo_base(tmp_path, "base.json") == tmp_path / "base.json"
    assert resolver_arquivo_base(tmp_path, "/srv/dados/base.json") == Path("/srv/dados/base.json")


def test_prefere_arquivo_dados_normalizado(tmp_path: Path) -> None:
    escolhido = _escrever(tmp_path / "dados estruturados normalizado_1.json", [], mtime=1_000)
    _escrever(tmp_path / "outro.json", [], mtime=2_000)
    assert resolver_arquivo_base(tmp_path, "") == escolhido


def test_entre_candidatos_usa_o_mais_recente(tmp_path: Path) -> None:
    _escrever(tmp_path / "dados normalizado_antigo.json", [], mtime=1_000)
    recente = _escrever(tmp_path / "dados normalizado_novo.json", [], mtime=2_000)
    assert resolver_arquivo_base(tmp_path, "") == recente


def test_sem_candidatos_ignora_overrides_e_temporarios(tmp_path: Path) -> None:
    overrides = _escrever(tmp_path / "setores_overrides.json", [], mtime=3_000)
    _escrever(tmp_path / "setores_overrides.tmp.json", [], mtime=3_000)
    base = _escrever(tmp_path / "setores.json", [], mtime=1_000)
    assert resolver_arquivo_base(tmp_path, "", excluir=overrides) == base


def test_diretorio_vazio_usa_nome_padrao(tmp_path: Path) -> None:
    caminho = resolver_arquivo_base(tmp_path, "")
    assert caminho.parent == tmp_path
    assert caminho.name.startswith("dados estruturados normalizado")


def test_carregar_diretorio(tmp_path: Path, overrides: OverridesStore, relogio, brutos) -> None:
    _escrever(tmp_path / "dados normalizado.json", brutos)
    repo = MemorySetorRepo(overrides, clock=relogio)

    report = carregar_diretorio(repo, overrides, tmp_path)

    assert report.ok
    assert report.base_count == 3
    assert report.overrides_applied == 0
    assert report.data_file == str(tmp_path / "dados normalizado.json")
    assert repo.buscar_por_slug("ti").andar == "2"


def test_overrides_aplicados_sobre_a_base(
    tmp_path: Path, overrides: OverridesStore, relogio, brutos,
) -> None:
    _escrever(tmp_path / "dados normalizado.json", brutos)
    _escrever(overrides.path, [{"slug": "ti", "email": "novo@org.br"}, {"slug": "ouvidoria"}])
    repo = MemorySetorRepo(overrides, clock=relogio)

    report = carregar_diretorio(repo, overrides, tmp_path)

    assert report.overrides_applied == 2
    assert repo.buscar_por_slug("ti").email == "novo@org.br"
    assert repo.buscar_por_slug("ouvidoria").id == 4
    assert overrides.status()["backups_count"] == 0


def test_base_ausente_degrada_para_vazio(tmp_path: Path, overrides: OverridesStore, relogio) -> None:
    repo = MemorySetorRepo(overrides, clock=relogio)

    report = carregar_diretorio(repo, overrides, tmp_path, "nao-existe.json")

    assert not report.ok
    assert report.error.startswith("FileNotFoundError")
    assert len(repo) == 0


def test_base_invalida_ainda_aplica_overrides(
    tmp_path: Path, overrides: OverridesStore, relogio,
) -> None:
    (tmp_path / "dados normalizado.json").write_text("{quebrado", encoding="utf-8")
    _escrever(overrides.path, [{"slug": "criado", "nome": "Criado em runtime"}])
    repo = MemorySetorRepo(overrides, clock=relogio)

    report = carregar_diretorio(repo, overrides, tmp_path)

    assert not report.ok
    assert report.base_count == 0
    assert report.overrides_applied == 1
    assert repo.buscar_por_slug("criado").nome == "Criado em runtime"


def test_base_que_nao_e_lista(tmp_path: Path, overrides: OverridesStore, relogio) -> None:
    _escrever(tmp_path / "dados normalizado.json", {"setores": []})
    repo = MemorySetorRepo(overrides, clock=relogio)

    report = carregar_diretorio(repo, overrides, tmp_path)

    assert report.error.startswith("ValueError")


def test_override_com_contagem_infinita_nao_aborta_carga(
    tmp_path: Path, overrides: OverridesStore, relogio, brutos,
) -> None:
    _escrever(tmp_path / "dados normalizado.json", brutos)
    overrides.path.write_text(
        '[{"slug": "ti", "acessos_ramais": {"2000": 1e400}}, {"slug": "rh", "andar": "4"}]',
        encoding="utf-8",
    )
    repo = MemorySetorRepo(overrides, clock=relogio)

    report = carregar_diretorio(repo, overrides, tmp_path)

    assert report.ok
    assert report.overrides_applied == 2
    assert repo.buscar_por_slug("ti").acessos_ramais == {"2000": 0}
    assert repo.buscar_por_slug("rh").andar == "4"
