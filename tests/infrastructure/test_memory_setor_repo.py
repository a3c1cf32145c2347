# tests/infrastructure/test_memory_setor_repo.py
from __future__ import annotations

import pytest

from ramais.infrastructure.overrides_store import OverridesStore
from ramais.infrastructure.repositories.memory_setor_repo import MemorySetorRepo

AGORA_ISO = "2023-11-14T22:13:20+00:00"


def _slugs(setores) -> list[str]:
    return [s.slug for s in setores]


def test_listar_todos_ordena_por_nome(repo: MemorySetorRepo) -> None:
    assert _slugs(repo.listar_todos()) == ["almoxarifado", "rh", "ti"]


def test_busca_por_id_e_slug(repo: MemorySetorRepo) -> None:
    assert repo.buscar_por_id(1).slug == "ti"
    assert repo.buscar_por_slug("rh").id == 2
    assert repo.buscar_por_id(99) is None
    assert repo.buscar_por_slug("nao-existe") is None


def test_pesquisar_ignora_acentos(repo: MemorySetorRepo) -> None:
    assert _slugs(repo.pesquisar("informacao")) == ["ti"]
    assert _slugs(repo.pesquisar("INFORMAÇÃO")) == ["ti"]


def test_pesquisar_por_responsavel(repo: MemorySetorRepo) -> None:
    assert _slugs(repo.pesquisar("joao")) == ["ti"]


def test_pesquisar_prefixo_bloco(repo: MemorySetorRepo) -> None:
    assert _slugs(repo.pesquisar("bloco a")) == ["almoxarifado", "ti"]


def test_pesquisar_filtros_exatos(repo: MemorySetorRepo) -> None:
    assert _slugs(repo.pesquisar(bloco="A")) == ["almoxarifado", "ti"]
    assert _slugs(repo.pesquisar(bloco="A", andar="2")) == ["ti"]
    assert _slugs(repo.pesquisar(bloco="all", andar="  ")) == ["almoxarifado", "rh", "ti"]
    assert repo.pesquisar(bloco="a") == []


def test_blocos_andares_e_estatisticas(repo: MemorySetorRepo) -> None:
    assert repo.blocos() == ["A", "B"]
    assert repo.andares() == ["1", "2", "TÉRREO"]
    assert repo.estatisticas() == {
        "total_setores": 3,
        "total_blocos": 2,
        "total_andares": 3,
        "total_ramais": 3,
    }


def test_criar_atribui_id_slug_e_grava_override(
    repo: MemorySetorRepo, overrides: OverridesStore,
) -> None:
    setor = repo.criar({"nome": " Financeiro ", "sigla": "FIN", "ramais": ["4000"]})

    assert setor.id == 4
    assert setor.slug == "financeiro"
    assert setor.ultima_atualizacao == AGORA_ISO
    assert repo.buscar_por_slug("financeiro") is setor

    entrada = overrides.carregar()[0]
    assert entrada["slug"] == "financeiro"
    assert entrada["sigla"] == "FIN"
    assert entrada["ramais"] == ["4000"]


def test_criar_com_defaults(repo: MemorySetorRepo) -> None:
    setor = repo.criar({})
    assert setor.nome == "Novo Setor"
    assert setor.sigla == "Novo"
    assert setor.slug == "novo-setor"


def test_criar_com_slug_repetido_gera_sufixo(repo: MemorySetorRepo) -> None:
    primeiro = repo.criar({"nome": "Outro", "slug": "ti"})
    segundo = repo.criar({"nome": "Outro", "slug": "ti"})

    assert primeiro.slug.startswith("ti-")
    assert segundo.slug not in {"ti", primeiro.slug}
    assert repo.buscar_por_slug("ti").id == 1


def test_atualizar_contatos_ignora_campos_gerais(
    repo: MemorySetorRepo, overrides: OverridesStore,
) -> None:
    setor = repo.atualizar_contatos("ti", {"email": "novo@org.br", "nome": "Outro nome"})

    assert setor.email == "novo@org.br"
    assert setor.nome == "Tecnologia da Informação"
    assert setor.ultima_atualizacao == AGORA_ISO
    assert repo.buscar_por_id(1) is setor

    entrada = overrides.carregar()[0]
    assert entrada["email"] == "novo@org.br"
    assert "nome" not in entrada


def test_atualizar_parcial_aceita_campos_gerais(repo: MemorySetorRepo) -> None:
    setor = repo.atualizar_parcial("rh", {"andar": "3", "sigla": "XX"})
    assert setor.andar == "3"
    assert setor.sigla == "RH"


def test_atualizar_setor_inexistente(repo: MemorySetorRepo, overrides: OverridesStore) -> None:
    assert repo.atualizar_contatos("nao-existe", {"email": "a@b.c"}) is None
    assert repo.atualizar_parcial("nao-existe", {"nome": "x"}) is None
    assert overrides.carregar() == []


def test_registrar_acesso_incrementa(repo: MemorySetorRepo) -> None:
    repo.registrar_acesso("ti", "2000")
    setor = repo.registrar_acesso("ti", " 2000 ")
    assert setor.acessos_ramais == {"2000": 2}
    assert repo.registrar_acesso("nao-existe", "2000") is None


def test_definir_favorito_e_idempotente(repo: MemorySetorRepo) -> None:
    repo.definir_favorito("ti", "2001", True)
    setor = repo.definir_favorito("ti", "2001", True)
    assert setor.favoritos_ramais == ("2001",)

    setor = repo.definir_favorito("ti", "2001", False)
    assert setor.favoritos_ramais == ()
    setor = repo.definir_favorito("ti", "2001", False)
    assert setor.favoritos_ramais == ()


def test_importar_brutos_ignora_itens_invalidos(
    overrides: OverridesStore, relogio, brutos,
) -> None:
    repo = MemorySetorRepo(overrides, clock=relogio)
    repo.importar_brutos([*brutos, {"setor": {"nome": "Sem id"}}, {"id": "abc"}], "replace")
    assert len(repo) == 3


def test_importar_brutos_merge_preserva_outros(repo: MemorySetorRepo) -> None:
    novo = {"id": 10, "setor": {"sigla": "CMP", "nome": "Compras", "bloco": "BLOCO C"}}
    repo.importar_brutos([novo], "merge")
    assert len(repo) == 4
    assert repo.buscar_por_slug("compras").bloco == "C"


def test_importar_normalizados_merge_sobrescreve_campo_a_campo(repo: MemorySetorRepo) -> None:
    repo.importar_normalizados([{"slug": "rh", "email": "pessoal@org.br"}], "merge")

    rh = repo.buscar_por_slug("rh")
    assert len(repo) == 3
    assert rh.email == "pessoal@org.br"
    assert rh.nome == "Recursos Humanos"
    assert rh.ramais == ("3000",)


def test_importar_normalizados_merge_por_id(repo: MemorySetorRepo) -> None:
    repo.importar_normalizados([{"id": "3", "andar": "Subsolo"}], "merge")
    assert repo.buscar_por_slug("almoxarifado").andar == "Subsolo"


def test_importar_normalizados_replace(repo: MemorySetorRepo) -> None:
    repo.importar_normalizados([{"nome": "Só Um", "sigla": "SU"}, {"id": 5, "nome": "Cinco"}], "replace")

    assert len(repo) == 2
    assert repo.buscar_por_slug("ti") is None
    assert repo.buscar_por_slug("so-um").id == 1
    assert repo.buscar_por_id(5).slug == "cinco"


def test_aplicar_override_existente_nao_grava(
    repo: MemorySetorRepo, overrides: OverridesStore,
) -> None:
    setor = repo.aplicar_override({"slug": "ti", "email": "override@org.br"})
    assert setor.email == "override@org.br"
    assert repo.buscar_por_id(1).email == "override@org.br"
    assert not overrides.path.exists()


def test_aplicar_override_desconhecido_cria_setor(repo: MemorySetorRepo) -> None:
    setor = repo.aplicar_override({"slug": "setor-criado-em-runtime", "email": "a@org.br"})
    assert setor.id == 4
    assert setor.sigla == "setor-cr"
    assert setor.nome == "setor-criado-em-runtime"
    assert setor.ultima_atualizacao == AGORA_ISO


def test_persistir_tudo_grava_snapshot(repo: MemorySetorRepo, overrides: OverridesStore) -> None:
    assert repo.persistir_tudo() is True
    assert sorted(e["slug"] for e in overrides.carregar()) == ["almoxarifado", "rh", "ti"]


def test_atualizar_contatos_preserva_campos_omitidos(repo: MemorySetorRepo) -> None:
    antes = repo.buscar_por_slug("ti").to_dict()

    depois = repo.atualizar_contatos("ti", {"email": "novo@org.br", "ramais": ["2002"]}).to_dict()

    alterados = {"email", "ramais", "ultima_atualizacao"}
    assert {k: v for k, v in depois.items() if k not in alterados} == {
        k: v for k, v in antes.items() if k not in alterados
    }
    assert depois["ramais"] == ["2002"]


def test_atualizar_contatos_descarta_telefones_vazios(repo: MemorySetorRepo) -> None:
    setor = repo.atualizar_contatos(
        "ti",
        {"telefones": [{"numero": ""}, {"numero": "  "}, {"numero": "3333-4000"}, "", "3333-5000"]},
    )
    assert [t.numero for t in setor.telefones] == ["3333-4000", "3333-5000"]


def test_importar_replace_com_contagem_infinita(repo: MemorySetorRepo) -> None:
    itens = [
        {"nome": "Ok", "sigla": "OK"},
        {"nome": "X", "sigla": "X", "acessos_ramais": {"1": float("inf")}},
        {"id": float("inf"), "nome": "Sem id valido", "sigla": "SI"},
    ]

    repo.importar_normalizados(itens, "replace")

    assert _slugs(repo.listar_todos()) == ["ok", "sem-id-valido", "x"]
    assert repo.buscar_por_slug("x").acessos_ramais == {"1": 0}
    assert repo.buscar_por_slug("sem-id-valido").id == 3


class _ItemQuebrado(dict):
    def get(self, *args: object, **kwargs: object) -> object:
        raise RuntimeError("leitura interrompida")


def test_replace_que_falha_preserva_diretorio_anterior(repo: MemorySetorRepo) -> None:
    with pytest.raises(RuntimeError):
        repo.importar_normalizados([{"nome": "Ok", "sigla": "OK"}, _ItemQuebrado()], "replace")

    assert _slugs(repo.listar_todos()) == ["almoxarifado", "rh", "ti"]
    assert repo.buscar_por_slug("ok") is None
    assert repo.buscar_por_id(1).slug == "ti"


def test_importar_brutos_replace_descarta_id_infinito(repo: MemorySetorRepo, brutos) -> None:
    repo.importar_brutos([brutos[1], {"id": float("inf"), "setor": {"nome": "X"}}], "replace")
    assert _slugs(repo.listar_todos()) == ["rh"]
