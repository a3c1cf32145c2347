# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from ramais.infrastructure.overrides_store import OverridesStore
from ramais.infrastructure.repositories.memory_setor_repo import MemorySetorRepo


class FakeClock:
    """Relogio controlado pelo teste (segundos, como time.time)."""

    def __init__(self, inicio: float = 1_700_000_000.0) -> None:
        self.agora = inicio

    def __call__(self) -> float:
        return self.agora

    def avancar(self, segundos: float) -> None:
        self.agora += segundos


@pytest.fixture()
def relogio() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def brutos() -> list[dict[str, Any]]:
    """Tres setores no formato do arquivo base (com prefixos BLOCO / sufixos ANDAR)."""
    return [
        {
            "id": 1,
            "setor": {
                "sigla": "TI",
                "nome": "Tecnologia da Informação",
                "bloco": "BLOCO A",
                "andar": "2º ANDAR",
                "slug": "ti",
                "email": "ti@org.br",
                "ramal_principal": "2000",
                "ramais": ["2000", "2001"],
                "telefones": [{"numero": "(11) 3333-2000", "link": "tel:1133332000"}],
                "telefones_externos": [],
            },
            "responsaveis": [{"nome": "João Silva"}],
            "contatos": {
                "celular": "11999990000",
                "whatsapp": "11999990001",
                "outros": ["plantao 2099"],
            },
            "ultima_atualizacao": "2024-01-01T00:00:00+00:00",
        },
        {
            "id": 2,
            "setor": {
                "sigla": "RH",
                "nome": "Recursos Humanos",
                "bloco": "BLOCO B",
                "andar": "TÉRREO",
                "slug": "rh",
                "email": "rh@org.br",
                "ramais": ["3000"],
            },
            "responsaveis": [{"nome": "Maria Souza"}],
            "contatos": {},
            "ultima_atualizacao": "2024-01-01T00:00:00+00:00",
        },
        {
            "id": 3,
            "setor": {
                "sigla": "ALM",
                "nome": "Almoxarifado",
                "bloco": "BLOCO A",
                "andar": "1º ANDAR",
                "slug": "almoxarifado",
            },
            "responsaveis": [],
            "contatos": {},
            "ultima_atualizacao": "2024-01-01T00:00:00+00:00",
        },
    ]


@pytest.fixture()
def overrides(tmp_path: Path) -> OverridesStore:
    return OverridesStore(
        tmp_path / "setores_overrides.json",
        tmp_path / "setores_overrides.backups",
        max_backups=5,
    )


@pytest.fixture()
def repo(
    overrides: OverridesStore, relogio: FakeClock, brutos: list[dict[str, Any]],
) -> MemorySetorRepo:
    """Diretorio com os tres setores de exemplo, overrides em tmp_path."""
    r = MemorySetorRepo(overrides, clock=relogio)
    r.importar_brutos(brutos, "replace")
    return r
