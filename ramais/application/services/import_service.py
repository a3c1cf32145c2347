# ramais/application/services/import_service.py
from __future__ import annotations

import io
import re
from collections.abc import Mapping
from typing import Any

import polars as pl

from ramais.domain.setor.repository import ModoImportacao, SetorRepository

from ..dtos.stats_dto import ImportResultDTO, StatsDTO

_SEPARADOR_MULTIPLO = re.compile(r";\s*")
_COLUNAS_MULTIPLAS = ("ramais", "telefones", "telefones_externos")


class ImportacaoInvalida(ValueError):
    """Corpo de importacao que nao pode ser interpretado (vira 400 na API)."""


def modo_importacao(valor: str | None) -> ModoImportacao:
    return "merge" if valor == "merge" else "replace"


def _lista(celula: str) -> list[str]:
    return [v for v in _SEPARADOR_MULTIPLO.split(celula) if v]


def ler_csv(texto: str) -> list[dict[str, Any]]:
    """CSV exportado (ou editado numa planilha) → dicts no formato normalizado.

    Cabecalhos sao comparados sem diferenciar maiusculas. Colunas ausentes
    viram texto vazio. Listas usam ";" como separador dentro da celula.
    """
    if not texto.strip():
        raise ImportacaoInvalida("CSV vazio")
    try:
        df = pl.read_csv(io.BytesIO(texto.encode("utf-8")), infer_schema_length=0)
    except pl.exceptions.PolarsError as err:
        raise ImportacaoInvalida(f"CSV invalido: {err}") from err
    if df.height == 0:
        raise ImportacaoInvalida("CSV deve incluir cabecalho e ao menos uma linha")

    df = df.rename({c: c.strip().lower() for c in df.columns}).fill_null("")
    itens = []
    for linha in df.iter_rows(named=True):
        valores = {k: str(v or "") for k, v in linha.items()}
        item: dict[str, Any] = {
            nome: valores.get(nome, "")
            for nome in (
                "id", "sigla", "nome", "slug", "bloco", "andar", "email",
                "ramal_principal", "celular", "whatsapp", "observacoes",
                "ultima_atualizacao",
            )
        }
        item.update({nome: _lista(valores.get(nome, "")) for nome in _COLUNAS_MULTIPLAS})
        item["responsaveis"] = [{"nome": n} for n in _lista(valores.get("responsaveis", ""))]
        itens.append(item)
    return itens


class ImportService:
    def __init__(self, repo: SetorRepository) -> None:
        self._repo = repo

    def importar_json(
        self, corpo: Any, modo: ModoImportacao, persistir: bool = False,
    ) -> ImportResultDTO:
        if not isinstance(corpo, list):
            raise ImportacaoInvalida("O corpo deve ser uma lista de setores")
        itens = [i for i in corpo if isinstance(i, Mapping)]
        # Formato bruto (arquivo base) tem a chave aninhada "setor".
        if itens and itens[0].get("setor"):
            self._repo.importar_brutos(itens, modo)
        else:
            self._repo.importar_normalizados(itens, modo)
        return self._resultado(modo, persistir)

    def importar_csv(
        self, texto: str, modo: ModoImportacao, persistir: bool = False,
    ) -> ImportResultDTO:
        self._repo.importar_normalizados(ler_csv(texto), modo)
        return self._resultado(modo, persistir)

    def _resultado(self, modo: ModoImportacao, persistir: bool) -> ImportResultDTO:
        persistido = self._repo.persistir_tudo() if persistir else False
        return ImportResultDTO(
            mode=modo,
            count=len(self._repo),
            stats=StatsDTO(**self._repo.estatisticas()),
            persisted=persistido,
        )
