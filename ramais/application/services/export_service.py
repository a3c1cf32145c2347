# ramais/application/services/export_service.py
from __future__ import annotations

import json
from collections.abc import Sequence

from ramais.domain.setor.entities import Setor

COLUNAS_CSV = (
    "id",
    "sigla",
    "nome",
    "slug",
    "bloco",
    "andar",
    "email",
    "ramal_principal",
    "responsaveis",
    "ramais",
    "telefones",
    "telefones_externos",
    "celular",
    "whatsapp",
    "observacoes",
    "ultima_atualizacao",
)

SEPARADOR_MULTIPLO = "; "

_EXIGE_ASPAS = (";", ",", "\n", '"')


def _celula(valor: object) -> str:
    texto = "" if valor is None else str(valor)
    if any(c in texto for c in _EXIGE_ASPAS):
        return '"' + texto.replace('"', '""') + '"'
    return texto


def _linha(setor: Setor) -> list[str]:
    return [
        str(setor.id),
        setor.sigla,
        setor.nome,
        setor.slug,
        setor.bloco,
        setor.andar,
        setor.email,
        setor.ramal_principal,
        SEPARADOR_MULTIPLO.join(r.nome for r in setor.responsaveis),
        SEPARADOR_MULTIPLO.join(setor.ramais),
        SEPARADOR_MULTIPLO.join(t.numero for t in setor.telefones),
        SEPARADOR_MULTIPLO.join(t.numero for t in setor.telefones_externos),
        setor.celular,
        setor.whatsapp,
        setor.observacoes,
        setor.ultima_atualizacao,
    ]


class ExportService:
    def exportar_json(self, setores: Sequence[Setor]) -> str:
        return json.dumps([s.to_dict() for s in setores], ensure_ascii=False, indent=2)

    def exportar_csv(self, setores: Sequence[Setor]) -> str:
        """Uma linha por setor, na ordem recebida. Campos multiplos unidos por "; ".

        Celulas com ";", ",", aspas ou quebra de linha vao entre aspas duplas
        (aspas internas dobradas), o que o importador CSV desfaz.
        """
        linhas = [",".join(COLUNAS_CSV)]
        linhas.extend(",".join(_celula(v) for v in _linha(s)) for s in setores)
        return "\n".join(linhas)
