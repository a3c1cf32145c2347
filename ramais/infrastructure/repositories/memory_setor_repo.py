# ramais/infrastructure/repositories/memory_setor_repo.py
from __future__ import annotations

import threading
import time
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from ramais.domain.setor.entities import CAMPOS_CONTATO, CAMPOS_GERAIS, CAMPOS_OVERRIDE, Setor
from ramais.domain.setor.repository import ModoImportacao
from ramais.domain.setor.value_objects import (
    chave_ordenacao,
    gerar_slug,
    limpar_texto,
    normalizar_texto,
)
from ramais.infrastructure.log import log
from ramais.infrastructure.overrides_store import OverridesStore

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"

# Erros de um item isolado numa importacao: o item e descartado, o resto segue.
_ITEM_INVALIDO = (KeyError, TypeError, ValueError, AttributeError, OverflowError)


def _base36(valor: int) -> str:
    if valor == 0:
        return "0"
    digitos = []
    while valor:
        valor, resto = divmod(valor, 36)
        digitos.append(_BASE36[resto])
    return "".join(reversed(digitos))


def _ordenar(setores: list[Setor]) -> list[Setor]:
    return sorted(setores, key=lambda s: chave_ordenacao(s.nome))


def _filtro_ativo(valor: str | None) -> bool:
    return bool(valor and valor.strip()) and valor != "all"


class MemorySetorRepo:
    """Diretorio em memoria indexado por id e por slug.

    Os dois indices apontam sempre para a mesma instancia de Setor. Toda
    mutacao troca a instancia nos dois e, quando vem de uma edicao, grava o
    override correspondente. "Nao encontrado" e sempre None, nunca excecao.
    """

    def __init__(
        self,
        overrides: OverridesStore,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._overrides = overrides
        self._clock = clock
        self._por_id: dict[int, Setor] = {}
        self._por_slug: dict[str, Setor] = {}
        self._lock = threading.RLock()

    # ---- leitura ----

    def __len__(self) -> int:
        with self._lock:
            return len(self._por_id)

    def listar_todos(self) -> list[Setor]:
        return _ordenar(self._snapshot())

    def buscar_por_id(self, setor_id: int) -> Setor | None:
        with self._lock:
            return self._por_id.get(setor_id)

    def buscar_por_slug(self, slug: str) -> Setor | None:
        with self._lock:
            return self._por_slug.get(slug)

    def pesquisar(
        self,
        query: str | None = None,
        bloco: str | None = None,
        andar: str | None = None,
    ) -> list[Setor]:
        resultados = self._snapshot()

        if query:
            termo = normalizar_texto(query)
            bloco_buscado = termo[6:].strip() if termo.startswith("bloco ") else ""

            def casa(setor: Setor) -> bool:
                campos = (setor.nome, setor.sigla, setor.bloco, setor.andar, setor.email)
                geral = any(termo in normalizar_texto(c) for c in campos) or any(
                    termo in normalizar_texto(r.nome) for r in setor.responsaveis
                )
                if bloco_buscado:
                    return geral or normalizar_texto(setor.bloco) == bloco_buscado
                return geral

            resultados = [s for s in resultados if casa(s)]

        if _filtro_ativo(bloco):
            resultados = [s for s in resultados if s.bloco == bloco]
        if _filtro_ativo(andar):
            resultados = [s for s in resultados if s.andar == andar]

        return _ordenar(resultados)

    def blocos(self) -> list[str]:
        return sorted({s.bloco for s in self._snapshot() if s.bloco}, key=chave_ordenacao)

    def andares(self) -> list[str]:
        return sorted({s.andar for s in self._snapshot() if s.andar}, key=chave_ordenacao)

    def estatisticas(self) -> dict[str, int]:
        setores = self._snapshot()
        return {
            "total_setores": len(setores),
            "total_blocos": len({s.bloco for s in setores if s.bloco}),
            "total_andares": len({s.andar for s in setores if s.andar}),
            "total_ramais": sum(len(s.ramais) for s in setores),
        }

    # ---- escrita ----

    def criar(self, dados: Mapping[str, Any]) -> Setor:
        with self._lock:
            setor = self._montar_novo(dados)
            self._indexar(setor)
            self._overrides.upsert(setor.to_override())
            return setor

    def atualizar_contatos(self, slug: str, campos: Mapping[str, Any]) -> Setor | None:
        return self._atualizar(slug, campos, CAMPOS_CONTATO)

    def atualizar_parcial(self, slug: str, campos: Mapping[str, Any]) -> Setor | None:
        return self._atualizar(slug, campos, CAMPOS_GERAIS)

    def registrar_acesso(self, slug: str, numero: str) -> Setor | None:
        with self._lock:
            setor = self._por_slug.get(slug)
            if setor is None:
                return None
            chave = limpar_texto(numero)
            acessos = dict(setor.acessos_ramais)
            acessos[chave] = acessos.get(chave, 0) + 1
            return self.atualizar_parcial(slug, {"acessos_ramais": acessos})

    def definir_favorito(self, slug: str, numero: str, favorito: bool) -> Setor | None:
        with self._lock:
            setor = self._por_slug.get(slug)
            if setor is None:
                return None
            chave = limpar_texto(numero)
            favoritos = list(setor.favoritos_ramais)
            if favorito and chave not in favoritos:
                favoritos.append(chave)
            if not favorito:
                favoritos = [f for f in favoritos if f != chave]
            return self.atualizar_parcial(slug, {"favoritos_ramais": favoritos})

    def importar_brutos(self, itens: Sequence[Mapping[str, Any]], modo: ModoImportacao) -> None:
        setores = []
        for item in itens:
            try:
                setores.append(Setor.from_raw(item))
            except _ITEM_INVALIDO as err:
                log(f"Item bruto ignorado na importacao: {err!r}")

        def indexar_todos() -> None:
            for setor in setores:
                self._indexar(setor)

        with self._lock:
            if modo == "replace":
                self._substituir(indexar_todos)
            else:
                for setor in setores:
                    self._mesclar(setor.id, setor.slug, setor.to_dict())

    def importar_normalizados(
        self, itens: Sequence[Mapping[str, Any]], modo: ModoImportacao,
    ) -> None:
        def importar_todos() -> None:
            for item in itens:
                try:
                    self._importar_item(item, modo)
                except _ITEM_INVALIDO as err:
                    log(f"Item ignorado na importacao: {err!r}")

        with self._lock:
            if modo == "replace":
                self._substituir(importar_todos)
            else:
                importar_todos()

    def aplicar_override(self, override: Mapping[str, Any]) -> Setor:
        """Aplica uma entrada do arquivo de overrides sem regrava-lo (uso no startup)."""
        slug = override["slug"]
        with self._lock:
            existente = self._por_slug.get(slug)
            if existente is not None:
                atualizado = existente.com_campos(override)
                self._indexar(atualizado)
                return atualizado
            campos = {
                **override,
                "sigla": override.get("sigla") or slug[:8] or "NOVO",
                "nome": override.get("nome") or slug or "Novo Setor",
            }
            novo = Setor.from_campos(self._proximo_id(), slug, campos)
            if not novo.ultima_atualizacao:
                novo = novo.com_campos({"ultima_atualizacao": self._agora_iso()})
            self._indexar(novo)
            return novo

    def persistir_tudo(self) -> bool:
        with self._lock:
            snapshot = [s.to_override() for s in self._por_id.values()]
        return self._overrides.persistir(snapshot)

    # ---- internos ----

    def _snapshot(self) -> list[Setor]:
        # Setor e imutavel: a lista copiada sob o lock e uma visao consistente
        with self._lock:
            return list(self._por_id.values())

    def _atualizar(
        self, slug: str, campos: Mapping[str, Any], permitidos: frozenset[str],
    ) -> Setor | None:
        with self._lock:
            existente = self._por_slug.get(slug)
            if existente is None:
                return None
            aceitos = {k: v for k, v in campos.items() if k in permitidos}
            atualizado = existente.com_campos({**aceitos, "ultima_atualizacao": self._agora_iso()})
            self._indexar(atualizado)
            self._overrides.upsert(atualizado.to_override(permitidos))
            return atualizado

    def _montar_novo(self, dados: Mapping[str, Any]) -> Setor:
        setor_id = self._proximo_id()
        nome = limpar_texto(dados.get("nome")) or limpar_texto(dados.get("sigla")) or "Novo Setor"
        sigla = limpar_texto(dados.get("sigla")) or nome.split(" ")[0] or "NOVO"
        slug = limpar_texto(dados.get("slug")) or gerar_slug(nome) or f"setor-{setor_id}"
        campos = {
            **{k: v for k, v in dados.items() if k in CAMPOS_OVERRIDE},
            "nome": nome,
            "sigla": sigla,
            "ultima_atualizacao": self._agora_iso(),
        }
        return Setor.from_campos(setor_id, self._slug_livre(slug), campos)

    def _novo_importado(self, setor_id: int | None, slug: str, item: Mapping[str, Any]) -> Setor:
        setor_id = setor_id if setor_id is not None and setor_id not in self._por_id else self._proximo_id()
        slug = slug or gerar_slug(limpar_texto(item.get("nome"))) or f"setor-{setor_id}"
        return Setor.from_campos(setor_id, self._slug_livre(slug), item)

    def _mesclar(self, setor_id: int | None, slug: str, item: Mapping[str, Any]) -> None:
        """Upsert por slug (fallback id) com sobrescrita rasa campo a campo."""
        existente = (slug and self._por_slug.get(slug)) or (
            self._por_id.get(setor_id) if setor_id is not None else None
        )
        if existente is None:
            self._indexar(self._novo_importado(setor_id, slug, item))
            return
        mesclado = existente.com_campos(item)
        if slug and slug != existente.slug and slug not in self._por_slug:
            self._por_slug.pop(existente.slug, None)
            mesclado = Setor.from_campos(mesclado.id, slug, mesclado.to_dict())
        self._indexar(mesclado)

    def _importar_item(self, item: Mapping[str, Any], modo: ModoImportacao) -> None:
        setor_id = self._id_informado(item.get("id"))
        slug = limpar_texto(item.get("slug"))
        if modo == "merge":
            self._mesclar(setor_id, slug, item)
        else:
            self._indexar(self._novo_importado(setor_id, slug, item))

    def _substituir(self, montar: Callable[[], None]) -> None:
        """Monta o diretorio em indices novos. Se `montar` falhar, os anteriores voltam."""
        anteriores = (self._por_id, self._por_slug)
        self._por_id, self._por_slug = {}, {}
        try:
            montar()
        except BaseException:
            self._por_id, self._por_slug = anteriores
            raise

    def _indexar(self, setor: Setor) -> None:
        anterior = self._por_id.get(setor.id)
        if anterior is not None and anterior.slug != setor.slug:
            self._por_slug.pop(anterior.slug, None)
        self._por_id[setor.id] = setor
        self._por_slug[setor.slug] = setor

    def _proximo_id(self) -> int:
        return max(self._por_id, default=0) + 1

    def _slug_livre(self, slug: str) -> str:
        if slug not in self._por_slug:
            return slug
        candidato = f"{slug}-{_base36(int(self._clock() * 1000))}"
        contador = 2
        base = candidato
        while candidato in self._por_slug:
            candidato = f"{base}-{contador}"
            contador += 1
        return candidato

    def _agora_iso(self) -> str:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc).isoformat()

    @staticmethod
    def _id_informado(valor: object) -> int | None:
        if valor is None or valor == "":
            return None
        try:
            return int(valor)  # type: ignore[call-overload]
        except (TypeError, ValueError, OverflowError):
            return None
