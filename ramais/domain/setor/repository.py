# ramais/domain/setor/repository.py
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Literal, Protocol

from .entities import Setor

ModoImportacao = Literal["replace", "merge"]


class SetorRepository(Protocol):
    def __len__(self) -> int: ...
    def listar_todos(self) -> list[Setor]: ...
    def buscar_por_id(self, setor_id: int) -> Setor | None: ...
    def buscar_por_slug(self, slug: str) -> Setor | None: ...
    def pesquisar(
        self, query: str | None = None, bloco: str | None = None, andar: str | None = None,
    ) -> list[Setor]: ...
    def blocos(self) -> list[str]: ...
    def andares(self) -> list[str]: ...
    def estatisticas(self) -> dict[str, int]: ...
    def criar(self, dados: Mapping[str, Any]) -> Setor: ...
    def atualizar_contatos(self, slug: str, campos: Mapping[str, Any]) -> Setor | None: ...
    def atualizar_parcial(self, slug: str, campos: Mapping[str, Any]) -> Setor | None: ...
    def registrar_acesso(self, slug: str, numero: str) -> Setor | None: ...
    def definir_favorito(self, slug: str, numero: str, favorito: bool) -> Setor | None: ...
    def importar_brutos(self, itens: Sequence[Mapping[str, Any]], modo: ModoImportacao) -> None: ...
    def importar_normalizados(
        self, itens: Sequence[Mapping[str, Any]], modo: ModoImportacao,
    ) -> None: ...
    def persistir_tudo(self) -> bool: ...
