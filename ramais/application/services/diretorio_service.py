# ramais/application/services/diretorio_service.py
from __future__ import annotations

from typing import Any

from ramais.domain.setor.entities import Setor
from ramais.domain.setor.repository import SetorRepository

from ..dtos.setor_dto import PaginaSetoresDTO, SetorDTO, TopRamalDTO
from ..dtos.stats_dto import StatsDTO


def _numerico(valor: str) -> bool:
    # isdigit() aceita "²", que int() recusa
    return valor.isascii() and valor.isdecimal()


class DiretorioService:
    def __init__(self, repo: SetorRepository) -> None:
        self._repo = repo

    def listar(
        self,
        query: str | None = None,
        bloco: str | None = None,
        andar: str | None = None,
    ) -> list[Setor]:
        if query or bloco or andar:
            return self._repo.pesquisar(query, bloco, andar)
        return self._repo.listar_todos()

    def paginar(
        self, setores: list[Setor], page: int, page_size: int, admin: bool,
    ) -> PaginaSetoresDTO:
        inicio = (page - 1) * page_size
        fatia = setores[inicio:inicio + page_size]
        return PaginaSetoresDTO(
            items=self.serializar_lista(fatia, admin),
            total=len(setores),
            page=page,
            page_size=page_size,
        )

    def obter(self, id_ou_slug: str) -> Setor | None:
        """Parametro numerico busca por id; qualquer outro texto, por slug."""
        if _numerico(id_ou_slug):
            return self._repo.buscar_por_id(int(id_ou_slug))
        return self._repo.buscar_por_slug(id_ou_slug)

    def resolver_slug(self, id_ou_slug: str) -> str:
        """Converte id numerico no slug correspondente (ou devolve o parametro)."""
        if _numerico(id_ou_slug):
            setor = self._repo.buscar_por_id(int(id_ou_slug))
            if setor is not None:
                return setor.slug
        return id_ou_slug

    def top_ramais(self, setor: Setor, limit: int) -> list[TopRamalDTO]:
        ordenados = sorted(setor.acessos_ramais.items(), key=lambda item: item[1], reverse=True)
        return [TopRamalDTO(numero=numero, count=count) for numero, count in ordenados[:limit]]

    def estatisticas(self) -> StatsDTO:
        return StatsDTO(**self._repo.estatisticas())

    def blocos(self) -> list[str]:
        return self._repo.blocos()

    def andares(self) -> list[str]:
        return self._repo.andares()

    @staticmethod
    def serializar(setor: Setor, admin: bool) -> dict[str, Any]:
        return SetorDTO.from_entity(setor).serializar(admin)

    @classmethod
    def serializar_lista(cls, setores: list[Setor], admin: bool) -> list[dict[str, Any]]:
        return [cls.serializar(s, admin) for s in setores]
