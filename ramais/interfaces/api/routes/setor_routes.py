# ramais/interfaces/api/routes/setor_routes.py
import re
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from ramais.application.dtos.setor_dto import (
    AcessoRamalResultDTO,
    ContatosUpdateDTO,
    FavoritoRamalResultDTO,
    PaginaSetoresDTO,
    RamalAcessoDTO,
    RamalFavoritoDTO,
    SetorCreateDTO,
    SetorUpdateDTO,
    TopRamalDTO,
)
from ramais.application.services.diretorio_service import DiretorioService
from ramais.infrastructure.repositories.memory_setor_repo import MemorySetorRepo
from ramais.interfaces.api.dependencies import (
    admin_liberado,
    exigir_admin,
    get_diretorio_service,
    get_repo,
)

router = APIRouter()

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_VERDADEIROS = {"1", "true", "yes", "on"}


@router.get("/setores", response_model=None)
def listar_setores(
    query: str | None = None,
    bloco: str | None = None,
    andar: str | None = None,
    paged: str | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=200, alias="pageSize"),
    admin: bool = Depends(admin_liberado),  # noqa: B008
    service: DiretorioService = Depends(get_diretorio_service),  # noqa: B008
) -> list[dict[str, Any]] | PaginaSetoresDTO:
    setores = service.listar(query, bloco, andar)
    if paged and paged.lower() in _VERDADEIROS:
        return service.paginar(setores, page, page_size, admin)
    return service.serializar_lista(setores, admin)


@router.post("/setores", status_code=201, dependencies=[Depends(exigir_admin)])
def criar_setor(
    payload: SetorCreateDTO,
    repo: MemorySetorRepo = Depends(get_repo),  # noqa: B008
) -> dict[str, Any]:
    email = payload.email.strip()
    if email and not _EMAIL.match(email):
        raise HTTPException(status_code=400, detail="E-mail invalido")
    nome = payload.nome.strip()
    sigla = payload.sigla.strip()
    if not nome or not sigla:
        raise HTTPException(status_code=400, detail="Informe nome e sigla")

    dados = payload.model_dump(exclude_none=True)
    dados.update(nome=nome, sigla=sigla, email=email)
    setor = repo.criar(dados)
    return DiretorioService.serializar(setor, admin=True)


@router.get("/setores/{id_ou_slug}")
def obter_setor(
    id_ou_slug: str,
    admin: bool = Depends(admin_liberado),  # noqa: B008
    service: DiretorioService = Depends(get_diretorio_service),  # noqa: B008
) -> dict[str, Any]:
    setor = service.obter(id_ou_slug)
    if setor is None:
        raise HTTPException(status_code=404, detail="Setor nao encontrado")
    return service.serializar(setor, admin)


@router.patch("/setores/{id_ou_slug}/contatos", dependencies=[Depends(exigir_admin)])
def atualizar_contatos(
    id_ou_slug: str,
    payload: ContatosUpdateDTO | None = None,
    repo: MemorySetorRepo = Depends(get_repo),  # noqa: B008
    service: DiretorioService = Depends(get_diretorio_service),  # noqa: B008
) -> dict[str, Any]:
    campos = payload.campos() if payload else {}
    setor = repo.atualizar_contatos(service.resolver_slug(id_ou_slug), campos)
    if setor is None:
        raise HTTPException(status_code=404, detail="Setor nao encontrado")
    return service.serializar(setor, admin=True)


@router.patch("/setores/{id_ou_slug}", dependencies=[Depends(exigir_admin)])
def atualizar_setor(
    id_ou_slug: str,
    payload: SetorUpdateDTO | None = None,
    repo: MemorySetorRepo = Depends(get_repo),  # noqa: B008
    service: DiretorioService = Depends(get_diretorio_service),  # noqa: B008
) -> dict[str, Any]:
    campos = payload.campos() if payload else {}
    setor = repo.atualizar_parcial(service.resolver_slug(id_ou_slug), campos)
    if setor is None:
        raise HTTPException(status_code=404, detail="Setor nao encontrado")
    return service.serializar(setor, admin=True)


@router.post(
    "/setores/{id_ou_slug}/ramais/access",
    response_model=AcessoRamalResultDTO,
    dependencies=[Depends(exigir_admin)],
)
def registrar_acesso_ramal(
    id_ou_slug: str,
    payload: RamalAcessoDTO | None = None,
    repo: MemorySetorRepo = Depends(get_repo),  # noqa: B008
    service: DiretorioService = Depends(get_diretorio_service),  # noqa: B008
) -> AcessoRamalResultDTO:
    numero = (payload.numero or "").strip() if payload else ""
    if not numero:
        raise HTTPException(status_code=400, detail="Numero do ramal e obrigatorio")
    setor = repo.registrar_acesso(service.resolver_slug(id_ou_slug), numero)
    if setor is None:
        raise HTTPException(status_code=404, detail="Setor nao encontrado")
    return AcessoRamalResultDTO(acessos_ramais=setor.acessos_ramais)


@router.post(
    "/setores/{id_ou_slug}/ramais/favorite",
    response_model=FavoritoRamalResultDTO,
    dependencies=[Depends(exigir_admin)],
)
def marcar_ramal_favorito(
    id_ou_slug: str,
    payload: RamalFavoritoDTO | None = None,
    repo: MemorySetorRepo = Depends(get_repo),  # noqa: B008
    service: DiretorioService = Depends(get_diretorio_service),  # noqa: B008
) -> FavoritoRamalResultDTO:
    numero = (payload.numero or "").strip() if payload else ""
    if not numero or payload is None or payload.favorite is None:
        raise HTTPException(
            status_code=400, detail="Campos 'numero' e 'favorite' sao obrigatorios",
        )
    setor = repo.definir_favorito(service.resolver_slug(id_ou_slug), numero, payload.favorite)
    if setor is None:
        raise HTTPException(status_code=404, detail="Setor nao encontrado")
    return FavoritoRamalResultDTO(favoritos_ramais=list(setor.favoritos_ramais))


@router.get("/setores/{id_ou_slug}/ramais/top", response_model=list[TopRamalDTO])
def top_ramais(
    id_ou_slug: str,
    limit: int = 5,
    service: DiretorioService = Depends(get_diretorio_service),  # noqa: B008
) -> list[TopRamalDTO]:
    setor = service.obter(id_ou_slug)
    if setor is None:
        raise HTTPException(status_code=404, detail="Setor nao encontrado")
    return service.top_ramais(setor, max(1, min(50, limit)))
