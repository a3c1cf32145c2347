# ramais/interfaces/api/routes/stats_routes.py
from fastapi import APIRouter, Depends

from ramais.application.dtos.stats_dto import StatsDTO
from ramais.application.services.diretorio_service import DiretorioService
from ramais.interfaces.api.dependencies import get_diretorio_service

router = APIRouter()


@router.get("/statistics", response_model=StatsDTO)
def get_statistics(
    service: DiretorioService = Depends(get_diretorio_service),  # noqa: B008
) -> StatsDTO:
    return service.estatisticas()


@router.get("/blocos", response_model=list[str])
def listar_blocos(
    service: DiretorioService = Depends(get_diretorio_service),  # noqa: B008
) -> list[str]:
    return service.blocos()


@router.get("/andares", response_model=list[str])
def listar_andares(
    service: DiretorioService = Depends(get_diretorio_service),  # noqa: B008
) -> list[str]:
    return service.andares()
