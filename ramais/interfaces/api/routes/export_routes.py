# ramais/interfaces/api/routes/export_routes.py
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import Response

from ramais.application.dtos.stats_dto import ImportResultDTO
from ramais.application.services.export_service import ExportService
from ramais.application.services.import_service import (
    ImportacaoInvalida,
    ImportService,
    modo_importacao,
)
from ramais.infrastructure.repositories.memory_setor_repo import MemorySetorRepo
from ramais.interfaces.api.dependencies import (
    exigir_admin,
    get_export_service,
    get_import_service,
    get_repo,
)

router = APIRouter(dependencies=[Depends(exigir_admin)])


def _persistir(valor: str | None) -> bool:
    return (valor or "").lower() in {"1", "true", "yes"}


async def corpo_texto(request: Request) -> str:
    return (await request.body()).decode("utf-8", errors="replace")


@router.get("/setores/export")
def exportar_setores(
    format: str = "json",  # noqa: A002
    repo: MemorySetorRepo = Depends(get_repo),  # noqa: B008
    export_service: ExportService = Depends(get_export_service),  # noqa: B008
) -> Response:
    formato = "csv" if format.lower() == "csv" else "json"
    carimbo = datetime.now(timezone.utc).isoformat().replace(":", "-").replace(".", "-")
    headers = {"Content-Disposition": f'attachment; filename="setores_{carimbo}.{formato}"'}
    setores = repo.listar_todos()

    if formato == "csv":
        return Response(
            content=export_service.exportar_csv(setores),
            media_type="text/csv; charset=utf-8",
            headers=headers,
        )
    return Response(
        content=export_service.exportar_json(setores),
        media_type="application/json",
        headers=headers,
    )


@router.post("/setores/import", response_model=ImportResultDTO)
def importar_setores(
    corpo: Any = Body(None),  # noqa: B008
    mode: str | None = None,
    persist: str | None = None,
    service: ImportService = Depends(get_import_service),  # noqa: B008
) -> ImportResultDTO:
    try:
        return service.importar_json(corpo, modo_importacao(mode), _persistir(persist))
    except ImportacaoInvalida as err:
        raise HTTPException(status_code=400, detail=str(err)) from err


@router.post("/setores/import-csv", response_model=ImportResultDTO)
def importar_setores_csv(
    texto: str = Depends(corpo_texto),  # noqa: B008
    mode: str | None = None,
    persist: str | None = None,
    service: ImportService = Depends(get_import_service),  # noqa: B008
) -> ImportResultDTO:
    try:
        return service.importar_csv(texto, modo_importacao(mode), _persistir(persist))
    except ImportacaoInvalida as err:
        raise HTTPException(status_code=400, detail=str(err)) from err
