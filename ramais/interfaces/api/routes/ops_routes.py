# ramais/interfaces/api/routes/ops_routes.py
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ramais.application.dtos.stats_dto import ReadyDTO, VersionDTO
from ramais.interfaces.api.context import AppContext
from ramais.interfaces.api.dependencies import get_context

router = APIRouter()
probes = APIRouter()


@router.get("/version", response_model=VersionDTO)
def get_version(context: AppContext = Depends(get_context)) -> VersionDTO:  # noqa: B008
    settings = context.settings
    return VersionDTO(
        version=settings.app_version,
        env=settings.app_env,
        server_started_at=context.started_at,
        total_setores=len(context.repo),
        release_notes=settings.release_notes,
    )


@router.get("/persist/status")
def get_persist_status(context: AppContext = Depends(get_context)) -> dict[str, Any]:  # noqa: B008
    return context.overrides.status()


@probes.get("/healthz")
def healthz() -> dict[str, bool]:
    return {"ok": True}


@probes.get("/readyz", response_model=ReadyDTO)
def readyz(context: AppContext = Depends(get_context)) -> JSONResponse:  # noqa: B008
    report = context.load_report
    total = len(context.repo)
    # Base quebrada so derruba a prontidao se nada foi carregado (nem overrides).
    pronto = report.ok or total > 0
    body = ReadyDTO(
        ready=pronto,
        total_setores=total,
        data_file=report.data_file,
        load_error=report.error,
    )
    return JSONResponse(content=body.model_dump(), status_code=200 if pronto else 503)
