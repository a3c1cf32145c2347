# ramais/interfaces/api/dependencies.py
from fastapi import Depends, HTTPException, Request

from ramais.application.services.diretorio_service import DiretorioService
from ramais.application.services.export_service import ExportService
from ramais.application.services.import_service import ImportService
from ramais.infrastructure.admin_gate import AdminGate
from ramais.infrastructure.repositories.memory_setor_repo import MemorySetorRepo
from ramais.interfaces.api.context import AppContext

MASTER_HEADER = "x-master-password"
MASTER_FIELD = "master_password"


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_repo(context: AppContext = Depends(get_context)) -> MemorySetorRepo:  # noqa: B008
    return context.repo


def get_gate(context: AppContext = Depends(get_context)) -> AdminGate:  # noqa: B008
    return context.gate


def get_diretorio_service(
    repo: MemorySetorRepo = Depends(get_repo),  # noqa: B008
) -> DiretorioService:
    return DiretorioService(repo)


def get_import_service(repo: MemorySetorRepo = Depends(get_repo)) -> ImportService:  # noqa: B008
    return ImportService(repo)


def get_export_service() -> ExportService:
    return ExportService()


async def get_credencial(request: Request) -> str | None:
    """Senha mestra do request: header, depois campo do corpo JSON, depois query."""
    header = request.headers.get(MASTER_HEADER)
    if header:
        return header

    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            corpo = await request.json()
        except ValueError:
            corpo = None
        if isinstance(corpo, dict) and corpo.get(MASTER_FIELD):
            return str(corpo[MASTER_FIELD])

    return request.query_params.get(MASTER_FIELD) or None


def admin_liberado(
    gate: AdminGate = Depends(get_gate),  # noqa: B008
    credencial: str | None = Depends(get_credencial),  # noqa: B008
) -> bool:
    """Para rotas de leitura: decide se campos sensiveis podem sair."""
    return gate.permitido(credencial)


def exigir_admin(liberado: bool = Depends(admin_liberado)) -> None:  # noqa: B008
    if not liberado:
        raise HTTPException(status_code=403, detail="Senha mestra invalida")
