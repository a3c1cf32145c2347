# ramais/interfaces/api/routes/admin_routes.py
from fastapi import APIRouter, Depends, HTTPException

from ramais.application.dtos.stats_dto import UnlockDTO
from ramais.infrastructure.admin_gate import AdminGate
from ramais.interfaces.api.dependencies import get_credencial, get_gate

router = APIRouter()


@router.post("/admin/unlock", response_model=UnlockDTO)
def desbloquear_admin(
    credencial: str | None = Depends(get_credencial),  # noqa: B008
    gate: AdminGate = Depends(get_gate),  # noqa: B008
) -> UnlockDTO:
    # O limite de tentativas por origem e aplicado antes, no RateLimitMiddleware.
    if not gate.permitido(credencial):
        raise HTTPException(status_code=403, detail="Senha mestra invalida")
    return UnlockDTO(unlock_ms=gate.restante_ms())
