# ramais/interfaces/api/middleware/rate_limit.py
from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

UNLOCK_PATH = "/api/admin/unlock"


@dataclass
class _Janela:
    count: int
    reset_at: float


class UnlockRateLimiter:
    """Contador por origem em janela fixa: a janela comeca na primeira tentativa
    e zera sozinha quando expira. Tentativas certas tambem contam."""

    def __init__(
        self,
        max_attempts: int = 5,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._max_attempts = max_attempts
        self._window = window_seconds
        self._clock = clock
        self._janelas: dict[str, _Janela] = {}

    def registrar(self, origem: str) -> bool:
        """Conta uma tentativa. False quando a origem passou do limite."""
        now = self._clock()
        # Limpar janelas expiradas de outras origens
        self._janelas = {k: j for k, j in self._janelas.items() if now <= j.reset_at}

        janela = self._janelas.setdefault(origem, _Janela(0, now + self._window))
        janela.count += 1
        return janela.count <= self._max_attempts


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Aplica o UnlockRateLimiter do AppContext ao endpoint de desbloqueio."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.method != "POST" or request.url.path != UNLOCK_PATH:
            return await call_next(request)

        limiter: UnlockRateLimiter = request.app.state.context.limiter
        if not limiter.registrar(client_ip(request)):
            return Response(
                content='{"error": "Muitas tentativas. Tente novamente em instantes."}',
                status_code=429,
                media_type="application/json",
            )
        return await call_next(request)
