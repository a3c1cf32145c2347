# ramais/infrastructure/admin_gate.py
#
# Shared-secret "master password" gate.
#
# Design decisions:
#   - Two states: LOCKED and UNLOCKED(until). A correct credential opens a
#     window of unlock_minutes; requests inside the window pass without a
#     credential and do NOT extend it. Only a new correct credential does.
#   - Expiry is evaluated lazily on the next check. There is no timer.
#   - The window is process-wide, not per client: this is a single-admin tool
#     and the secret is shared.
#   - Outside development, a missing secret or the well-known default makes the
#     gate refuse every credential, so a forgotten MASTER_PASSWORD never leaves
#     a deployed instance open with "080808".
#   - The clock is injected so tests can move time without sleeping.
from __future__ import annotations

import hmac
import time
from collections.abc import Callable
from dataclasses import dataclass

from .config import SENHA_MESTRA_PADRAO, Settings


@dataclass(frozen=True)
class AdminGateConfig:
    senha: str
    unlock_minutes: int = 5
    desenvolvimento: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> AdminGateConfig:
        return cls(
            senha=settings.master_password,
            unlock_minutes=settings.unlock_minutes,
            desenvolvimento=settings.desenvolvimento,
        )


class AdminGate:
    def __init__(self, config: AdminGateConfig, clock: Callable[[], float] = time.time) -> None:
        self._config = config
        self._clock = clock
        self._liberado_ate = 0.0

    @property
    def utilizavel(self) -> bool:
        """False quando nenhuma credencial pode abrir o portao (producao sem senha propria)."""
        if self._config.desenvolvimento:
            return True
        senha = self._config.senha
        return bool(senha) and senha != SENHA_MESTRA_PADRAO

    @property
    def aberto(self) -> bool:
        return self._clock() < self._liberado_ate

    def permitido(self, credencial: str | None) -> bool:
        """True se a janela esta aberta ou se `credencial` abre uma nova."""
        if self.aberto:
            return True
        if not self._credencial_valida(credencial):
            return False
        self._liberado_ate = self._clock() + self._config.unlock_minutes * 60
        return True

    def restante_ms(self) -> int:
        return max(0, int((self._liberado_ate - self._clock()) * 1000))

    def _credencial_valida(self, credencial: str | None) -> bool:
        if not self.utilizavel or credencial is None:
            return False
        candidata = credencial.strip()
        if not candidata:
            return False
        esperada = self._config.senha or SENHA_MESTRA_PADRAO
        return hmac.compare_digest(candidata.encode("utf-8"), esperada.encode("utf-8"))
