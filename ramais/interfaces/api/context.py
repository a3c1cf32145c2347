# ramais/interfaces/api/context.py
#
# Everything a running app owns: settings, the directory, the overrides store,
# the admin gate and the unlock rate limiter.
#
# Design decisions:
#   - One AppContext per FastAPI app, kept in app.state. No module-level
#     singletons, so each test builds an isolated app over its own tmp dir.
#   - The clock is shared by the gate, the limiter and the repo, so a test
#     advancing a fake clock moves every time-dependent piece together.
from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ramais.infrastructure.admin_gate import AdminGate, AdminGateConfig
from ramais.infrastructure.config import Settings
from ramais.infrastructure.data_loader import LoadReport, carregar_diretorio
from ramais.infrastructure.overrides_store import OverridesStore
from ramais.infrastructure.repositories.memory_setor_repo import MemorySetorRepo
from ramais.interfaces.api.middleware.rate_limit import UnlockRateLimiter


@dataclass
class AppContext:
    settings: Settings
    repo: MemorySetorRepo
    overrides: OverridesStore
    gate: AdminGate
    limiter: UnlockRateLimiter
    load_report: LoadReport
    clock: Callable[[], float] = time.time
    started_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
    )


def build_context(settings: Settings, clock: Callable[[], float] = time.time) -> AppContext:
    """Monta o contexto e carrega o diretorio (base + overrides)."""
    overrides = OverridesStore(
        settings.overrides_path,
        settings.backups_dir,
        max_backups=settings.backups_max,
        retention_days=settings.backups_retention_days,
    )
    repo = MemorySetorRepo(overrides, clock=clock)
    report = carregar_diretorio(repo, overrides, settings.assets_dir, settings.data_file)
    return AppContext(
        settings=settings,
        repo=repo,
        overrides=overrides,
        gate=AdminGate(AdminGateConfig.from_settings(settings), clock=clock),
        limiter=UnlockRateLimiter(clock=clock),
        load_report=report,
        clock=clock,
    )
