# tests/integration/conftest.py
from __future__ import annotations

import json
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from ramais.infrastructure.config import Settings
from ramais.interfaces.api.context import AppContext, build_context
from ramais.interfaces.api.main import create_app

SENHA = "segredo"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings isoladas: assets em tmp_path, senha propria, ambiente de desenvolvimento."""
    return Settings(
        master_password=SENHA,
        unlock_minutes=5,
        assets_dir=tmp_path,
        data_file="",
        backups_max=5,
        backups_retention_days=0,
        app_env="development",
        app_version="1.2.3",
        release_notes="notas",
        cors_origins=("http://localhost:5173",),
    )


@pytest.fixture()
def arquivo_base(settings: Settings, brutos: list[dict[str, Any]]) -> Path:
    caminho = settings.assets_dir / "dados normalizado.json"
    caminho.write_text(json.dumps(brutos, ensure_ascii=False), encoding="utf-8")
    return caminho


@pytest.fixture()
def context(settings: Settings, arquivo_base: Path, relogio: Callable[[], float]) -> AppContext:
    return build_context(settings, clock=relogio)


@pytest.fixture()
def client(settings: Settings, context: AppContext) -> Generator[TestClient, None, None]:
    """TestClient sobre um diretorio carregado do arquivo base em tmp_path."""
    app = create_app(settings, context)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def admin() -> dict[str, str]:
    return {"x-master-password": SENHA}
