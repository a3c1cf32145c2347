# ramais/infrastructure/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

SENHA_MESTRA_PADRAO = "080808"


@dataclass(frozen=True)
class Settings:
    master_password: str
    unlock_minutes: int
    assets_dir: Path
    data_file: str
    backups_max: int
    backups_retention_days: int
    app_env: str
    app_version: str
    release_notes: str
    cors_origins: tuple[str, ...]

    @property
    def desenvolvimento(self) -> bool:
        return self.app_env == "development"

    @property
    def overrides_path(self) -> Path:
        return self.assets_dir / "setores_overrides.json"

    @property
    def backups_dir(self) -> Path:
        return self.assets_dir / "setores_overrides.backups"


def _int_env(nome: str, padrao: int) -> int:
    try:
        return int(os.environ.get(nome, str(padrao)).strip())
    except ValueError:
        return padrao


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    origins = os.environ.get("CORS_ORIGINS", "http://localhost:5173")
    return Settings(
        master_password=os.environ.get("MASTER_PASSWORD", "").strip(),
        unlock_minutes=max(1, _int_env("MASTER_UNLOCK_MINUTES", 5)),
        assets_dir=Path(os.environ.get("ASSETS_DIR", str(Path.cwd() / "attached_assets"))),
        data_file=os.environ.get("DATA_FILE", "").strip(),
        backups_max=max(1, _int_env("SETORES_BACKUPS_MAX", 20)),
        backups_retention_days=max(0, _int_env("SETORES_BACKUPS_RETENTION_DAYS", 0)),
        app_env=os.environ.get("APP_ENV", "development").strip().lower(),
        app_version=os.environ.get("APP_VERSION", "0.0.0"),
        release_notes=os.environ.get("APP_RELEASE_NOTES", ""),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )
