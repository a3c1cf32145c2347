# ramais/application/dtos/stats_dto.py
from pydantic import BaseModel, Field


class StatsDTO(BaseModel):
    total_setores: int = Field(serialization_alias="totalSetores")
    total_blocos: int = Field(serialization_alias="totalBlocos")
    total_andares: int = Field(serialization_alias="totalAndares")
    total_ramais: int = Field(serialization_alias="totalRamais")


class ImportResultDTO(BaseModel):
    ok: bool = True
    mode: str
    count: int
    stats: StatsDTO
    persisted: bool = False


class VersionDTO(BaseModel):
    version: str
    env: str
    server_started_at: str = Field(serialization_alias="serverStartedAt")
    total_setores: int = Field(serialization_alias="totalSetores")
    release_notes: str = Field(serialization_alias="releaseNotes")


class ReadyDTO(BaseModel):
    ready: bool
    total_setores: int
    data_file: str | None
    load_error: str | None


class UnlockDTO(BaseModel):
    ok: bool = True
    unlock_ms: int
