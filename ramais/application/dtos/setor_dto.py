# ramais/application/dtos/setor_dto.py
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from ramais.domain.setor.entities import CAMPOS_SENSIVEIS, Setor


def _como_texto(valor: object) -> object:
    # Numeros viram texto (ramais chegam como 2045 ou "2045"); o resto segue para o pydantic.
    if isinstance(valor, (int, float)) and not isinstance(valor, bool):
        return str(valor)
    return valor


Texto = Annotated[str, BeforeValidator(_como_texto)]


class TelefoneDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    numero: Texto = ""
    link: Texto = ""
    ramal_original: Texto = ""

    @model_validator(mode="before")
    @classmethod
    def _aceitar_texto(cls, data: Any) -> Any:
        if isinstance(data, (str, int)):
            return {"numero": str(data)}
        return data


class ResponsavelDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    nome: Texto = ""
    cargo: Texto = ""


class ContatosUpdateDTO(BaseModel):
    """PATCH /setores/{slug}/contatos. Campos ausentes nao sao alterados."""

    model_config = ConfigDict(extra="ignore")

    email: Texto | None = None
    ramal_principal: Texto | None = None
    ramais: list[Texto] | None = None
    telefones: list[TelefoneDTO] | None = None
    telefones_externos: list[TelefoneDTO] | None = None
    celular: Texto | None = None
    whatsapp: Texto | None = None
    outros_contatos: list[Texto] | None = None

    def campos(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class SetorUpdateDTO(ContatosUpdateDTO):
    """PATCH /setores/{slug}: contatos + campos gerais."""

    nome: Texto | None = None
    bloco: Texto | None = None
    andar: Texto | None = None
    observacoes: Texto | None = None


class SetorCreateDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    nome: Texto = ""
    sigla: Texto = ""
    slug: Texto | None = None
    bloco: Texto = ""
    andar: Texto = ""
    email: Texto = ""
    observacoes: Texto = ""
    ramal_principal: Texto = ""
    ramais: list[Texto] = []
    telefones: list[TelefoneDTO] = []
    telefones_externos: list[TelefoneDTO] = []
    responsaveis: list[ResponsavelDTO] = []
    celular: Texto = ""
    whatsapp: Texto = ""
    outros_contatos: list[Texto] = []


class RamalAcessoDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    numero: Texto | None = None


class RamalFavoritoDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    numero: Texto | None = None
    favorite: bool | None = None


class SetorDTO(BaseModel):
    id: int
    slug: str
    sigla: str
    nome: str
    bloco: str
    andar: str
    observacoes: str
    email: str
    ramal_principal: str
    ramais: list[str]
    telefones: list[TelefoneDTO]
    telefones_externos: list[TelefoneDTO]
    responsaveis: list[ResponsavelDTO]
    celular: str
    whatsapp: str
    outros_contatos: list[str]
    favoritos_ramais: list[str]
    acessos_ramais: dict[str, int]
    ultima_atualizacao: str

    @classmethod
    def from_entity(cls, setor: Setor) -> "SetorDTO":
        return cls(**setor.to_dict())

    def serializar(self, admin: bool) -> dict[str, Any]:
        """Sem admin: remove celular/whatsapp e esvazia responsaveis."""
        if admin:
            return self.model_dump()
        dados = self.model_dump(exclude=set(CAMPOS_SENSIVEIS))
        dados["responsaveis"] = []
        return dados


class TopRamalDTO(BaseModel):
    numero: str
    count: int


class AcessoRamalResultDTO(BaseModel):
    ok: bool = True
    acessos_ramais: dict[str, int]


class FavoritoRamalResultDTO(BaseModel):
    ok: bool = True
    favoritos_ramais: list[str]


class PaginaSetoresDTO(BaseModel):
    items: list[dict[str, Any]]
    total: int
    page: int
    page_size: int = Field(serialization_alias="pageSize")
