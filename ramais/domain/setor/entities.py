# ramais/domain/setor/entities.py
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .value_objects import (
    Responsavel,
    Telefone,
    gerar_slug,
    limpar_lista,
    limpar_texto,
    normalizar_acessos,
    normalizar_andar,
    normalizar_bloco,
    normalizar_responsaveis,
    normalizar_telefones,
    sem_duplicatas,
)

CAMPOS_CONTATO = frozenset({
    "email",
    "ramal_principal",
    "ramais",
    "telefones",
    "telefones_externos",
    "celular",
    "whatsapp",
    "outros_contatos",
})

CAMPOS_GERAIS = CAMPOS_CONTATO | {
    "nome",
    "bloco",
    "andar",
    "observacoes",
    "favoritos_ramais",
    "acessos_ramais",
}

# Campos que um override pode carregar. id nunca: e atribuido pelo diretorio.
CAMPOS_OVERRIDE = CAMPOS_GERAIS | {"sigla", "responsaveis"}

CAMPOS_SENSIVEIS = ("celular", "whatsapp")


def _normalizar_campo(nome: str, valor: Any) -> Any:
    if nome in ("telefones", "telefones_externos"):
        return normalizar_telefones(valor)
    if nome in ("ramais", "outros_contatos"):
        return limpar_lista(valor)
    if nome == "favoritos_ramais":
        return sem_duplicatas(limpar_lista(valor))
    if nome == "responsaveis":
        return normalizar_responsaveis(valor)
    if nome == "acessos_ramais":
        return normalizar_acessos(valor)
    return limpar_texto(valor)


def _valores_conhecidos(campos: Mapping[str, Any]) -> dict[str, Any]:
    """Filtra e normaliza os campos editaveis. None conta como ausente."""
    conhecidos = {f.name for f in dataclasses.fields(Setor)} - {"id", "slug"}
    return {
        nome: _normalizar_campo(nome, valor)
        for nome, valor in campos.items()
        if nome in conhecidos and valor is not None
    }


@dataclass(frozen=True)
class Setor:
    """Aggregate Root do diretorio. Imutavel: toda alteracao gera uma nova
    instancia via com_campos(), que o repositorio reindexa."""

    id: int
    slug: str
    sigla: str = ""
    nome: str = ""
    bloco: str = ""
    andar: str = ""
    observacoes: str = ""
    email: str = ""
    ramal_principal: str = ""
    ramais: tuple[str, ...] = ()
    telefones: tuple[Telefone, ...] = ()
    telefones_externos: tuple[Telefone, ...] = ()
    responsaveis: tuple[Responsavel, ...] = ()
    celular: str = ""
    whatsapp: str = ""
    outros_contatos: tuple[str, ...] = ()
    favoritos_ramais: tuple[str, ...] = ()
    acessos_ramais: dict[str, int] = field(default_factory=dict, hash=False)
    ultima_atualizacao: str = ""

    def __post_init__(self) -> None:
        if not self.slug.strip():
            raise ValueError("Setor exige slug nao-vazio")

    @classmethod
    def from_campos(cls, setor_id: int, slug: str, campos: Mapping[str, Any]) -> Setor:
        """Constroi um setor a partir de um dict esparso, com defaults vazios."""
        valores = _valores_conhecidos(campos)
        return cls(id=setor_id, slug=slug, **valores)

    @classmethod
    def from_raw(cls, item: Mapping[str, Any]) -> Setor:
        """Formato do arquivo base: {id, setor: {...}, responsaveis, contatos, ultima_atualizacao}."""
        setor = item.get("setor") or {}
        contatos = item.get("contatos") or {}
        campos = {
            "sigla": setor.get("sigla"),
            "nome": setor.get("nome"),
            "bloco": normalizar_bloco(setor.get("bloco")),
            "andar": normalizar_andar(setor.get("andar")),
            "observacoes": setor.get("observacoes"),
            "email": setor.get("email"),
            "ramal_principal": setor.get("ramal_principal"),
            "ramais": setor.get("ramais"),
            "telefones": setor.get("telefones"),
            "telefones_externos": setor.get("telefones_externos"),
            "responsaveis": item.get("responsaveis"),
            "celular": contatos.get("celular"),
            "whatsapp": contatos.get("whatsapp"),
            "outros_contatos": contatos.get("outros"),
            "ultima_atualizacao": item.get("ultima_atualizacao"),
        }
        setor_id = int(item["id"])
        slug = (
            limpar_texto(setor.get("slug"))
            or gerar_slug(limpar_texto(setor.get("nome")))
            or f"setor-{setor_id}"
        )
        return cls.from_campos(setor_id, slug, campos)

    def com_campos(self, campos: Mapping[str, Any]) -> Setor:
        """Merge esparso: so os campos presentes em `campos` mudam."""
        valores = _valores_conhecidos(campos)
        return dataclasses.replace(self, **valores)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "slug": self.slug,
            "sigla": self.sigla,
            "nome": self.nome,
            "bloco": self.bloco,
            "andar": self.andar,
            "observacoes": self.observacoes,
            "email": self.email,
            "ramal_principal": self.ramal_principal,
            "ramais": list(self.ramais),
            "telefones": [t.to_dict() for t in self.telefones],
            "telefones_externos": [t.to_dict() for t in self.telefones_externos],
            "responsaveis": [r.to_dict() for r in self.responsaveis],
            "celular": self.celular,
            "whatsapp": self.whatsapp,
            "outros_contatos": list(self.outros_contatos),
            "favoritos_ramais": list(self.favoritos_ramais),
            "acessos_ramais": dict(self.acessos_ramais),
            "ultima_atualizacao": self.ultima_atualizacao,
        }

    def to_override(self, campos: frozenset[str] = CAMPOS_OVERRIDE) -> dict[str, Any]:
        """Entrada do arquivo de overrides: slug + os campos pedidos + carimbo."""
        completo = self.to_dict()
        entrada: dict[str, Any] = {"slug": self.slug}
        entrada.update({k: completo[k] for k in sorted(campos) if k in completo})
        entrada["ultima_atualizacao"] = self.ultima_atualizacao
        return entrada
