# ramais/domain/setor/value_objects.py
from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

_ANDAR_SUFIXO = re.compile(r"\s*[º°ª¬∫]*\s*ANDAR", re.IGNORECASE)
_SLUG_INVALIDO = re.compile(r"[^a-z0-9]+")


def normalizar_texto(texto: object) -> str:
    """Minusculas, sem acentos e sem espacos nas pontas. Base da busca."""
    if not texto:
        return ""
    decomposto = unicodedata.normalize("NFD", str(texto).lower())
    return "".join(c for c in decomposto if not unicodedata.combining(c)).strip()


def chave_ordenacao(nome: str) -> tuple[str, str]:
    return (normalizar_texto(nome), nome)


def gerar_slug(texto: str) -> str:
    return _SLUG_INVALIDO.sub("-", normalizar_texto(texto)).strip("-")


def limpar_texto(valor: object) -> str:
    if valor is None:
        return ""
    return str(valor).strip()


def limpar_lista(valores: object) -> tuple[str, ...]:
    """Trim em cada item e descarta vazios. Qualquer coisa que nao seja lista vira ()."""
    if not isinstance(valores, (list, tuple)):
        return ()
    itens = (limpar_texto(v) for v in valores)
    return tuple(v for v in itens if v)


def normalizar_bloco(bloco: object) -> str:
    texto = limpar_texto(bloco)
    if texto.upper().startswith("BLOCO "):
        return texto[6:].strip()
    return texto


def normalizar_andar(andar: object) -> str:
    texto = limpar_texto(andar)
    if " ANDAR" in texto.upper():
        return _ANDAR_SUFIXO.sub("", texto, count=1).strip()
    return texto


@dataclass(frozen=True)
class Telefone:
    """Telefone de um setor. numero nunca vazio (garantido por from_raw)."""

    numero: str
    link: str = ""
    ramal_original: str = ""

    @classmethod
    def from_raw(cls, raw: object) -> Telefone | None:
        if isinstance(raw, str):
            numero = raw.strip()
            return cls(numero=numero) if numero else None
        if isinstance(raw, Mapping):
            numero = limpar_texto(raw.get("numero"))
            if not numero:
                return None
            return cls(
                numero=numero,
                link=limpar_texto(raw.get("link")),
                ramal_original=limpar_texto(raw.get("ramal_original")),
            )
        if isinstance(raw, Telefone):
            return raw
        return None

    def to_dict(self) -> dict[str, str]:
        return {"numero": self.numero, "link": self.link, "ramal_original": self.ramal_original}


def normalizar_telefones(valores: object) -> tuple[Telefone, ...]:
    if not isinstance(valores, (list, tuple)):
        return ()
    telefones = (Telefone.from_raw(v) for v in valores)
    return tuple(t for t in telefones if t is not None)


@dataclass(frozen=True)
class Responsavel:
    nome: str
    cargo: str = ""

    @classmethod
    def from_raw(cls, raw: object) -> Responsavel | None:
        if isinstance(raw, str):
            return cls(nome=raw.strip())
        if isinstance(raw, Mapping):
            return cls(nome=limpar_texto(raw.get("nome")), cargo=limpar_texto(raw.get("cargo")))
        if isinstance(raw, Responsavel):
            return raw
        return None

    def to_dict(self) -> dict[str, str]:
        return {"nome": self.nome, "cargo": self.cargo}


def normalizar_responsaveis(valores: Iterable[object] | object) -> tuple[Responsavel, ...]:
    if not isinstance(valores, (list, tuple)):
        return ()
    responsaveis = (Responsavel.from_raw(v) for v in valores)
    return tuple(r for r in responsaveis if r is not None)


def normalizar_acessos(valores: object) -> dict[str, int]:
    if not isinstance(valores, Mapping):
        return {}
    acessos: dict[str, int] = {}
    for chave, contagem in valores.items():
        numero = limpar_texto(chave)
        if not numero:
            continue
        try:
            acessos[numero] = int(contagem)
        except (TypeError, ValueError, OverflowError):
            acessos[numero] = 0
    return acessos


def sem_duplicatas(valores: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(valores))
