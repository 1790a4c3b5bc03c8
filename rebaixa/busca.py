"""Consulta pontual na base em memória (igualdade exata, sem diferenciar maiúsculas)."""
from dataclasses import dataclass
from typing import Any, Optional

from .utils import somente_digitos


SEM_CONSULTA = "sem_consulta"
ENCONTRADO = "encontrado"
NAO_ENCONTRADO = "nao_encontrado"

# Política de chaves por tipo de base
CAMPOS_PRODUTOS = ("codigo",)
CAMPOS_INVENTARIO = ("codigo", "ean")   # também a base de consulta (EAN | Código | Descrição)


@dataclass(frozen=True)
class ResultadoBusca:
    status: str
    registro: Optional[Any] = None
    indice: Optional[int] = None

    @property
    def encontrado(self) -> bool:
        return self.status == ENCONTRADO


def buscar(registros, consulta, campos=CAMPOS_PRODUTOS) -> ResultadoBusca:
    """
    Retorna o primeiro registro (ordem de importação) cujo campo chave
    é igual à consulta. Nunca altera a lista.
    """
    alvo = str(consulta or "").strip().lower()
    if not alvo:
        return ResultadoBusca(SEM_CONSULTA)

    for i, registro in enumerate(registros):
        for campo in campos:
            valor = str(getattr(registro, campo, "") or "").strip().lower()
            if valor and valor == alvo:
                return ResultadoBusca(ENCONTRADO, registro, i)
    return ResultadoBusca(NAO_ENCONTRADO)


def buscar_leitura(registros, lido, campos=CAMPOS_PRODUTOS) -> ResultadoBusca:
    """
    Como buscar(), para texto vindo do leitor de código de barras: se a
    leitura crua não casar, tenta de novo só com os dígitos.
    """
    res = buscar(registros, lido, campos)
    digitos = somente_digitos(lido)
    if res.status == NAO_ENCONTRADO and digitos and digitos != str(lido).strip():
        return buscar(registros, digitos, campos)
    return res
