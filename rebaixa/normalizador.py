"""
Normalização das linhas lidas da planilha/API para os registros canônicos.

Cada layout é uma tabela declarativa campo canônico -> lista de apelidos
aceitos no cabeçalho (a ordem da lista é a prioridade). Novos apelidos são
só mais uma entrada na tabela.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from .busca import CAMPOS_INVENTARIO, CAMPOS_PRODUTOS
from .erros import ColumnMismatchError, EmptyCatalogError
from .modelos import ItemContagem, Produto
from .utils import norm_header, para_inteiro, para_numero, para_texto

logger = logging.getLogger(__name__)

TEXTO = "texto"
NUMERO = "numero"
INTEIRO = "inteiro"


@dataclass(frozen=True)
class Campo:
    nome: str
    apelidos: tuple
    tipo: str = TEXTO


@dataclass(frozen=True)
class Layout:
    nome: str
    campos: tuple
    chaves: tuple                  # ao menos uma precisa estar preenchida
    fabrica: Callable
    obrigatorios: tuple = ()       # validação estrita do cabeçalho
    posicoes: tuple = ()           # ordem das colunas no modo posicional
    campos_busca: tuple = CAMPOS_PRODUTOS

    def campo(self, nome: str) -> Campo:
        return next(c for c in self.campos if c.nome == nome)


CAMPO_CODIGO = Campo("codigo", ("codigo", "código", "id", "sku"))
CAMPO_EAN = Campo("ean", ("ean", "gtin", "codigo_barras", "código de barras", "barcode"))
CAMPO_DESCRICAO = Campo("descricao", ("descricao", "descrição", "nome", "produto"))

LAYOUT_PRODUTOS = Layout(
    nome="produtos",
    campos=(
        CAMPO_CODIGO,
        CAMPO_DESCRICAO,
        Campo("estoque", ("estoque", "quantidade", "qtd", "stock"), INTEIRO),
        Campo("preco", ("preco", "preço", "valor", "price"), NUMERO),
        CAMPO_EAN,
    ),
    chaves=("codigo",),
    fabrica=Produto,
    obrigatorios=("codigo", "descricao", "estoque", "preco"),
)

# Planilha de consulta sem cabeçalho: EAN | Código | Descrição
LAYOUT_CONSULTA = Layout(
    nome="consulta",
    campos=(CAMPO_EAN, CAMPO_CODIGO, CAMPO_DESCRICAO),
    chaves=("codigo",),
    fabrica=Produto,
    posicoes=("ean", "codigo", "descricao"),
    campos_busca=CAMPOS_INVENTARIO,
)

# Planilha de inventário: EAN | Código | Descrição | Quantidade
LAYOUT_INVENTARIO = Layout(
    nome="inventario",
    campos=(
        CAMPO_EAN,
        CAMPO_CODIGO,
        CAMPO_DESCRICAO,
        Campo("quantidade", ("quantidade", "qtd", "contagem", "estoque"), INTEIRO),
    ),
    chaves=("codigo", "ean"),
    fabrica=ItemContagem,
    obrigatorios=("codigo", "descricao"),
    posicoes=("ean", "codigo", "descricao", "quantidade"),
    campos_busca=CAMPOS_INVENTARIO,
)

LAYOUTS = {l.nome: l for l in (LAYOUT_PRODUTOS, LAYOUT_CONSULTA, LAYOUT_INVENTARIO)}


@dataclass
class ResultadoNormalizacao:
    registros: list = field(default_factory=list)
    rejeitados: int = 0

    @property
    def total(self) -> int:
        return len(self.registros) + self.rejeitados


def _indice_cabecalho(linha: dict) -> dict:
    # rótulo normalizado -> chave original (primeira ocorrência)
    indice = {}
    for chave in linha:
        indice.setdefault(norm_header(chave), chave)
    return indice


def resolver_campo(linha: dict, apelidos, indice: Optional[dict] = None):
    """
    Procura o primeiro apelido (em ordem de prioridade) presente no cabeçalho.

    Returns:
        (True, valor) se algum apelido casou, (False, None) caso contrário.
    """
    indice = indice if indice is not None else _indice_cabecalho(linha)
    for apelido in apelidos:
        chave = indice.get(norm_header(apelido))
        if chave is not None:
            return True, linha[chave]
    return False, None


def coagir(valor, tipo: str):
    if tipo == NUMERO:
        return max(0.0, para_numero(valor))
    if tipo == INTEIRO:
        return max(0, para_inteiro(valor))
    return para_texto(valor)


def normalizar_linha(linha: dict, layout: Layout, posicional: bool = False):
    """Converte uma linha em registro canônico, ou None se a chave ficar vazia."""
    valores = {}
    if posicional:
        for pos, nome in enumerate(layout.posicoes):
            valores[nome] = coagir(linha.get(pos), layout.campo(nome).tipo)
    else:
        indice = _indice_cabecalho(linha)
        for campo in layout.campos:
            _, bruto = resolver_campo(linha, campo.apelidos, indice)
            valores[campo.nome] = coagir(bruto, campo.tipo)

    if not any(valores.get(c) for c in layout.chaves):
        return None
    return layout.fabrica(**valores)


def validar_cabecalho(linhas: list, layout: Layout):
    """Modo estrito: todas as colunas obrigatórias precisam existir no cabeçalho."""
    if not linhas or not layout.obrigatorios:
        return
    indice = _indice_cabecalho(linhas[0])
    faltando = [
        nome for nome in layout.obrigatorios
        if not resolver_campo(linhas[0], layout.campo(nome).apelidos, indice)[0]
    ]
    if faltando:
        raise ColumnMismatchError(faltando, list(linhas[0].keys()))


def validar_colunas(linhas: list, layout: Layout):
    """Modo posicional: a planilha precisa ter ao menos as colunas do layout."""
    exigidas = len(layout.posicoes)
    largura = max((max(l) + 1 for l in linhas if l), default=0)
    if largura < exigidas:
        raise ColumnMismatchError(
            list(layout.posicoes[largura:]),
            [f"coluna_{i + 1}" for i in range(largura)],
        )


def normalizar_linhas(linhas: list, layout: Layout, posicional: bool = False,
                      estrito: bool = False) -> ResultadoNormalizacao:
    """
    Normaliza todas as linhas, descartando as que ficam sem chave.

    Raises:
        ColumnMismatchError: (estrito/posicional) colunas obrigatórias ausentes
        EmptyCatalogError: nenhuma linha aproveitável
    """
    if posicional:
        if not layout.posicoes:
            raise ValueError(f"Layout '{layout.nome}' não tem modo posicional.")
        if linhas:
            validar_colunas(linhas, layout)
    elif estrito:
        validar_cabecalho(linhas, layout)

    resultado = ResultadoNormalizacao()
    for linha in linhas:
        registro = normalizar_linha(linha, layout, posicional)
        if registro is None:
            resultado.rejeitados += 1
        else:
            resultado.registros.append(registro)

    if not resultado.registros:
        raise EmptyCatalogError("Nenhuma linha válida encontrada na planilha.")

    if resultado.rejeitados:
        logger.info("%s: %d linhas sem chave descartadas", layout.nome, resultado.rejeitados)
    return resultado
