"""
Leitura de planilhas (arquivo local, arquivo arrastado ou bytes baixados).

Produz uma lista de linhas no formato {rótulo_do_cabeçalho: valor_bruto}
ou, no modo posicional, {índice_da_coluna: valor_bruto}.
"""
import io
import logging
from typing import Optional

import pandas as pd

from .erros import EmptyCatalogError, ParseError
from .utils import vazio, para_texto

logger = logging.getLogger(__name__)

EXTENSOES_EXCEL = (".xlsx", ".xlsm")
EXTENSOES_TEXTO = (".csv", ".txt", ".tsv")
ZIP_MAGIC = b"PK\x03\x04"


def detectar_formato(conteudo: bytes, nome_arquivo: Optional[str] = None) -> str:
    """Retorna 'xlsx' ou 'csv' pela extensão ou, sem nome, pelo conteúdo."""
    nome = (nome_arquivo or "").lower().strip()
    if nome.endswith(EXTENSOES_EXCEL):
        return "xlsx"
    if nome.endswith(EXTENSOES_TEXTO):
        return "csv"
    if nome.endswith(".xls"):
        raise ParseError("Formato .xls não suportado. Salve a planilha como .xlsx ou .csv.")
    if conteudo.startswith(ZIP_MAGIC):
        return "xlsx"
    if b"\x00" in conteudo[:1024]:
        raise ParseError("Arquivo binário não reconhecido como planilha.")
    return "csv"


def _ler_csv(conteudo: bytes) -> pd.DataFrame:
    for encoding in ("utf-8-sig", "latin-1"):
        try:
            return pd.read_csv(
                io.BytesIO(conteudo), header=None, dtype=str, keep_default_na=False,
                sep=None, engine="python", encoding=encoding,
            )
        except UnicodeDecodeError:
            continue
        except pd.errors.EmptyDataError:
            raise
        except Exception:
            # Sniffer não achou separador (planilha de uma coluna só)
            try:
                return pd.read_csv(
                    io.BytesIO(conteudo), header=None, dtype=str,
                    keep_default_na=False, encoding=encoding,
                )
            except UnicodeDecodeError:
                continue
    raise ParseError("Não consegui decodificar o arquivo de texto.")


def _ler_dataframe(conteudo: bytes, nome_arquivo: Optional[str]) -> pd.DataFrame:
    if not conteudo or not conteudo.strip():
        raise EmptyCatalogError("A planilha está vazia.")

    formato = detectar_formato(conteudo, nome_arquivo)
    try:
        if formato == "xlsx":
            # Primeira aba, sem cabeçalho: o cabeçalho é decidido depois
            return pd.read_excel(io.BytesIO(conteudo), sheet_name=0, header=None, dtype=object)
        return _ler_csv(conteudo)
    except pd.errors.EmptyDataError:
        raise EmptyCatalogError("A planilha está vazia.")
    except (ParseError, EmptyCatalogError):
        raise
    except Exception as e:
        nome = nome_arquivo or "conteúdo baixado"
        raise ParseError(f"Não consegui ler o arquivo '{nome}': {e}") from e


def _celulas(valores) -> list:
    # NaN/strings vazias viram None; remove células vazias no fim da linha
    celulas = [None if vazio(v) or (isinstance(v, str) and v.strip() == "") else v for v in valores]
    while celulas and celulas[-1] is None:
        celulas.pop()
    return celulas


def _rotulos(cabecalho: list, largura: int) -> list:
    rotulos, vistos = [], {}
    for i in range(largura):
        rotulo = para_texto(cabecalho[i]) if i < len(cabecalho) else ""
        rotulo = rotulo or f"coluna_{i + 1}"
        if rotulo in vistos:
            vistos[rotulo] += 1
            rotulo = f"{rotulo}_{vistos[rotulo]}"
        else:
            vistos[rotulo] = 0
        rotulos.append(rotulo)
    return rotulos


def ler_planilha(conteudo: bytes, nome_arquivo: Optional[str] = None, posicional: bool = False) -> list:
    """
    Lê a primeira aba de uma planilha e devolve as linhas na ordem de origem.

    Args:
        conteudo: bytes do arquivo (xlsx ou texto delimitado)
        nome_arquivo: nome original, usado para decidir o formato
        posicional: se True, ignora o cabeçalho; a linha 0 é descartada
            e as colunas são referenciadas por posição (0, 1, 2...)

    Raises:
        ParseError: conteúdo não é uma planilha legível
        EmptyCatalogError: nenhuma linha de dados
    """
    df = _ler_dataframe(conteudo, nome_arquivo)
    linhas_brutas = [_celulas(r) for r in df.itertuples(index=False, name=None)]

    if posicional:
        dados = [c for c in linhas_brutas[1:] if c]
        linhas = [dict(enumerate(c)) for c in dados]
    else:
        nao_vazias = [c for c in linhas_brutas if c]
        if not nao_vazias:
            raise EmptyCatalogError("A planilha está vazia.")
        cabecalho, dados = nao_vazias[0], nao_vazias[1:]
        largura = max([len(cabecalho)] + [len(c) for c in dados])
        rotulos = _rotulos(cabecalho, largura)
        linhas = [
            {rotulos[i]: (c[i] if i < len(c) else None) for i in range(largura)}
            for c in dados
        ]

    if not linhas:
        raise EmptyCatalogError("A planilha não tem linhas de dados.")

    logger.info("Planilha lida: %d linhas (%s)", len(linhas), nome_arquivo or "sem nome")
    return linhas
