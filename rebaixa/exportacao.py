"""Exportação das listas: planilha para download e rascunho de e-mail."""
import datetime as dt
import io
from urllib.parse import quote, urlencode

import pandas as pd

from . import config
from .utils import format_br_currency

COLUNAS_PEDIDO = ["Código", "Descrição", "Quantidade", "Preço Original", "Sugestão de Preço"]
COLUNAS_CONTAGEM = ["EAN", "Código", "Descrição", "Quantidade"]


def pedido_para_dataframe(itens) -> pd.DataFrame:
    return pd.DataFrame(
        [[i.codigo, i.descricao, i.quantidade, i.preco_original, i.preco_sugerido] for i in itens],
        columns=COLUNAS_PEDIDO,
    )


def contagem_para_dataframe(itens) -> pd.DataFrame:
    return pd.DataFrame(
        [[i.ean, i.codigo, i.descricao, i.quantidade] for i in itens if i.quantidade > 0],
        columns=COLUNAS_CONTAGEM,
    )


def exportar_pedido_xlsx(itens) -> bytes:
    bio = io.BytesIO()
    with pd.ExcelWriter(bio, engine="openpyxl") as writer:
        pedido_para_dataframe(itens).to_excel(writer, sheet_name="Solicitacao", index=False)
    return bio.getvalue()


def exportar_contagem_csv(itens) -> bytes:
    return contagem_para_dataframe(itens).to_csv(index=False).encode("utf-8")


def nome_arquivo_contagem(agora: dt.datetime = None) -> str:
    agora = agora or dt.datetime.now()
    return f"inventario_{agora.strftime('%Y-%m-%d_%H%M%S')}.csv"


def montar_corpo_email(itens, arquivo: str = config.ARQUIVO_PEDIDO) -> str:
    linhas = [
        "Olá,",
        "",
        "Solicito os seguintes produtos conforme lista abaixo:",
        "",
        "CÓDIGO | DESCRIÇÃO | QTD | P. ORIGINAL | SUGERIDO",
        "-------|-----------|-----|-------------|----------",
    ]
    for i in itens:
        linhas.append(
            f"{i.codigo} | {i.descricao} | {i.quantidade} | "
            f"{format_br_currency(i.preco_original)} | {format_br_currency(i.preco_sugerido)}"
        )
    linhas += [
        "",
        f"Total de itens: {len(itens)}",
        "",
        f'O arquivo "{arquivo}" foi baixado. Por favor, anexe-o a este e-mail antes de enviar.',
    ]
    return "\n".join(linhas)


def url_gmail(destino: str, assunto: str, corpo: str) -> str:
    params = {"view": "cm", "fs": "1", "to": destino, "su": assunto, "body": corpo}
    return "https://mail.google.com/mail/?" + urlencode(params, quote_via=quote)


def url_mailto(destino: str, assunto: str, corpo: str) -> str:
    return f"mailto:{quote(destino, safe='@')}?" + urlencode({"subject": assunto, "body": corpo}, quote_via=quote)
