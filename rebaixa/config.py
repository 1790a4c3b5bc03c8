import os
import datetime as dt

import streamlit as st

APP_TITLE = "Rebaixa Pro"

# Diretório de persistência local (equivalente ao localStorage do navegador)
STORAGE_DIR = os.environ.get("REBAIXA_STORAGE_DIR", ".streamlit/rebaixa_store")

LOG_DIR = os.environ.get("REBAIXA_LOG_DIR", "logs")

HTTP_TIMEOUT = 30

# Atualização automática da base: uma vez por "dia"
INTERVALO_ATUALIZACAO = dt.timedelta(days=1)

APPSHEET_BASE_URL = "https://api.appsheet.com/api/v2/apps"
APPSHEET_LOCALE = "pt-BR"

EMAIL_DESTINO_PADRAO = "compras@example.com"
EMAIL_ASSUNTO = "Solicitação de Produtos"

ARQUIVO_PEDIDO = "solicitacao_produtos.xlsx"


def segredo(chave: str, padrao=None):
    """Lê um valor de st.secrets e, na falta dele, das variáveis de ambiente."""
    try:
        if chave in st.secrets:
            return st.secrets[chave]
    except Exception:
        # st.secrets levanta erro quando não existe secrets.toml
        pass
    return os.environ.get(chave, padrao)
