"""Peças compartilhadas pelas páginas Streamlit."""
import streamlit as st

from . import config
from .logger import configurar_logging
from .sessao import IGNORADO, ResultadoImportacao, SessaoControlador
from .utils import format_br_int


def iniciar_pagina(titulo: str):
    st.set_page_config(page_title=f"{titulo} | {config.APP_TITLE}", layout="wide")
    configurar_logging()


def obter_sessao() -> SessaoControlador:
    if "sessao" not in st.session_state:
        st.session_state["sessao"] = SessaoControlador()
    return st.session_state["sessao"]


def exigir_login(sessao: SessaoControlador):
    if not sessao.usuario:
        st.warning("Faça login na página inicial para continuar.")
        st.stop()


def atualizacao_automatica(sessao: SessaoControlador):
    # Modo silencioso: falhas ficam só no log
    res = sessao.sincronizar_se_vencido()
    if res is not None and res.ok:
        st.toast(f"Base atualizada automaticamente ({format_br_int(len(res.registros))} produtos).")


def mostrar_resultado(res: ResultadoImportacao, sucesso: str):
    if not res.mostrar:
        return
    if res.ok:
        msg = sucesso.format(n=format_br_int(len(res.registros)))
        if res.rejeitados:
            msg += f" ({res.rejeitados} linhas sem código ignoradas)"
        st.success(msg)
    elif res.status == IGNORADO:
        st.info("Já existe uma importação em andamento. Aguarde.")
    else:
        st.error(res.erro)


def barra_lateral(sessao: SessaoControlador):
    with st.sidebar:
        st.subheader(config.APP_TITLE)
        if sessao.usuario:
            st.caption(f"Usuário: **{sessao.usuario.nome}** ({sessao.usuario.perfil})")
        st.metric("Produtos na base", format_br_int(len(sessao.estado.catalogo)))
        st.metric("Itens na rebaixa", len(sessao.pedido))
        if sessao.estado.ultima_sincronizacao:
            st.caption(f"Última sincronização: {sessao.estado.ultima_sincronizacao:%d/%m/%Y %H:%M}")
