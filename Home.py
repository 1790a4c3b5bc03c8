import streamlit as st

from rebaixa import config
from rebaixa.sessao import Relato
from rebaixa.ui import atualizacao_automatica, barra_lateral, iniciar_pagina, mostrar_resultado, obter_sessao

iniciar_pagina("Início")
sessao = obter_sessao()

# --- Login ---
if not sessao.usuario:
    st.title(f"🏷️ {config.APP_TITLE}")
    st.caption("Varejo Inteligente")
    with st.form("login"):
        login = st.text_input("Usuário", placeholder="Ex.: admin")
        senha = st.text_input("Senha", type="password")
        entrar = st.form_submit_button("Iniciar Sessão", type="primary")
    if entrar:
        if sessao.entrar(login, senha):
            st.rerun()
        else:
            st.error("Credenciais inválidas. Tente novamente.")
    st.stop()

atualizacao_automatica(sessao)
barra_lateral(sessao)

if st.sidebar.button("Sair", use_container_width=True):
    sessao.sair()
    st.rerun()

# --- Conteúdo Principal ---
st.header(f"Olá, {sessao.usuario.nome}")

c1, c2, c3 = st.columns(3)
with c1:
    st.info("**Passo 1**\n\nCarregue a base em **Base de Dados** (arquivo, link ou AppSheet).")
with c2:
    st.info("**Passo 2**\n\nConsulte produtos e monte a lista em **Rebaixa**.")
with c3:
    st.info("**Passo 3**\n\nExporte a planilha e envie o e-mail da solicitação.")

st.markdown("---")
st.subheader("Sincronização da base")

cfg = sessao.estado.config_remota
if cfg.tem_link:
    st.caption(f"Link configurado: {cfg.link_compartilhado}")
elif cfg.tem_appsheet:
    st.caption(f"AppSheet configurado: tabela **{cfg.nome_tabela}**")
else:
    st.warning("⚠️ Nenhuma origem remota configurada. Use a página **Base de Dados**.")

if st.button("🔄 Sincronizar Agora", type="primary",
             disabled=sessao.ocupado or not (cfg.tem_link or cfg.tem_appsheet)):
    with st.spinner("Sincronizando..."):
        res = sessao.sincronizar(Relato.ALTO)
    mostrar_resultado(res, "Base sincronizada: {n} produtos.")

if not sessao.estado.catalogo:
    st.warning("O sistema está sem produtos. Importe a planilha (codigo, descricao, estoque, preco).")
