"""
Origens remotas da base de produtos:
- link compartilhado do Google Drive/Sheets (baixa o arquivo)
- API do AppSheet (ação Find, devolve as linhas já como dicionários)
"""
import logging
import re
from typing import Optional
from urllib.parse import quote

import requests

from . import config
from .erros import CredentialError, RemoteFetchError
from .modelos import ConfigRemota

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/125 Safari/537.36"
)


def _requests_session() -> requests.Session:
    # Sem retry automático: uma falha é devolvida ao chamador
    s = requests.Session()
    s.headers.update({"User-Agent": USER_AGENT})
    return s


def gs_export_xlsx_url(sheet_id: str) -> str:
    return f"https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=xlsx"


def drive_download_url(file_id: str) -> str:
    return f"https://drive.google.com/uc?export=download&id={file_id}"


def extract_sheet_id_from_url(url: str) -> Optional[str]:
    if not url: return None
    m = re.search(r"/spreadsheets/d/([a-zA-Z0-9\-_]+)", url)
    return m.group(1) if m else None


def extract_file_id_from_url(url: str) -> Optional[str]:
    if not url: return None
    m = re.search(r"/file/d/([a-zA-Z0-9\-_]+)", url) or re.search(r"[?&]id=([a-zA-Z0-9\-_]+)", url)
    return m.group(1) if m else None


def link_para_download(url: str) -> str:
    """Converte o link de compartilhamento em URL de download direto."""
    url = (url or "").strip()
    if not url:
        raise RemoteFetchError("Nenhum link de planilha configurado.")
    if not url.lower().startswith(("http://", "https://")):
        raise RemoteFetchError(f"Link inválido: {url}")
    if "export?format=" in url or "uc?export=download" in url:
        return url

    sid = extract_sheet_id_from_url(url)
    if sid:
        return gs_export_xlsx_url(sid)
    fid = extract_file_id_from_url(url)
    if fid:
        return drive_download_url(fid)
    if "drive.google.com" in url or "docs.google.com" in url:
        raise RemoteFetchError("Link inválido do Google Drive (esperado .../d/<ID>/...).")
    # link direto para o arquivo
    return url


def baixar_por_link(url: str) -> bytes:
    """
    Baixa a planilha apontada pelo link compartilhado.

    Raises:
        RemoteFetchError: link malformado, falha de rede ou HTTP
    """
    destino = link_para_download(url)
    s = _requests_session()
    try:
        r = s.get(destino, timeout=config.HTTP_TIMEOUT)
        r.raise_for_status()
    except requests.HTTPError as e:
        sc = getattr(e.response, "status_code", "?")
        raise RemoteFetchError(
            f"Falha ao baixar a planilha (HTTP {sc}). Verifique o compartilhamento "
            f"'Qualquer pessoa com o link - Leitor'.\nURL: {destino}"
        ) from e
    except requests.RequestException as e:
        raise RemoteFetchError(f"Falha de conexão ao baixar a planilha: {e}") from e

    if "text/html" in r.headers.get("Content-Type", "").lower():
        # Drive devolve a página de login quando o arquivo não é público
        raise RemoteFetchError(
            "O link devolveu uma página HTML em vez da planilha. "
            "Certifique-se de que o acesso está como 'Qualquer pessoa com o link'."
        )

    logger.info("Planilha baixada: %d bytes de %s", len(r.content), destino)
    return r.content


def appsheet_action_url(cfg: ConfigRemota) -> str:
    return f"{config.APPSHEET_BASE_URL}/{cfg.app_id}/tables/{quote(cfg.nome_tabela)}/Action"


def buscar_appsheet(cfg: ConfigRemota) -> list:
    """
    Consulta todas as linhas da tabela AppSheet (ação Find, filtro vazio).

    Raises:
        CredentialError: credenciais ausentes ou recusadas (401/403)
        RemoteFetchError: falha de rede, HTTP ou resposta malformada
    """
    if not cfg.tem_appsheet:
        raise CredentialError("Credenciais do AppSheet não configuradas (App ID, Access Key e tabela).")

    corpo = {"Action": "Find", "Properties": {"Locale": config.APPSHEET_LOCALE}, "Rows": []}
    s = _requests_session()
    try:
        r = s.post(
            appsheet_action_url(cfg),
            json=corpo,
            headers={"ApplicationAccessKey": cfg.access_key},
            timeout=config.HTTP_TIMEOUT,
        )
    except requests.RequestException as e:
        raise RemoteFetchError(f"Falha de conexão com o AppSheet: {e}") from e

    if r.status_code in (401, 403):
        raise CredentialError(f"O AppSheet recusou as credenciais (HTTP {r.status_code}).")
    try:
        r.raise_for_status()
    except requests.HTTPError as e:
        raise RemoteFetchError(f"Erro do AppSheet (HTTP {r.status_code}).") from e

    try:
        dados = r.json()
    except ValueError as e:
        raise RemoteFetchError("Resposta do AppSheet não é um JSON válido.") from e

    if isinstance(dados, dict):
        dados = dados.get("Rows", dados.get("rows"))
    if not isinstance(dados, list):
        raise RemoteFetchError("Resposta do AppSheet em formato inesperado.")

    linhas = [d for d in dados if isinstance(d, dict)]
    logger.info("AppSheet: %d linhas recebidas da tabela %s", len(linhas), cfg.nome_tabela)
    return linhas
