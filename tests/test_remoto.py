import json

import pytest
import requests

from rebaixa import remoto
from rebaixa.erros import CredentialError, RemoteFetchError
from rebaixa.modelos import ConfigRemota

CFG = ConfigRemota(app_id="app-123", access_key="segredo", nome_tabela="Produtos Loja")


def _resposta(status=200, conteudo=b"", tipo="application/octet-stream"):
    r = requests.Response()
    r.status_code = status
    r._content = conteudo
    r.headers["Content-Type"] = tipo
    r.url = "https://exemplo.com"
    return r


class SessaoFalsa:
    def __init__(self, resposta=None, erro=None):
        self.resposta = resposta
        self.erro = erro
        self.chamadas = []

    def _responder(self, metodo, url, **kwargs):
        self.chamadas.append((metodo, url, kwargs))
        if self.erro:
            raise self.erro
        return self.resposta

    def get(self, url, **kwargs):
        return self._responder("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._responder("POST", url, **kwargs)


@pytest.fixture
def sessao_http(monkeypatch):
    def instalar(**kwargs):
        falsa = SessaoFalsa(**kwargs)
        monkeypatch.setattr(remoto, "_requests_session", lambda: falsa)
        return falsa
    return instalar


def test_link_do_sheets_vira_exportacao_xlsx():
    url = "https://docs.google.com/spreadsheets/d/AbC_123-x/edit#gid=0"
    assert remoto.link_para_download(url) == "https://docs.google.com/spreadsheets/d/AbC_123-x/export?format=xlsx"


def test_link_do_drive_vira_download():
    assert remoto.link_para_download("https://drive.google.com/file/d/XYZ9/view?usp=sharing") == \
        "https://drive.google.com/uc?export=download&id=XYZ9"
    assert remoto.link_para_download("https://drive.google.com/open?id=XYZ9") == \
        "https://drive.google.com/uc?export=download&id=XYZ9"


def test_link_direto_e_mantido():
    assert remoto.link_para_download(" https://exemplo.com/base.csv ") == "https://exemplo.com/base.csv"


@pytest.mark.parametrize("url", ["", "ftp://x/base.csv", "https://drive.google.com/drive/folders"])
def test_link_invalido(url):
    with pytest.raises(RemoteFetchError):
        remoto.link_para_download(url)


def test_baixar_por_link(sessao_http):
    falsa = sessao_http(resposta=_resposta(conteudo=b"codigo\n1\n", tipo="text/csv"))
    assert remoto.baixar_por_link("https://exemplo.com/base.csv") == b"codigo\n1\n"
    metodo, url, kwargs = falsa.chamadas[0]
    assert (metodo, url) == ("GET", "https://exemplo.com/base.csv")
    assert kwargs["timeout"] == remoto.config.HTTP_TIMEOUT


def test_baixar_pagina_html_e_erro(sessao_http):
    sessao_http(resposta=_resposta(conteudo=b"<html>login</html>", tipo="text/html; charset=utf-8"))
    with pytest.raises(RemoteFetchError):
        remoto.baixar_por_link("https://drive.google.com/file/d/XYZ/view")


def test_baixar_http_404(sessao_http):
    sessao_http(resposta=_resposta(status=404))
    with pytest.raises(RemoteFetchError, match="HTTP 404"):
        remoto.baixar_por_link("https://exemplo.com/base.csv")


def test_baixar_sem_rede(sessao_http):
    sessao_http(erro=requests.ConnectionError("offline"))
    with pytest.raises(RemoteFetchError):
        remoto.baixar_por_link("https://exemplo.com/base.csv")


def test_appsheet_find(sessao_http):
    linhas = [{"Código": "1", "Descrição": "A"}]
    falsa = sessao_http(resposta=_resposta(conteudo=json.dumps(linhas).encode(), tipo="application/json"))
    assert remoto.buscar_appsheet(CFG) == linhas

    metodo, url, kwargs = falsa.chamadas[0]
    assert metodo == "POST"
    assert url == "https://api.appsheet.com/api/v2/apps/app-123/tables/Produtos%20Loja/Action"
    assert kwargs["headers"] == {"ApplicationAccessKey": "segredo"}
    assert kwargs["json"] == {"Action": "Find", "Properties": {"Locale": "pt-BR"}, "Rows": []}


def test_appsheet_envelope_rows(sessao_http):
    corpo = {"Rows": [{"codigo": "1"}, "lixo"]}
    sessao_http(resposta=_resposta(conteudo=json.dumps(corpo).encode(), tipo="application/json"))
    assert remoto.buscar_appsheet(CFG) == [{"codigo": "1"}]


def test_appsheet_sem_credenciais():
    with pytest.raises(CredentialError):
        remoto.buscar_appsheet(ConfigRemota(app_id="app"))


@pytest.mark.parametrize("status", [401, 403])
def test_appsheet_credencial_recusada(sessao_http, status):
    sessao_http(resposta=_resposta(status=status))
    with pytest.raises(CredentialError):
        remoto.buscar_appsheet(CFG)


def test_appsheet_erro_do_servidor(sessao_http):
    sessao_http(resposta=_resposta(status=500))
    with pytest.raises(RemoteFetchError):
        remoto.buscar_appsheet(CFG)


def test_appsheet_json_invalido(sessao_http):
    sessao_http(resposta=_resposta(conteudo=b"nao e json", tipo="application/json"))
    with pytest.raises(RemoteFetchError):
        remoto.buscar_appsheet(CFG)
