import datetime as dt

import pytest

from rebaixa.armazenamento import Armazenamento
from rebaixa.modelos import Produto
from rebaixa.sessao import SessaoControlador


class Relogio:
    def __init__(self, agora):
        self.agora = agora

    def __call__(self):
        return self.agora


@pytest.fixture
def relogio():
    return Relogio(dt.datetime(2024, 5, 1, 8, 0, 0))


@pytest.fixture
def armazenamento(tmp_path):
    return Armazenamento(str(tmp_path / "store"))


@pytest.fixture
def sessao(armazenamento, relogio, monkeypatch):
    monkeypatch.delenv("REBAIXA_SENHA_ADMIN", raising=False)
    monkeypatch.delenv("REBAIXA_SENHA_USER", raising=False)
    return SessaoControlador(armazenamento, relogio=relogio)


@pytest.fixture
def catalogo():
    return [
        Produto("100", "Arroz 5kg", 50, 9.9, "7891000100"),
        Produto("200", "Feijão 1kg", 10, 7.5, "7891000200"),
        Produto("300", "Café 500g", 0, 15.0),
    ]


@pytest.fixture
def csv_produtos():
    return (
        "codigo;descricao;estoque;preco\n"
        "100;Arroz 5kg;50;9,90\n"
        "200;Feijão 1kg;10;7,50\n"
        ";linha sem código;1;1\n"
    ).encode("utf-8")
