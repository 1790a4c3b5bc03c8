from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from rebaixa import config

PAGINA_BASE = Path(__file__).resolve().parent.parent / "pages" / "1_📂_Base_de_Dados.py"


@pytest.fixture
def pagina_base(sessao, tmp_path, monkeypatch):
    monkeypatch.setattr(config, "LOG_DIR", str(tmp_path / "logs"))
    sessao.entrar("admin", "123")
    at = AppTest.from_file(str(PAGINA_BASE), default_timeout=30)
    at.session_state["sessao"] = sessao
    return at


def test_uploads_nao_importam_sem_clique(pagina_base, sessao):
    pagina_base.run()
    assert not pagina_base.exception
    # sem arquivo escolhido nenhum "Ler arquivo" aparece e nada é importado
    assert not [b for b in pagina_base.button if b.label == "Ler arquivo"]
    assert pagina_base.session_state["upload_counter"] == {"produtos": 0, "consulta": 0, "inventario": 0}
    assert sessao.estado.catalogo == []
    assert len(sessao.contagem) == 0


def test_pagina_exige_login(pagina_base, sessao):
    sessao.sair()
    pagina_base.run()
    assert not pagina_base.exception
    assert pagina_base.warning[0].value == "Faça login na página inicial para continuar."
