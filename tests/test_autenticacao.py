from rebaixa.autenticacao import PERFIL_ADMIN, PERFIL_USER, autenticar


def test_usuarios_padrao(monkeypatch):
    monkeypatch.delenv("REBAIXA_SENHA_ADMIN", raising=False)
    monkeypatch.delenv("REBAIXA_SENHA_USER", raising=False)
    admin = autenticar(" Admin ", "123")
    assert admin.perfil == PERFIL_ADMIN
    assert admin.is_admin
    assert autenticar("user", "123").perfil == PERFIL_USER


def test_credenciais_invalidas(monkeypatch):
    monkeypatch.delenv("REBAIXA_SENHA_ADMIN", raising=False)
    assert autenticar("admin", "1234") is None
    assert autenticar("outro", "123") is None
    assert autenticar(None, None) is None


def test_senha_configurada_pelo_ambiente(monkeypatch):
    monkeypatch.setenv("REBAIXA_SENHA_USER", "loja2024")
    assert autenticar("user", "123") is None
    assert autenticar("user", "loja2024").login == "user"
