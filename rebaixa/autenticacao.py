"""Login com dois usuários fixos (admin e user). Sem provedor externo nem expiração."""
import hmac
import logging
from typing import Optional

from .config import segredo
from .modelos import Usuario

logger = logging.getLogger(__name__)

PERFIL_ADMIN = "admin"
PERFIL_USER = "user"


def _usuarios() -> dict:
    # Senhas configuráveis via st.secrets/variáveis de ambiente
    return {
        "admin": (segredo("REBAIXA_SENHA_ADMIN", "123"), Usuario("admin", "Administrador Master", PERFIL_ADMIN)),
        "user": (segredo("REBAIXA_SENHA_USER", "123"), Usuario("user", "Usuário Padrão", PERFIL_USER)),
    }


def autenticar(login: str, senha: str) -> Optional[Usuario]:
    registro = _usuarios().get((login or "").strip().lower())
    if registro and hmac.compare_digest(str(registro[0]), str(senha or "")):
        logger.info("Login: %s", registro[1].login)
        return registro[1]
    logger.warning("Tentativa de login inválida para '%s'", login)
    return None
