"""
Persistência local: um documento JSON por chave, lido inteiro na abertura
da sessão e regravado inteiro a cada mudança (como o localStorage).
"""
import json
import logging
import os

from . import config

logger = logging.getLogger(__name__)

CHAVE_TIPO_CATALOGO = "tipo_catalogo"
CHAVE_CATALOGO = "catalogo"
CHAVE_PEDIDO = "pedido"
CHAVE_CONTAGEM = "contagem"
CHAVE_CONFIG_REMOTA = "config_remota"
CHAVE_ULTIMA_SINCRONIZACAO = "ultima_sincronizacao"


class Armazenamento:
    def __init__(self, diretorio: str = None):
        self.diretorio = diretorio or config.STORAGE_DIR
        os.makedirs(self.diretorio, exist_ok=True)

    def _caminho(self, chave: str) -> str:
        return os.path.join(self.diretorio, f"{chave}.json")

    def ler(self, chave: str, padrao=None):
        p = self._caminho(chave)
        if not os.path.exists(p):
            return padrao
        try:
            with open(p, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Valor salvo em '%s' ilegível, usando padrão: %s", chave, e)
            return padrao

    def gravar(self, chave: str, valor):
        p = self._caminho(chave)
        tmp = p + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(valor, f, ensure_ascii=False, indent=2)
        os.replace(tmp, p)

    def apagar(self, chave: str):
        p = self._caminho(chave)
        if os.path.exists(p):
            os.remove(p)
