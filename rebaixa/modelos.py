"""Modelos de dados do Rebaixa Pro"""

from dataclasses import asdict, dataclass, fields


def _de_dict(cls, dados: dict):
    # Ignora chaves desconhecidas (versões antigas do armazenamento)
    nomes = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in (dados or {}).items() if k in nomes})


@dataclass
class Produto:
    """Registro canônico do catálogo"""
    codigo: str
    descricao: str = ""
    estoque: int = 0
    preco: float = 0.0
    ean: str = ""

    def para_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def de_dict(cls, dados: dict) -> "Produto":
        return _de_dict(cls, dados)


@dataclass
class ItemContagem:
    """Item da contagem de inventário (quantidade contada, independente do estoque)"""
    codigo: str
    ean: str = ""
    descricao: str = ""
    quantidade: int = 0

    @property
    def chave(self) -> str:
        return (self.codigo or self.ean).strip().lower()

    def para_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def de_dict(cls, dados: dict) -> "ItemContagem":
        return _de_dict(cls, dados)


@dataclass
class ItemPedido:
    """Item da lista de rebaixa. O mesmo código pode aparecer mais de uma vez."""
    codigo: str
    descricao: str
    quantidade: int
    preco_original: float   # preço do catálogo no momento da inclusão
    preco_sugerido: float   # editável pelo usuário

    @property
    def subtotal(self) -> float:
        return self.quantidade * self.preco_sugerido

    def para_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def de_dict(cls, dados: dict) -> "ItemPedido":
        return _de_dict(cls, dados)


@dataclass
class Usuario:
    login: str
    nome: str
    perfil: str  # admin | user

    @property
    def is_admin(self) -> bool:
        return self.perfil == "admin"

    def para_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def de_dict(cls, dados: dict) -> "Usuario":
        return _de_dict(cls, dados)


@dataclass
class ConfigRemota:
    """Origem remota da base: link compartilhado ou tabela AppSheet"""
    link_compartilhado: str = ""
    app_id: str = ""
    access_key: str = ""
    nome_tabela: str = ""

    @property
    def tem_link(self) -> bool:
        return bool(self.link_compartilhado.strip())

    @property
    def tem_appsheet(self) -> bool:
        return bool(self.app_id and self.access_key and self.nome_tabela)

    def para_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def de_dict(cls, dados: dict) -> "ConfigRemota":
        return _de_dict(cls, dados)
