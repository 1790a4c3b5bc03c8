"""
Listas editáveis: pedido de rebaixa (sem mesclagem) e contagem de inventário
(mesclagem por chave, quantidades somadas).
"""
import logging
import math

from .erros import EntradaInvalidaError
from .modelos import ItemContagem, ItemPedido, Produto
from .utils import br_to_float

logger = logging.getLogger(__name__)

VAZIO = "vazio"
POPULADO = "populado"


def _ler_inteiro(texto):
    v = br_to_float(texto)
    return int(v) if math.isfinite(v) else None


def _ler_preco(texto):
    v = br_to_float(texto)
    return float(v) if math.isfinite(v) else None


class _ListaBase:
    def __init__(self, itens=None):
        self.itens = list(itens or [])

    def __len__(self):
        return len(self.itens)

    def __iter__(self):
        return iter(self.itens)

    def __getitem__(self, indice):
        return self.itens[indice]

    @property
    def estado(self) -> str:
        return POPULADO if self.itens else VAZIO

    def remover(self, indice: int):
        """Remove exatamente um item; os seguintes sobem uma posição."""
        item = self.itens.pop(indice)
        logger.debug("Item removido (%s) na posição %d", item.codigo, indice)
        return item

    def para_lista(self) -> list:
        return [i.para_dict() for i in self.itens]


class ListaPedido(_ListaBase):
    """Lista de rebaixa. O mesmo código pode entrar várias vezes."""

    def adicionar(self, item: ItemPedido) -> int:
        self.itens.append(item)
        return len(self.itens) - 1

    def adicionar_do_catalogo(self, produto: Produto, quantidade=1, preco_sugerido=None) -> int:
        """
        Inclui um produto do catálogo validando a digitação do usuário.

        Raises:
            EntradaInvalidaError: quantidade não positiva ou preço não numérico
        """
        qtd = _ler_inteiro(quantidade)
        if qtd is None or qtd <= 0:
            raise EntradaInvalidaError("Quantidade deve ser um número positivo.")

        if preco_sugerido is None or (isinstance(preco_sugerido, str) and not preco_sugerido.strip()):
            preco = produto.preco
        else:
            preco = _ler_preco(preco_sugerido)
            if preco is None or preco < 0:
                raise EntradaInvalidaError("Sugestão de preço deve ser um valor numérico.")

        return self.adicionar(ItemPedido(
            codigo=produto.codigo,
            descricao=produto.descricao,
            quantidade=qtd,
            preco_original=produto.preco,
            preco_sugerido=preco,
        ))

    def editar(self, indice: int, quantidade=None, preco_sugerido=None) -> ItemPedido:
        """
        Edição em andamento (a cada tecla). Quantidade vazia vale 0 e preço
        vazio fica NaN até a confirmação; texto não numérico mantém o valor
        anterior.
        """
        item = self.itens[indice]
        if quantidade is not None:
            if str(quantidade).strip() == "":
                item.quantidade = 0
            else:
                v = _ler_inteiro(quantidade)
                if v is not None:
                    item.quantidade = v
        if preco_sugerido is not None:
            if str(preco_sugerido).strip() == "":
                item.preco_sugerido = math.nan
            else:
                v = _ler_preco(preco_sugerido)
                if v is not None:
                    item.preco_sugerido = v
        return item

    def confirmar(self, indice: int) -> ItemPedido:
        """Fim da edição: quantidade mínima 1, preço inválido volta ao original."""
        item = self.itens[indice]
        if item.quantidade <= 0:
            item.quantidade = 1
        if not math.isfinite(item.preco_sugerido) or item.preco_sugerido < 0:
            item.preco_sugerido = item.preco_original
        return item

    def limpar(self, confirmado: bool = False) -> bool:
        if not confirmado:
            return False
        self.itens.clear()
        return True

    def total(self) -> float:
        # Preço em edição (NaN) não entra na soma
        return sum(i.subtotal for i in self.itens if math.isfinite(i.preco_sugerido))

    @classmethod
    def de_lista(cls, dados) -> "ListaPedido":
        return cls(ItemPedido.de_dict(d) for d in (dados or []))


class ListaContagem(_ListaBase):
    """Contagem de inventário: leituras repetidas do mesmo item somam."""

    def _posicao(self, chave: str):
        for i, item in enumerate(self.itens):
            if item.chave == chave:
                return i
        return None

    def adicionar(self, item: ItemContagem) -> int:
        qtd = max(0, int(item.quantidade))
        i = self._posicao(item.chave)
        if i is None:
            self.itens.append(ItemContagem(item.codigo, item.ean, item.descricao, qtd))
            return len(self.itens) - 1
        existente = self.itens[i]
        existente.quantidade = existente.quantidade + qtd
        return i

    def registrar(self, item: ItemContagem, quantidade=1) -> int:
        """Lança uma leitura do item do inventário (quantidade digitada pelo usuário)."""
        qtd = _ler_inteiro(quantidade)
        if qtd is None or qtd <= 0:
            raise EntradaInvalidaError("Quantidade deve ser um número positivo.")
        return self.adicionar(ItemContagem(item.codigo, item.ean, item.descricao, qtd))

    def substituir(self, itens):
        self.itens = list(itens)

    def contados(self) -> list:
        return [i for i in self.itens if i.quantidade > 0]

    def finalizar(self, confirmado: bool = False) -> bool:
        """Zera as quantidades mantendo os itens (a base do inventário continua)."""
        if not confirmado:
            return False
        for item in self.itens:
            item.quantidade = 0
        return True

    @classmethod
    def de_lista(cls, dados) -> "ListaContagem":
        return cls(ItemContagem.de_dict(d) for d in (dados or []))
