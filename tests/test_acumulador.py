import pytest

from rebaixa.acumulador import POPULADO, VAZIO, ListaContagem, ListaPedido
from rebaixa.erros import EntradaInvalidaError
from rebaixa.modelos import ItemContagem, ItemPedido, Produto

ARROZ = Produto("100", "Arroz", 50, 9.9)


def test_contagem_soma_leituras_do_mesmo_codigo():
    lista = ListaContagem()
    assert lista.estado == VAZIO
    lista.adicionar(ItemContagem("100", quantidade=3))
    lista.adicionar(ItemContagem("100", quantidade=2))
    assert lista.para_lista() == [{"codigo": "100", "ean": "", "descricao": "", "quantidade": 5}]
    assert lista.estado == POPULADO


def test_contagem_chave_por_ean_quando_sem_codigo():
    lista = ListaContagem()
    lista.adicionar(ItemContagem("", "7891", quantidade=1))
    lista.adicionar(ItemContagem("", "7891", quantidade=1))
    lista.adicionar(ItemContagem("", "7892", quantidade=1))
    assert [i.quantidade for i in lista] == [2, 1]


def test_registrar_valida_quantidade():
    lista = ListaContagem([ItemContagem("100", descricao="Arroz")])
    assert lista.registrar(lista[0], "4") == 0
    assert lista[0].quantidade == 4
    for invalida in ("0", "-1", "abc", ""):
        with pytest.raises(EntradaInvalidaError):
            lista.registrar(lista[0], invalida)
    assert lista[0].quantidade == 4


def test_finalizar_zera_mas_mantem_itens():
    lista = ListaContagem([ItemContagem("1", "a", "A", 3), ItemContagem("2", "b", "B", 0)])
    assert lista.finalizar() is False
    assert lista[0].quantidade == 3
    assert lista.finalizar(confirmado=True) is True
    assert [(i.codigo, i.descricao, i.quantidade) for i in lista] == [("1", "A", 0), ("2", "B", 0)]
    assert lista.contados() == []


def test_pedido_nao_mescla_duplicados():
    lista = ListaPedido()
    lista.adicionar_do_catalogo(ARROZ)
    lista.adicionar_do_catalogo(ARROZ, 2)
    assert len(lista) == 2
    assert [i.quantidade for i in lista] == [1, 2]


def test_pedido_preco_sugerido_padrao_e_snapshot():
    lista = ListaPedido()
    lista.adicionar_do_catalogo(ARROZ, "2", "")
    lista.adicionar_do_catalogo(ARROZ, 1, "8,50")
    assert lista[0].preco_original == 9.9
    assert lista[0].preco_sugerido == 9.9
    assert lista[1].preco_sugerido == 8.5


def test_pedido_rejeita_entrada_invalida():
    lista = ListaPedido()
    with pytest.raises(EntradaInvalidaError):
        lista.adicionar_do_catalogo(ARROZ, 0)
    with pytest.raises(EntradaInvalidaError):
        lista.adicionar_do_catalogo(ARROZ, 1, "barato")
    with pytest.raises(EntradaInvalidaError):
        lista.adicionar_do_catalogo(ARROZ, 1, "-3")
    assert len(lista) == 0


def test_total():
    lista = ListaPedido([
        ItemPedido("1", "A", 2, 12.0, 10.0),
        ItemPedido("2", "B", 1, 6.0, 5.5),
    ])
    assert lista.total() == 25.5
    lista.remover(0)
    assert lista.total() == 5.5


def test_edicao_tolera_campo_vazio_e_confirmar_corrige():
    lista = ListaPedido([ItemPedido("1", "A", 2, 12.0, 10.0)])
    lista.editar(0, quantidade="")
    assert lista[0].quantidade == 0
    assert lista[0].preco_sugerido == 10.0
    lista.editar(0, preco_sugerido="1x")
    assert lista[0].preco_sugerido == 10.0
    lista.confirmar(0)
    assert lista[0].quantidade == 1

    lista.editar(0, quantidade="-5", preco_sugerido="-1")
    lista.confirmar(0)
    assert (lista[0].quantidade, lista[0].preco_sugerido) == (1, 12.0)


def test_remover_desloca_itens_seguintes():
    lista = ListaPedido([ItemPedido(str(n), "", 1, 1.0, 1.0) for n in range(3)])
    removido = lista.remover(1)
    assert removido.codigo == "1"
    assert [i.codigo for i in lista] == ["0", "2"]


def test_limpar_exige_confirmacao():
    lista = ListaPedido([ItemPedido("1", "A", 1, 1.0, 1.0)])
    assert lista.limpar() is False
    assert len(lista) == 1
    assert lista.limpar(confirmado=True) is True
    assert lista.estado == VAZIO


def test_preco_apagado_volta_ao_original_ao_confirmar():
    lista = ListaPedido([ItemPedido("1", "A", 2, 12.0, 10.0)])
    lista.editar(0, preco_sugerido="")
    assert lista.total() == 0
    lista.confirmar(0)
    assert lista[0].preco_sugerido == 12.0
    assert lista.total() == 24.0


def test_linha_toda_apagada_volta_aos_padroes():
    lista = ListaPedido([ItemPedido("1", "A", 3, 12.0, 10.0)])
    lista.editar(0, quantidade="", preco_sugerido="")
    lista.confirmar(0)
    assert (lista[0].quantidade, lista[0].preco_sugerido) == (1, 12.0)
