"""
Controlador da sessão: dono único do estado (usuário, catálogo, listas,
configuração remota). Toda mudança passa por aqui e é seguida de uma
gravação explícita no armazenamento local.

O usuário logado fica só na memória do controlador, que vive no
st.session_state de cada navegador; o armazenamento em disco é compartilhado
pelo servidor e nunca guarda login.
"""
import datetime as dt
import enum
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

from . import autenticacao, config
from .acumulador import ListaContagem, ListaPedido
from .armazenamento import (
    CHAVE_CATALOGO, CHAVE_CONFIG_REMOTA, CHAVE_CONTAGEM, CHAVE_PEDIDO,
    CHAVE_TIPO_CATALOGO, CHAVE_ULTIMA_SINCRONIZACAO, Armazenamento,
)
from .busca import CAMPOS_INVENTARIO, ResultadoBusca, buscar_leitura
from .erros import RebaixaError, RemoteFetchError
from .ingestao import ler_planilha
from .modelos import ConfigRemota, ItemContagem, Produto, Usuario
from .normalizador import LAYOUT_INVENTARIO, LAYOUT_PRODUTOS, LAYOUTS, Layout, normalizar_linhas
from .remoto import baixar_por_link, buscar_appsheet

logger = logging.getLogger(__name__)


class Relato(enum.Enum):
    """Como o chamador quer ser avisado do resultado de uma importação."""
    ALTO = "alto"               # mensagem na tela
    SILENCIOSO = "silencioso"   # só log (atualização automática)


OK = "ok"
ERRO = "erro"
IGNORADO = "ignorado"   # outra importação em andamento


@dataclass
class ResultadoImportacao:
    status: str
    registros: list = field(default_factory=list)
    rejeitados: int = 0
    erro: Optional[str] = None
    tipo_erro: Optional[str] = None
    relato: Relato = Relato.ALTO

    @property
    def ok(self) -> bool:
        return self.status == OK

    @property
    def mostrar(self) -> bool:
        return self.relato is Relato.ALTO


@dataclass
class EstadoApp:
    usuario: Optional[Usuario] = None
    catalogo: list = field(default_factory=list)
    tipo_catalogo: str = LAYOUT_PRODUTOS.nome
    pedido: ListaPedido = field(default_factory=ListaPedido)
    contagem: ListaContagem = field(default_factory=ListaContagem)
    config_remota: ConfigRemota = field(default_factory=ConfigRemota)
    ultima_sincronizacao: Optional[dt.datetime] = None


class SessaoControlador:
    def __init__(self, armazenamento: Armazenamento = None,
                 relogio: Callable[[], dt.datetime] = dt.datetime.now):
        self.armazenamento = armazenamento or Armazenamento()
        self.relogio = relogio
        self.estado = EstadoApp()
        self._trava = threading.Lock()
        self._ultima_tentativa: Optional[dt.datetime] = None
        self.carregar()

    # ── Persistência ──

    def carregar(self):
        a = self.armazenamento
        tipo = a.ler(CHAVE_TIPO_CATALOGO, LAYOUT_PRODUTOS.nome)
        self.estado = EstadoApp(
            usuario=self.estado.usuario,
            catalogo=[Produto.de_dict(p) for p in a.ler(CHAVE_CATALOGO, [])],
            tipo_catalogo=tipo if tipo in LAYOUTS else LAYOUT_PRODUTOS.nome,
            pedido=ListaPedido.de_lista(a.ler(CHAVE_PEDIDO, [])),
            contagem=ListaContagem.de_lista(a.ler(CHAVE_CONTAGEM, [])),
            config_remota=ConfigRemota.de_dict(a.ler(CHAVE_CONFIG_REMOTA, {})),
        )
        ultima = a.ler(CHAVE_ULTIMA_SINCRONIZACAO)
        if ultima:
            try:
                self.estado.ultima_sincronizacao = dt.datetime.fromisoformat(ultima)
            except ValueError:
                logger.warning("Data de sincronização inválida no armazenamento: %r", ultima)
        self._ultima_tentativa = self.estado.ultima_sincronizacao

    def salvar(self, *chaves):
        e = self.estado
        valores = {
            CHAVE_CATALOGO: lambda: [p.para_dict() for p in e.catalogo],
            CHAVE_TIPO_CATALOGO: lambda: e.tipo_catalogo,
            CHAVE_PEDIDO: e.pedido.para_lista,
            CHAVE_CONTAGEM: e.contagem.para_lista,
            CHAVE_CONFIG_REMOTA: e.config_remota.para_dict,
            CHAVE_ULTIMA_SINCRONIZACAO: lambda: (
                e.ultima_sincronizacao.isoformat() if e.ultima_sincronizacao else None
            ),
        }
        for chave in chaves or valores.keys():
            self.armazenamento.gravar(chave, valores[chave]())

    # ── Login ──

    @property
    def usuario(self) -> Optional[Usuario]:
        return self.estado.usuario

    def entrar(self, login: str, senha: str) -> Optional[Usuario]:
        usuario = autenticacao.autenticar(login, senha)
        if usuario:
            self.estado.usuario = usuario
        return usuario

    def sair(self):
        self.estado.usuario = None

    # ── Importação ──

    @property
    def ocupado(self) -> bool:
        return self._trava.locked()

    def _importar(self, obter_linhas: Callable[[], list], layout: Layout, posicional: bool,
                  estrito: bool, relato: Relato, aplicar: bool,
                  ao_iniciar: Callable[[], None] = None) -> ResultadoImportacao:
        if not self._trava.acquire(blocking=False):
            logger.info("Importação ignorada: já existe outra em andamento")
            return ResultadoImportacao(IGNORADO, relato=relato)
        try:
            if ao_iniciar:
                ao_iniciar()
            try:
                linhas = obter_linhas()
                res = normalizar_linhas(linhas, layout, posicional=posicional, estrito=estrito)
            except RebaixaError as e:
                nivel = logging.ERROR if relato is Relato.ALTO else logging.WARNING
                logger.log(nivel, "Importação (%s) falhou [%s]: %s", layout.nome, e.tipo, e)
                return ResultadoImportacao(ERRO, erro=str(e), tipo_erro=e.tipo, relato=relato)

            if aplicar:
                self._aplicar(layout, res.registros)
            logger.info("Importação (%s): %d registros, %d rejeitados",
                        layout.nome, len(res.registros), res.rejeitados)
            return ResultadoImportacao(OK, res.registros, res.rejeitados, relato=relato)
        finally:
            self._trava.release()

    def _aplicar(self, layout: Layout, registros: list):
        # Substituição integral: a lista nova só fica visível depois de pronta
        if layout is LAYOUT_INVENTARIO:
            self.estado.contagem.substituir(list(registros))
            self.salvar(CHAVE_CONTAGEM)
        else:
            self.estado.catalogo = list(registros)
            self.estado.tipo_catalogo = layout.nome
            self.salvar(CHAVE_CATALOGO, CHAVE_TIPO_CATALOGO)

    def importar_arquivo(self, conteudo: bytes, nome_arquivo: str = None, tipo: str = "produtos",
                         posicional: bool = False, estrito: bool = False,
                         relato: Relato = Relato.ALTO, aplicar: bool = True) -> ResultadoImportacao:
        """
        Lê e normaliza um arquivo. Com aplicar=False serve de pré-visualização
        (o catálogo atual não muda até confirmar_importacao).
        """
        layout = LAYOUTS[tipo]
        return self._importar(
            lambda: ler_planilha(conteudo, nome_arquivo, posicional=posicional),
            layout, posicional, estrito, relato, aplicar,
        )

    def confirmar_importacao(self, registros: list, tipo: str = "produtos"):
        self._aplicar(LAYOUTS[tipo], registros)

    def limpar_catalogo(self, confirmado: bool = False) -> bool:
        if not confirmado:
            return False
        self.estado.catalogo = []
        self.estado.tipo_catalogo = LAYOUT_PRODUTOS.nome
        self.salvar(CHAVE_CATALOGO, CHAVE_TIPO_CATALOGO)
        return True

    # ── Sincronização remota ──

    def salvar_config_remota(self, cfg: ConfigRemota):
        self.estado.config_remota = cfg
        self.salvar(CHAVE_CONFIG_REMOTA)

    def sincronizar(self, relato: Relato = Relato.ALTO, origem: str = None) -> ResultadoImportacao:
        """
        Atualiza o catálogo pela origem remota configurada
        ('link' ou 'appsheet'; sem origem, usa o link se houver).
        """
        cfg = self.estado.config_remota
        origem = origem or ("link" if cfg.tem_link else "appsheet" if cfg.tem_appsheet else None)

        if origem == "link":
            obter = lambda: ler_planilha(baixar_por_link(cfg.link_compartilhado))
        elif origem == "appsheet":
            obter = lambda: buscar_appsheet(cfg)
        else:
            erro = RemoteFetchError("Nenhuma origem remota configurada.")
            return ResultadoImportacao(ERRO, erro=str(erro), tipo_erro=erro.tipo, relato=relato)

        def marcar_tentativa():
            # Só conta como tentativa depois de obter a trava
            self._ultima_tentativa = self.relogio()

        res = self._importar(obter, LAYOUT_PRODUTOS, False, False, relato, True, marcar_tentativa)
        if res.ok:
            self.estado.ultima_sincronizacao = self._ultima_tentativa
            self.salvar(CHAVE_ULTIMA_SINCRONIZACAO)
        return res

    def sincronizacao_vencida(self, agora: dt.datetime = None) -> bool:
        cfg = self.estado.config_remota
        if not (cfg.tem_link or cfg.tem_appsheet):
            return False
        if self._ultima_tentativa is None:
            return True
        agora = agora or self.relogio()
        return agora - self._ultima_tentativa >= config.INTERVALO_ATUALIZACAO

    def sincronizar_se_vencido(self, agora: dt.datetime = None) -> Optional[ResultadoImportacao]:
        """Atualização automática diária; nunca concorre com uma sincronização manual."""
        if self.ocupado or not self.sincronizacao_vencida(agora):
            return None
        return self.sincronizar(Relato.SILENCIOSO)

    # ── Consulta ──

    def buscar_produto(self, consulta: str) -> ResultadoBusca:
        campos = LAYOUTS[self.estado.tipo_catalogo].campos_busca
        return buscar_leitura(self.estado.catalogo, consulta, campos)

    def buscar_inventario(self, consulta: str) -> ResultadoBusca:
        return buscar_leitura(self.estado.contagem.itens, consulta, CAMPOS_INVENTARIO)

    # ── Lista de rebaixa ──

    @property
    def pedido(self) -> ListaPedido:
        return self.estado.pedido

    def adicionar_pedido(self, produto: Produto, quantidade=1, preco_sugerido=None) -> int:
        i = self.pedido.adicionar_do_catalogo(produto, quantidade, preco_sugerido)
        self.salvar(CHAVE_PEDIDO)
        return i

    def editar_pedido(self, indice: int, quantidade=None, preco_sugerido=None):
        item = self.pedido.editar(indice, quantidade, preco_sugerido)
        self.salvar(CHAVE_PEDIDO)
        return item

    def confirmar_pedido(self, indice: int):
        item = self.pedido.confirmar(indice)
        self.salvar(CHAVE_PEDIDO)
        return item

    def remover_pedido(self, indice: int):
        item = self.pedido.remover(indice)
        self.salvar(CHAVE_PEDIDO)
        return item

    def limpar_pedido(self, confirmado: bool = False) -> bool:
        if self.pedido.limpar(confirmado):
            self.salvar(CHAVE_PEDIDO)
            return True
        return False

    # ── Contagem de inventário ──

    @property
    def contagem(self) -> ListaContagem:
        return self.estado.contagem

    def adicionar_contagem(self, item: ItemContagem, quantidade=1) -> int:
        i = self.contagem.registrar(item, quantidade)
        self.salvar(CHAVE_CONTAGEM)
        return i

    def remover_contagem(self, indice: int):
        item = self.contagem.remover(indice)
        self.salvar(CHAVE_CONTAGEM)
        return item

    def finalizar_contagem(self, confirmado: bool = False) -> bool:
        if self.contagem.finalizar(confirmado):
            self.salvar(CHAVE_CONTAGEM)
            return True
        return False
