"""Hierarquia de erros da importação, sincronização e edição das listas."""


class RebaixaError(Exception):
    """Erro base do Rebaixa Pro"""
    tipo = "erro"

    def __init__(self, mensagem: str = ""):
        self.mensagem = mensagem
        super().__init__(mensagem)


class ParseError(RebaixaError):
    """Conteúdo não pôde ser lido como planilha"""
    tipo = "parse"


class EmptyCatalogError(RebaixaError):
    """Nenhuma linha aproveitável depois da leitura/normalização"""
    tipo = "vazio"


class ColumnMismatchError(RebaixaError):
    """Colunas obrigatórias ausentes no cabeçalho"""
    tipo = "colunas"

    def __init__(self, faltando: list, lidas: list = None):
        self.faltando = list(faltando)
        self.lidas = list(lidas or [])
        super().__init__(
            f"Planilha inválida. Colunas ausentes: {', '.join(map(str, self.faltando))}"
        )


class RemoteFetchError(RebaixaError):
    """Falha de rede/HTTP ou link remoto malformado"""
    tipo = "remoto"


class CredentialError(RebaixaError):
    """A API remota recusou as credenciais configuradas"""
    tipo = "credencial"


class EntradaInvalidaError(RebaixaError):
    """Valor digitado inválido (quantidade não positiva, preço não numérico)"""
    tipo = "entrada"
