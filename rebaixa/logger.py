"""
Configuração de logging do Rebaixa Pro.
Console + arquivo rotativo; cada módulo usa logging.getLogger(__name__).
"""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from . import config

FORMATO = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
FORMATO_DATA = "%Y-%m-%d %H:%M:%S"

_configurado = False


def configurar_logging(nivel: str = "INFO", log_dir: str = None) -> logging.Logger:
    """
    Configura o logger raiz do pacote uma única vez por processo.

    Args:
        nivel: DEBUG, INFO, WARNING, ERROR
        log_dir: diretório dos arquivos de log (padrão: config.LOG_DIR)
    """
    global _configurado
    logger = logging.getLogger("rebaixa")
    if _configurado:
        return logger

    logger.setLevel(getattr(logging, nivel.upper(), logging.INFO))
    formatter = logging.Formatter(FORMATO, datefmt=FORMATO_DATA)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    log_path = Path(log_dir or config.LOG_DIR)
    try:
        log_path.mkdir(parents=True, exist_ok=True)
        arquivo = RotatingFileHandler(
            log_path / "rebaixa.log",
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        arquivo.setFormatter(formatter)
        logger.addHandler(arquivo)
    except OSError as e:
        logger.warning("Não foi possível criar o log em arquivo (%s): %s", log_path, e)

    _configurado = True
    return logger
