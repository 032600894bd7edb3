# logger.py
# Configuração de logs da aplicação

import logging
import os
from datetime import datetime

FORMATO = '%(asctime)s [%(levelname)s] %(message)s'
FORMATO_DATA = '%Y-%m-%d %H:%M:%S'

logger = logging.getLogger('resell')


def configurar_logging(app):
    """Instala os handlers de console e, se LOG_DIR estiver definido, de arquivo diário.

    Chamado uma única vez no startup; chamadas repetidas não duplicam handlers.
    """
    nivel = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logger.setLevel(nivel)
    logger.propagate = False

    if logger.handlers:
        return logger

    formatter = logging.Formatter(FORMATO, FORMATO_DATA)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_dir = app.config.get('LOG_DIR')
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, f'resell_{datetime.now().strftime("%Y%m%d")}.log')
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.info(f'Arquivo de log: {log_path}')

    return logger


def log_event(msg: str):
    """Registra evento informativo"""
    logger.info(msg)


def log_error(msg: str, exc: Exception = None):
    """Registra erro com traceback opcional"""
    if exc:
        logger.error(f"{msg}: {exc}", exc_info=exc)
    else:
        logger.error(msg)


def log_warning(msg: str):
    logger.warning(msg)
