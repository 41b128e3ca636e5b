"""
Logging da aplicação: tudo em stderr, com o nome do módulo em cada linha
"""
import logging
import sys

LOG_FORMAT = '[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

# bibliotecas ruidosas durante a geração do PDF
QUIET_LOGGERS = ('werkzeug', 'fpdf', 'fontTools')


class StderrHandler(logging.StreamHandler):
    """Escreve no sys.stderr corrente, mesmo se ele for trocado depois da configuração"""

    def __init__(self):
        super().__init__()

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


def _attach(logger, handler, level):
    for old in [h for h in logger.handlers if isinstance(h, StderrHandler)]:
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def setup_logging(app):
    """
    Liga os loggers ``atas.*`` e o ``app.logger`` ao stderr.

    O nível vem de ``LOG_LEVEL``; chamadas repetidas (uma por ``create_app``)
    não duplicam handlers.
    """
    level = logging.getLevelName(str(app.config.get('LOG_LEVEL', 'INFO')).upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = StderrHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATEFMT))

    app.logger.handlers.clear()
    _attach(app.logger, handler, level)
    _attach(logging.getLogger('atas'), handler, level)
    for name in QUIET_LOGGERS:
        _attach(logging.getLogger(name), handler, max(level, logging.WARNING))

    app.logger.debug(f"Logging configurado em {logging.getLevelName(level)}")
