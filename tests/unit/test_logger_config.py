"""
Testes da configuração de logging
"""

import logging

from flask import Flask

from atas.logger_config import StderrHandler, setup_logging


class TestSetupLogging:
    def test_module_logs_reach_stderr(self, app, capsys):
        """Testa que mensagens dos módulos atas.* saem formatadas no stderr"""
        logging.getLogger("atas.forms.services").info("Formulário criado: f1")

        err = capsys.readouterr().err
        assert "INFO     [atas.forms.services] Formulário criado: f1" in err

    def test_repeated_setup_does_not_duplicate_handlers(self, app):
        """Testa que reconfigurar o logging mantém um único handler"""
        setup_logging(app)
        setup_logging(app)

        handlers = logging.getLogger("atas").handlers
        assert len([h for h in handlers if isinstance(h, StderrHandler)]) == 1

    def test_level_from_config(self):
        """Testa o nível vindo de LOG_LEVEL e as bibliotecas silenciadas"""
        app = Flask("atas")
        app.config["LOG_LEVEL"] = "debug"

        setup_logging(app)

        assert logging.getLogger("atas").level == logging.DEBUG
        assert logging.getLogger("werkzeug").level == logging.WARNING
        assert logging.getLogger("fpdf").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        """Testa que um LOG_LEVEL inválido usa INFO"""
        app = Flask("atas")
        app.config["LOG_LEVEL"] = "barulhento"

        setup_logging(app)

        assert logging.getLogger("atas").level == logging.INFO
