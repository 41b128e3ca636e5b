"""
Error handlers da API.
Transforma exceções em respostas JSON com mensagens amigáveis.
"""

import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from atas.exceptions import AtasError

logger = logging.getLogger(__name__)

HTTP_MESSAGES = {
    400: "Requisição inválida. Verifique os dados enviados.",
    404: "Recurso não encontrado.",
    405: "Método não permitido.",
    413: "Requisição muito grande.",
}


def register_error_handlers(app):
    """Registra handlers de erro customizados"""

    @app.errorhandler(AtasError)
    def handle_domain_error(error):
        """Erros de domínio já carregam status e mensagem"""
        if error.status_code >= 500:
            logger.error(f"Erro {error.status_code}: {error.message}", exc_info=True)
        else:
            logger.warning(f"Erro {error.status_code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        logger.warning(f"HTTP {error.code}: {error.description}")
        return jsonify(
            {
                "success": False,
                "error": HTTP_MESSAGES.get(error.code, error.name),
                "code": error.code,
            }
        ), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        """Captura qualquer erro não tratado"""
        logger.error(f"Erro não tratado: {str(error)}", exc_info=True)

        payload = {
            "success": False,
            "error": "Ocorreu um erro interno. Tente novamente mais tarde.",
            "code": 500,
        }
        if app.config.get("SHOW_DETAILED_ERRORS"):
            payload["details"] = str(error)
        return jsonify(payload), 500
