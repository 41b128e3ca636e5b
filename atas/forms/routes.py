"""
Rotas dos formulários (CRUD usado pelo editor)
"""

import logging

from flask import current_app, jsonify, request

from atas.forms import bp
from atas.schemas import FormUpdateSchema, load_payload

logger = logging.getLogger(__name__)


def _form_service():
    return current_app.extensions["form_service"]


@bp.route("/data/<form_id>", methods=["GET"])
def get_form(form_id):
    """Documento completo, já no formato atual"""
    return jsonify(_form_service().read(form_id))


@bp.route("/forms", methods=["GET"])
def list_forms():
    """Lista de formulários; ``?q=`` filtra pelo título"""
    search = request.args.get("q", "").strip()
    return jsonify(_form_service().list_forms(search or None))


@bp.route("/createForm", methods=["POST"])
def create_form():
    form_id = _form_service().create()
    return jsonify({"formId": form_id})


@bp.route("/update/<form_id>", methods=["POST"])
def update_form(form_id):
    changes = load_payload(
        FormUpdateSchema(),
        request.get_json(silent=True),
        "Dados inválidos para atualização",
    )
    _form_service().update(form_id, changes)
    return jsonify({"success": True})


@bp.route("/form/<form_id>", methods=["DELETE"])
def delete_form(form_id):
    _form_service().delete(form_id)
    logger.info(f"Formulário {form_id} excluído com sucesso")
    return jsonify({"success": True, "message": "Formulário excluído com sucesso"})
