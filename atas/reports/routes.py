"""
Rotas de geração e download da ata
"""

import logging
import os

from flask import Response, current_app, jsonify, request

from atas.reports import bp
from atas.reports.services import sanitize_filename
from atas.schemas import GenerateReportSchema, load_payload
from atas.services.storage import validate_key

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def _report_service():
    return current_app.extensions["report_service"]


@bp.route("/generate/<form_id>", methods=["POST"])
def generate_report(form_id):
    """Gera o PDF da ata, empacota em ZIP e devolve o identificador"""
    validate_key(form_id)
    payload = load_payload(
        GenerateReportSchema(),
        request.get_json(silent=True),
        "Dados inválidos: sections ou headerData ausentes",
    )
    result = _report_service().generate(
        form_id,
        payload["sections"],
        payload["headerData"],
        payload.get("formInfo"),
    )
    return jsonify(result)


@bp.route("/download/<filename>", methods=["GET"])
def download_report(filename):
    """Envia o ZIP como ``<empresa>.zip``; o arquivo é apagado ao fim do envio"""
    service = _report_service()
    path = service.archive_path(filename)

    empresa = request.args.get("empresa", "").strip()
    download_name = f"{sanitize_filename(empresa)}.zip"
    logger.info(f"Fazendo download do arquivo: {download_name}")

    def stream():
        # só apaga após o envio completo; envios interrompidos ficam para o cleanup-temp
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                yield chunk
        service.remove_archive(path)

    response = Response(stream(), mimetype="application/zip")
    response.headers.set("Content-Disposition", "attachment", filename=download_name)
    response.headers["Content-Length"] = str(os.path.getsize(path))
    return response
