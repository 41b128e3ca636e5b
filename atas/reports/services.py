"""
Reports Services - Geração da ata em PDF e empacotamento em ZIP
"""

import base64
import copy
import logging
import mimetypes
import os
import re
import time
import uuid
from typing import Any, Dict, Optional

from atas.exceptions import ArchiveNotFoundError, AtasError, ReportGenerationError
from atas.forms.services import FormService
from atas.reports.assembler import DEFAULT_LOGO_DATA_URI, build_report_html
from atas.services.pdf_converter import archive_file, render_pdf
from atas.services.storage import KEY_PATTERN

logger = logging.getLogger(__name__)

DEFAULT_REPORT_NAME = "relatorio"

_UNSAFE_CHARS_RE = re.compile(r"[^\w\s]", re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_filename(name: Any, default: str = DEFAULT_REPORT_NAME) -> str:
    """
    Nome de empresa seguro para uso como nome de arquivo.

    Remove tudo fora de ``[A-Za-z0-9_]`` e espaços, depois troca cada
    sequência de espaços por ``_``.

    Exemplo:
        >>> sanitize_filename("Acme & Co. Ltda")
        'Acme_Co_Ltda'
    """
    text = name.strip() if isinstance(name, str) else ""
    text = _WHITESPACE_RE.sub("_", _UNSAFE_CHARS_RE.sub("", text))
    return text or default


def load_logo_data_uri(logo_path: Optional[str]) -> str:
    """Lê o logo configurado como data URI; usa a imagem embutida se falhar"""
    if not logo_path:
        return DEFAULT_LOGO_DATA_URI

    try:
        with open(logo_path, "rb") as f:
            encoded = base64.b64encode(f.read()).decode("ascii")
    except OSError as e:
        logger.warning(f"Logo não pôde ser lido em {logo_path}: {e}")
        return DEFAULT_LOGO_DATA_URI

    mime_type = mimetypes.guess_type(logo_path)[0] or "image/png"
    return f"data:{mime_type};base64,{encoded}"


class ReportService:
    """Fluxo de geração: HTML -> PDF -> ZIP -> marca pdfGerado"""

    def __init__(
        self,
        form_service: FormService,
        temp_dir: str,
        firm_name: str = "Canella & Santos",
        logo_path: Optional[str] = None,
        page_size: str = "A4",
        page_margin: str = "20mm",
    ):
        self.form_service = form_service
        self.temp_dir = temp_dir
        self.firm_name = firm_name
        self.logo_data_uri = load_logo_data_uri(logo_path)
        self.page_size = page_size
        self.page_margin = page_margin

    def ensure_temp_dir(self) -> None:
        try:
            os.makedirs(self.temp_dir, exist_ok=True)
        except OSError as e:
            logger.error(f"Erro ao criar diretório temp: {e}")
            raise ReportGenerationError("Erro ao criar diretório temporário.") from e

    def build_html(
        self,
        sections: Dict[str, Any],
        header_data: Dict[str, Any],
        form_info: Optional[Dict[str, Any]] = None,
    ) -> str:
        sections = copy.deepcopy(sections)
        if form_info is not None:
            sections["formInfo"] = copy.deepcopy(form_info)

        return build_report_html(
            sections,
            header_data,
            firm_name=self.firm_name,
            logo_data_uri=self.logo_data_uri,
            page_size=self.page_size,
            page_margin=self.page_margin,
        )

    def generate(
        self,
        form_id: str,
        sections: Dict[str, Any],
        header_data: Dict[str, Any],
        form_info: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, str]:
        """
        Gera o ZIP da ata de um formulário.

        Args:
            form_id: Formulário a ser marcado com ``pdfGerado``
            sections: Objeto com ``sectionsList`` (ou seções antigas)
            header_data: Dados do cabeçalho
            form_info: Perfil do cliente; substitui ``sections["formInfo"]``

        Returns:
            dict: ``filename`` (id do ZIP temporário) e ``empresaNome``
        """
        empresa_nome = sanitize_filename(header_data.get("empresa"))
        self.ensure_temp_dir()

        report_id = str(uuid.uuid4())
        pdf_path = os.path.join(self.temp_dir, f"{report_id}.pdf")
        zip_path = os.path.join(self.temp_dir, f"{report_id}.zip")

        html_content = self.build_html(sections, header_data, form_info)
        try:
            render_pdf(
                html_content,
                pdf_path,
                page_size=self.page_size,
                page_margin=self.page_margin,
            )
            archive_file(pdf_path, zip_path, arcname=f"{empresa_nome}.pdf")
        finally:
            self._remove_quietly(pdf_path)

        try:
            self.form_service.mark_pdf_generated(form_id)
        except AtasError as e:
            # a ata já foi gerada; o status é apenas informativo
            logger.error(f"Erro ao atualizar status pdfGerado de {form_id}: {e}")

        logger.info(f"Ata gerada para {form_id}: {report_id}.zip")
        return {"filename": report_id, "empresaNome": empresa_nome}

    def archive_path(self, filename: str) -> str:
        """Caminho do ZIP gerado; nomes fora do padrão são tratados como inexistentes"""
        if not isinstance(filename, str) or not KEY_PATTERN.match(filename):
            raise ArchiveNotFoundError()

        path = os.path.join(self.temp_dir, f"{filename}.zip")
        if not os.path.isfile(path):
            raise ArchiveNotFoundError()
        return path

    def remove_archive(self, path: str) -> None:
        self._remove_quietly(path)
        logger.info(f"Arquivo temporário removido: {os.path.basename(path)}")

    def cleanup_stale(self, max_age_hours: float = 24, now: Optional[float] = None) -> list:
        """Remove PDFs/ZIPs gerados há mais de ``max_age_hours`` horas"""
        if not os.path.isdir(self.temp_dir):
            return []

        cutoff = (now if now is not None else time.time()) - max_age_hours * 3600
        removed = []
        for name in sorted(os.listdir(self.temp_dir)):
            if not name.endswith((".pdf", ".zip")):
                continue
            path = os.path.join(self.temp_dir, name)
            try:
                if os.path.getmtime(path) < cutoff:
                    os.remove(path)
                    removed.append(name)
            except OSError as e:
                logger.warning(f"Não foi possível remover {name}: {e}")
        return removed

    @staticmethod
    def _remove_quietly(path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Não foi possível remover {path}: {e}")
