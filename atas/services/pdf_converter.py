"""
Serviço de conversão HTML -> PDF e empacotamento em ZIP.
"""

import html
import logging
import os
import re
import zipfile
from typing import Optional

from fpdf import FPDF
from reportlab.lib import pagesizes
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas as reportlab_canvas

from atas.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)

_HEAD_RE = re.compile(r"(?is)<(style|head|title)\b.*?</\1>")
_BODY_RE = re.compile(r"(?is)<body\b[^>]*>(.*)</body>")
_LENGTH_RE = re.compile(r"^\s*([\d.]+)\s*(mm|cm|in|pt)?\s*$")
_MM_PER_UNIT = {"mm": 1.0, "cm": 10.0, "in": 25.4, "pt": 25.4 / 72}
_ENTITY_RE = re.compile(r"&(#\d+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);")
_BREAK_RE = re.compile(r"(?i)<br\s*/?>|</(p|div|li|tr|h[1-6])>")
_TAG_RE = re.compile(r"<[^<]+?>")
_TYPOGRAPHIC = str.maketrans(
    {
        "\u2018": "'",
        "\u2019": "'",
        "\u201c": '"',
        "\u201d": '"',
        "\u2013": "-",
        "\u2014": "-",
        "\u2022": "-",
        "\u2026": "...",
    }
)

PLAIN_FONT = "Helvetica"
PLAIN_FONT_SIZE = 11
PLAIN_LEADING = 14


def _length_mm(value: str, default: float = 20.0) -> float:
    match = _LENGTH_RE.match(value or "")
    if not match:
        return default
    return float(match.group(1)) * _MM_PER_UNIT[match.group(2) or "mm"]


def _body_html(html_content: str) -> str:
    """Remove <head> e <style>; o FPDF só entende o corpo do documento"""
    body = _BODY_RE.search(html_content)
    content = body.group(1) if body else html_content
    return _HEAD_RE.sub("", content)


def _latin1_text(text: str) -> str:
    """As fontes padrão do PDF só cobrem Latin-1; o resto vira equivalente ou '?'"""
    return text.translate(_TYPOGRAPHIC).encode("latin-1", "replace").decode("latin-1")


def _latin1_html(html_content: str) -> str:
    def resolve(match):
        entity = match.group(0)
        char = html.unescape(entity)
        # entidades Latin-1 (&amp;, &lt;, &nbsp;...) continuam escapadas
        if char == entity or all(ord(c) < 256 for c in char):
            return entity
        return char

    return _latin1_text(_ENTITY_RE.sub(resolve, html_content))


def render_pdf(
    html_content: str,
    output_path: str,
    title: str = "Ata de Reunião",
    page_size: str = "A4",
    page_margin: str = "20mm",
) -> str:
    """
    Renderiza o HTML em um arquivo PDF.

    Usa o ``write_html`` do fpdf2 com o texto reduzido a Latin-1. Se a
    renderização falhar, gera um PDF de texto simples com ReportLab.

    Args:
        html_content: Documento HTML completo
        output_path: Caminho do PDF a ser gravado
        title: Título gravado nos metadados do PDF
        page_size: Formato da página (A4, Letter...)
        page_margin: Margem da página (ex.: "20mm", "2cm")

    Returns:
        str: O caminho do arquivo gerado
    """
    logger.info(f"Gerando PDF em {output_path}")
    margin = _length_mm(page_margin)

    try:
        pdf = FPDF(format=page_size)
        pdf.set_title(_latin1_text(title))
        pdf.set_margins(margin, margin, margin)
        pdf.set_auto_page_break(auto=True, margin=margin)
        pdf.add_page()
        pdf.set_font("Times", size=12)
        pdf.write_html(_latin1_html(_body_html(html_content)))
        pdf.output(output_path)
    except OSError as e:
        raise ReportGenerationError(f"Erro ao gravar PDF: {e}") from e
    except Exception as e:
        logger.warning(f"fpdf2 não conseguiu renderizar o HTML ({e}); usando PDF de texto simples")
        _render_plain_text_pdf(html_content, output_path, title, page_size, margin)

    logger.info(f"PDF gerado com sucesso: {output_path}")
    return output_path


def _render_plain_text_pdf(
    html_content: str,
    output_path: str,
    title: str,
    page_size: str = "A4",
    margin_mm: float = 20.0,
) -> None:
    """Fallback para texto simples"""
    page = getattr(pagesizes, page_size.upper(), pagesizes.A4)
    width, height = page
    margin = margin_mm * mm
    max_width = width - 2 * margin

    pdf = reportlab_canvas.Canvas(output_path, pagesize=page)
    pdf.setTitle(title)
    pdf.setFont(PLAIN_FONT, PLAIN_FONT_SIZE)
    y = height - margin

    text = _TAG_RE.sub("", _BREAK_RE.sub("\n", _body_html(html_content)))
    plain_text = _latin1_text(html.unescape(text))
    for raw_line in plain_text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        for wrapped in simpleSplit(line, PLAIN_FONT, PLAIN_FONT_SIZE, max_width):
            pdf.drawString(margin, y, wrapped)
            y -= PLAIN_LEADING

            if y <= margin:
                pdf.showPage()
                pdf.setFont(PLAIN_FONT, PLAIN_FONT_SIZE)
                y = height - margin

    pdf.showPage()
    try:
        pdf.save()
    except OSError as e:
        raise ReportGenerationError(f"Erro ao gravar PDF: {e}") from e


def archive_file(
    source_path: str, zip_path: str, arcname: Optional[str] = None
) -> str:
    """Cria um ZIP com uma única entrada contendo ``source_path``"""
    arcname = arcname or os.path.basename(source_path)
    try:
        with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zip_file:
            zip_file.write(source_path, arcname=arcname)
    except (OSError, zipfile.BadZipFile) as e:
        raise ReportGenerationError(f"Erro ao criar arquivo ZIP: {e}") from e

    logger.info(f"Arquivo ZIP criado: {zip_path}")
    return zip_path
