"""
Migração de documentos antigos para o formato atual.

``normalize_form_document`` é o único ponto que conhece os formatos legados;
o resto da aplicação trabalha sempre com o documento canônico.
"""

import copy
from typing import Any, Dict, Tuple

from atas.forms.defaults import (
    LEGACY_SECTIONS,
    default_block,
    default_form_info,
    default_header_data,
    default_section,
)

# Ausência destes campos não segue o padrão do formulário novo
MISSING_FORM_INFO_FALLBACKS = {
    "departamentos": [],
    "parcelamentosDetalhes": [""],
}


def normalize_block(block: Dict[str, Any]) -> Dict[str, Any]:
    block = dict(block)
    block.setdefault("title", "")
    block.setdefault("content", "")
    block["assunto"] = block.get("assunto") or ""
    block["responsavel"] = block.get("responsavel") or ""
    return block


def normalize_blocks(blocks) -> list:
    if not isinstance(blocks, list):
        return [default_block()]
    normalized = [normalize_block(b) for b in blocks if isinstance(b, dict)]
    return normalized or [default_block()]


def normalize_section(section: Dict[str, Any]) -> Dict[str, Any]:
    section = dict(section)
    section["blocks"] = normalize_blocks(section.get("blocks"))
    if "completed" not in section:
        section["completed"] = False
    return section


def normalize_form_info(form_info) -> Dict[str, Any]:
    if not isinstance(form_info, dict):
        return default_form_info()

    form_info = dict(form_info)
    for field, fallback in MISSING_FORM_INFO_FALLBACKS.items():
        if not isinstance(form_info.get(field), list):
            form_info[field] = list(fallback)
    return form_info


def sections_from_legacy(document: Dict[str, Any]) -> list:
    """Converte os campos fiscal/dp/contabil em sectionsList"""
    sections = []
    for legacy_key, section_type, title in LEGACY_SECTIONS:
        legacy = document.get(legacy_key)
        if not isinstance(legacy, dict):
            continue
        sections.append(
            {
                "type": section_type,
                "title": title,
                "blocks": normalize_blocks(legacy.get("blocks")),
                "completed": legacy.get("completed") or False,
            }
        )

    if not sections:
        sections.append(default_section("fiscal"))
    return sections


def normalize_form_document(
    raw: Dict[str, Any], participantes_contabilidade=None
) -> Tuple[Dict[str, Any], bool]:
    """
    Mapeia qualquer formato aceito de documento para o formato canônico.

    Args:
        raw: Documento lido do armazenamento (não é alterado)
        participantes_contabilidade: Valor padrão usado se headerData faltar

    Returns:
        Tuple[dict, bool]: (documento normalizado, se houve alteração)
    """
    document = copy.deepcopy(raw)

    if document.get("pdfGerado") is None:
        document["pdfGerado"] = False

    document["formInfo"] = normalize_form_info(document.get("formInfo"))

    if not isinstance(document.get("headerData"), dict):
        document["headerData"] = default_header_data(participantes_contabilidade)

    if isinstance(document.get("sectionsList"), list):
        document["sectionsList"] = [
            normalize_section(section)
            for section in document["sectionsList"]
            if isinstance(section, dict)
        ]
    else:
        document["sectionsList"] = sections_from_legacy(document)

    return document, document != raw
