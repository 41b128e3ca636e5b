"""
Montagem do HTML da ata de reunião.

Função pura: recebe as seções e o cabeçalho e devolve o HTML completo, sem
I/O. A mesma entrada sempre produz exatamente o mesmo texto.
"""

import re
from typing import Any, Dict, List, Optional

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup

from atas.forms.defaults import FORM_INFO_LIST_FIELDS, SECTION_TITLES, default_form_info

NOT_INFORMED = "Não informado"

# Cada nível de recuo do editor equivale a 1.5cm de margem
INDENT_UNIT_CM = 1.5

# PNG 1x1 transparente; substituído por LOGO_PATH quando configurado
DEFAULT_LOGO_DATA_URI = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)

# Campos que indicam que o perfil do cliente foi preenchido
PROFILE_SCALAR_FIELDS = (
    "nomeEmpresa",
    "cnpj",
    "endereco",
    "setorAtuacao",
    "porteEmpresa",
    "setorAtuacaoDetalhes",
    "numeroFuncionarios",
    "funcionarioIntermediario",
    "expectativas",
    "estadoDocumentos",
    "responsavelDocumentosNome",
    "responsavelDocumentosCargo",
    "pendenciasRelatorios",
    "emiteNF",
    "quantidadeNotas",
    "mediaFaturamento",
    "temSistemaEmissao",
    "qualSistemaEmissao",
    "temBalancoFechado",
    "temParcelamentos",
    "necessidadeControleCND",
    "observacoesGerais",
)
PROFILE_ANY_ITEM_FIELDS = ("departamentos", "parcelamentosDetalhes")
PROFILE_NON_EMPTY_LIST_FIELDS = (
    "razoesParaMudanca",
    "servicosAnteriores",
    "preferenciaComunicacao",
)

# Chaves do corpo "sections" que nunca são seções no modo de compatibilidade
NON_SECTION_KEYS = ("formInfo", "sectionsList")
LEGACY_TITLE_OVERRIDES = {"dp": "Departamento Pessoal"}

_TAG_RE = re.compile(r"<(li|ul|ol|p)\b([^>]*)>", re.IGNORECASE)
_INDENT_CLASS_RE = re.compile(r'class\s*=\s*"[^"]*\bql-indent-(\d+)\b[^"]*"')
_STYLE_RE = re.compile(r'style\s*=\s*"([^"]*)"')

_env = Environment(
    loader=PackageLoader("atas", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _as_list(value: Any) -> List[str]:
    if isinstance(value, list):
        return [_text(item) for item in value]
    if value:
        return [_text(value)]
    return []


def format_date(value: Any) -> str:
    """Converte YYYY-MM-DD para DD-MM-YYYY; outros formatos passam direto"""
    text = _text(value)
    if not text:
        return ""
    parts = text.split("-")
    if len(parts) != 3:
        return text
    year, month, day = parts
    return f"{day}-{month}-{year}"


def _indent_tag(match) -> str:
    tag, attrs = match.group(1), match.group(2)
    indent = _INDENT_CLASS_RE.search(attrs)
    if not indent:
        return match.group(0)

    margin = f"margin-left: {INDENT_UNIT_CM * int(indent.group(1)):g}cm"
    style = _STYLE_RE.search(attrs)
    if style:
        if "margin-left" in style.group(1):
            return match.group(0)
        attrs = f"{attrs[:style.start(1)]}{margin}; {attrs[style.start(1):]}"
    else:
        attrs = f'{attrs[:indent.end()]} style="{margin}"{attrs[indent.end():]}'
    return f"<{tag}{attrs}>"


def process_rich_text(content: Any) -> str:
    """Mantém o HTML do editor, convertendo classes ql-indent-N em margem"""
    text = _text(content)
    if not text:
        return ""
    return _TAG_RE.sub(_indent_tag, text)


def has_profile_content(form_info: Optional[Dict[str, Any]]) -> bool:
    if not isinstance(form_info, dict):
        return False
    if any(form_info.get(field) for field in PROFILE_SCALAR_FIELDS):
        return True
    if any(
        any(item for item in _as_list(form_info.get(field)))
        for field in PROFILE_ANY_ITEM_FIELDS
    ):
        return True
    return any(_as_list(form_info.get(field)) for field in PROFILE_NON_EMPTY_LIST_FIELDS)


def _profile_context(form_info: Dict[str, Any]) -> Dict[str, Any]:
    """Perfil com todos os campos presentes, textos e listas já coagidos"""
    info = default_form_info()
    for field, value in form_info.items():
        if field in FORM_INFO_LIST_FIELDS:
            info[field] = _as_list(value)
        else:
            info[field] = _text(value)
    return info


def section_title(section_type: Any, title: Any) -> str:
    section_type = _text(section_type) or "outros"
    return SECTION_TITLES.get(section_type) or _text(title) or section_type.upper()


def _is_blank(value: Any) -> bool:
    return not _text(value).strip()


def _render_blocks(blocks: List[Any]) -> List[Dict[str, Any]]:
    rendered = []
    for block in blocks:
        if not isinstance(block, dict):
            continue
        title, content = block.get("title"), block.get("content")
        if _is_blank(title) and _is_blank(content):
            continue
        rendered.append(
            {
                "title": "" if _is_blank(title) else _text(title),
                "content": Markup(
                    "" if _is_blank(content) else process_rich_text(content)
                ),
            }
        )
    return rendered


def collect_sections(sections: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Seções com conteúdo, na ordem de exibição, com títulos resolvidos"""
    collected = []
    sections_list = sections.get("sectionsList")

    if isinstance(sections_list, list):
        candidates = [
            (section_title(s.get("type"), s.get("title")), s.get("blocks"))
            for s in sections_list
            if isinstance(s, dict)
        ]
    else:
        # modo de compatibilidade: chaves antigas no nível superior
        candidates = [
            (
                LEGACY_TITLE_OVERRIDES.get(key)
                or SECTION_TITLES.get(key)
                or key.upper(),
                value.get("blocks"),
            )
            for key, value in sections.items()
            if key not in NON_SECTION_KEYS and isinstance(value, dict)
        ]

    for title, blocks in candidates:
        if not isinstance(blocks, list):
            continue
        rendered = _render_blocks(blocks)
        if rendered:
            collected.append({"title": title, "blocks": rendered})
    return collected


def build_report_html(
    sections: Optional[Dict[str, Any]],
    header_data: Optional[Dict[str, Any]],
    firm_name: str = "Canella & Santos",
    logo_data_uri: str = DEFAULT_LOGO_DATA_URI,
    page_size: str = "A4",
    page_margin: str = "20mm",
) -> str:
    """
    Gera o HTML completo da ata.

    Args:
        sections: Objeto com ``sectionsList`` (ou seções antigas) e ``formInfo``
        header_data: Dados do cabeçalho (empresa, local, data, participantes)
        firm_name: Nome do escritório exibido no cabeçalho
        logo_data_uri: Imagem embutida no topo do documento
        page_size: Tamanho da página (@page size)
        page_margin: Margem da página (@page margin)

    Returns:
        str: Documento HTML autocontido
    """
    if not isinstance(sections, dict):
        sections = {}
    if not isinstance(header_data, dict):
        header_data = {}

    header = {
        "empresa": _text(header_data.get("empresa")),
        "local": _text(header_data.get("local")),
        "data": format_date(header_data.get("data")),
        "participantes_empresa": _text(header_data.get("participantesEmpresa")),
        "participantes_contabilidade": _text(
            header_data.get("participantesContabilidade")
        ),
    }

    form_info = sections.get("formInfo")
    profile = _profile_context(form_info) if has_profile_content(form_info) else None

    template = _env.get_template("reports/ata.html")
    return template.render(
        header=header,
        firm_name=firm_name,
        logo_data_uri=logo_data_uri,
        page_size=page_size,
        page_margin=page_margin,
        profile=profile,
        not_informed=NOT_INFORMED,
        sections=collect_sections(sections),
    )
