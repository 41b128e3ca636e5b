"""
Formatos canônicos do documento de formulário.

Todas as funções retornam objetos novos a cada chamada, então quem recebe
pode alterá-los livremente.
"""

# Tipos de seção aceitos (enumeração fechada) e rótulos exibidos no editor
SECTION_TYPES = {
    "fiscal": "Fiscal",
    "contabil": "Contábil",
    "pessoal": "Pessoal",
    "legalizacao": "Legalização",
    "controle": "Controle",
    "estudos": "Estudos Tributários",
    "financeiro": "Financeiro",
    "atendimento": "Atendimento",
    "outros": "Outros",
}

# Títulos usados no PDF
SECTION_TITLES = {
    "fiscal": "Departamento Fiscal",
    "contabil": "Departamento Contábil",
    "pessoal": "Departamento Pessoal",
    "legalizacao": "Departamento de Legalização",
    "controle": "Departamento de Controle",
    "estudos": "Departamento de Estudos Tributários",
    "financeiro": "Departamento Financeiro",
    "atendimento": "Departamento de Atendimento",
    "outros": "Outros",
}

# Campos antigos (antes de sectionsList) -> (tipo, título)
LEGACY_SECTIONS = (
    ("fiscal", "fiscal", "Fiscal"),
    ("dp", "pessoal", "Pessoal"),
    ("contabil", "contabil", "Contábil"),
)

NEW_FORM_TITLE = "Novo Formulário"
UNTITLED_FORM_TITLE = "Formulário sem título"
DEFAULT_PARTICIPANTES_CONTABILIDADE = "Eli, Cataryna e William"

FORM_INFO_LIST_FIELDS = {
    "departamentos": ["", "", ""],
    "razoesParaMudanca": [],
    "servicosAnteriores": [],
    "parcelamentosDetalhes": [""],
    "preferenciaComunicacao": [],
}

FORM_INFO_FIELDS = (
    # Informações Gerais da Empresa
    "nomeEmpresa",
    "cnpj",
    "endereco",
    "setorAtuacao",
    "setorAtuacaoDetalhes",
    "porteEmpresa",
    "regimeTributario",
    # Estrutura Organizacional
    "numeroFuncionarios",
    "funcionarioIntermediario",
    "departamentos",
    # Motivação para a Mudança
    "razoesParaMudanca",
    "outrosMotivos",
    "expectativas",
    # Histórico Contábil
    "servicosAnteriores",
    "outrosServicos",
    "escritorioContabilAnterior",
    # Documentação e Processos
    "estadoDocumentos",
    "responsavelDocumentosNome",
    "responsavelDocumentosCargo",
    "pendenciasRelatorios",
    "temBalancoFechado",
    # Financeiro
    "temParcelamentos",
    "parcelamentosDetalhes",
    # Controle
    "necessidadeControleCND",
    # Fiscal
    "emiteNF",
    "quantidadeNotas",
    "mediaFaturamento",
    "temSistemaEmissao",
    "qualSistemaEmissao",
    # Preferência de Comunicação
    "preferenciaComunicacao",
    # Observações Gerais
    "observacoesGerais",
    # Informações de Contato
    "email",
    "telefone",
    "whatsapp",
    "outrosContatos",
    # Responsável interno (não sai no PDF)
    "responsavel",
)


def default_block():
    return {"title": "", "content": "", "assunto": "", "responsavel": ""}


def default_section(section_type="fiscal", title=None):
    return {
        "type": section_type,
        "title": title or SECTION_TYPES.get(section_type, section_type),
        "blocks": [default_block()],
        "completed": False,
    }


def default_legacy_section():
    return {"blocks": [default_block()], "completed": False}


def default_header_data(participantes_contabilidade=None):
    return {
        "empresa": "",
        "local": "",
        "data": "",
        "participantesEmpresa": "",
        "participantesContabilidade": (
            DEFAULT_PARTICIPANTES_CONTABILIDADE
            if participantes_contabilidade is None
            else participantes_contabilidade
        ),
    }


def default_form_info():
    form_info = {}
    for field in FORM_INFO_FIELDS:
        if field in FORM_INFO_LIST_FIELDS:
            form_info[field] = list(FORM_INFO_LIST_FIELDS[field])
        else:
            form_info[field] = ""
    return form_info


def default_form_document(participantes_contabilidade=None):
    """Documento completo criado para um formulário novo"""
    return {
        "sectionsList": [default_section("fiscal")],
        # Para compatibilidade com versão anterior
        "fiscal": default_legacy_section(),
        "dp": default_legacy_section(),
        "contabil": default_legacy_section(),
        "headerData": default_header_data(participantes_contabilidade),
        "pdfGerado": False,
        "formInfo": default_form_info(),
    }
