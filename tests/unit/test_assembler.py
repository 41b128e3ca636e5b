"""
Testes unitários da montagem do HTML da ata.
"""

import pytest

from atas.forms.defaults import default_form_info
from atas.reports.assembler import (
    build_report_html,
    format_date,
    has_profile_content,
    process_rich_text,
    section_title,
)


def _block(title="", content=""):
    return {"title": title, "content": content, "assunto": "", "responsavel": ""}


def _sections(*sections, form_info=None):
    payload = {"sectionsList": list(sections)}
    if form_info is not None:
        payload["formInfo"] = form_info
    return payload


HEADER = {
    "empresa": "Padaria Central",
    "local": "Sede",
    "data": "2024-03-07",
    "participantesEmpresa": "João",
    "participantesContabilidade": "Eli",
}


class TestHeader:
    def test_date_is_reformatted(self):
        """Testa a data no formato dd/mm/aaaa"""
        html = build_report_html(_sections(), HEADER)
        assert "<td>07-03-2024</td>" in html
        assert "2024-03-07" not in html

    def test_header_rows(self):
        """Testa as linhas do cabeçalho"""
        html = build_report_html(_sections(), HEADER, firm_name="Canella & Santos")

        assert "Ata de Reunião" in html
        assert "<td>Padaria Central</td>" in html
        assert "Representantes Padaria Central" in html
        assert "Representantes Canella &amp; Santos" in html

    def test_missing_values_render_empty(self):
        """Testa campos ausentes do cabeçalho"""
        html = build_report_html(_sections(), {"empresa": None})

        assert "None" not in html
        assert "undefined" not in html
        assert "<td></td>" in html

    def test_plain_text_is_escaped(self):
        """Testa o escape dos textos simples"""
        html = build_report_html(_sections(), {"empresa": "<b>A & B</b>"})
        assert "&lt;b&gt;A &amp; B&lt;/b&gt;" in html

    def test_page_settings(self):
        """Testa tamanho e margem da página"""
        html = build_report_html(_sections(), HEADER, page_size="Letter", page_margin="1in")
        assert "size: Letter;" in html
        assert "margin: 1in;" in html

    def test_logo_is_embedded(self):
        """Testa o logo embutido"""
        html = build_report_html(_sections(), HEADER, logo_data_uri="data:image/png;base64,AAAA")
        assert 'src="data:image/png;base64,AAAA"' in html

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-03-07", "07-03-2024"),
            ("07/03/2024", "07/03/2024"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_format_date(self, value, expected):
        """Testa a formatação de datas"""
        assert format_date(value) == expected


class TestSections:
    def test_blank_blocks_are_skipped(self):
        """Um bloco em branco e um com título X: X aparece uma única vez"""
        sections = _sections(
            {
                "type": "fiscal",
                "title": "Fiscal",
                "blocks": [_block(), _block(title="X")],
            }
        )
        html = build_report_html(sections, HEADER)

        assert html.count("X") == 1
        assert html.count('class="block"') == 1
        assert "Departamento Fiscal" in html

    def test_section_with_only_blank_blocks_is_omitted(self):
        """Testa a omissão de seções sem conteúdo"""
        sections = _sections(
            {"type": "fiscal", "title": "Fiscal", "blocks": [_block(), _block("  ", " ")]},
            {"type": "contabil", "title": "Contábil", "blocks": [_block(content="<p>ok</p>")]},
        )
        html = build_report_html(sections, HEADER)

        assert "Departamento Fiscal" not in html
        assert "Departamento Contábil" in html
        assert "<p>ok</p>" in html

    def test_sections_keep_display_order(self):
        """Testa a ordem das seções"""
        sections = _sections(
            {"type": "financeiro", "title": "", "blocks": [_block("A")]},
            {"type": "estudos", "title": "", "blocks": [_block("B")]},
        )
        html = build_report_html(sections, HEADER)

        assert html.index("Departamento Financeiro") < html.index(
            "Departamento de Estudos Tributários"
        )

    def test_internal_fields_are_not_printed(self):
        """Testa que assunto e responsável não aparecem"""
        block = _block("Título", "<p>Conteúdo</p>")
        block["assunto"] = "assunto-interno"
        block["responsavel"] = "responsavel-interno"
        html = build_report_html(
            _sections({"type": "outros", "title": "Outros", "blocks": [block]}), HEADER
        )

        assert "assunto-interno" not in html
        assert "responsavel-interno" not in html

    def test_malformed_entries_are_skipped(self):
        """Testa que entradas malformadas são ignoradas"""
        sections = _sections(
            "não é seção",
            {"type": "fiscal", "blocks": "não é lista"},
            {"type": "controle", "blocks": [None, _block("CND")]},
        )
        html = build_report_html(sections, HEADER)

        assert "Departamento de Controle" in html
        assert "CND" in html
        assert "Departamento Fiscal" not in html

    def test_compatibility_mode_uses_legacy_keys(self):
        """Testa o modo de compatibilidade"""
        sections = {
            "fiscal": {"blocks": [_block("Apuração")]},
            "dp": {"blocks": [_block("Folha")]},
            "formInfo": {"blocks": [_block("nunca")]},
        }
        html = build_report_html(sections, HEADER)

        assert "Departamento Fiscal" in html
        assert "Departamento Pessoal" in html
        assert "nunca" not in html

    @pytest.mark.parametrize(
        "section_type,title,expected",
        [
            ("fiscal", "Qualquer", "Departamento Fiscal"),
            ("atendimento", "", "Departamento de Atendimento"),
            ("novo", "Meu título", "Meu título"),
            ("novo", "", "NOVO"),
            (None, None, "Outros"),
        ],
    )
    def test_section_title(self, section_type, title, expected):
        """Testa o título de cada tipo de seção"""
        assert section_title(section_type, title) == expected

    def test_output_is_deterministic(self):
        """Testa que a mesma entrada gera o mesmo HTML"""
        sections = _sections(
            {"type": "fiscal", "title": "Fiscal", "blocks": [_block("A", "<p>b</p>")]},
            form_info={"nomeEmpresa": "Acme", "emiteNF": "Sim"},
        )
        assert build_report_html(sections, HEADER) == build_report_html(sections, HEADER)


class TestRichText:
    def test_indent_class_becomes_margin(self):
        """Testa a conversão da classe de recuo em margem"""
        html = process_rich_text('<ul><li class="ql-indent-2">Item</li></ul>')
        assert html == '<ul><li class="ql-indent-2" style="margin-left: 3cm">Item</li></ul>'

    def test_indent_is_prepended_to_existing_style(self):
        """Testa o recuo somado ao style existente"""
        html = process_rich_text('<p class="ql-indent-1" style="color: red">x</p>')
        assert 'style="margin-left: 1.5cm; color: red"' in html

    def test_other_markup_is_untouched(self):
        """Testa que o restante do HTML fica intacto"""
        content = '<h2>Título</h2><p class="ql-align-center"><strong>a</strong></p>'
        assert process_rich_text(content) == content

    def test_content_is_not_escaped_in_report(self):
        """Testa o conteúdo rico sem escape"""
        sections = _sections(
            {"type": "fiscal", "title": "", "blocks": [_block(content="<ol><li>um</li></ol>")]}
        )
        assert "<ol><li>um</li></ol>" in build_report_html(sections, HEADER)


class TestClientProfile:
    def test_empty_profile_is_skipped(self):
        """Testa a omissão do perfil vazio"""
        html = build_report_html(_sections(form_info=default_form_info()), HEADER)

        assert has_profile_content(default_form_info()) is False
        assert "FORMULÁRIO DE PERFIL DO CLIENTE" not in html

    @pytest.mark.parametrize(
        "form_info",
        [
            {"cnpj": "00.000.000/0001-00"},
            {"departamentos": ["", "RH"]},
            {"razoesParaMudanca": ["Custo"]},
            {"parcelamentosDetalhes": ["PERT"]},
            {"observacoesGerais": "Cliente novo"},
        ],
    )
    def test_any_filled_field_shows_profile(self, form_info):
        """Testa que qualquer campo preenchido exibe o perfil"""
        assert has_profile_content(form_info) is True

    def test_profile_blocks(self):
        """Testa os blocos numerados do perfil"""
        form_info = {
            "nomeEmpresa": "Acme",
            "setorAtuacao": "Outros",
            "setorAtuacaoDetalhes": "",
            "departamentos": ["RH", "", "Financeiro"],
            "razoesParaMudanca": ["Custo", "Outros"],
            "outrosMotivos": "Atendimento lento",
        }
        html = build_report_html(_sections(form_info=form_info), HEADER)

        assert "FORMULÁRIO DE PERFIL DO CLIENTE" in html
        assert "1. Informações Gerais da Empresa" in html
        assert "8. Fiscal" in html
        assert "Outros: Não especificado" in html
        assert "<li>RH</li>" in html
        assert "<li></li>" not in html
        assert "<li>Outros: Atendimento lento</li>" in html
        assert "Observações Gerais" not in html

    def test_emite_nf_nao_hides_details(self):
        """Testa os detalhes de NF ocultos quando não emite"""
        html = build_report_html(
            _sections(form_info={"nomeEmpresa": "Acme", "emiteNF": "Não"}), HEADER
        )

        assert "Quantas notas?" not in html
        assert "Qual a média de faturamento?" not in html

    def test_emite_nf_sim_shows_details(self):
        """Campos vazios aparecem como Não informado"""
        form_info = {
            "nomeEmpresa": "Acme",
            "emiteNF": "Sim",
            "quantidadeNotas": "",
            "mediaFaturamento": "",
        }
        html = build_report_html(_sections(form_info=form_info), HEADER)

        assert "<p><strong>Quantas notas?</strong> Não informado</p>" in html
        assert "<p><strong>Qual a média de faturamento?</strong> Não informado</p>" in html

    def test_parcelamentos_only_when_sim(self):
        """Testa os parcelamentos apenas quando possui"""
        form_info = {"nomeEmpresa": "Acme", "parcelamentosDetalhes": ["PERT"]}

        html = build_report_html(_sections(form_info=dict(form_info, temParcelamentos="Não")), HEADER)
        assert "Detalhes dos Parcelamentos" not in html

        html = build_report_html(_sections(form_info=dict(form_info, temParcelamentos="Sim")), HEADER)
        assert "<li>PERT</li>" in html

    def test_parcelamentos_sim_without_details(self):
        """Testa parcelamentos sem detalhes"""
        form_info = {"nomeEmpresa": "Acme", "temParcelamentos": "Sim", "parcelamentosDetalhes": [""]}
        html = build_report_html(_sections(form_info=form_info), HEADER)
        assert "<li>Não informado</li>" in html

    def test_sistema_emissao(self):
        """Testa o sistema de emissão"""
        form_info = {"nomeEmpresa": "Acme", "temSistemaEmissao": "Sim", "qualSistemaEmissao": "NFe.io"}
        html = build_report_html(_sections(form_info=form_info), HEADER)
        assert "<p><strong>Qual o sistema?</strong> NFe.io</p>" in html

    def test_internal_responsavel_is_not_printed(self):
        """Testa que o responsável interno não aparece"""
        form_info = {"nomeEmpresa": "Acme", "responsavel": "Operador Interno"}
        html = build_report_html(_sections(form_info=form_info), HEADER)
        assert "Operador Interno" not in html
