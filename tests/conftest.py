"""
Configuração de testes das atas.
"""

import pytest

from atas import create_app
from config import TestConfig


@pytest.fixture(scope="function")
def app(tmp_path):
    """Cria instância da aplicação com armazenamento em memória"""

    class Config(TestConfig):
        DATA_DIR = str(tmp_path)
        TEMP_DIR = str(tmp_path / "temp")

    yield create_app(Config)


@pytest.fixture(scope="function")
def client(app):
    """Cliente de teste para fazer requisições"""
    return app.test_client()


@pytest.fixture(scope="function")
def runner(app):
    """CLI runner para testar comandos"""
    return app.test_cli_runner()


@pytest.fixture
def form_service(app):
    return app.extensions["form_service"]


@pytest.fixture
def report_service(app):
    return app.extensions["report_service"]


@pytest.fixture
def legacy_document():
    """Documento gravado antes de sectionsList/formInfo existirem"""
    return {
        "fiscal": {
            "blocks": [{"title": "Apuração", "content": "<p>ICMS</p>"}],
            "completed": True,
        },
        "dp": {"blocks": [{"title": "", "content": ""}], "completed": False},
        "contabil": {"blocks": [{"title": "Balanço", "content": ""}]},
        "headerData": {
            "empresa": "Padaria Central",
            "local": "Sede",
            "data": "2023-11-20",
            "participantesEmpresa": "João",
            "participantesContabilidade": "Eli",
        },
    }
