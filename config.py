import os

from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, ".env"))


def _env_flag(name, default="False"):
    return os.environ.get(name, default).lower() in ["true", "on", "1"]


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key-change-in-production"

    # Storage layout
    DATA_DIR = os.environ.get("DATA_DIR") or os.path.join(basedir, "data")
    FORMS_DIR = os.environ.get("FORMS_DIR") or os.path.join(DATA_DIR, "forms")
    FORM_LIST_PATH = os.environ.get("FORM_LIST_PATH") or os.path.join(
        DATA_DIR, "formList.json"
    )
    TEMP_DIR = os.environ.get("TEMP_DIR") or os.path.join(DATA_DIR, "temp")

    # "json" = one file per form, "memory" = volatile (tests)
    STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "json")

    # PDF settings
    PDF_PAGE_SIZE = os.environ.get("PDF_PAGE_SIZE", "A4")
    PDF_MARGIN = os.environ.get("PDF_MARGIN", "20mm")
    LOGO_PATH = os.environ.get("LOGO_PATH")

    # Accounting firm shown in the report header
    ESCRITORIO_NOME = os.environ.get("ESCRITORIO_NOME", "Canella & Santos")
    DEFAULT_PARTICIPANTES_CONTABILIDADE = os.environ.get(
        "DEFAULT_PARTICIPANTES_CONTABILIDADE", "Eli, Cataryna e William"
    )

    # Reject edits once a PDF was generated (advisory only when False)
    LOCK_FORMS_AFTER_PDF = _env_flag("LOCK_FORMS_AFTER_PDF")

    # The React client runs on another origin
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Sentry Error Tracking
    SENTRY_DSN = os.environ.get("SENTRY_DSN")

    SHOW_DETAILED_ERRORS = _env_flag("SHOW_DETAILED_ERRORS")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Environment settings
    DEBUG = _env_flag("FLASK_DEBUG")
    ENV = os.environ.get("FLASK_ENV", "production")
    PORT = int(os.environ.get("PORT", 3001))


class TestConfig(Config):
    """Configuração para ambiente de testes"""

    TESTING = True
    STORAGE_BACKEND = "memory"
    LOCK_FORMS_AFTER_PDF = False
    SENTRY_DSN = None
