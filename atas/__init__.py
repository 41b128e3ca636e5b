import logging
import os

from flask import Flask

from config import Config

logger = logging.getLogger(__name__)


def _build_storage(backend, directory):
    from atas.services.storage import JsonFileStorage, MemoryStorage

    if backend == "memory":
        return MemoryStorage()
    if backend == "json":
        return JsonFileStorage(directory)
    raise ValueError(f"STORAGE_BACKEND desconhecido: {backend}")


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Configure JSON and response encoding
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    from atas.logger_config import setup_logging

    setup_logging(app)

    # Initialize Sentry for error tracking
    if app.config.get("SENTRY_DSN"):
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=app.config["SENTRY_DSN"],
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=app.config.get("ENV", "production"),
        )

    # The editor is served from another origin
    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = app.config.get(
            "CORS_ORIGINS", "*"
        )
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        response.headers["Access-Control-Allow-Methods"] = (
            "GET, POST, DELETE, OPTIONS"
        )
        return response

    # Wire storage and services
    from atas.forms.repository import FormIndexRepository, FormRepository
    from atas.forms.services import FormService
    from atas.reports.services import ReportService

    backend = app.config.get("STORAGE_BACKEND", "json")
    form_list_path = app.config["FORM_LIST_PATH"]
    index_key = os.path.splitext(os.path.basename(form_list_path))[0]

    index = FormIndexRepository(
        _build_storage(backend, os.path.dirname(form_list_path)), key=index_key
    )
    index.ensure_initialized()

    form_service = FormService(
        FormRepository(_build_storage(backend, app.config["FORMS_DIR"])),
        index,
        participantes_contabilidade=app.config["DEFAULT_PARTICIPANTES_CONTABILIDADE"],
        lock_after_pdf=app.config.get("LOCK_FORMS_AFTER_PDF", False),
    )
    report_service = ReportService(
        form_service,
        app.config["TEMP_DIR"],
        firm_name=app.config["ESCRITORIO_NOME"],
        logo_path=app.config.get("LOGO_PATH"),
        page_size=app.config["PDF_PAGE_SIZE"],
        page_margin=app.config["PDF_MARGIN"],
    )
    report_service.ensure_temp_dir()

    app.extensions["form_service"] = form_service
    app.extensions["report_service"] = report_service

    # Register blueprints
    from atas.forms import bp as forms_bp

    app.register_blueprint(forms_bp)

    from atas.reports import bp as reports_bp

    app.register_blueprint(reports_bp)

    # Register error handlers
    from atas.error_handlers import register_error_handlers

    register_error_handlers(app)

    # Register CLI commands
    from atas import cli

    cli.init_app(app)

    logger.info(f"Aplicação iniciada (armazenamento: {backend})")
    return app
