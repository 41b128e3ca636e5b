"""Serviços de infraestrutura compartilhados"""

from .pdf_converter import archive_file, render_pdf
from .storage import FormStorage, JsonFileStorage, MemoryStorage, validate_key

__all__ = [
    "FormStorage",
    "JsonFileStorage",
    "MemoryStorage",
    "validate_key",
    "render_pdf",
    "archive_file",
]
