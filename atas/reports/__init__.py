"""
Geração da ata de reunião em PDF
"""

from flask import Blueprint

bp = Blueprint("reports", __name__)

from atas.reports import routes  # noqa: E402,F401
