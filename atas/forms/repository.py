"""
Forms Repository - Camada de acesso a dados
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from atas.exceptions import CorruptDocumentError
from atas.services.storage import FormStorage, validate_key

logger = logging.getLogger(__name__)


class FormRepository:
    """Repositório dos documentos de formulário (um por ID)"""

    def __init__(self, storage: FormStorage):
        self.storage = storage

    def get(self, form_id: str) -> Optional[Dict[str, Any]]:
        """Obtém o documento bruto; None se não existir"""
        data = self.storage.get(validate_key(form_id))
        if data is not None and not isinstance(data, dict):
            raise CorruptDocumentError(
                f"Documento {form_id} não é um objeto JSON"
            )
        return data

    def save(self, form_id: str, document: Dict[str, Any]) -> None:
        self.storage.put(validate_key(form_id), document)

    def delete(self, form_id: str) -> bool:
        return self.storage.delete(validate_key(form_id))

    def exists(self, form_id: str) -> bool:
        return self.storage.exists(validate_key(form_id))

    def ids(self) -> List[str]:
        return self.storage.keys()


class FormIndexRepository:
    """Repositório da lista de formulários ({id, title, date})"""

    def __init__(self, storage: FormStorage, key: str = "formList"):
        self.storage = storage
        self.key = validate_key(key)
        self._lock = threading.RLock()

    def ensure_initialized(self) -> None:
        """Cria a lista vazia se ela ainda não existir"""
        with self._lock:
            if not self.storage.exists(self.key):
                self.storage.put(self.key, [])
                logger.info("Lista de formulários criada")

    def all(self) -> List[Dict[str, Any]]:
        """Lista completa na ordem de inserção; [] se ausente ou ilegível"""
        try:
            entries = self.storage.get(self.key)
        except CorruptDocumentError as e:
            logger.error(f"Erro ao ler lista de formulários: {e}")
            return []

        if entries is None:
            return []
        if not isinstance(entries, list):
            logger.error("Lista de formulários em formato inesperado")
            return []
        return [entry for entry in entries if isinstance(entry, dict)]

    def save(self, entries: List[Dict[str, Any]]) -> None:
        with self._lock:
            self.storage.put(self.key, entries)

    def append(self, entry: Dict[str, Any]) -> None:
        with self._lock:
            entries = self.all()
            entries.append(entry)
            self.save(entries)

    def find(self, form_id: str) -> Optional[Dict[str, Any]]:
        for entry in self.all():
            if entry.get("id") == form_id:
                return entry
        return None

    def update_entry(self, form_id: str, **fields) -> bool:
        """Atualiza a primeira entrada com o ID; False se não encontrada"""
        with self._lock:
            entries = self.all()
            for entry in entries:
                if entry.get("id") == form_id:
                    entry.update(fields)
                    self.save(entries)
                    return True
            return False

    def remove(self, form_id: str) -> int:
        """Remove as entradas do ID e retorna quantas foram removidas"""
        with self._lock:
            entries = self.all()
            remaining = [entry for entry in entries if entry.get("id") != form_id]
            removed = len(entries) - len(remaining)
            if removed:
                self.save(remaining)
            return removed
