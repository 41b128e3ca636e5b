"""
Forms Services - Camada de lógica de negócios
"""

import copy
import logging
import threading
import uuid
import weakref
from typing import Any, Dict, List, Optional

from atas.exceptions import (
    CorruptDocumentError,
    FormLockedError,
    FormNotFoundError,
    PartialDeleteError,
    StorageError,
)
from atas.forms.defaults import (
    DEFAULT_PARTICIPANTES_CONTABILIDADE,
    LEGACY_SECTIONS,
    NEW_FORM_TITLE,
    UNTITLED_FORM_TITLE,
    default_form_document,
)
from atas.forms.normalization import normalize_form_document
from atas.forms.repository import FormIndexRepository, FormRepository
from atas.services.storage import validate_key

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("sectionsList", "headerData", "formInfo", "pdfGerado")


class FormService:
    """Operações do armazenamento de formulários"""

    def __init__(
        self,
        repository: FormRepository,
        index: FormIndexRepository,
        participantes_contabilidade: str = DEFAULT_PARTICIPANTES_CONTABILIDADE,
        lock_after_pdf: bool = False,
    ):
        self.repository = repository
        self.index = index
        self.participantes_contabilidade = participantes_contabilidade
        self.lock_after_pdf = lock_after_pdf
        # locks somem quando nenhuma operação os usa
        self._locks: "weakref.WeakValueDictionary[str, threading.RLock]" = (
            weakref.WeakValueDictionary()
        )
        self._locks_guard = threading.Lock()

    def _lock_for(self, form_id: str) -> threading.RLock:
        # serializa leitura-alteração-escrita do mesmo formulário neste processo
        validate_key(form_id)
        with self._locks_guard:
            return self._locks.setdefault(form_id, threading.RLock())

    def new_document(self) -> Dict[str, Any]:
        return default_form_document(self.participantes_contabilidade)

    def create(self) -> str:
        """Cria um formulário vazio e registra na lista"""
        form_id = str(uuid.uuid4())
        self.repository.save(form_id, self.new_document())
        self.index.append({"id": form_id, "title": NEW_FORM_TITLE, "date": ""})
        logger.info(f"Formulário criado: {form_id}")
        return form_id

    def read(self, form_id: str) -> Dict[str, Any]:
        """
        Lê um formulário já no formato atual.

        - Inexistente: cria e grava o documento padrão.
        - Corrompido: retorna o padrão em memória, sem sobrescrever o arquivo.
        - Formato antigo: normaliza e grava de volta.
        """
        validate_key(form_id)
        with self._lock_for(form_id):
            try:
                stored = self.repository.get(form_id)
            except CorruptDocumentError as e:
                logger.error(f"Erro ao ler arquivo {form_id}.json: {e}")
                return self.new_document()

            if stored is None:
                document = self.new_document()
                self.repository.save(form_id, document)
                logger.info(f"Documento padrão gravado para {form_id}")
                return copy.deepcopy(document)

            document, changed = normalize_form_document(
                stored, self.participantes_contabilidade
            )
            if changed:
                self.repository.save(form_id, document)
                logger.info(f"Formulário {form_id} migrado para o formato atual")
            return document

    def update(self, form_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Substitui por inteiro cada campo presente em ``changes``.

        Campos ausentes (ou None) ficam como estão.
        """
        changes = {
            key: value
            for key, value in changes.items()
            if key in UPDATABLE_FIELDS and value is not None
        }

        validate_key(form_id)
        with self._lock_for(form_id):
            document = self.read(form_id)

            if (
                self.lock_after_pdf
                and document.get("pdfGerado")
                and set(changes) - {"pdfGerado"}
            ):
                raise FormLockedError()

            if "pdfGerado" in changes:
                document["pdfGerado"] = bool(changes["pdfGerado"])

            if "sectionsList" in changes:
                document["sectionsList"] = copy.deepcopy(changes["sectionsList"])
                self._sync_legacy_sections(document)

            if "headerData" in changes:
                document["headerData"] = copy.deepcopy(changes["headerData"])

            if "formInfo" in changes:
                document["formInfo"] = copy.deepcopy(changes["formInfo"])

            self.repository.save(form_id, document)

            if "headerData" in changes:
                header = changes["headerData"]
                self.index.update_entry(
                    form_id,
                    title=header.get("empresa") or UNTITLED_FORM_TITLE,
                    date=header.get("data") or "",
                )

            return copy.deepcopy(document)

    @staticmethod
    def _sync_legacy_sections(document: Dict[str, Any]) -> None:
        """Mantém fiscal/dp/contabil espelhando sectionsList"""
        for legacy_key, section_type, _title in LEGACY_SECTIONS:
            section = next(
                (
                    s
                    for s in document["sectionsList"]
                    if s.get("type") == section_type
                ),
                None,
            )
            if section is not None:
                document[legacy_key] = {
                    "blocks": copy.deepcopy(section.get("blocks", [])),
                    "completed": section.get("completed", False),
                }

    def mark_pdf_generated(self, form_id: str) -> bool:
        """Marca ``pdfGerado``; formulários inexistentes não são criados"""
        validate_key(form_id)
        with self._lock_for(form_id):
            if not self.repository.exists(form_id):
                logger.warning(f"pdfGerado não marcado: formulário {form_id} inexistente")
                return False
            document = self.read(form_id)
            document["pdfGerado"] = True
            self.repository.save(form_id, document)
            return True

    def delete(self, form_id: str) -> None:
        """
        Exclui o documento e sua entrada na lista.

        Raises:
            FormNotFoundError: documento inexistente (lista intocada)
            PartialDeleteError: documento excluído, lista não atualizada
        """
        validate_key(form_id)
        with self._lock_for(form_id):
            if not self.repository.exists(form_id):
                raise FormNotFoundError()

            self.repository.delete(form_id)
            logger.info(f"Arquivo do formulário {form_id} excluído")

            try:
                removed = self.index.remove(form_id)
            except StorageError as e:
                logger.error(f"Erro ao atualizar lista de formulários: {e}")
                raise PartialDeleteError(details=e.message) from e

            logger.info(f"{removed} entrada(s) removida(s) da lista")

    def list_forms(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        entries = self.index.all()
        if search:
            term = search.lower()
            entries = [
                entry
                for entry in entries
                if term in str(entry.get("title") or "").lower()
            ]
        return entries

    def reindex(self, dry_run: bool = False) -> Dict[str, Any]:
        """
        Reconcilia a lista com os documentos armazenados.

        Mantém a ordem das entradas válidas, acrescenta documentos ausentes
        e descarta entradas sem documento.
        """
        stored_ids = self.repository.ids()
        stored = set(stored_ids)
        entries = self.index.all()

        kept = [entry for entry in entries if entry.get("id") in stored]
        removed = [entry.get("id") for entry in entries if entry.get("id") not in stored]
        known = {entry.get("id") for entry in kept}

        added = []
        for form_id in stored_ids:
            if form_id in known:
                continue
            kept.append(self._index_entry_for(form_id))
            known.add(form_id)
            added.append(form_id)

        if not dry_run and (added or removed):
            self.index.save(kept)

        return {"kept": len(kept) - len(added), "added": added, "removed": removed}

    def _index_entry_for(self, form_id: str) -> Dict[str, Any]:
        try:
            stored = self.repository.get(form_id) or {}
        except CorruptDocumentError:
            stored = {}

        header = stored.get("headerData")
        if not isinstance(header, dict):
            header = {}
        return {
            "id": form_id,
            "title": header.get("empresa") or NEW_FORM_TITLE,
            "date": header.get("data") or "",
        }
