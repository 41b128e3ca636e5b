"""
Camada de armazenamento chave/valor para documentos JSON.

A lógica de formulários recebe uma instância de ``FormStorage`` e nunca
acessa o sistema de arquivos diretamente; em testes usamos ``MemoryStorage``.
"""

import copy
import json
import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from atas.exceptions import CorruptDocumentError, StorageError, ValidationError

logger = logging.getLogger(__name__)

KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def validate_key(key: str) -> str:
    """Garante que a chave é segura para virar nome de arquivo"""
    if not isinstance(key, str) or not KEY_PATTERN.match(key):
        raise ValidationError("Identificador inválido.")
    return key


class FormStorage(ABC):
    """Interface de armazenamento usada pelos repositórios"""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Retorna o valor ou None se a chave não existir"""

    @abstractmethod
    def put(self, key: str, value: Any) -> None:
        """Grava (ou sobrescreve) o valor da chave"""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a chave; False se ela não existia"""

    @abstractmethod
    def keys(self) -> List[str]:
        """Lista as chaves existentes"""

    def exists(self, key: str) -> bool:
        return key in self.keys()


class JsonFileStorage(FormStorage):
    """Um arquivo ``<chave>.json`` por documento"""

    def __init__(self, directory: str):
        self.directory = directory
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Erro ao criar diretório {directory}: {e}") from e

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{validate_key(key)}.json")

    def get(self, key):
        path = self._path(key)
        if not os.path.exists(path):
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = f.read()
        except OSError as e:
            raise StorageError(f"Erro ao ler {path}: {e}") from e

        if not data.strip():
            raise CorruptDocumentError(f"Arquivo vazio: {path}")

        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            raise CorruptDocumentError(f"JSON inválido em {path}: {e}") from e

    def put(self, key, value):
        path = self._path(key)
        # escrita atômica: arquivo temporário no mesmo diretório + replace
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Erro ao gravar {path}: {e}") from e

    def delete(self, key):
        path = self._path(key)
        if not os.path.exists(path):
            return False
        try:
            os.remove(path)
        except OSError as e:
            raise StorageError(f"Erro ao excluir {path}: {e}") from e
        return True

    def keys(self):
        try:
            names = sorted(os.listdir(self.directory))
        except OSError as e:
            raise StorageError(f"Erro ao listar {self.directory}: {e}") from e
        return [
            name[: -len(".json")]
            for name in names
            if name.endswith(".json") and KEY_PATTERN.match(name[: -len(".json")])
        ]

    def exists(self, key):
        return os.path.exists(self._path(key))


class MemoryStorage(FormStorage):
    """Armazenamento volátil; guarda cópias para não compartilhar referências"""

    def __init__(self):
        self._data = {}

    def get(self, key):
        validate_key(key)
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def put(self, key, value):
        validate_key(key)
        self._data[key] = copy.deepcopy(value)

    def delete(self, key):
        validate_key(key)
        if key not in self._data:
            return False
        del self._data[key]
        return True

    def keys(self):
        return list(self._data.keys())

    def exists(self, key):
        return key in self._data
