"""
Exceções de domínio da aplicação.

Cada exceção carrega o status HTTP correspondente e uma mensagem pronta para
o usuário; a conversão para JSON fica em ``atas.error_handlers``.
"""


class AtasError(Exception):
    """Erro base da aplicação"""

    status_code = 500
    message = "Ocorreu um erro inesperado."

    def __init__(self, message=None, details=None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details

    def to_dict(self):
        payload = {"success": False, "error": self.message, "code": self.status_code}
        if self.details:
            payload["details"] = self.details
        return payload


class StorageError(AtasError):
    """Falha de leitura/escrita no armazenamento"""

    message = "Erro de armazenamento."


class CorruptDocumentError(StorageError):
    """Conteúdo armazenado não pôde ser interpretado"""

    message = "Documento armazenado está corrompido."


class ValidationError(AtasError):
    """Dados de entrada inválidos"""

    status_code = 400
    message = "Dados inválidos."


class FormNotFoundError(AtasError):
    status_code = 404
    message = "Formulário não encontrado."


class ArchiveNotFoundError(AtasError):
    status_code = 404
    message = "Arquivo não encontrado"


class FormLockedError(AtasError):
    """Formulário já teve PDF gerado e o bloqueio está ativo"""

    status_code = 409
    message = "Formulário bloqueado: o PDF já foi gerado."


class PartialDeleteError(AtasError):
    """Arquivo do formulário excluído, mas a lista não foi atualizada"""

    status_code = 207
    message = "Formulário excluído, mas houve erro ao atualizar a lista"

    def to_dict(self):
        payload = {"warning": self.message, "code": self.status_code}
        if self.details:
            payload["error"] = self.details
        return payload


class ReportGenerationError(AtasError):
    message = "Erro ao gerar documentos"
