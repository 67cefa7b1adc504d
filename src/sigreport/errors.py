from typing import Any, Dict


class ReportError(Exception):
    """Базовая структурная ошибка: отчёт не строится, вызывающий получает код."""

    def __init__(self, message: str, error_code: str, http_status: int = 400):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.http_status = http_status

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.error_code,
            "message": self.message,
            "status": self.http_status,
        }


class MalformedDocumentError(ReportError):
    def __init__(self, message: str = "Document malformed or not matching documentType"):
        super().__init__(message, error_code="DOCUMENT_MALFORMED")


class InvalidPolicyError(ReportError):
    def __init__(self, policy: str):
        super().__init__(f"Invalid signature policy: {policy}", error_code="INVALID_POLICY")
        self.policy = policy
