"""Exceções da calculadora de taxas contratuais."""
from typing import Dict, Optional


class CalculatorError(Exception):
    """Base para todos os erros da aplicação."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class SeriesLookupError(CalculatorError):
    """Falha ao obter a taxa de referência de uma série do SGS."""
    pass


class LookupNotFoundError(SeriesLookupError):
    """A consulta não retornou nenhuma observação."""

    def __init__(self, code: Optional[int] = None, message: str = "Taxa não encontrada"):
        details = {"code": code} if code is not None else {}
        super().__init__(message, details)


class LookupAmbiguousError(SeriesLookupError):
    """A consulta retornou mais de uma observação."""

    def __init__(self, code: Optional[int] = None, count: int = 0,
                 message: str = "Mais de uma taxa encontrada"):
        details = {}
        if code is not None:
            details["code"] = code
        if count:
            details["count"] = count
        super().__init__(message, details)
        self.count = count


class LookupTransportError(SeriesLookupError):
    """Erro de rede ou payload de erro devolvido pelo serviço remoto."""

    GENERIC_MESSAGE = "Erro ao calcular a taxa"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        details = {"http_status": status_code} if status_code else {}
        super().__init__(message or self.GENERIC_MESSAGE, details)
        self.status_code = status_code


class InputValidationError(CalculatorError):
    """Campos do formulário inválidos; a avaliação não é executada."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("Dados do formulário inválidos", {"fields": sorted(errors)})
        self.errors = errors
