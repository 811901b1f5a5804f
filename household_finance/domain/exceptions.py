"""Domain-specific exceptions"""

from typing import Dict, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    code = "DomainError"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(DomainException):
    """Input is malformed or contradictory. Carries every violated field at once."""

    code = "ValidationFailed"

    def __init__(
        self,
        errors: Dict[str, str],
        code: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.errors = dict(errors)
        super().__init__(message or "; ".join(f"{k}: {v}" for k, v in self.errors.items()), code)


class NotFoundError(DomainException):
    """Referenced entity does not exist"""

    code = "NotFound"


class ConflictError(DomainException):
    """Operation conflicts with existing data"""

    code = "Conflict"


class CardInUseError(ConflictError):
    """Credit card still has transactions referencing it"""

    code = "CreditCardInUse"


class AccountInUseError(ConflictError):
    """Account still has transactions referencing it"""

    code = "AccountInUse"


class StorageError(DomainException):
    """Persistence collaborator failed"""

    code = "StorageError"
