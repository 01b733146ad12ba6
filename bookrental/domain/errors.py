# bookrental/domain/errors.py
from typing import Any, Dict, List


class RentalError(Exception):
    """
    Baza dla wszystkich bledow domeny.
    reason - kod maszynowy, klient moze po nim rozgalezic logike
    errors - lista bledow per pozycja ({"bookId": ..., "reason": ...})
    """

    status_code = 400
    default_reason = "error"

    def __init__(
        self,
        message: str,
        reason: str | None = None,
        errors: List[Dict[str, Any]] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.reason = reason or self.default_reason
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reason": self.reason,
            "message": self.message,
            "errors": self.errors,
        }


class ValidationError(RentalError):
    status_code = 400
    default_reason = "validation_error"


class AuthenticationError(RentalError):
    status_code = 401
    default_reason = "invalid_credentials"


class NotFoundError(RentalError):
    status_code = 404
    default_reason = "not_found"


class ConflictError(RentalError):
    status_code = 409
    default_reason = "conflict"


class InsufficientStockError(ConflictError):
    default_reason = "book_unavailable"

    def __init__(self, book_id: int, requested: int = 1):
        super().__init__(
            f"Book {book_id} has fewer than {requested} copies available",
            errors=[{"bookId": book_id, "reason": "book_unavailable"}],
        )
        self.book_id = book_id
        self.requested = requested


class TransientInfrastructureError(RentalError):
    status_code = 503
    default_reason = "transient_failure"


class InvariantViolation(RentalError):
    status_code = 500
    default_reason = "invariant_violation"
