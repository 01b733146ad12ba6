# bookrental/services/inventory_service.py
from sqlalchemy.orm import Session

from bookrental.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from bookrental.repos.book_repo import BookRepo
from bookrental.utils.logging import get_logger

logger = get_logger(__name__)


class InventoryService:
    """
    Zmiana stanu magazynu ksiazki.
    Nie commituje - wywolujacy (checkout, wypozyczenie) trzyma granice transakcji.
    """

    def __init__(self, db: Session):
        self.repo = BookRepo(db)

    def decrement(self, book_id: int, amount: int = 1) -> None:
        if amount <= 0:
            raise ValidationError("Decrement amount must be positive", reason="invalid_amount")

        # nigdy nie liczymy nowej ilosci w pamieci - warunek quantity >= amount sprawdza baza
        rowcount = self.repo.decrement_quantity(book_id, amount)
        if rowcount == 1:
            logger.info(f"Zmniejszono stan ksiazki {book_id} o {amount}")
            return

        if self.repo.get_book(book_id) is None:
            raise NotFoundError(
                f"Book {book_id} not found",
                reason="book_not_found",
                errors=[{"bookId": book_id, "reason": "book_not_found"}],
            )

        logger.info(f"Brak wystarczajacej ilosci ksiazki {book_id} (zadano {amount})")
        raise InsufficientStockError(book_id, amount)
