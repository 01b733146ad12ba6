# bookrental/services/rental_service.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from bookrental.data.models.rental_record import RentalRecordModel
from bookrental.domain.errors import NotFoundError, RentalError, TransientInfrastructureError, ValidationError
from bookrental.domain.rules import duration_in_bounds
from bookrental.repos.user_repo import UserRepo
from bookrental.services.cart_service import CartService
from bookrental.services.common import is_transient, rental_to_dict
from bookrental.services.inventory_service import InventoryService
from bookrental.utils.retry import db_retry
from bookrental.utils.settings import MIN_RENTAL_DAYS, MAX_RENTAL_DAYS
from bookrental.utils.logging import get_logger

logger = get_logger(__name__)


class RentalService:
    """
    Bezposrednie wypozyczenie jednej ksiazki (bez platnosci).
    Dekrement, rekord wypozyczenia i usuniecie ksiazki z koszyka w jednej transakcji.
    """

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepo(db)
        self.carts = CartService(db)
        self.inventory = InventoryService(db)

    @db_retry()
    def rent_book(self, user_id: int, book_id: int, rental_duration: int) -> Dict[str, Any]:
        if not duration_in_bounds(rental_duration):
            raise ValidationError(
                f"Rental duration must be between {MIN_RENTAL_DAYS} and {MAX_RENTAL_DAYS} days",
                reason="invalid_duration",
            )

        try:
            if self.users.get_user(user_id) is None:
                raise NotFoundError(f"User {user_id} not found", reason="user_not_found")

            self.inventory.decrement(book_id, 1)

            now = datetime.now(timezone.utc)
            record = RentalRecordModel(
                user_id=user_id,
                book_id=book_id,
                rental_duration=rental_duration,
                rent_start_date=now,
                rent_end_date=now + timedelta(days=rental_duration),
            )
            self.users.add_rentals([record])
            # wypozyczona ksiazka nie moze zostac w koszyku
            self.carts.discard_book(user_id, book_id)
            result = rental_to_dict(record)
            self.db.commit()
        except RentalError:
            self.db.rollback()
            raise
        except DBAPIError as e:
            self.db.rollback()
            if not is_transient(e):
                raise
            logger.warning(f"Chwilowy blad bazy przy wypozyczeniu ksiazki {book_id}, ponawiam: {e}")
            raise TransientInfrastructureError("Rental could not be completed, try again") from e

        logger.info(f"Uzytkownik {user_id} wypozyczyl ksiazke {book_id} na {rental_duration} dni")
        return result

    def list_rentals(self, user_id: int) -> List[Dict[str, Any]]:
        return [rental_to_dict(r) for r in self.users.get_rentals(user_id)]
