# bookrental/services/checkout_service.py
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Tuple

from redis.exceptions import RedisError
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from bookrental.data.models.payment import PaymentModel, PAYMENT_PENDING, PAYMENT_COMPLETED
from bookrental.data.models.payment_item import PaymentItemModel
from bookrental.data.models.rental_record import RentalRecordModel
from bookrental.domain.errors import (
    ConflictError,
    InvariantViolation,
    NotFoundError,
    RentalError,
    TransientInfrastructureError,
    ValidationError,
)
from bookrental.domain.rules import duration_in_bounds, money_equal, sum_lines, to_money, verify_payment_total
from bookrental.domain.schemas import CheckoutIn
from bookrental.repos.book_repo import BookRepo
from bookrental.repos.payment_repo import PaymentRepo
from bookrental.repos.user_repo import UserRepo
from bookrental.services.cart_service import CartService
from bookrental.services.common import is_transient, rental_to_dict
from bookrental.services.inventory_service import InventoryService
from bookrental.services.lock_service import LockService
from bookrental.services.notification_service import NotificationService
from bookrental.utils.retry import db_retry
from bookrental.utils.settings import CHECKOUT_LOCK_TTL_SECONDS
from bookrental.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CheckoutLine:
    book_id: int
    rental_duration: int
    rent_price: Decimal


class CheckoutService:
    """
    Zamiana koszyka (albo listy pozycji od klienta) na wypozyczenie.

    1. Walidacja wszystkich pozycji zanim cokolwiek zapiszemy
    2. Platnosc pending ze snapshotem pozycji
    3. Warunkowy dekrement magazynu dla kazdej ksiazki
    4. Rekordy wypozyczen uzytkownika
    5. Platnosc completed, czyszczenie koszyka
    Kroki 2-5 to jedna transakcja - blad w dowolnym miejscu = rollback calosci.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.books = BookRepo(db)
        self.users = UserRepo(db)
        self.payments = PaymentRepo(db)
        self.carts = CartService(db)
        self.inventory = InventoryService(db)
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    def checkout(self, user_id: int, payload: CheckoutIn | None = None) -> Dict[str, Any]:
        token = uuid.uuid4().hex

        try:
            locked = self.lock_service.acquire_checkout_lock(user_id, token, CHECKOUT_LOCK_TTL_SECONDS)
        except RedisError as e:
            raise TransientInfrastructureError("Checkout lock store unavailable") from e

        if not locked:
            raise ConflictError(
                "Another checkout for this user is in progress", reason="checkout_in_progress"
            )

        logger.info(f"Start checkoutu uzytkownika {user_id}")
        try:
            result = self._checkout_with_retry(user_id, payload)
        finally:
            try:
                self.lock_service.release_checkout_lock(user_id, token)
            except RedisError as e:
                # lock i tak wygasnie po TTL
                logger.warning(f"Nie udalo sie zwolnic blokady checkoutu uzytkownika {user_id}: {e}")

        self.notification_service.send_rental_notification(
            user_id, result["payment_id"], [r["book_id"] for r in result["rented_books"]]
        )
        return result

    @db_retry()
    def _checkout_with_retry(self, user_id: int, payload: CheckoutIn | None) -> Dict[str, Any]:
        try:
            if self.users.get_user(user_id) is None:
                raise NotFoundError(f"User {user_id} not found", reason="user_not_found")

            requested, claimed_total = self._requested_items(user_id, payload)
            lines, total = self._validate(requested, claimed_total)
            result = self._execute(user_id, lines, total)
            self.db.commit()
        except InvariantViolation as e:
            self.db.rollback()
            logger.critical(f"NARUSZENIE NIEZMIENNIKA w checkoucie uzytkownika {user_id}: {e.message}")
            raise
        except RentalError as e:
            self.db.rollback()
            logger.info(f"Checkout uzytkownika {user_id} odrzucony: {e.reason} {e.errors}")
            raise
        except DBAPIError as e:
            self.db.rollback()
            if not is_transient(e):
                raise
            logger.warning(f"Chwilowy blad bazy w checkoucie uzytkownika {user_id}, ponawiam: {e}")
            raise TransientInfrastructureError("Checkout could not be completed, try again") from e
        except Exception as e:
            self.db.rollback()
            logger.error(f"Nieoczekiwany blad checkoutu uzytkownika {user_id}: {e}")
            raise

        logger.info(
            f"Checkout uzytkownika {user_id} zatwierdzony: platnosc {result['payment_id']}, "
            f"suma {result['total_amount']}"
        )
        return result

    def _requested_items(
        self, user_id: int, payload: CheckoutIn | None
    ) -> Tuple[List[Tuple[int, int, Decimal | None]], Decimal | None]:
        claimed_total = payload.total_amount if payload else None

        if payload is not None and payload.items is not None:
            requested = [(i.book_id, i.rental_duration, i.rent_price) for i in payload.items]
        else:
            # brak listy od klienta - bierzemy zapisany koszyk
            requested = [(b, d, None) for b, d in self.carts.items_for_checkout(user_id)]

        return requested, claimed_total

    def _validate(
        self,
        requested: List[Tuple[int, int, Decimal | None]],
        claimed_total: Decimal | None,
    ) -> Tuple[List[CheckoutLine], Decimal]:
        if not requested:
            raise ValidationError("Cart is empty", reason="empty_cart")

        errors = []
        seen = set()
        for book_id, duration, _ in requested:
            if not duration_in_bounds(duration):
                errors.append({"bookId": book_id, "reason": "invalid_duration"})
            if book_id in seen:
                errors.append({"bookId": book_id, "reason": "duplicate_item"})
            seen.add(book_id)

        if errors:
            raise ValidationError("Invalid checkout items", reason=errors[0]["reason"], errors=errors)

        books = self.books.get_books(seen)
        missing, conflicts, lines = [], [], []

        for book_id, duration, claimed_price in requested:
            book = books.get(book_id)
            if book is None:
                missing.append({"bookId": book_id, "reason": "book_not_found"})
            elif not book.available or book.quantity <= 0:
                conflicts.append({"bookId": book_id, "reason": "book_unavailable"})
            elif claimed_price is not None and not money_equal(book.rent_price, claimed_price):
                conflicts.append(
                    {
                        "bookId": book_id,
                        "reason": "price_mismatch",
                        "currentPrice": float(book.rent_price),
                    }
                )
            else:
                lines.append(CheckoutLine(book_id, duration, to_money(book.rent_price)))

        if missing:
            raise NotFoundError("Book not found", reason="book_not_found", errors=missing + conflicts)
        if conflicts:
            raise ConflictError(
                "Some books cannot be checked out", reason=conflicts[0]["reason"], errors=conflicts
            )

        total = sum_lines((l.rent_price, l.rental_duration) for l in lines)

        if claimed_total is not None and not money_equal(total, claimed_total):
            raise ConflictError(
                "Total amount does not match current prices",
                reason="total_mismatch",
                errors=[{"reason": "total_mismatch", "expected": float(total), "claimed": float(claimed_total)}],
            )

        return lines, total

    def _execute(self, user_id: int, lines: List[CheckoutLine], total: Decimal) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)

        payment = self.payments.create_payment(
            PaymentModel(
                user_id=user_id,
                status=PAYMENT_PENDING,
                total_amount=total,
                created_at=now,
                items=[
                    PaymentItemModel(
                        book_id=l.book_id,
                        rental_duration=l.rental_duration,
                        rent_price=l.rent_price,
                    )
                    for l in lines
                ],
            )
        )

        # ponowna kontrola stanu w tej samej transakcji: przegrany wyscig dostaje book_unavailable
        for l in lines:
            self.inventory.decrement(l.book_id, 1)

        records = self.users.add_rentals(
            [
                RentalRecordModel(
                    user_id=user_id,
                    book_id=l.book_id,
                    payment_id=payment.id,
                    rental_duration=l.rental_duration,
                    rent_start_date=now,
                    rent_end_date=now + timedelta(days=l.rental_duration),
                )
                for l in lines
            ]
        )

        self.payments.update_payment_status(payment, PAYMENT_COMPLETED, processed_at=now)
        self.carts.clear_cart(user_id)

        verify_payment_total(payment.items, payment.total_amount)

        return {
            "payment_id": payment.id,
            "status": payment.status,
            "total_amount": total,
            "rented_books": [rental_to_dict(r) for r in records],
        }
