from decimal import Decimal
from typing import Dict, Any, List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookrental.data.models.cart import CartModel
from bookrental.data.models.cart_item import CartItemModel
from bookrental.domain.errors import ConflictError, NotFoundError, ValidationError
from bookrental.domain.rules import duration_in_bounds, line_total, sum_lines, to_money
from bookrental.repos.book_repo import BookRepo
from bookrental.repos.cart_repo import CartRepo
from bookrental.utils.settings import MIN_RENTAL_DAYS, MAX_RENTAL_DAYS
from bookrental.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Koszyk uzytkownika, prosty podzial na:
    commands (add, update, remove, clear) modyfikuja stan i podbijaja version
    query (get, items_for_checkout) tylko odczyt
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.books = BookRepo(db)

    #query - odczyt
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)

        if not cart:
            return {
                "cart_id": None,
                "user_id": user_id,
                "version": 0,
                "items": [],
                "total_amount": Decimal("0.00"),
            }

        items = self.repo.get_cart_items(cart.id)
        books = self.books.get_books(i.book_id for i in items)

        lines = []
        for i in items:
            book = books.get(i.book_id)
            price = to_money(book.rent_price) if book else Decimal("0.00")
            lines.append(
                {
                    "book_id": i.book_id,
                    "title": book.title if book else "",
                    "rent_price": price,
                    "rental_duration": i.rental_duration,
                    "line_total": to_money(line_total(price, i.rental_duration)),
                }
            )

        #dict przeksztalcany w jsona, total z tych samych cen co lineTotal
        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "version": cart.version,
            "items": lines,
            "total_amount": to_money(sum((l["line_total"] for l in lines), Decimal("0"))),
        }

    def items_for_checkout(self, user_id: int) -> List[Tuple[int, int]]:
        """Domyslne zrodlo pozycji checkoutu: pary (book_id, rental_duration)."""
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return []
        return [(i.book_id, i.rental_duration) for i in self.repo.get_cart_items(cart.id)]

    #commands
    def add_book(self, user_id: int, book_id: int, rental_duration: int = 1) -> Dict[str, Any]:
        self._check_duration(rental_duration)

        book = self.books.get_book(book_id)
        if not book:
            raise NotFoundError(f"Book {book_id} not found", reason="book_not_found")

        try:
            # koszyk tworzony leniwie przy pierwszym dodaniu
            cart = self.repo.get_cart_by_user(user_id)
            if not cart:
                cart = self.repo.create_cart(
                    CartModel(user_id=user_id, version=1, total_amount=Decimal("0.00"))
                )
                logger.info(f"Utworzono nowy koszyk {cart.id} dla uzytkownika {user_id}")

            if self.repo.get_cart_item(cart.id, book_id):
                raise ValidationError(
                    "Book already exists in cart",
                    reason="duplicate_item",
                    errors=[{"bookId": book_id, "reason": "duplicate_item"}],
                )

            self.repo.add_cart_item(
                CartItemModel(cart_id=cart.id, book_id=book_id, rental_duration=rental_duration)
            )
            self._bump(cart)
            self.repo.commit()
        except IntegrityError:
            # rownolegle dodanie tej samej ksiazki albo rownolegle utworzenie koszyka
            self.repo.rollback()
            raise ConflictError("Cart was modified by another request", reason="cart_conflict")
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Dodano ksiazke {book_id} do koszyka uzytkownika {user_id} na {rental_duration} dni")
        return self.get_cart(user_id)

    def update_duration(self, user_id: int, book_id: int, rental_duration: int) -> Dict[str, Any]:
        self._check_duration(rental_duration)

        cart = self.repo.get_cart_by_user(user_id)
        item = self.repo.get_cart_item(cart.id, book_id) if cart else None
        if not item:
            raise NotFoundError("Book not found in cart", reason="item_not_in_cart")

        try:
            item.rental_duration = rental_duration
            self.repo.add_cart_item(item)
            self._bump(cart)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Zmieniono okres wypozyczenia ksiazki {book_id} w koszyku uzytkownika {user_id} na {rental_duration} dni")
        return self.get_cart(user_id)

    def remove_book(self, user_id: int, book_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return self.get_cart(user_id)

        try:
            removed = self.repo.delete_cart_item(cart.id, book_id)
            if removed == 0:
                # idempotentne - brak pozycji to nie blad i brak zmian w koszyku
                self.repo.rollback()
                return self.get_cart(user_id)

            self._bump(cart)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Usunieto ksiazke {book_id} z koszyka uzytkownika {user_id}")
        return self.get_cart(user_id)

    def clear_cart(self, user_id: int) -> None:
        """
        Czyszczenie w ramach transakcji checkoutu - bez commita.
        Konflikt wersji oznacza, ze koszyk zmienil sie w trakcie checkoutu.
        """
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return

        self.repo.clear_items(cart.id)
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={"version": cart.version + 1, "total_amount": Decimal("0.00")},
        )
        if rowcount == 0:
            raise ConflictError("Cart was modified during checkout", reason="cart_conflict")

    def discard_book(self, user_id: int, book_id: int) -> None:
        """Usuniecie pozycji w cudzej transakcji (wypozyczenie) - bez commita."""
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return

        if self.repo.delete_cart_item(cart.id, book_id) == 0:
            return
        self._bump(cart)

    def _bump(self, cart: CartModel) -> None:
        # przeliczenie totalu z aktualnych cen katalogu
        items = self.repo.get_cart_items(cart.id)
        books = self.books.get_books(i.book_id for i in items)
        total = sum_lines(
            (books[i.book_id].rent_price, i.rental_duration) for i in items if i.book_id in books
        )

        # Optimistic locking
        # np w bazie update set version 3 where id 1 and version 2
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={"version": cart.version + 1, "total_amount": total},
        )
        if rowcount == 0:
            raise ConflictError(
                "Cart was modified by another request", reason="cart_conflict"
            )
        # synchronize_session=False - odswiez obiekt z bazy
        self.repo.refresh(cart)

    @staticmethod
    def _check_duration(rental_duration: int) -> None:
        if not duration_in_bounds(rental_duration):
            raise ValidationError(
                f"Rental duration must be between {MIN_RENTAL_DAYS} and {MAX_RENTAL_DAYS} days",
                reason="invalid_duration",
            )
