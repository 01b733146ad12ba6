import pytest

from bookrental.data.models import BookModel
from bookrental.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from bookrental.services.inventory_service import InventoryService


def test_decrement_updates_quantity_and_availability(db, make_book):
    book = make_book(quantity=2)
    svc = InventoryService(db)

    svc.decrement(book.id)
    db.commit()
    db.refresh(book)
    assert book.quantity == 1
    assert book.available is True

    svc.decrement(book.id)
    db.commit()
    db.refresh(book)
    assert book.quantity == 0
    assert book.available is False


def test_decrement_never_below_zero(db, make_book):
    book = make_book(quantity=1)
    svc = InventoryService(db)

    with pytest.raises(InsufficientStockError) as exc:
        svc.decrement(book.id, 2)

    assert exc.value.reason == "book_unavailable"
    db.rollback()
    db.refresh(book)
    assert book.quantity == 1


def test_decrement_last_copy_twice(db, make_book):
    book = make_book(quantity=1)
    svc = InventoryService(db)
    svc.decrement(book.id)
    db.commit()

    with pytest.raises(InsufficientStockError):
        svc.decrement(book.id)

    db.rollback()
    assert db.get(BookModel, book.id).quantity == 0


def test_decrement_unknown_book_is_not_found(db):
    with pytest.raises(NotFoundError) as exc:
        InventoryService(db).decrement(12345)
    assert exc.value.reason == "book_not_found"
    assert not isinstance(exc.value, InsufficientStockError)


def test_decrement_rejects_non_positive_amount(db, make_book):
    book = make_book(quantity=3)
    with pytest.raises(ValidationError):
        InventoryService(db).decrement(book.id, 0)
