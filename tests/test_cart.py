from decimal import Decimal

import pytest
from sqlalchemy import update

from bookrental.data.models import BookModel, CartModel
from bookrental.domain.errors import ConflictError, NotFoundError, ValidationError
from bookrental.services.cart_service import CartService


def test_empty_cart_for_new_user(client, make_user, headers):
    user = make_user()
    resp = client.get("/cart", headers=headers(user.id))
    assert resp.status_code == 200
    assert resp.json() == {"cartId": None, "userId": user.id, "version": 0, "items": [], "totalAmount": 0.0}


def test_add_creates_cart_and_computes_total(client, make_user, make_book, headers):
    user = make_user()
    a = make_book("A", price="10.00", quantity=1)
    b = make_book("B", price="2.50", quantity=1)

    client.post("/cart/add", json={"bookId": a.id, "rentalDuration": 3}, headers=headers(user.id))
    resp = client.post("/cart/add", json={"bookId": b.id}, headers=headers(user.id))

    assert resp.status_code == 200
    cart = resp.json()
    assert cart["cartId"] is not None
    assert cart["version"] == 3
    assert cart["totalAmount"] == 32.5
    assert cart["items"][0] == {
        "bookId": a.id,
        "title": "A",
        "rentPrice": 10.0,
        "rentalDuration": 3,
        "lineTotal": 30.0,
    }


def test_add_duplicate_rejected(client, make_user, make_book, headers):
    user = make_user()
    a = make_book()
    client.post("/cart/add", json={"bookId": a.id}, headers=headers(user.id))

    resp = client.post("/cart/add", json={"bookId": a.id, "rentalDuration": 5}, headers=headers(user.id))

    assert resp.status_code == 400
    assert resp.json()["detail"]["reason"] == "duplicate_item"
    cart = client.get("/cart", headers=headers(user.id)).json()
    assert len(cart["items"]) == 1
    assert cart["items"][0]["rentalDuration"] == 1


def test_add_unknown_book(client, make_user, headers):
    user = make_user()
    resp = client.post("/cart/add", json={"bookId": 404}, headers=headers(user.id))
    assert resp.status_code == 404
    assert resp.json()["detail"]["reason"] == "book_not_found"


def test_update_duration_recomputes_total(client, make_user, make_book, headers):
    user = make_user()
    a = make_book(price="4.00")
    client.post("/cart/add", json={"bookId": a.id}, headers=headers(user.id))

    resp = client.put(f"/cart/update/{a.id}", json={"rentalDuration": 10}, headers=headers(user.id))

    assert resp.status_code == 200
    assert resp.json()["totalAmount"] == 40.0


def test_total_follows_catalog_price_change(client, db, make_user, make_book, headers):
    user = make_user()
    a = make_book("A", price="100.00")
    b = make_book("B", price="1.50")
    client.post("/cart/add", json={"bookId": a.id, "rentalDuration": 2}, headers=headers(user.id))
    client.post("/cart/add", json={"bookId": b.id}, headers=headers(user.id))

    db.execute(update(BookModel).where(BookModel.id == a.id).values(rent_price=Decimal("80.00")))
    db.commit()

    cart = client.get("/cart", headers=headers(user.id)).json()
    assert cart["items"][0]["lineTotal"] == 160.0
    assert cart["totalAmount"] == sum(i["lineTotal"] for i in cart["items"]) == 161.5


@pytest.mark.parametrize("duration", [0, 31])
def test_update_out_of_range(client, make_user, make_book, headers, duration):
    user = make_user()
    a = make_book()
    client.post("/cart/add", json={"bookId": a.id}, headers=headers(user.id))

    resp = client.put(f"/cart/update/{a.id}", json={"rentalDuration": duration}, headers=headers(user.id))

    assert resp.status_code == 400
    assert resp.json()["detail"]["reason"] == "invalid_duration"


def test_update_missing_item(client, make_user, make_book, headers):
    user = make_user()
    a = make_book()
    resp = client.put(f"/cart/update/{a.id}", json={"rentalDuration": 2}, headers=headers(user.id))
    assert resp.status_code == 404
    assert resp.json()["detail"]["reason"] == "item_not_in_cart"


def test_remove_recomputes_total(client, make_user, make_book, headers):
    user = make_user()
    a = make_book("A", price="10.00")
    b = make_book("B", price="1.00")
    client.post("/cart/add", json={"bookId": a.id}, headers=headers(user.id))
    client.post("/cart/add", json={"bookId": b.id}, headers=headers(user.id))

    resp = client.delete(f"/cart/remove/{a.id}", headers=headers(user.id))

    assert resp.status_code == 200
    assert [i["bookId"] for i in resp.json()["items"]] == [b.id]
    assert resp.json()["totalAmount"] == 1.0


def test_remove_absent_item_is_idempotent(client, make_user, make_book, headers):
    user = make_user()
    a = make_book()
    b = make_book("Other")
    client.post("/cart/add", json={"bookId": a.id}, headers=headers(user.id))
    before = client.get("/cart", headers=headers(user.id)).json()

    resp = client.delete(f"/cart/remove/{b.id}", headers=headers(user.id))

    assert resp.status_code == 200
    assert resp.json() == before


def test_remove_without_cart(client, make_user, headers):
    user = make_user()
    resp = client.delete("/cart/remove/1", headers=headers(user.id))
    assert resp.status_code == 200
    assert resp.json()["items"] == []


def test_stale_version_is_conflict(db, session_factory, make_user, make_book):
    user = make_user()
    a = make_book("A")
    b = make_book("B")
    svc = CartService(db)
    svc.add_book(user.id, a.id)
    cart_id = svc.repo.get_cart_by_user(user.id).id

    original = svc.repo.get_cart_by_user

    def read_then_concurrent_bump(user_id):
        cart = original(user_id)
        # inny request podbija wersje miedzy odczytem a zapisem
        other = session_factory()
        try:
            other.execute(
                update(CartModel).where(CartModel.id == cart.id).values(version=CartModel.version + 1)
            )
            other.commit()
        finally:
            other.close()
        return cart

    svc.repo.get_cart_by_user = read_then_concurrent_bump

    with pytest.raises(ConflictError) as exc:
        svc.add_book(user.id, b.id)

    assert exc.value.reason == "cart_conflict"
    assert [i.book_id for i in svc.repo.get_cart_items(cart_id)] == [a.id]


def test_items_for_checkout(db, make_user, make_book):
    user = make_user()
    a = make_book("A")
    svc = CartService(db)
    assert svc.items_for_checkout(user.id) == []

    svc.add_book(user.id, a.id, 4)
    assert svc.items_for_checkout(user.id) == [(a.id, 4)]


def test_service_errors(db, make_user, make_book):
    user = make_user()
    a = make_book()
    svc = CartService(db)

    with pytest.raises(ValidationError):
        svc.add_book(user.id, a.id, 45)
    with pytest.raises(NotFoundError):
        svc.update_duration(user.id, a.id, 2)
