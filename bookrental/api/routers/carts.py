#bookrental/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookrental.api.deps import get_current_user_id, http_error
from bookrental.data.database import get_db
from bookrental.domain.errors import RentalError
from bookrental.domain.schemas import CartAddIn, CartOut, CartUpdateIn
from bookrental.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return get_service(db).get_cart(user_id)


@router.post("/add", response_model=CartOut)
def add_item(
    payload: CartAddIn,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_book(user_id, payload.book_id, payload.rental_duration)
    except RentalError as e:
        raise http_error(e)


@router.put("/update/{book_id}", response_model=CartOut)
def update_item(
    book_id: int,
    payload: CartUpdateIn,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_duration(user_id, book_id, payload.rental_duration)
    except RentalError as e:
        raise http_error(e)


@router.delete("/remove/{book_id}", response_model=CartOut)
def remove_item(
    book_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_book(user_id, book_id)
    except RentalError as e:
        raise http_error(e)
