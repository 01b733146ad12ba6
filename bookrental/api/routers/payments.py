# bookrental/api/routers/payments.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookrental.api.deps import get_current_user_id, http_error
from bookrental.data.database import get_db
from bookrental.domain.errors import RentalError
from bookrental.domain.schemas import PaymentOut
from bookrental.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("", response_model=List[PaymentOut])
def list_payments(
    status: str | None = Query(None),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return PaymentService(db).list_payments(user_id, status)
    except RentalError as e:
        raise http_error(e)


@router.get("/{payment_id}", response_model=PaymentOut)
def get_payment(
    payment_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return PaymentService(db).get_payment(payment_id, user_id)
    except RentalError as e:
        raise http_error(e)
