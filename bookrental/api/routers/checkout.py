# bookrental/api/routers/checkout.py
from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from bookrental.api.deps import get_current_user_id, get_lock_service, get_notification_service, http_error
from bookrental.data.database import get_db
from bookrental.domain.errors import RentalError
from bookrental.domain.schemas import CheckoutIn, CheckoutOut
from bookrental.services.checkout_service import CheckoutService
from bookrental.services.lock_service import LockService
from bookrental.services.notification_service import NotificationService

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("", response_model=CheckoutOut, status_code=201)
def checkout(
    payload: CheckoutIn | None = Body(None),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Pusty body - checkout zapisanego koszyka.
    Body z items - checkout podanej listy (rentPrice i totalAmount tylko do weryfikacji).
    """
    svc = CheckoutService(db, lock_service, notification_service)
    try:
        return svc.checkout(user_id, payload)
    except RentalError as e:
        raise http_error(e)
