from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookrental.api.deps import get_current_user_id, http_error
from bookrental.data.database import get_db
from bookrental.domain.errors import RentalError
from bookrental.domain.schemas import RentIn, RentalRecordOut
from bookrental.services.rental_service import RentalService

router = APIRouter(prefix="/rentals", tags=["rentals"])


@router.post("", response_model=RentalRecordOut, status_code=201)
def rent_book(
    payload: RentIn,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return RentalService(db).rent_book(user_id, payload.book_id, payload.rental_duration)
    except RentalError as e:
        raise http_error(e)


@router.get("", response_model=List[RentalRecordOut])
def list_rentals(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return RentalService(db).list_rentals(user_id)
