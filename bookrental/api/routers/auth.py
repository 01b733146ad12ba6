from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookrental.api.deps import get_current_user_id, http_error
from bookrental.data.database import get_db
from bookrental.domain.errors import RentalError
from bookrental.domain.schemas import AuthOut, LoginIn, ProfileOut, SignupIn
from bookrental.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthOut, status_code=201)
def signup(payload: SignupIn, db: Session = Depends(get_db)):
    try:
        return UserService(db).signup(payload)
    except RentalError as e:
        raise http_error(e)


@router.post("/login", response_model=AuthOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    try:
        return UserService(db).login(payload)
    except RentalError as e:
        raise http_error(e)


@router.get("/profile", response_model=ProfileOut)
def profile(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return UserService(db).get_profile(user_id)
    except RentalError as e:
        raise http_error(e)
