from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookrental.data.models.user import UserModel
from bookrental.domain.errors import AuthenticationError, NotFoundError, ValidationError
from bookrental.domain.schemas import SignupIn, LoginIn
from bookrental.repos.user_repo import UserRepo
from bookrental.services.common import rental_to_dict
from bookrental.utils.security import create_access_token, hash_password, verify_password
from bookrental.utils.logging import get_logger

logger = get_logger(__name__)


def user_to_dict(user: UserModel) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "phone_no": user.phone_no,
    }


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def signup(self, payload: SignupIn) -> Dict[str, Any]:
        email = payload.email.lower()
        if self.repo.get_user_by_email(email):
            raise ValidationError("User already exists", reason="email_taken")

        user = UserModel(
            name=payload.name,
            email=email,
            password_hash=hash_password(payload.password),
            phone_no=payload.phone_no,
        )
        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            self.db.rollback()
            raise ValidationError("User already exists", reason="email_taken")

        logger.info(f"Zarejestrowano uzytkownika {created.id}")
        return {"user": user_to_dict(created), "token": create_access_token(created.id)}

    def login(self, payload: LoginIn) -> Dict[str, Any]:
        user = self.repo.get_user_by_email(payload.email.lower())
        if not user or not verify_password(payload.password, user.password_hash):
            raise AuthenticationError("Invalid email or password", reason="invalid_credentials")

        logger.info(f"Uzytkownik {user.id} zalogowany")
        return {"user": user_to_dict(user), "token": create_access_token(user.id)}

    def get_profile(self, user_id: int) -> Dict[str, Any]:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found", reason="user_not_found")

        profile = user_to_dict(user)
        profile["rented_books"] = [rental_to_dict(r) for r in self.repo.get_rentals(user_id)]
        return profile
