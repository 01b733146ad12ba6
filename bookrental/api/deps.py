# bookrental/api/deps.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from bookrental.domain.errors import RentalError
from bookrental.services.lock_service import LockService
from bookrental.services.notification_service import NotificationService
from bookrental.utils.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_current_user_id(token: str = Depends(oauth2_scheme)) -> int:
    user_id = decode_access_token(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"reason": "invalid_token", "message": "Token is not valid", "errors": []},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def get_lock_service() -> LockService:
    return LockService()


def get_notification_service() -> NotificationService:
    return NotificationService()


def http_error(e: RentalError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.to_dict())
