from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookrental.data.models.user import UserModel
from bookrental.data.models.rental_record import RentalRecordModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_user_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email)
        ).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def add_rentals(self, records: List[RentalRecordModel]) -> List[RentalRecordModel]:
        self.db.add_all(records)
        self.db.flush()
        return records

    def get_rentals(self, user_id: int) -> List[RentalRecordModel]:
        return list(
            self.db.execute(
                select(RentalRecordModel)
                .where(RentalRecordModel.user_id == user_id)
                .order_by(RentalRecordModel.id)
            ).scalars().all()
        )
