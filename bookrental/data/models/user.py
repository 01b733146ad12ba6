from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from bookrental.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    phone_no = Column(String, nullable=True)
    role = Column(String, nullable=False, default="user")  # user, admin
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    rentals = relationship(
        "RentalRecordModel",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="RentalRecordModel.id",
    )
