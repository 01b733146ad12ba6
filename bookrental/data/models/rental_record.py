from sqlalchemy import Column, Integer, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from bookrental.data.database import Base


class RentalRecordModel(Base):
    __tablename__ = "rental_records"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False)
    # null dla wypozyczenia bez platnosci (POST /rentals)
    payment_id = Column(Integer, ForeignKey("payments.id"), nullable=True)

    rental_duration = Column(Integer, nullable=False)
    rent_start_date = Column(DateTime(timezone=True), nullable=False)
    rent_end_date = Column(DateTime(timezone=True), nullable=False)

    user = relationship("UserModel", back_populates="rentals")
