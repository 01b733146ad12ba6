from sqlalchemy import Column, Integer, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from bookrental.data.database import Base


class PaymentItemModel(Base):
    """Snapshot pozycji w chwili zakupu - cena nie zmienia sie razem z katalogiem."""

    __tablename__ = "payment_items"

    id = Column(Integer, primary_key=True)
    payment_id = Column(Integer, ForeignKey("payments.id", ondelete="CASCADE"), nullable=False)
    book_id = Column(Integer, nullable=False)

    rental_duration = Column(Integer, nullable=False)
    rent_price = Column(Numeric(10, 2), nullable=False)

    payment = relationship("PaymentModel", back_populates="items")
