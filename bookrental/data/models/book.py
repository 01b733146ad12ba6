from sqlalchemy import Column, Integer, String, Boolean, Numeric, Text, CheckConstraint

from bookrental.data.database import Base


class BookModel(Base):
    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_books_quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    author = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    category = Column(String, nullable=True, index=True)

    rent_price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    # zawsze quantity > 0, aktualizowane w tym samym UPDATE co quantity
    available = Column(Boolean, nullable=False, default=False)

    average_rating = Column(Numeric(4, 2), nullable=False, default=0)
    rating_count = Column(Integer, nullable=False, default=0)
