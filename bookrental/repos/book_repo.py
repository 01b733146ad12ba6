# bookrental/repos/book_repo.py
from typing import Iterable, List

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session

from bookrental.data.models.book import BookModel
from bookrental.data.models.feedback import FeedbackModel


class BookRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_book(self, book_id: int) -> BookModel | None:
        return self.db.get(BookModel, book_id)

    def get_books(self, book_ids: Iterable[int]) -> dict[int, BookModel]:
        ids = list(book_ids)
        if not ids:
            return {}
        rows = self.db.execute(select(BookModel).where(BookModel.id.in_(ids))).scalars().all()
        return {b.id: b for b in rows}

    def list_books(self, category: str | None = None, available: bool | None = None) -> List[BookModel]:
        stmt = select(BookModel).order_by(BookModel.id)
        if category is not None:
            stmt = stmt.where(BookModel.category == category)
        if available is not None:
            stmt = stmt.where(BookModel.available == available)
        return list(self.db.execute(stmt).scalars().all())

    def create_book(self, book: BookModel) -> BookModel:
        self.db.add(book)
        self.db.commit()
        self.db.refresh(book)
        return book

    def decrement_quantity(self, book_id: int, amount: int) -> int:
        """
        Atomowy warunkowy dekrement:
        UPDATE books SET quantity = quantity - :n, available = (quantity - :n > 0)
        WHERE id = :id AND quantity >= :n
        Zwraca rowcount (0 = brak ksiazki albo za malo egzemplarzy).
        """
        result = self.db.execute(
            update(BookModel)
            .where(BookModel.id == book_id, BookModel.quantity >= amount)
            .values(
                quantity=BookModel.quantity - amount,
                available=case((BookModel.quantity - amount > 0, True), else_=False),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def add_feedback(self, feedback: FeedbackModel) -> FeedbackModel:
        self.db.add(feedback)
        self.db.flush()
        return feedback

    def apply_rating(self, book_id: int, rating: int) -> int:
        # po prawej stronie SET sa stare wartosci kolumn, wiec srednia liczy sie w jednym UPDATE
        result = self.db.execute(
            update(BookModel)
            .where(BookModel.id == book_id)
            .values(
                average_rating=(BookModel.average_rating * BookModel.rating_count + float(rating))
                / (BookModel.rating_count + 1),
                rating_count=BookModel.rating_count + 1,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def list_feedback(self, book_id: int) -> List[FeedbackModel]:
        return list(
            self.db.execute(
                select(FeedbackModel)
                .where(FeedbackModel.book_id == book_id)
                .order_by(FeedbackModel.id)
            ).scalars().all()
        )

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
