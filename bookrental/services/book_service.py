# bookrental/services/book_service.py
from typing import List

from sqlalchemy.orm import Session

from bookrental.data.models.book import BookModel
from bookrental.data.models.feedback import FeedbackModel
from bookrental.domain.errors import NotFoundError, ValidationError
from bookrental.domain.schemas import BookIn
from bookrental.repos.book_repo import BookRepo
from bookrental.utils.logging import get_logger

logger = get_logger(__name__)


class BookService:
    """Katalog ksiazek i opinie."""

    def __init__(self, db: Session):
        self.repo = BookRepo(db)

    def list_books(self, category: str | None = None, available: bool | None = None) -> List[BookModel]:
        return self.repo.list_books(category=category, available=available)

    def get_book(self, book_id: int) -> BookModel:
        book = self.repo.get_book(book_id)
        if not book:
            raise NotFoundError(f"Book {book_id} not found", reason="book_not_found")
        return book

    def create_book(self, payload: BookIn) -> BookModel:
        book = BookModel(
            title=payload.title,
            author=payload.author,
            description=payload.description,
            image_url=payload.image_url,
            category=payload.category,
            rent_price=payload.rent_price,
            quantity=payload.quantity,
            available=payload.quantity > 0,
            average_rating=0,
            rating_count=0,
        )
        created = self.repo.create_book(book)
        logger.info(f"Dodano ksiazke {created.id} '{created.title}' w ilosci {created.quantity}")
        return created

    def add_feedback(self, user_id: int, book_id: int, rating: int, comment: str | None) -> FeedbackModel:
        if not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5", reason="invalid_rating")

        self.get_book(book_id)

        try:
            feedback = self.repo.add_feedback(
                FeedbackModel(book_id=book_id, user_id=user_id, rating=rating, comment=comment)
            )
            self.repo.apply_rating(book_id, rating)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Uzytkownik {user_id} ocenil ksiazke {book_id} na {rating}/5 (opinia {feedback.id})")
        return feedback

    def list_feedback(self, book_id: int) -> List[FeedbackModel]:
        self.get_book(book_id)
        return self.repo.list_feedback(book_id)
