# bookrental/api/routers/books.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookrental.api.deps import get_current_user_id, http_error
from bookrental.data.database import get_db
from bookrental.domain.errors import RentalError
from bookrental.domain.schemas import BookIn, BookOut, FeedbackIn, FeedbackOut
from bookrental.services.book_service import BookService

router = APIRouter(prefix="/books", tags=["books"])


@router.get("", response_model=List[BookOut])
def list_books(
    category: str | None = Query(None),
    available: bool | None = Query(None),
    db: Session = Depends(get_db),
):
    return BookService(db).list_books(category=category, available=available)


@router.post("", response_model=BookOut, status_code=201)
def create_book(
    payload: BookIn,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return BookService(db).create_book(payload)


@router.get("/{book_id}", response_model=BookOut)
def get_book(book_id: int, db: Session = Depends(get_db)):
    try:
        return BookService(db).get_book(book_id)
    except RentalError as e:
        raise http_error(e)


@router.post("/{book_id}/feedback", response_model=FeedbackOut, status_code=201)
def add_feedback(
    book_id: int,
    payload: FeedbackIn,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return BookService(db).add_feedback(user_id, book_id, payload.rating, payload.comment)
    except RentalError as e:
        raise http_error(e)


@router.get("/{book_id}/feedback", response_model=List[FeedbackOut])
def list_feedback(book_id: int, db: Session = Depends(get_db)):
    try:
        return BookService(db).list_feedback(book_id)
    except RentalError as e:
        raise http_error(e)
