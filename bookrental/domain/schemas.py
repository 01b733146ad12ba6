# bookrental/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# kwoty w JSON jako liczby, nie stringi
Money = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]


class ApiModel(BaseModel):
    """Klucze camelCase na zewnatrz, snake_case tez przyjmowane na wejsciu."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------- auth / users ----------

class SignupIn(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    phone_no: str | None = None


class LoginIn(ApiModel):
    email: EmailStr
    password: str


class UserOut(ApiModel):
    id: int
    name: str
    email: str
    phone_no: str | None = None


class AuthOut(ApiModel):
    user: UserOut
    token: str


class RentalRecordOut(ApiModel):
    book_id: int
    rental_duration: int
    rent_start_date: datetime
    rent_end_date: datetime
    payment_id: int | None = None


class ProfileOut(UserOut):
    rented_books: List[RentalRecordOut]


# ---------- catalog ----------

class BookIn(ApiModel):
    title: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    description: str | None = None
    image_url: str | None = None
    category: str | None = None
    rent_price: Decimal = Field(..., gt=0)
    quantity: int = Field(..., ge=0)


class BookOut(ApiModel):
    id: int
    title: str
    author: str
    description: str | None = None
    image_url: str | None = None
    category: str | None = None
    rent_price: Money
    quantity: int
    available: bool
    average_rating: Money
    rating_count: int


class FeedbackIn(ApiModel):
    rating: int
    comment: str | None = Field(None, max_length=2000)


class FeedbackOut(ApiModel):
    id: int
    book_id: int
    user_id: int
    rating: int
    comment: str | None = None
    created_at: datetime


# ---------- cart ----------

class CartAddIn(ApiModel):
    book_id: int
    rental_duration: int = 1


class CartUpdateIn(ApiModel):
    rental_duration: int


class CartItemOut(ApiModel):
    book_id: int
    title: str
    rent_price: Money
    rental_duration: int
    line_total: Money


class CartOut(ApiModel):
    cart_id: int | None = None
    user_id: int
    version: int
    items: List[CartItemOut]
    total_amount: Money


# ---------- checkout / payments ----------

class CheckoutItemIn(ApiModel):
    book_id: int
    rental_duration: int
    # tylko sprawdzenie zgodnosci z katalogiem, nigdy zrodlo ceny
    rent_price: Decimal | None = None


class CheckoutIn(ApiModel):
    items: List[CheckoutItemIn] | None = None
    total_amount: Decimal | None = None


class CheckoutOut(ApiModel):
    payment_id: int
    status: str
    total_amount: Money
    rented_books: List[RentalRecordOut]


class PaymentItemOut(ApiModel):
    book_id: int
    rental_duration: int
    rent_price: Money


class PaymentOut(ApiModel):
    id: int
    user_id: int
    status: str
    total_amount: Money
    items: List[PaymentItemOut]
    created_at: datetime
    processed_at: datetime | None = None


# ---------- direct rental ----------

class RentIn(ApiModel):
    book_id: int
    rental_duration: int = 1
