#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from bookrental.data.models.user import UserModel
from bookrental.data.models.book import BookModel
from bookrental.data.models.feedback import FeedbackModel
from bookrental.data.models.cart import CartModel
from bookrental.data.models.cart_item import CartItemModel
from bookrental.data.models.payment import PaymentModel
from bookrental.data.models.payment_item import PaymentItemModel
from bookrental.data.models.rental_record import RentalRecordModel

__all__ = [
    "UserModel",
    "BookModel",
    "FeedbackModel",
    "CartModel",
    "CartItemModel",
    "PaymentModel",
    "PaymentItemModel",
    "RentalRecordModel",
]
