# bookrental/services/payment_service.py
from typing import List

from sqlalchemy.orm import Session

from bookrental.data.models.payment import PaymentModel, PAYMENT_STATUSES
from bookrental.domain.errors import NotFoundError, ValidationError
from bookrental.repos.payment_repo import PaymentRepo


class PaymentService:
    """
    Odczyt platnosci (Query).
    Lista po statusie pozwala zewnetrznemu procesowi znalezc platnosci pending/failed.
    """

    def __init__(self, db: Session):
        self.repo = PaymentRepo(db)

    def get_payment(self, payment_id: int, user_id: int) -> PaymentModel:
        payment = self.repo.get_payment(payment_id)

        # cudza platnosc wyglada jak nieistniejaca
        if not payment or payment.user_id != user_id:
            raise NotFoundError("Payment not found", reason="payment_not_found")

        return payment

    def list_payments(self, user_id: int, status: str | None = None) -> List[PaymentModel]:
        if status is not None and status not in PAYMENT_STATUSES:
            raise ValidationError(
                f"Status must be one of {', '.join(PAYMENT_STATUSES)}", reason="invalid_status"
            )
        return self.repo.list_payments(user_id, status)
