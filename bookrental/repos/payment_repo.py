# bookrental/repos/payment_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookrental.data.models.payment import PaymentModel


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_payment(self, payment: PaymentModel) -> PaymentModel:
        # flush zamiast commit - platnosc jest czescia transakcji checkoutu
        self.db.add(payment)
        self.db.flush()
        return payment

    def get_payment(self, payment_id: int) -> PaymentModel | None:
        return self.db.get(PaymentModel, payment_id)

    def list_payments(self, user_id: int, status: str | None = None) -> List[PaymentModel]:
        stmt = (
            select(PaymentModel)
            .where(PaymentModel.user_id == user_id)
            .order_by(PaymentModel.created_at.desc(), PaymentModel.id.desc())
        )
        if status is not None:
            stmt = stmt.where(PaymentModel.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def update_payment_status(self, payment: PaymentModel, status: str, processed_at=None) -> PaymentModel:
        payment.status = status
        if processed_at is not None:
            payment.processed_at = processed_at
        self.db.flush()
        return payment
