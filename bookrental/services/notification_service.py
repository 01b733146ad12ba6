# bookrental/services/notification_service.py
from typing import List

from bookrental.celery_worker import celery_app
from bookrental.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadomienia po udanym checkoucie.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_rental_notification(user_id: int, payment_id: int, book_ids: List[int]):
        # checkout jest juz zacommitowany - blad kolejki tylko logujemy
        try:
            send_rental_notification_task.delay(user_id, payment_id, book_ids)
        except Exception as e:
            logger.warning(f"Nie udalo sie zlecic powiadomienia dla platnosci {payment_id}: {e}")


@celery_app.task(name="bookrental.services.notification_service.send_rental_notification_task")
def send_rental_notification_task(user_id: int, payment_id: int, book_ids: List[int]):
    """
    Celery task - w prawdziwym systemie wyslalby email z potwierdzeniem.
    Teraz tylko loguje.
    """
    logger.info(
        f"[POWIADOMIENIE] Uzytkownik {user_id}: platnosc {payment_id} zakonczona, "
        f"wypozyczone ksiazki ({len(book_ids)}): {book_ids}"
    )
    return {"user_id": user_id, "payment_id": payment_id, "status": "sent"}
