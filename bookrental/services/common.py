# bookrental/services/common.py
from typing import Any, Dict

from sqlalchemy.exc import DBAPIError, OperationalError

from bookrental.data.models.rental_record import RentalRecordModel


def rental_to_dict(record: RentalRecordModel) -> Dict[str, Any]:
    return {
        "book_id": record.book_id,
        "rental_duration": record.rental_duration,
        "rent_start_date": record.rent_start_date,
        "rent_end_date": record.rent_end_date,
        "payment_id": record.payment_id,
    }


def is_transient(error: Exception) -> bool:
    # blokady, timeouty, konflikty serializacji, zerwane polaczenie
    if isinstance(error, OperationalError):
        return True
    return isinstance(error, DBAPIError) and error.connection_invalidated
