# bookrental/celery_worker.py
from celery import Celery

from bookrental.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "bookrental",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# Explicite importuj taski, zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "bookrental.services.notification_service",
)

celery_app.conf.timezone = "UTC"
