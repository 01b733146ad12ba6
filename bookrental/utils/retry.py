# bookrental/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import redis

from bookrental.domain.errors import TransientInfrastructureError
from bookrental.utils.settings import CHECKOUT_MAX_ATTEMPTS


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )


def db_retry(attempts: int = CHECKOUT_MAX_ATTEMPTS):
    #ponawiamy tylko bledy infrastruktury, bledy biznesowe ida od razu do klienta
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
        retry=retry_if_exception_type(TransientInfrastructureError),
    )
