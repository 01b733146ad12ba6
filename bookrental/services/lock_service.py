import redis

from bookrental.utils.retry import redis_retry
from bookrental.utils.settings import REDIS_URL
from bookrental.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje lua atomowo, nie mozna wcisnac sie miedzy GET a DEL
#wiec nie zwolnimy locka, ktory po wygasnieciu przejal inny request


class LockService:
    """
    -blokada checkoutu per uzytkownik (jeden checkout naraz)
    -zwalnianie blokady tylko przez wlasciciela tokenu
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(user_id: int) -> str:
        return f"checkout:user:{user_id}:lock"

    @redis_retry()
    def acquire_checkout_lock(self, user_id: int, token: str, ttl: int) -> bool:
        key = self._key(user_id)
        logger.info(f"Zakladanie blokady {key}")
        #SET checkout:user:1:lock "<token>" NX EX 30
        return bool(
            self.redis.set(
                name=key,
                value=token,
                nx=True,
                ex=ttl, #wygasa sam, nawet jesli proces padnie w trakcie checkoutu
            )
        )

    @redis_retry()
    def release_checkout_lock(self, user_id: int, token: str) -> bool:
        key = self._key(user_id)
        logger.info(f"Zwalnianie blokady {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)
