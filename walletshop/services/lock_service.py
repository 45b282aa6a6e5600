import uuid
from contextlib import contextmanager

import redis
from redis.exceptions import RedisError
from tenacity import (
    retry,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
    wait_fixed,
    retry_if_exception_type,
    retry_if_result,
    RetryError,
)
from walletshop.domain.errors import WalletBusyError
from walletshop.utils.settings import REDIS_URL, WALLET_LOCK_TTL_SECONDS, WALLET_LOCK_WAIT_SECONDS
from walletshop.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje atomowo przez lua, skrypt dziala jako jedna nieprzerywalna operacja
#nie mozna wcisnac sie miedzy GET a DEL, wiec cudzy lock (po wygasnieciu ttl) nie zostanie usuniety


#tenacity retry - tylko bledy polaczenia z redisem
def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(RedisError),
    )


def _wallet_key(wallet_code: str) -> str:
    return f"wallet:{wallet_code}:lock"


class LockService:
    """
    -blokada walleta na czas upsertu zamowienia
    -zwalnianie locka tylko przez wlasciciela (token)
    -czekanie na lock zamiast natychmiastowej odmowy
    """

    def __init__(
        self,
        url: str | None = None,
        ttl: int = WALLET_LOCK_TTL_SECONDS,
        wait_seconds: float = WALLET_LOCK_WAIT_SECONDS,
    ):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl
        self.wait_seconds = wait_seconds

    @redis_retry()
    def acquire_wallet_lock(self, wallet_code: str, token: str, ttl: int) -> bool:
        key = _wallet_key(wallet_code)
        #SET wallet:demo:lock "<token>" NX EX 30
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release_wallet_lock(self, wallet_code: str, token: str) -> bool:
        key = _wallet_key(wallet_code)
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    def _wait_for_lock(self, wallet_code: str, token: str) -> bool:
        poll = retry(
            stop=stop_after_delay(self.wait_seconds),
            wait=wait_fixed(0.05),
            retry=retry_if_result(lambda acquired: not acquired),
        )
        return poll(self.acquire_wallet_lock)(wallet_code, token, self.ttl)

    @contextmanager
    def wallet_lock(self, wallet_code: str):
        token = uuid.uuid4().hex
        try:
            self._wait_for_lock(wallet_code, token)
        except RetryError:
            logger.warning(f"Wallet {wallet_code} still locked after {self.wait_seconds}s")
            raise WalletBusyError(wallet_code)

        logger.info(f"Acquired lock for wallet {wallet_code}")
        try:
            yield token
        finally:
            if not self.release_wallet_lock(wallet_code, token):
                logger.warning(f"Lock for wallet {wallet_code} expired before release")
