import pytest

from walletshop.domain.errors import WalletBusyError
from walletshop.services.lock_service import LockService


class FakeRedis:
    """Minimalny SET NX / compare-and-delete."""

    def __init__(self):
        self.store = {}

    def set(self, name, value, nx=False, ex=None):
        if nx and name in self.store:
            return None
        self.store[name] = value
        return True

    def eval(self, script, numkeys, key, token):
        if self.store.get(key) == token:
            del self.store[key]
            return 1
        return 0


@pytest.fixture
def locks():
    svc = LockService(url="redis://localhost:6379/0", ttl=5, wait_seconds=0.2)
    svc.redis = FakeRedis()
    return svc


def test_lock_is_released_after_block(locks):
    with locks.wallet_lock("demo") as token:
        assert locks.redis.store["wallet:demo:lock"] == token

    assert locks.redis.store == {}


def test_busy_wallet_times_out(locks):
    locks.redis.store["wallet:demo:lock"] = "someone-else"

    with pytest.raises(WalletBusyError):
        with locks.wallet_lock("demo"):
            pass

    assert locks.redis.store["wallet:demo:lock"] == "someone-else"


def test_other_wallets_do_not_contend(locks):
    with locks.wallet_lock("alice"):
        with locks.wallet_lock("bob"):
            assert set(locks.redis.store) == {"wallet:alice:lock", "wallet:bob:lock"}
