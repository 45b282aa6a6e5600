import os
import tempfile
import threading
from contextlib import contextmanager
from decimal import Decimal

# srodowisko testowe ustawione przed importem walletshop (settings czyta env przy imporcie)
_TMP_DIR = tempfile.mkdtemp(prefix="walletshop-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["WALLET_LOCKS_ENABLED"] = "0"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["BULK_MAX_WORKERS"] = "1"

import pytest

import walletshop.data.models  # noqa: F401
from walletshop.data.database import Base, SessionLocal, engine
from walletshop.data.models import ItemModel, CouponModel


class FakeLockService:
    """Lock per wallet w pamieci zamiast redisa."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}
        self.acquired = []

    @contextmanager
    def wallet_lock(self, wallet_code):
        with self._guard:
            lock = self._locks.setdefault(wallet_code, threading.Lock())
        with lock:
            self.acquired.append(wallet_code)
            yield wallet_code


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def catalog(db):
    db.add_all(
        [
            ItemModel(id=1, name="Sticker pack", price=Decimal("10.00"), active=True),
            ItemModel(id=2, name="Enamel pin", price=Decimal("5.00"), active=True),
            ItemModel(id=3, name="Hoodie", price=Decimal("20.00"), active=True),
            ItemModel(id=4, name="Retired mug", price=Decimal("7.00"), active=False),
            ItemModel(id=5, name="Free sample", price=Decimal("0.00"), active=True),
            CouponModel(id=1, code="SAVE10", percent=10, active=True),
            CouponModel(id=2, code="OLD5", percent=5, active=False),
            CouponModel(id=3, code="EXTRA15", percent=15, active=True),
        ]
    )
    db.commit()
    return db


@pytest.fixture
def lock_service():
    return FakeLockService()
