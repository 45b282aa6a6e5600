# walletshop/services/batch_order_service.py
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List
from sqlalchemy.orm import Session

from walletshop.data.database import SessionLocal
from walletshop.domain.errors import BusinessError
from walletshop.services.lock_service import LockService
from walletshop.services.order_service import OrderService
from walletshop.utils.settings import BULK_MAX_WORKERS
from walletshop.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class OrderGroup:
    wallet_code: str
    lines: List[Any] = field(default_factory=list)


def group_records(records: Iterable[Any]) -> List[OrderGroup]:
    """
    Rekordy z wallet_code -> jedna grupa na wallet.
    Kolejnosc grup = kolejnosc pierwszego wystapienia walleta.
    """
    groups: Dict[str, OrderGroup] = {}
    for record in records:
        group = groups.setdefault(record.wallet_code, OrderGroup(record.wallet_code))
        group.lines.append(record)
    return list(groups.values())


class BatchOrderService:
    """
    Wiele niezaleznych zamowien naraz.
    Kazda grupa ma wlasna sesje i transakcje - blad jednej nie cofa pozostalych,
    wyniki zbierane po zakonczeniu wszystkich (settle-all).
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        lock_service: LockService | None = None,
        max_workers: int = BULK_MAX_WORKERS,
    ):
        self.session_factory = session_factory
        self.lock_service = lock_service
        self.max_workers = max(1, max_workers)

    def bulk_set_orders(
        self,
        groups: List[OrderGroup],
        buyer_ip: str | None = None,
        rejected: List[Dict[str, str]] | None = None,
    ) -> Dict[str, Any]:
        """
        rejected - grupy odrzucone wczesniej (np. zly wiersz w CSV),
        doklejane do errors bez uruchamiania upsertu.
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [
                pool.submit(self._set_one, group, buyer_ip)
                for group in groups
            ]

        created = 0
        errors = list(rejected or [])

        for group, future in zip(groups, futures):
            exc = future.exception()
            if exc is None:
                created += 1
            elif isinstance(exc, BusinessError):
                errors.append({"wallet_code": group.wallet_code, "error": exc.message})
            else:
                logger.error(f"Unexpected failure for wallet {group.wallet_code}: {exc!r}")
                errors.append({"wallet_code": group.wallet_code, "error": "Internal error"})

        logger.info(f"Bulk orders: {created} created, {len(errors)} failed")

        return {"created": created, "errors": errors}

    def _set_one(self, group: OrderGroup, buyer_ip: str | None):
        db = self.session_factory()
        try:
            svc = OrderService(db, lock_service=self.lock_service)
            return svc.set_order(group.wallet_code, group.lines, buyer_ip)
        finally:
            db.close()
