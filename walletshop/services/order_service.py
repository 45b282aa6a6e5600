# walletshop/services/order_service.py
from contextlib import nullcontext
from typing import Any, Dict, Sequence
from sqlalchemy.orm import Session

from walletshop.data.models.order import OrderModel, ORDER_STATUS_PENDING
from walletshop.data.models.order_line import OrderLineModel
from walletshop.repos.order_repo import OrderRepo
from walletshop.services.catalog_service import CatalogService
from walletshop.services.pricing_service import PricingService
from walletshop.services.lock_service import LockService
from walletshop.services.notification_service import NotificationService
from walletshop.utils.logging import get_logger

logger = get_logger(__name__)


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "status": order.status,
        "created_at": order.created_at,
        "lines": [
            {
                "item_id": line.item_id,
                "quantity": line.quantity,
                "unit_price": line.unit_price,
                "total_price": line.total_price,
            }
            for line in order.lines
        ],
        # wykupienie wazne tylko dopoki kupon jest aktywny
        "coupons": [
            {
                "id": r.id,
                "order_id": r.order_id,
                "coupon_id": r.coupon_id,
                "coupon_code": r.coupon_code,
                "percent": r.percent,
            }
            for r in order.coupons
            if r.coupon is None or r.coupon.active
        ],
    }


class OrderService:
    """
    Zamowienie walleta: jeden order na wallet_code, podmieniany w miejscu.
    Ceny zawsze z katalogu, nigdy z wejscia klienta.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.pricing = PricingService(CatalogService(db))
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    # =====================================================
    # QUERY
    # =====================================================
    def get_current_order(self, wallet_code: str) -> Dict[str, Any] | None:
        order = self.repo.get_order_by_wallet(wallet_code)
        if not order:
            return None
        return order_to_dict(order)

    # =====================================================
    # COMMANDS
    # =====================================================
    def set_order(
        self,
        wallet_code: str,
        lines: Sequence[Any],
        buyer_ip: str | None = None,
    ) -> Dict[str, Any]:
        """
        Use Case: ustawienie zamowienia walleta (upsert).

        1. Wycena linii z katalogu (jedno zapytanie)
        2. Odczyt zamowienia walleta z row lockiem
        3. Nowe zamowienie albo podmiana calego zestawu linii
        4. Jeden commit, przy bledzie rollback calosci
        """
        lock = self.lock_service.wallet_lock(wallet_code) if self.lock_service else nullcontext()

        with lock:
            try:
                priced = self.pricing.price_lines(lines)
                line_models = [
                    OrderLineModel(
                        item_id=p.item_id,
                        quantity=p.quantity,
                        unit_price=p.unit_price,
                        total_price=p.total_price,
                    )
                    for p in priced
                ]

                # rownolegly pierwszy zapis tego walleta konczy sie tu no-opem, nie IntegrityError
                created = self.repo.ensure_order(wallet_code, buyer_ip)
                order = self.repo.get_order_by_wallet(wallet_code, for_update=True)

                order.status = ORDER_STATUS_PENDING
                # brak ip od wolajacego = zostaje poprzednie
                if buyer_ip:
                    order.buyer_ip = buyer_ip
                self.repo.replace_lines(order, line_models)

                self.repo.commit()

                if created:
                    logger.info(f"Created order {order.id} for wallet {wallet_code}")
                else:
                    logger.info(f"Replaced lines of order {order.id} for wallet {wallet_code}")

            except Exception as e:
                logger.error(f"Setting order for wallet {wallet_code} failed: {e}")
                self.repo.rollback()
                raise

        self._notify(wallet_code, order)
        return order_to_dict(order)

    def _notify(self, wallet_code: str, order: OrderModel):
        # zamowienie juz zapisane, brak brokera nie moze go cofnac
        try:
            self.notification_service.send_order_notification(wallet_code, order.id, len(order.lines))
        except Exception as e:
            logger.warning(f"Order {order.id} notification not sent: {e}")
