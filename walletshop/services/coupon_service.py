# walletshop/services/coupon_service.py
from typing import Any, Dict
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from walletshop.data.models.coupon_redemption import CouponRedemptionModel
from walletshop.domain.errors import BusinessError
from walletshop.repos.coupon_repo import CouponRepo
from walletshop.repos.order_repo import OrderRepo
from walletshop.utils.logging import get_logger

logger = get_logger(__name__)


class CouponService:
    """
    Wykupienie i usuniecie kuponu dla zamowienia walleta.

    Sprawdzenie "Already used" przed insertem to tylko szybka sciezka.
    Dwa rownolegle requesty moga oba przejsc przez sprawdzenie -
    wtedy drugi insert odbija sie od unique (order_id, coupon_id)
    i konczy sie tym samym bledem biznesowym.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CouponRepo(db)
        self.order_repo = OrderRepo(db)

    def redeem_coupon(self, wallet_code: str, code: str) -> Dict[str, Any]:
        try:
            coupon = self.repo.get_active_coupon_by_code(code)
            if not coupon:
                raise BusinessError("Coupon invalid")

            order = self.order_repo.get_order_by_wallet(wallet_code)
            if not order:
                raise BusinessError("No current order")

            if self.repo.get_redemption(order.id, coupon.id):
                raise BusinessError("Already used")

            try:
                redemption = self.repo.add_redemption(
                    CouponRedemptionModel(
                        order=order,
                        coupon=coupon,
                        coupon_code=coupon.code,
                        percent=coupon.percent,
                        wallet_code=wallet_code,
                    )
                )
                self.repo.commit()
            except IntegrityError:
                logger.info(f"Coupon {coupon.id} already redeemed on order {order.id} (constraint)")
                self.repo.rollback()
                raise BusinessError("Already used")

        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Coupon {coupon.code} redeemed on order {order.id} for wallet {wallet_code}")

        return {
            "id": redemption.id,
            "coupon_code": code,
            "coupon_id": redemption.coupon_id,
            "percent": redemption.percent,
        }

    def remove_coupon(self, wallet_code: str, coupon_id: int) -> Dict[str, Any]:
        try:
            order = self.order_repo.get_order_by_wallet(wallet_code)
            if not order:
                raise BusinessError("No current order")

            removed = self.repo.delete_redemptions(order.id, coupon_id)
            self.repo.commit()

        except Exception:
            self.repo.rollback()
            raise

        # kolekcja w sesji nie widzi bulk delete
        self.db.expire(order, ["coupons"])
        logger.info(f"Removed {removed} redemption(s) of coupon {coupon_id} from order {order.id}")

        return {}
